"""Command-line entry point for launching the termdeck TUI."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from . import __version__
from .paths import AppPaths, default_paths
from .tui.app import AppConfig, TermdeckApp


def configure_logging(level: int = logging.INFO) -> None:
    """Configure basic logging to stderr unless the host already did."""

    if logging.getLogger().handlers:
        # Assume the application configured logging already.
        return

    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    """Create the CLI parser for launching the TUI."""

    parser = argparse.ArgumentParser(
        prog="termdeck",
        description="Launch the termdeck terminal workspace",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"termdeck {__version__}",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help=(
            "Directory holding session.json and the other state files "
            "(default: the platform user data directory)"
        ),
    )
    parser.add_argument(
        "--dev-log-panel",
        action="store_true",
        help="Show the live developer log panel inside the TUI",
    )
    return parser


def resolve_paths(data_dir: Path | None) -> AppPaths:
    """An explicit data directory disables the config-dir relocation."""

    if data_dir is None:
        return default_paths()
    return AppPaths(data_dir=data_dir.expanduser())


def main(argv: list[str] | None = None) -> int:
    """Parse CLI arguments and run the TUI."""

    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging()

    config = AppConfig(
        paths=resolve_paths(args.data_dir),
        show_log_panel=args.dev_log_panel,
    )
    app = TermdeckApp(config)
    try:
        app.run()
    finally:
        app.teardown()
    return 0


def run(argv: list[str] | None = None) -> None:
    """Execute the CLI and exit the current process."""

    sys.exit(main(argv))


if __name__ == "__main__":  # pragma: no cover
    run()
