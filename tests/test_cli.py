from __future__ import annotations

import logging
from pathlib import Path

import pytest

from termdeck import __version__, cli


def test_defaults_use_platform_data_dir() -> None:
    args = cli.build_parser().parse_args([])

    assert args.data_dir is None
    assert args.dev_log_panel is False


def test_data_dir_and_dev_log_panel_flags_parse() -> None:
    args = cli.build_parser().parse_args(["--data-dir", "/tmp/termdeck-data", "--dev-log-panel"])

    assert args.data_dir == Path("/tmp/termdeck-data")
    assert args.dev_log_panel is True


def test_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.build_parser().parse_args(["--version"])

    assert excinfo.value.code == 0
    assert capsys.readouterr().out.strip() == f"termdeck {__version__}"


def test_explicit_data_dir_skips_config_relocation(tmp_path: Path) -> None:
    resolved = cli.resolve_paths(tmp_path)

    assert resolved.data_dir == tmp_path
    assert resolved.legacy_config_dir is None


def test_main_runs_app_and_tears_down(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    calls: list[str] = []

    class DummyApp:
        def __init__(self, config: cli.AppConfig) -> None:
            calls.append(f"init:{config.paths.data_dir}:{config.show_log_panel}")

        def run(self) -> None:
            calls.append("run")

        def teardown(self) -> None:
            calls.append("teardown")

    monkeypatch.setattr(cli, "TermdeckApp", DummyApp)
    monkeypatch.setattr(cli, "configure_logging", lambda: calls.append("logging"))

    assert cli.main(["--data-dir", str(tmp_path)]) == 0
    assert calls == ["logging", f"init:{tmp_path}:False", "run", "teardown"]


def test_configure_logging_respects_existing_handlers(monkeypatch: pytest.MonkeyPatch) -> None:
    configured: list[dict] = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: configured.append(kwargs))
    handler = logging.NullHandler()
    root = logging.getLogger()
    root.addHandler(handler)
    try:
        cli.configure_logging()
    finally:
        root.removeHandler(handler)

    assert configured == []
