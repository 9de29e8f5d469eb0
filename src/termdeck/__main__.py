from __future__ import annotations

# Convenience entry point for local development. Allows running the CLI via
# `python -m termdeck` without installing the console script.
from termdeck.cli import run


if __name__ == "__main__":  # pragma: no cover
    run()
