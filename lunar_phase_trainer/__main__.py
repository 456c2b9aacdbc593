from __future__ import annotations

import sys
from pathlib import Path


def _ensure_repo_root_on_path() -> None:
    """Put the directory containing this package on ``sys.path``.

    Running ``python lunar_phase_trainer/__main__.py`` directly leaves the
    package itself undiscoverable; inserting its parent lets the absolute
    imports below resolve.
    """
    repo_root = str(Path(__file__).resolve().parent.parent)
    if repo_root not in sys.path:
        sys.path.insert(0, repo_root)


try:
    # Works when executed as a module: python -m lunar_phase_trainer
    from .app import run
    from .logging_config import configure_logging
except ImportError:
    # Works when executed as a script (IDE "Run File", absolute path, etc.)
    _ensure_repo_root_on_path()
    from lunar_phase_trainer.app import run
    from lunar_phase_trainer.logging_config import configure_logging


def main() -> int:
    """Entry point for running the trainer window."""
    logger = configure_logging()
    logger.info("Starting Lunar Phase Trainer")
    return run()


if __name__ == "__main__":
    raise SystemExit(main())
