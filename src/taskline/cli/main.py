# src/taskline/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then either:
- runs a single command given on the command line (`taskline list status=overdue`), or
- starts the console REPL (when enabled in settings).
"""

from __future__ import annotations

import logging
import shlex
import sys

from ..cli.bootstrap import create_initial_state
from ..cli.commands import registry as command_registry
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def _shutdown(state) -> None:
    """Best-effort shutdown."""
    store = getattr(state, "store", None)
    if store is not None and hasattr(store, "close"):
        try:
            store.close()
        except Exception:
            logger.debug("Store close failed.", exc_info=True)


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    args = sys.argv[1:] if argv is None else argv

    # choose console log level from settings.log_level
    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = getattr(settings, "data_dir", ".local/taskline")
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "taskline"))

    state = create_initial_state(settings=settings)

    try:
        if args:
            line = "/" + " ".join(shlex.quote(a) for a in args).lstrip("/")
            print(command_registry.handle(state, line, emit=print))
        elif settings.console_enabled:
            run_console_loop(state)
        else:
            logger.info("Console disabled and no command given; nothing to do.")
    finally:
        _shutdown(state)
        logger.info("Bye.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
