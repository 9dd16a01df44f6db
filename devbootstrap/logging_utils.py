from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Tuple

DEFAULT_LOG_PATH = "~/Library/Logs/devbootstrap.log"


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Send every bootstrap record (each `CMD` line, each `WARN` from a
    tolerated stage failure) to ~/Library/Logs/devbootstrap.log and the
    terminal.

    Prompts and the public key go through rich, not through logging.

    When ~/Library/Logs is not writable (sandboxed shells, a fresh
    account without a Library folder), ./devbootstrap.log is used.
    Returns the path actually written to.
    """

    root = logging.getLogger()
    root.setLevel(level)

    # configure_logging() may be reached twice (tests, repeated run() calls); keep one set of handlers.
    if getattr(root, "_devbootstrap_log_path", None):
        return root._devbootstrap_log_path  # type: ignore[attr-defined]

    requested = str(Path(log_path).expanduser())
    file_handler, chosen_path = _open_log_file(requested)

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )
    handlers: list[logging.Handler] = [file_handler]
    if also_console:
        handlers.append(logging.StreamHandler())
    for h in handlers:
        h.setFormatter(fmt)
        root.addHandler(h)

    setattr(root, "_devbootstrap_log_path", chosen_path)
    if chosen_path != requested:
        logging.getLogger(__name__).warning("WARN cannot write %s; logging to %s", requested, chosen_path)
    else:
        logging.getLogger(__name__).info("Logging to %s", chosen_path)
    return chosen_path


def _open_log_file(requested: str) -> Tuple[logging.Handler, str]:
    try:
        Path(os.path.dirname(requested) or ".").mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(requested), requested
    except OSError:
        fallback = str(Path.cwd() / "devbootstrap.log")
        return logging.FileHandler(fallback), fallback
