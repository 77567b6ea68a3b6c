"""
Root logger configuration for Fast Memos.

``setup_logging`` is called by every ``create_app``.  The module-level app
is built at import time, so a later app with its own settings must still be
able to change the level and the log file.  Handlers installed here carry a
marker attribute; handlers added by anything else (pytest, uvicorn) are
left alone.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Marker attribute: "console" or "file".
_HANDLER_TAG = "_fast_memos_handler"


def _own_handler(root: logging.Logger, kind: str) -> Optional[logging.Handler]:
    for handler in root.handlers:
        if getattr(handler, _HANDLER_TAG, None) == kind:
            return handler
    return None


def _tagged(handler: logging.Handler, kind: str) -> logging.Handler:
    setattr(handler, _HANDLER_TAG, kind)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger for the given level and optional log file.

    Safe to call repeatedly.  The level is applied on every call, a single
    console handler is kept, and the file handler is swapped when ``logfile``
    changes (or removed when it is empty).  Unknown level names fall back
    to ``INFO``.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    if _own_handler(root, "console") is None:
        root.addHandler(_tagged(logging.StreamHandler(), "console"))

    current = _own_handler(root, "file")
    wanted = str(Path(logfile).resolve()) if logfile else None
    if current is not None and getattr(current, "baseFilename", None) == wanted:
        return
    if current is not None:
        root.removeHandler(current)
        current.close()
    if wanted:
        Path(wanted).parent.mkdir(parents=True, exist_ok=True)
        root.addHandler(_tagged(logging.FileHandler(wanted, encoding="utf-8"), "file"))
