import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(name: str = None, level: str = "WARNING", log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure root logger with a stderr handler, plus a rotating file handler
    when `log_file` is given. Stdout is left alone: the CLI prints values there.
    Returns a logger for `name`.
    """
    lvl = getattr(logging, str(level).upper(), logging.WARNING)

    root = logging.getLogger()
    if not root.handlers:
        ch = logging.StreamHandler(sys.stderr)
        ch.setLevel(lvl)
        ch.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(ch)

        if log_file:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            fh = RotatingFileHandler(str(log_file), maxBytes=5 * 1024 * 1024, backupCount=5, encoding="utf-8")
            fh.setLevel(lvl)
            fh.setFormatter(logging.Formatter(LOG_FORMAT))
            root.addHandler(fh)

    root.setLevel(lvl)
    return logging.getLogger(name)
