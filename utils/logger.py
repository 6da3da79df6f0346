# utils/logger.py
import logging
import os
import re
from logging.handlers import RotatingFileHandler
from typing import Optional, Union

FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATEFMT = "%Y-%m-%d %H:%M:%S"
MAX_BYTES = 5 * 1024 * 1024
BACKUPS = 5

# requests puts the full URL in connection errors, Binance signature included
_SIGNATURE_PARAM = re.compile(r"(signature=)[0-9a-fA-F]+")


class RedactSignatures(logging.Filter):
    """Masks ``signature=<hex>`` query values in the rendered message."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _SIGNATURE_PARAM.sub(r"\1***", message)
        if redacted != message:
            record.msg, record.args = redacted, None
        return True


def setup_logger(name: str,
                 level: Union[str, int, None] = None,
                 log_file: Optional[str] = "",
                 to_console: bool = True) -> logging.Logger:
    """
    Create/get a logger with console and rotating-file handlers.
    ``level`` and ``log_file`` default to LOG_LEVEL / LOG_FILE; pass
    ``log_file=None`` for console only. Calling again with the same name
    returns the configured logger untouched.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    level = level or os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(level)
    if log_file == "":
        log_file = os.getenv("LOG_FILE", "logs/trading.log")

    formatter = logging.Formatter(fmt=FORMAT, datefmt=DATEFMT)
    handlers = []
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(RotatingFileHandler(log_file, maxBytes=MAX_BYTES, backupCount=BACKUPS, encoding="utf-8"))
    if to_console:
        handlers.append(logging.StreamHandler())

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
        handler.addFilter(RedactSignatures())
        logger.addHandler(handler)

    # urllib3 logs full URLs at DEBUG, signatures included
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)

    return logger
