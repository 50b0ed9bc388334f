import inspect
import logging
import sys
import time
import json
import re
from functools import wraps
from pathlib import Path
from typing import Callable, Any, Optional
from contextvars import ContextVar

from logging.handlers import RotatingFileHandler

# Correlation ID: request header name and per-request context variable
CORRELATION_HEADER = "X-Correlation-ID"
correlation_id_var: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)

# Patterns for secrets that should be masked in logs
SECRET_PATTERNS = [
    (re.compile(r'(api[_-]?key\s*[=:]\s*)["\']?[\w-]{20,}["\']?', re.IGNORECASE), r'\1***MASKED***'),
    (re.compile(r'(key\s*[=:]\s*)["\']?AIza[\w-]+["\']?', re.IGNORECASE), r'\1***MASKED***'),
    (re.compile(r'(bearer\s+)[\w.-]{20,}', re.IGNORECASE), r'\1***MASKED***'),
    (re.compile(r'(authorization["\']?\s*[=:]\s*)["\']?[\w.-]{20,}["\']?', re.IGNORECASE), r'\1***MASKED***'),
    (re.compile(r'-----BEGIN [A-Z ]*PRIVATE KEY-----.*?-----END [A-Z ]*PRIVATE KEY-----', re.DOTALL),
     '***MASKED PRIVATE KEY***'),
]


def mask_secrets(text: str) -> str:
    """Mask sensitive values in text."""
    for pattern, replacement in SECRET_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


class SecretMaskingFilter(logging.Filter):
    """Filter to mask secrets in log messages."""

    def filter(self, record):
        if isinstance(record.msg, str):
            record.msg = mask_secrets(record.msg)
        if record.args:
            record.args = tuple(
                mask_secrets(str(arg)) if isinstance(arg, str) else arg
                for arg in record.args
            )
        return True


BASE_DIR = Path(__file__).resolve().parent.parent.parent
LOGS_DIR = BASE_DIR / "logs"
LOG_FORMAT = "%(asctime)s - [%(correlation_id)s] - %(name)s - %(levelname)s - %(message)s"


class CorrelationIdFilter(logging.Filter):
    """Filter to inject correlation ID into log records."""

    def filter(self, record):
        correlation_id = correlation_id_var.get()
        record.correlation_id = correlation_id if correlation_id else "N/A"
        return True


class JsonFormatter(logging.Formatter):
    """Formatter for structured JSON logging."""

    def format(self, record):
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, 'correlation_id', 'N/A'),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class ColorFormatter(logging.Formatter):
    """Custom formatter to add colors to console output."""

    grey = "\x1b[38;20m"
    yellow = "\x1b[33;20m"
    red = "\x1b[31;20m"
    bold_red = "\x1b[31;1m"
    reset = "\x1b[0m"

    FORMATS = {
        logging.DEBUG: grey + LOG_FORMAT + reset,
        logging.INFO: grey + LOG_FORMAT + reset,
        logging.WARNING: yellow + LOG_FORMAT + reset,
        logging.ERROR: red + LOG_FORMAT + reset,
        logging.CRITICAL: bold_red + LOG_FORMAT + reset
    }

    def format(self, record):
        log_fmt = self.FORMATS.get(record.levelno)
        formatter = logging.Formatter(log_fmt, datefmt="%Y-%m-%d %H:%M:%S")
        return formatter.format(record)


def setup_log_file(logs_dir: Path = LOGS_DIR, clear_log: bool = False) -> Path:
    """
    Creates the log directory and optionally truncates the current log file.
    """
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = logs_dir / "app.log"

    if clear_log and log_file.exists():
        log_file.write_text("")
    return log_file


def configure_logger(
    name: str = "app",
    log_level: int = logging.INFO,
    use_json: bool = False,
    mask_secrets: bool = True,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Attaches console (and optionally rotating file) handlers to the named logger.
    """
    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    correlation_filter = CorrelationIdFilter()
    secret_filter = SecretMaskingFilter() if mask_secrets else None

    # Prevent adding handlers multiple times (create_app may run more than once per process)
    if logger.handlers:
        return logger

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(ColorFormatter())
    console_handler.addFilter(correlation_filter)
    if secret_filter:
        console_handler.addFilter(secret_filter)
    logger.addHandler(console_handler)

    if log_file is not None:
        # Rotate after 5MB, keep 5 backup files
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=5 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8"
        )
        if use_json:
            file_handler.setFormatter(JsonFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
        else:
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        file_handler.addFilter(correlation_filter)
        if secret_filter:
            file_handler.addFilter(secret_filter)
        logger.addHandler(file_handler)

    return logger


def setup_logger(
    name: str = "app",
    log_level: int | str = logging.INFO,
    clear_log: bool = False,
    use_json: bool = False,
    mask_secrets: bool = True,
    log_to_file: bool = True,
) -> logging.Logger:
    """
    Sets up a logger with console (colored) and file (rotating) handlers.

    Args:
        name: Logger name
        log_level: Logging level, as an int or a level name such as "DEBUG"
        clear_log: If True, clears the log file at startup
        use_json: If True, uses JSON formatter for file output
        mask_secrets: If True, masks API keys, bearer tokens and private keys in logs
        log_to_file: If False, only the console handler is attached
    """
    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())
    log_file = setup_log_file(clear_log=clear_log) if log_to_file else None
    return configure_logger(name, log_level, use_json, mask_secrets, log_file)


def set_correlation_id(correlation_id: Optional[str]):
    """Set the correlation ID for the current context."""
    correlation_id_var.set(correlation_id)


def get_correlation_id() -> Optional[str]:
    """Get the correlation ID for the current context."""
    return correlation_id_var.get()


logger = logging.getLogger(__name__)


def log_async_execution_time(func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator to log the execution time of a coroutine function.
    """
    if not inspect.iscoroutinefunction(func):
        raise TypeError(f"log_async_execution_time expects a coroutine function, got {func!r}")

    @wraps(func)
    async def wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        logger.info(f"Starting async execution of: {func.__name__}")
        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            duration = time.perf_counter() - start_time
            logger.error(f"Error in async {func.__name__} after {duration:.4f} seconds: {e}")
            raise
        duration = time.perf_counter() - start_time
        logger.info(f"Finished async execution of: {func.__name__} in {duration:.4f} seconds")
        return result
    return wrapper
