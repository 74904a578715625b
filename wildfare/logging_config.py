import logging
import sys
from typing import Any

from .config import LogSettings


class _ColoredFormatter(logging.Formatter):
    _COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    _RESET = '\033[0m'
    _BOLD = '\033[1m'

    def format(self, record: logging.LogRecord) -> str:
        color = self._COLORS.get(record.levelname, '')
        if color:
            record.levelname = f"{color}{self._BOLD}{record.levelname}{self._RESET}"
        return super().format(record)


class ComponentFilter(logging.Filter):
    """Pass errors always; other records only when logging is on and the component is enabled."""

    def __init__(self, log_settings: LogSettings):
        super().__init__()
        self.log_settings = log_settings

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno >= logging.ERROR:
            return True
        if not self.log_settings.logging_enabled:
            return False
        components = self.log_settings.enabled_components
        if not components:
            return True
        return any(record.name == c or record.name.startswith(f"{c}.") for c in components)


def summarize_payload(payload: Any, show_raw: bool = False) -> Any:
    """Shorten lists and wide dicts for log output unless raw payloads were requested."""
    if show_raw or payload is None:
        return payload
    if isinstance(payload, (list, tuple)):
        return f"[Array({len(payload)})]"
    if isinstance(payload, dict) and len(payload) > 8:
        keys = list(payload)
        return f"{{Object: {len(keys)} keys: {', '.join(map(str, keys[:5]))}…}}"
    return payload


def setup_logging(level: int | str = logging.INFO, log_settings: LogSettings | None = None) -> None:
    """Setup simple console logging with colors, function names and line numbers."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    log_format = '%(asctime)s [%(levelname)s] %(name)s %(funcName)s():%(lineno)d - %(message)s'
    date_format = '%Y-%m-%d %H:%M:%S'

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    if log_settings is not None:
        handler.addFilter(ComponentFilter(log_settings))

    formatter = (
        _ColoredFormatter(log_format, datefmt=date_format)
        if sys.stdout.isatty()
        else logging.Formatter(log_format, datefmt=date_format)
    )
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    logging.getLogger('schedule').setLevel(logging.WARNING)
