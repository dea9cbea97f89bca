import sys
from pathlib import Path
from typing import Any, Dict

import yaml
from loguru import logger

from clients.llm import LLMError
from clients.telegram import TelegramAPIError
from clients.wordpress import WordPressError

LOG_DIR = Path(".data")
LOG_DIR.mkdir(parents=True, exist_ok=True)

logger.remove()


def _console_format(record: Dict[str, Any]) -> str:
    """Pretty-print console logs while keeping structured extras intact."""
    timestamp = record["time"].strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
    source = f"{record['name']}:{record['function']}".replace("<", "\\<").replace(">", "\\>")
    base = (
        f"<green>{timestamp}</green> | "
        f"<level>{record['level'].name:<8}</level> | "
        f"<cyan>{source}</cyan> - {{message}}"
    )
    extras = record.get("extra") or {}
    if extras:
        extras_yaml = yaml.safe_dump(
            {key: _yaml_safe(value) for key, value in extras.items()},
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
        ).rstrip()
        # Extras may carry user text; escape markup so colorize never trips on it.
        padded_yaml = "\n".join(f"  {line}" for line in extras_yaml.splitlines())
        padded_yaml = padded_yaml.replace("{", "{{").replace("}", "}}").replace("<", "\\<")
        base = f"{base}\n{padded_yaml}"
    return f"{base}\n{{exception}}"


def _yaml_safe(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, dict):
        return {str(key): _yaml_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_yaml_safe(item) for item in value]
    return str(value)


CONSOLE_SINK_ID = logger.add(
    sys.stderr,
    level="INFO",
    colorize=True,
    enqueue=True,
    format=_console_format,
)

_file_sink_id: int | None = None


def configure_file_logging(filename: str, *, rotation: str = "10 MB") -> Path:
    """Attach a file sink for this process and return its path."""
    global _file_sink_id
    # One JSON log per process; re-configuring replaces the previous sink.
    if _file_sink_id is not None:
        logger.remove(_file_sink_id)
    log_path = LOG_DIR / filename
    _file_sink_id = logger.add(
        log_path,
        rotation=rotation,
        serialize=True,
        backtrace=True,
        diagnose=False,
        enqueue=True,
    )
    return log_path


def format_http_error(err: Exception) -> str:
    """Normalize client exceptions to readable strings for logging."""
    if isinstance(err, TelegramAPIError):
        return err.description or str(err)
    if isinstance(err, (LLMError, WordPressError)) and err.status_code is not None:
        return f"HTTP {err.status_code}: {err.detail or err}"
    return str(err)
