import os
from dataclasses import dataclass
from typing import Mapping

from dotenv import load_dotenv


load_dotenv()


DEFAULT_LLM_API_URL = "https://api.deepseek.com/v1/chat/completions"
DEFAULT_LLM_MODEL = "deepseek-chat"
DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful assistant that rewrites Telegram group discussions into publishable blog posts."
)
DEFAULT_FETCH_LIMIT = 50
DEFAULT_POST_STATUS = "draft"

# Telegram caps getUpdates at 100 items per call.
FETCH_LIMIT_MIN = 1
FETCH_LIMIT_MAX = 100

SECONDS_IN_MINUTE = 60
DEFAULT_POLL_INTERVAL = SECONDS_IN_MINUTE


@dataclass(frozen=True)
class Settings:
    llm_api_key: str
    llm_model: str
    llm_system_prompt: str
    llm_api_url: str
    telegram_bot_token: str
    telegram_chat_id: str
    telegram_fetch_limit: int
    wordpress_base_url: str
    wordpress_username: str
    wordpress_application_password: str
    wordpress_post_status: str
    telegram_webhook_secret: str | None = None
    poll_interval: int = DEFAULT_POLL_INTERVAL


def _require(env: Mapping[str, str], name: str) -> str:
    """Return a non-blank variable or stop the process naming what is missing."""
    value = env.get(name)
    if value is None or not value.strip():
        raise SystemExit(f"Environment variable {name} is required.")
    return value.strip()


def _optional(env: Mapping[str, str], name: str, default: str | None) -> str | None:
    value = env.get(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def parse_int_env(
    env: Mapping[str, str],
    name: str,
    *,
    default: int,
    minimum: int | None = None,
    maximum: int | None = None,
) -> int:
    """Parse a variable as int, honoring a default and optional inclusive bounds."""
    value = env.get(name)
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value.strip())
    except ValueError as exc:
        raise SystemExit(f"Environment variable {name} must be a valid integer.") from exc
    if maximum is None:
        if minimum is not None and parsed < minimum:
            raise SystemExit(f"Environment variable {name} must be at least {minimum}.")
    elif (minimum is not None and parsed < minimum) or parsed > maximum:
        raise SystemExit(f"Environment variable {name} must be between {minimum} and {maximum}.")
    return parsed


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Read and validate configuration, failing fast on missing or invalid values."""
    env = os.environ if environ is None else environ
    return Settings(
        llm_api_key=_require(env, "DEEPSEEK_API_KEY"),
        llm_model=_optional(env, "DEEPSEEK_MODEL", DEFAULT_LLM_MODEL),
        llm_system_prompt=_optional(env, "DEEPSEEK_SYSTEM_PROMPT", DEFAULT_SYSTEM_PROMPT),
        llm_api_url=_optional(env, "LLM_API_URL", DEFAULT_LLM_API_URL),
        telegram_bot_token=_require(env, "TELEGRAM_BOT_TOKEN"),
        telegram_chat_id=_require(env, "TELEGRAM_CHAT_ID"),
        telegram_fetch_limit=parse_int_env(
            env,
            "TELEGRAM_FETCH_LIMIT",
            default=DEFAULT_FETCH_LIMIT,
            minimum=FETCH_LIMIT_MIN,
            maximum=FETCH_LIMIT_MAX,
        ),
        wordpress_base_url=_require(env, "WORDPRESS_BASE_URL").rstrip("/"),
        wordpress_username=_require(env, "WORDPRESS_USERNAME"),
        wordpress_application_password=_require(env, "WORDPRESS_APPLICATION_PASSWORD"),
        wordpress_post_status=_optional(env, "WORDPRESS_POST_STATUS", DEFAULT_POST_STATUS),
        telegram_webhook_secret=_optional(env, "TELEGRAM_WEBHOOK_SECRET", None),
        poll_interval=parse_int_env(
            env,
            "POLL_INTERVAL_SECONDS",
            default=DEFAULT_POLL_INTERVAL,
            minimum=1,
        ),
    )
