"""Pick the representative message out of a Telegram update envelope."""

from typing import Any, Callable, Dict, Tuple

Update = Dict[str, Any]
Message = Dict[str, Any]


def _slot(name: str) -> Callable[[Update], Message | None]:
    def extract(update: Update) -> Message | None:
        value = update.get(name)
        return value if isinstance(value, dict) else None

    extract.__name__ = f"extract_{name}"
    return extract


# Priority order matters: a fresh message wins over any edited variant.
MESSAGE_EXTRACTORS: Tuple[Callable[[Update], Message | None], ...] = (
    _slot("message"),
    _slot("channel_post"),
    _slot("edited_message"),
    _slot("edited_channel_post"),
)


def pick_message(update: Update) -> Message | None:
    """Return the first message variant present on the update, if any."""
    for extract in MESSAGE_EXTRACTORS:
        message = extract(update)
        if message is not None:
            return message
    return None


def _clean(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    return value.strip() or None


def extract_text(update: Update) -> str | None:
    """Trimmed text (or caption) of the picked message; None when blank."""
    message = pick_message(update)
    if message is None:
        return None
    return _clean(message.get("text")) or _clean(message.get("caption"))
