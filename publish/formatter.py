"""Helpers to turn chat text into WordPress-friendly titles."""

import re

FALLBACK_TITLE = "Telegram Update"
TITLE_MAX_LENGTH = 80
ELLIPSIS = "…"

_WHITESPACE_RUN = re.compile(r"\s+")


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs (newlines included) to single spaces and trim."""
    return _WHITESPACE_RUN.sub(" ", text).strip()


def build_title(message: str) -> str:
    """Derive a single-line post title of at most TITLE_MAX_LENGTH characters."""
    normalized = normalize_whitespace(message)
    if not normalized:
        return FALLBACK_TITLE
    if len(normalized) <= TITLE_MAX_LENGTH:
        return normalized
    return normalized[: TITLE_MAX_LENGTH - 1].rstrip() + ELLIPSIS
