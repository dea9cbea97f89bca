import pytest

from publish.formatter import FALLBACK_TITLE, build_title


def test_build_title_returns_fallback_for_empty_message() -> None:
    assert build_title("") == "Telegram Update"


def test_build_title_returns_fallback_for_whitespace_only_message() -> None:
    assert build_title(" \n\t ") == FALLBACK_TITLE


def test_build_title_trims_and_normalizes_spacing() -> None:
    assert build_title("   Hello    world   ") == "Hello world"


def test_build_title_collapses_newlines() -> None:
    assert build_title("First line\n\nsecond\tline") == "First line second line"


def test_build_title_truncates_long_messages_with_ellipsis() -> None:
    assert build_title("a" * 100) == "a" * 79 + "…"


def test_build_title_keeps_exactly_eighty_characters() -> None:
    assert build_title("b" * 80) == "b" * 80


def test_build_title_drops_trailing_space_before_ellipsis() -> None:
    message = "x" * 78 + " tail that goes past the limit"

    assert build_title(message) == "x" * 78 + "…"


@pytest.mark.parametrize(
    "message",
    [
        "",
        "   Hello    world   ",
        "a" * 100,
        "x" * 78 + " tail that goes past the limit",
        "line one\nline two\n" * 10,
    ],
)
def test_build_title_is_idempotent(message: str) -> None:
    title = build_title(message)

    assert build_title(title) == title
    assert len(title) <= 80
