import pytest
import requests

from clients.llm import ChatCompletionClient, LLMError
from clients.telegram import TelegramAPIError, TelegramClient
from clients.wordpress import PostDraft, PublishedPost, WordPressClient, WordPressError
from conftest import FakeResponse, FakeSession
from utils import format_http_error


def _telegram(session: FakeSession, **kwargs) -> TelegramClient:
    return TelegramClient("123:ABC", session=session, backoff=0.0, **kwargs)


def test_get_updates_passes_limit_and_offset() -> None:
    session = FakeSession(FakeResponse(payload={"ok": True, "result": [{"update_id": 1}]}))

    updates = _telegram(session).get_updates(offset=5, limit=50)

    assert updates == [{"update_id": 1}]
    call = session.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "https://api.telegram.org/bot123:ABC/getUpdates"
    assert call["params"] == {"timeout": 0, "offset": 5, "limit": 50}


def test_acknowledge_updates_commits_offset() -> None:
    session = FakeSession(FakeResponse(payload={"ok": True, "result": []}))

    _telegram(session).acknowledge_updates(43)

    assert session.calls[0]["params"] == {"timeout": 0, "offset": 43, "limit": 1}


def test_delete_message_posts_chat_and_message_id() -> None:
    session = FakeSession(FakeResponse(payload={"ok": True, "result": True}))

    _telegram(session).delete_message(-100123456, 21)

    call = session.calls[0]
    assert call["url"].endswith("/deleteMessage")
    assert call["json"] == {"chat_id": -100123456, "message_id": 21}


def test_telegram_client_retries_transport_errors() -> None:
    session = FakeSession(
        requests.ConnectionError("boom"),
        FakeResponse(payload={"ok": True, "result": []}),
    )

    assert _telegram(session).get_updates() == []
    assert len(session.calls) == 2


def test_telegram_client_does_not_retry_client_errors() -> None:
    session = FakeSession(
        FakeResponse(400, payload={"ok": False, "description": "Bad Request: message to delete not found"}),
    )

    with pytest.raises(TelegramAPIError) as info:
        _telegram(session).delete_message(1, 2)

    assert info.value.status_code == 400
    assert format_http_error(info.value) == "Bad Request: message to delete not found"
    assert len(session.calls) == 1


def test_telegram_client_gives_up_after_max_retries() -> None:
    session = FakeSession(*(FakeResponse(502, text="Bad Gateway") for _ in range(3)))

    with pytest.raises(TelegramAPIError):
        _telegram(session, max_retries=3).get_updates()

    assert len(session.calls) == 3


def _llm(session: FakeSession) -> ChatCompletionClient:
    return ChatCompletionClient("key", model="deepseek-test", system_prompt="Test prompt.", session=session)


def test_generate_post_sends_system_and_user_messages() -> None:
    session = FakeSession(
        FakeResponse(payload={"choices": [{"message": {"role": "assistant", "content": "  Article body \n"}}]})
    )

    content = _llm(session).generate_post("valid prompt")

    assert content == "Article body"
    call = session.calls[0]
    assert call["url"] == "https://api.deepseek.com/v1/chat/completions"
    assert call["headers"]["Authorization"] == "Bearer key"
    assert call["json"] == {
        "model": "deepseek-test",
        "messages": [
            {"role": "system", "content": "Test prompt."},
            {"role": "user", "content": "valid prompt"},
        ],
    }


def test_generate_post_raises_on_http_error() -> None:
    session = FakeSession(FakeResponse(500, text="upstream exploded"))

    with pytest.raises(LLMError) as info:
        _llm(session).generate_post("prompt")

    assert info.value.status_code == 500
    assert format_http_error(info.value) == "HTTP 500: upstream exploded"


@pytest.mark.parametrize(
    "payload",
    [{"choices": []}, {"choices": [{"message": {"content": "   "}}]}, {"choices": [{}]}],
)
def test_generate_post_raises_on_empty_content(payload) -> None:
    session = FakeSession(FakeResponse(payload=payload))

    with pytest.raises(LLMError, match="did not include any content"):
        _llm(session).generate_post("prompt")


def _wordpress(session: FakeSession) -> WordPressClient:
    return WordPressClient(
        "https://example.com/",
        username="tester",
        application_password="app-password",
        default_status="draft",
        session=session,
    )


def test_create_post_uses_basic_auth_and_default_status() -> None:
    session = FakeSession(FakeResponse(201, payload={"id": 7, "link": "https://example.com/?p=7"}))

    post = _wordpress(session).create_post(PostDraft(title="Hello", content="Body"))

    assert post == PublishedPost(id=7, link="https://example.com/?p=7")
    call = session.calls[0]
    assert call["url"] == "https://example.com/wp-json/wp/v2/posts"
    assert call["auth"] == ("tester", "app-password")
    assert call["json"] == {"title": "Hello", "content": "Body", "status": "draft"}


def test_create_post_honors_explicit_status() -> None:
    session = FakeSession(FakeResponse(201, payload={"id": 8}))

    post = _wordpress(session).create_post(PostDraft(title="t", content="c", status="publish"))

    assert post.link is None
    assert session.calls[0]["json"]["status"] == "publish"


def test_create_post_raises_on_http_error_without_retrying() -> None:
    session = FakeSession(FakeResponse(401, text='{"code":"rest_cannot_create"}'))

    with pytest.raises(WordPressError) as info:
        _wordpress(session).create_post(PostDraft(title="t", content="c"))

    assert info.value.status_code == 401
    assert len(session.calls) == 1
