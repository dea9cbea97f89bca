from typing import Any, Dict, List

import pytest
from loguru import logger

TARGET_CHAT_ID = -100123456


@pytest.fixture
def log_records():
    records: List[Dict[str, Any]] = []
    sink_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(sink_id)


def make_update(
    update_id: int,
    *,
    slot: str = "message",
    message_id: int | None = None,
    chat_id: int | str = TARGET_CHAT_ID,
    date: int | None = 1_700_000_000,
    text: str | None = None,
    caption: str | None = None,
) -> Dict[str, Any]:
    message: Dict[str, Any] = {
        "message_id": message_id if message_id is not None else update_id * 10,
        "chat": {"id": chat_id, "type": "supergroup"},
    }
    if date is not None:
        message["date"] = date
    if text is not None:
        message["text"] = text
    if caption is not None:
        message["caption"] = caption
    return {"update_id": update_id, slot: message}


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    """Records calls and replays queued responses (or raises queued exceptions)."""

    def __init__(self, *responses: Any) -> None:
        self.responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def _next(self, **call: Any) -> FakeResponse:
        self.calls.append(call)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def request(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        return self._next(method=method, url=url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._next(method="POST", url=url, **kwargs)
