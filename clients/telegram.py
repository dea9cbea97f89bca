"""Telegram Bot API helper with basic retry logic."""

import time
from typing import Any, Dict, List, Sequence

import requests


class TelegramAPIError(RuntimeError):
    """Raised when Telegram Bot API returns an error or the HTTP request fails."""

    def __init__(
        self,
        message: str,
        *,
        status_code = None,
        description = None,
        response: requests.Response | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.description = description
        self.response = response


class TelegramClient:
    """Minimal Telegram Bot API client with retry-aware request helpers."""

    def __init__(
        self,
        token: str,
        *,
        base_url = None,
        timeout: float = 20.0,
        max_retries: int = 3,
        backoff: float = 0.4,
        session: requests.Session | None = None,
    ) -> None:
        """Construct a Telegram Bot API client with basic retry/backoff."""
        if not token:
            raise ValueError("Telegram token is required")
        # Allow overriding base URL for self-hosted gateways or tests.
        self.base_url = base_url or f"https://api.telegram.org/bot{token}"
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.backoff = max(0.0, backoff)
        self.session = session or requests.Session()

    def _request(
        self,
        method: str,
        *,
        http_method: str = "POST",
        params: Dict[str, Any] | None = None,
        json_data: Dict[str, Any] | None = None,
    ) -> Any:
        """Perform an API call with exponential backoff and structured errors."""
        url = f"{self.base_url}/{method}"
        last_error: TelegramAPIError | None = None

        for attempt in range(self.max_retries):
            try:
                response = self.session.request(
                    http_method,
                    url,
                    params=params,
                    json=json_data,
                    timeout=self.timeout,
                )
            except requests.RequestException as exc:
                last_error = TelegramAPIError(f"HTTP request failed: {exc}")
            else:
                try:
                    payload = response.json()
                except ValueError:
                    last_error = TelegramAPIError(
                        "Failed to decode Telegram response",
                        status_code=response.status_code,
                        description=response.text,
                        response=response,
                    )
                else:
                    if response.status_code != 200:
                        detail = None
                        if isinstance(payload, dict):
                            detail = payload.get("description")
                        detail = detail or response.text
                        last_error = TelegramAPIError(
                            f"HTTP {response.status_code}: {detail}",
                            status_code=response.status_code,
                            description=detail,
                            response=response,
                        )
                        # Client errors (bad chat id, message already gone) do not heal on retry.
                        if 400 <= response.status_code < 500 and response.status_code != 429:
                            break
                    elif not payload.get("ok"):
                        detail = payload.get("description") or str(payload)
                        last_error = TelegramAPIError(
                            f"Telegram API error: {detail}",
                            status_code=response.status_code,
                            description=detail,
                            response=response,
                        )
                    else:
                        return payload["result"]

            if attempt + 1 == self.max_retries:
                break

            sleep_for = self.backoff * (2 ** attempt)
            if sleep_for:
                time.sleep(sleep_for)

        if last_error is None:
            last_error = TelegramAPIError("Telegram request failed without specific error")
        raise last_error

    # Public helpers -----------------------------------------------------

    def get_updates(
        self,
        *,
        offset: int | None = None,
        limit: int | None = None,
        timeout: int = 0,
        allowed_updates: Sequence[str] | None = None,
    ) -> List[Dict[str, Any]]:
        """Fetch pending updates, optionally starting at a given offset.

        Passing ``offset`` confirms every update with a smaller id, so the
        server will not return them again.
        """
        params: Dict[str, Any] = {"timeout": timeout}
        if offset is not None:
            params["offset"] = offset
        if limit is not None:
            params["limit"] = limit
        if allowed_updates is not None:
            params["allowed_updates"] = ",".join(allowed_updates)
        return self._request("getUpdates", http_method="GET", params=params) or []

    def acknowledge_updates(self, offset: int) -> None:
        """Commit the cursor so updates below ``offset`` are dropped server-side."""
        self.get_updates(offset=offset, limit=1, timeout=0)

    def delete_message(self, chat_id: int | str, message_id: int) -> None:
        """Delete a chat message; the bot needs delete rights in groups and channels."""
        payload = {"chat_id": chat_id, "message_id": message_id}
        self._request("deleteMessage", json_data=payload)
