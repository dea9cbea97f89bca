"""OpenAI-compatible chat completion client (DeepSeek by default)."""

from typing import Any, Dict, Tuple

import requests

DEEPSEEK_API_URL = "https://api.deepseek.com/v1/chat/completions"
DEFAULT_TIMEOUT = (6.1, 120.0)


class LLMError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None, detail: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class ChatCompletionClient:
    """Turns a chat message into article content with a single completion call."""

    def __init__(
        self,
        api_key: str,
        *,
        model: str,
        system_prompt: str,
        api_url: str = DEEPSEEK_API_URL,
        timeout: Tuple[float, float] = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("LLM API key is required")
        self.api_key = api_key
        self.model = model
        self.system_prompt = system_prompt
        self.api_url = api_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def generate_post(self, message_text: str) -> str:
        """Return the generated article body for ``message_text``."""
        body: Dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": self.system_prompt},
                {"role": "user", "content": message_text},
            ],
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            r = self.session.post(self.api_url, headers=headers, json=body, timeout=self.timeout)
        except requests.RequestException as exc:
            raise LLMError(f"Chat completion request failed: {exc}") from exc

        if not r.ok:
            raise LLMError(
                f"Chat completion request failed with status {r.status_code}: {r.text}",
                status_code=r.status_code,
                detail=r.text,
            )

        try:
            data = r.json()
        except ValueError as exc:
            raise LLMError("Failed to decode chat completion response", status_code=r.status_code) from exc

        content = _first_choice_content(data)
        if not content:
            raise LLMError("Chat completion response did not include any content.")
        return content


def _first_choice_content(data: Any) -> str | None:
    """Dig ``choices[0].message.content`` out of a completion payload."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices") or []
    if not choices or not isinstance(choices[0], dict):
        return None
    message = choices[0].get("message") or {}
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str):
        return None
    return content.strip() or None
