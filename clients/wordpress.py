"""WordPress REST API client for creating posts with an application password."""

from dataclasses import dataclass
from typing import Any, Dict, Tuple

import requests

DEFAULT_TIMEOUT = (6.1, 30.0)


class WordPressError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None, detail: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


@dataclass(frozen=True)
class PostDraft:
    title: str
    content: str
    status: str | None = None


@dataclass(frozen=True)
class PublishedPost:
    id: int
    link: str | None = None


class WordPressClient:
    """Creates posts through ``/wp-json/wp/v2/posts``.

    Requests are not retried: a POST that timed out may still have created the
    post, and repeating it would publish a duplicate.
    """

    def __init__(
        self,
        base_url: str,
        *,
        username: str,
        application_password: str,
        default_status: str = "draft",
        timeout: Tuple[float, float] = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("WordPress base URL is required")
        self.base_url = base_url.rstrip("/")
        self.default_status = default_status
        self.timeout = timeout
        self.session = session or requests.Session()
        self.auth = (username, application_password)

    @property
    def posts_endpoint(self) -> str:
        return f"{self.base_url}/wp-json/wp/v2/posts"

    def create_post(self, draft: PostDraft) -> PublishedPost:
        """Create a post and return its id and public link."""
        body: Dict[str, Any] = {
            "title": draft.title,
            "content": draft.content,
            "status": draft.status or self.default_status,
        }
        headers = {"Accept": "application/json", "Content-Type": "application/json"}

        try:
            r = self.session.post(
                self.posts_endpoint,
                headers=headers,
                json=body,
                auth=self.auth,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise WordPressError(f"WordPress request failed: {exc}") from exc

        if not r.ok:
            raise WordPressError(
                f"WordPress post creation failed with status {r.status_code}: {r.text}",
                status_code=r.status_code,
                detail=r.text,
            )

        try:
            payload = r.json()
        except ValueError as exc:
            raise WordPressError("Failed to decode WordPress response", status_code=r.status_code) from exc

        if not isinstance(payload, dict) or payload.get("id") is None:
            raise WordPressError("WordPress response did not include a post id", status_code=r.status_code)
        return PublishedPost(id=payload["id"], link=payload.get("link"))
