import logging
import os
from typing import Any, List, NamedTuple, Optional

import requests
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

# Use backend URL from the environment or fall back to localhost
API_BASE = (
    os.environ.get("BACKEND_URL")
    or os.environ.get("NEXT_PUBLIC_BACKEND_URL")
    or "http://localhost:5000"
)


class MediaFile(NamedTuple):
    filename: str
    content_type: str
    data: bytes


class BackendError(Exception):
    def __init__(self, status_code: Optional[int], message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class BackendClient:
    """Thin HTTP client for the Mini LinkedIn API."""

    def __init__(self, base_url: Optional[str] = None, session=None, timeout: Optional[float] = None):
        self.base_url = (base_url or API_BASE).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, token: Optional[str] = None, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = self.session.request(
                method, f"{self.base_url}{path}", headers=headers, timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            raise BackendError(None, str(e)) from e

        if response.status_code >= 400:
            try:
                body = response.json()
                message = body.get("detail") or body.get("message") or response.text
            except (ValueError, AttributeError):
                message = response.text
            raise BackendError(response.status_code, str(message))

        try:
            return response.json()
        except ValueError as e:
            raise BackendError(response.status_code, "Unexpected response from server") from e

    def get_posts(self, limit: int = 20, offset: int = 0) -> List[dict]:
        return self._request("GET", "/posts", params={"limit": limit, "offset": offset})

    def create_post(self, content: str, media: Optional[MediaFile], token: str) -> dict:
        # Leave Content-Type unset so the multipart boundary is filled in
        files = None
        if media is not None:
            files = {"media": (media.filename, media.data, media.content_type)}
        return self._request("POST", "/posts", token=token, data={"content": content}, files=files)

    def login(self, email: str, password: str) -> dict:
        return self._request("POST", "/auth/login", json={"email": email, "password": password})

    def register(self, name: str, email: str, password: str) -> dict:
        return self._request("POST", "/auth/register", json={"name": name, "email": email, "password": password})

    def media_url(self, path: Optional[str]) -> Optional[str]:
        if not path:
            return None
        return f"{self.base_url}{path}"
