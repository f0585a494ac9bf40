import json
import logging
from datetime import datetime
from enum import Enum
from typing import List, Optional

import jwt

from .api import BackendClient, BackendError
from .storage import TOKEN_KEY, USER_KEY, LocalStorage
from .timeago import time_ago

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load posts."


class FeedState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


def user_from_token(token: Optional[str]) -> Optional[dict]:
    """Read {name, id} from a token payload for display only. The signature is not checked."""
    if not token:
        return None
    try:
        payload = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError:
        return None
    return {"name": payload.get("name") or "User", "id": payload.get("id")}


class FeedPage:
    def __init__(self, client: BackendClient, storage: LocalStorage):
        self.client = client
        self.storage = storage
        self.state = FeedState.IDLE
        self.posts: List[dict] = []
        self.error: Optional[str] = None
        self.is_logged_in = False
        self.user: Optional[dict] = None

    def mount(self) -> None:
        self.fetch_posts()

        token = self.storage.get_item(TOKEN_KEY)
        self.is_logged_in = bool(token)

        stored_user = self.storage.get_item(USER_KEY)
        self.user = None
        if stored_user:
            try:
                user = json.loads(stored_user)
            except ValueError:
                user = None
            if isinstance(user, dict):
                self.user = user
        if self.user is None:
            self.user = user_from_token(token)

    def fetch_posts(self) -> None:
        self.state = FeedState.LOADING
        self.error = None
        try:
            self.posts = self.client.get_posts()
        except BackendError:
            logger.exception("Error fetching posts")
            self.error = LOAD_ERROR_MESSAGE
            self.state = FeedState.ERROR
            return
        self.state = FeedState.SUCCESS

    @property
    def greeting(self) -> str:
        name = (self.user or {}).get("name") or "User"
        return f"Hello, {name}"

    @property
    def profile_link(self) -> str:
        if self.user:
            return f"/profile/{self.user.get('id') or ''}"
        return "/login"

    def entries(self, now: Optional[datetime] = None) -> List[dict]:
        return [dict(post, time_ago=time_ago(post["created_at"], now=now)) for post in self.posts]
