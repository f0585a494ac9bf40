import base64
import logging
import uuid
from collections import OrderedDict
from typing import Callable, Optional

from .api import BackendClient, BackendError, MediaFile
from .storage import TOKEN_KEY, LocalStorage

logger = logging.getLogger(__name__)

MAX_CHARS = 300

EMPTY_POST_ERROR = "Please enter some text or attach media to post."
NOT_LOGGED_IN_ERROR = "You must be logged in to post."
BAD_MEDIA_ERROR = "Please select an image or video file only."
POST_FAILED_ERROR = "Error posting. Please try again."


class MediaStash:
    """Holds picked files between page renders, since a file input cannot be refilled."""

    def __init__(self, capacity: int = 100):
        self.capacity = capacity
        self._files: "OrderedDict[str, MediaFile]" = OrderedDict()

    def put(self, media: MediaFile) -> str:
        key = uuid.uuid4().hex
        self._files[key] = media
        while len(self._files) > self.capacity:
            self._files.popitem(last=False)
        return key

    def pop(self, key: str) -> Optional[MediaFile]:
        return self._files.pop(key, None)


class PostComposer:
    """Draft state for a new post: text, one image or video, and the emoji picker."""

    def __init__(
        self,
        client: BackendClient,
        storage: LocalStorage,
        on_post_created: Optional[Callable[[], None]] = None,
    ):
        self.client = client
        self.storage = storage
        self.on_post_created = on_post_created
        self.content = ""
        self.media: Optional[MediaFile] = None
        self.show_emoji_picker = False
        self.loading = False
        self.error: Optional[str] = None
        # Bumped to hand out a fresh file input so the same file can be picked again
        self.file_input_key = 0

    @property
    def remaining(self) -> int:
        return MAX_CHARS - len(self.content)

    @property
    def can_submit(self) -> bool:
        return not self.loading and bool(self.content.strip() or self.media)

    def change(self, value: str) -> None:
        if len(value) <= MAX_CHARS:
            self.content = value

    def add_emoji(self, emoji: str) -> None:
        if len(self.content) + len(emoji) <= MAX_CHARS:
            self.content += emoji

    def toggle_emoji_picker(self) -> None:
        self.show_emoji_picker = not self.show_emoji_picker

    def select_media(self, media: Optional[MediaFile]) -> None:
        if media is None:
            return
        if not media.content_type.startswith(("image/", "video/")):
            self.error = BAD_MEDIA_ERROR
            return
        self.media = media
        self.error = None

    def remove_media(self) -> None:
        self.media = None
        self.file_input_key += 1

    def preview(self) -> Optional[dict]:
        if self.media is None:
            return None
        kind = self.media.content_type.split("/", 1)[0]
        encoded = base64.b64encode(self.media.data).decode("ascii")
        return {"kind": kind, "type": self.media.content_type, "url": f"data:{self.media.content_type};base64,{encoded}"}

    def submit(self) -> bool:
        self.error = None
        if self.loading:
            return False

        if not self.content.strip() and not self.media:
            self.error = EMPTY_POST_ERROR
            return False

        token = self.storage.get_item(TOKEN_KEY)
        if not token:
            self.error = NOT_LOGGED_IN_ERROR
            return False

        self.loading = True
        try:
            self.client.create_post(self.content.strip(), self.media, token)
        except BackendError:
            logger.exception("Error posting")
            self.error = POST_FAILED_ERROR
            return False
        finally:
            self.loading = False

        self.content = ""
        self.remove_media()
        self.show_emoji_picker = False
        if self.on_post_created:
            self.on_post_created()
        return True
