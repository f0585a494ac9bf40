import json
import logging
from pathlib import Path
from typing import Dict, Mapping, Optional

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"


class LocalStorage:
    """String key/value store standing in for the browser's localStorage.

    Backed by a plain dict, seeded from e.g. request cookies, and optionally
    persisted to a JSON file on every write.
    """

    def __init__(self, initial: Optional[Mapping[str, str]] = None, path: Optional[Path] = None):
        self.path = path
        self._items: Dict[str, str] = {}
        if path is not None and path.exists():
            self._items.update(json.loads(path.read_text()))
        if initial:
            self._items.update(initial)

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)
        self._save()

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)
        self._save()

    def _save(self) -> None:
        if self.path is None:
            return
        self.path.write_text(json.dumps(self._items))
        logger.debug("Saved %d storage items to %s", len(self._items), self.path)
