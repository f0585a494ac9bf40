import logging
import shutil
import uuid
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

logger = logging.getLogger(__name__)

UPLOADS_PREFIX = "/uploads"
ALLOWED_MEDIA_PREFIXES = ("image/", "video/")


def is_allowed_media(content_type: Optional[str]) -> bool:
    return bool(content_type) and content_type.startswith(ALLOWED_MEDIA_PREFIXES)


def save_upload(upload: UploadFile, uploads_dir: Path) -> str:
    """Store an uploaded file under a random name and return its public URL."""
    suffix = Path(upload.filename or "").suffix.lower()
    filename = f"{uuid.uuid4().hex}{suffix}"

    uploads_dir.mkdir(parents=True, exist_ok=True)
    with open(uploads_dir / filename, "wb") as out:
        shutil.copyfileobj(upload.file, out)

    logger.info("Saved upload %s (%s)", filename, upload.content_type)
    return f"{UPLOADS_PREFIX}/{filename}"


def remove_upload(media_url: Optional[str], uploads_dir: Path) -> None:
    if not media_url or not media_url.startswith(UPLOADS_PREFIX + "/"):
        return
    path = uploads_dir / Path(media_url).name
    try:
        path.unlink()
    except FileNotFoundError:
        logger.warning("Upload %s already gone", path)
