"""Local blob storage for uploaded event images.

Images are written under ``<MEDIA_ROOT>/event-images/`` and referenced by
their path relative to the media root, e.g. ``event-images/3f2a….png``.
"""
import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from eventhub.config import settings

logger = logging.getLogger(__name__)

IMAGE_NAMESPACE = "event-images"
ALLOWED_IMAGE_TYPES = ("jpeg", "png", "jpg")

_PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
_JPEG_SIGNATURE = b"\xff\xd8\xff"


@dataclass
class ImageUpload:
    """A validated image waiting to be stored."""

    content: bytes
    extension: str
    filename: Optional[str] = None


def sniff_image_type(content: bytes) -> Optional[str]:
    """Return ``png`` or ``jpg`` from the file signature, else None."""
    if content.startswith(_PNG_SIGNATURE):
        return "png"
    if content.startswith(_JPEG_SIGNATURE):
        return "jpg"
    return None


def read_image_upload(upload: Optional[UploadFile], max_kilobytes: int) -> tuple[Optional[ImageUpload], Optional[str]]:
    """Read and check an optional upload.

    Returns ``(image, None)`` on success, ``(None, None)`` when nothing was
    uploaded and ``(None, message)`` when the file is rejected.
    """
    if upload is None or not upload.filename:
        return None, None
    limit = max_kilobytes * 1024
    # Never pull more than one byte past the limit into memory.
    content = upload.file.read(limit + 1)
    if len(content) > limit:
        return None, "The image must not be greater than %d kilobytes." % max_kilobytes

    extension = sniff_image_type(content)
    if extension is None:
        return None, "The image must be a file of type: %s." % ", ".join(ALLOWED_IMAGE_TYPES)
    return ImageUpload(content=content, extension=extension, filename=upload.filename), None


class ImageStorage:
    """Stores images on the local filesystem under a namespaced directory."""

    def __init__(self, root: str):
        self.root = Path(root)

    def store(self, image: ImageUpload) -> str:
        directory = self.root / IMAGE_NAMESPACE
        directory.mkdir(parents=True, exist_ok=True)
        reference = "%s/%s.%s" % (IMAGE_NAMESPACE, uuid.uuid4().hex, image.extension)
        (self.root / reference).write_bytes(image.content)
        logger.info("Image stored at: %s", reference)
        return reference

    def delete(self, reference: Optional[str]) -> None:
        if not reference:
            return
        path = self.root / reference
        if path.exists():
            path.unlink()
            logger.info("Removed stored image %s", reference)

    def exists(self, reference: str) -> bool:
        return (self.root / reference).is_file()


def get_storage() -> ImageStorage:
    """FastAPI dependency — image storage rooted at ``settings.MEDIA_ROOT``."""
    return ImageStorage(settings.MEDIA_ROOT)
