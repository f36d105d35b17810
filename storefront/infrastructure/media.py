"""Media upload storage.

Validates uploaded images and videos and stores them under the public
uploads directory with a timestamp-prefixed, sanitized filename. Files are
served back under the configured URL prefix.
"""

import re
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Literal
from uuid import uuid4

import structlog

from storefront.domain.exceptions import MediaValidationError
from storefront.infrastructure.config import settings

logger = structlog.get_logger()

MediaKind = Literal["image", "video"]

ALLOWED_IMAGE_TYPES = {
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/webp",
    "image/gif",
    "image/avif",
}

ALLOWED_VIDEO_TYPES = {
    "video/mp4",
    "video/mpeg",
    "video/ogg",
    "video/webm",
    "video/quicktime",
}

ALLOWED_EXTENSIONS: dict[str, set[str]] = {
    "image": {".jpg", ".jpeg", ".png", ".webp", ".gif", ".avif"},
    "video": {".mp4", ".mpeg", ".ogg", ".webm", ".mov"},
}

DANGEROUS_TYPES = {
    "application/x-msdownload",
    "application/x-sh",
    "application/x-bat",
    "application/x-csh",
    "application/x-php",
    "text/x-php",
    "application/x-httpd-php",
}

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


@dataclass(frozen=True)
class MediaUpload:
    """An uploaded file received from a form.

    Attributes:
        filename: Original client filename.
        content_type: Declared MIME type.
        data: File contents.
    """

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def kind(self) -> MediaKind | None:
        """Media kind derived from the MIME type, None when neither."""
        if self.content_type.startswith("image/"):
            return "image"
        if self.content_type.startswith("video/"):
            return "video"
        return None


def sanitize_filename(filename: str, timestamp_ms: int, suffix: str = "") -> str:
    """Build a storage filename: ``<timestamp>-<sanitized stem>[-<suffix>]<ext>``.

    Args:
        filename: Original filename.
        timestamp_ms: Millisecond timestamp prefix.
        suffix: Optional disambiguator appended to the stem.

    Returns:
        Safe filename.
    """
    path = Path(filename)
    stem = _UNSAFE_CHARS.sub("_", path.stem) or "file"
    if suffix:
        stem = f"{stem}-{suffix}"
    return f"{timestamp_ms}-{stem}{path.suffix}"


class MediaStorage:
    """Filesystem storage for uploaded media."""

    def __init__(
        self,
        upload_dir: str | Path | None = None,
        url_prefix: str | None = None,
        max_image_size: int | None = None,
        max_video_size: int | None = None,
    ) -> None:
        self.upload_dir = Path(upload_dir or settings.upload_dir)
        self.url_prefix = (url_prefix or settings.upload_url_prefix).rstrip("/")
        self.max_sizes: dict[str, int] = {
            "image": max_image_size or settings.max_image_size,
            "video": max_video_size or settings.max_video_size,
        }

    def validate(self, upload: MediaUpload, expected: MediaKind) -> None:
        """Validate an upload against the rules for its kind.

        Raises:
            MediaValidationError: If the file is not acceptable.
        """
        allowed_types = ALLOWED_IMAGE_TYPES if expected == "image" else ALLOWED_VIDEO_TYPES
        if upload.content_type in DANGEROUS_TYPES:
            raise MediaValidationError(
                upload.filename, "File type is not allowed for security reasons"
            )
        if upload.content_type not in allowed_types:
            raise MediaValidationError(
                upload.filename,
                f"{expected.capitalize()} type not allowed. "
                f"Allowed types: {', '.join(sorted(allowed_types))}",
            )
        max_size = self.max_sizes[expected]
        if upload.size > max_size:
            raise MediaValidationError(
                upload.filename,
                f"{expected.capitalize()} size too large. "
                f"Maximum size: {max_size // (1024 * 1024)}MB",
            )
        extension = Path(upload.filename).suffix.lower()
        if extension not in ALLOWED_EXTENSIONS[expected]:
            raise MediaValidationError(
                upload.filename,
                "File extension not allowed. "
                f"Allowed extensions: {', '.join(sorted(ALLOWED_EXTENSIONS[expected]))}",
            )
        if upload.size == 0:
            raise MediaValidationError(upload.filename, "File is empty")

    def save(self, upload: MediaUpload, subdir: str | None = None) -> str:
        """Write an upload to disk.

        Args:
            upload: File to store.
            subdir: Optional subdirectory under the upload root.

        Returns:
            Public URL of the stored file. Existing files are never
            overwritten.
        """
        target_dir = self.upload_dir / subdir if subdir else self.upload_dir
        target_dir.mkdir(parents=True, exist_ok=True)
        timestamp_ms = int(time.time() * 1000)
        filename = sanitize_filename(upload.filename, timestamp_ms)
        while (target_dir / filename).exists():
            filename = sanitize_filename(upload.filename, timestamp_ms, uuid4().hex[:6])
        (target_dir / filename).write_bytes(upload.data)

        url = f"{self.url_prefix}/{subdir}/{filename}" if subdir else f"{self.url_prefix}/{filename}"
        logger.info("Media saved", url=url, size=upload.size)
        return url

    def validate_and_save(
        self, upload: MediaUpload, expected: MediaKind, subdir: str | None = None
    ) -> str:
        """Validate then store an upload, returning its URL."""
        self.validate(upload, expected)
        return self.save(upload, subdir)

    def is_managed(self, url: str | None) -> bool:
        """Whether a URL points into this storage."""
        return bool(url) and url.startswith(f"{self.url_prefix}/")

    def delete(self, url: str | None) -> bool:
        """Delete a stored file by its public URL.

        URLs outside the upload prefix are ignored. Missing files are
        logged, not raised.

        Returns:
            True if a file was removed.
        """
        if not self.is_managed(url):
            return False
        relative = url[len(self.url_prefix) + 1:]
        path = (self.upload_dir / relative).resolve()
        if self.upload_dir.resolve() not in path.parents:
            logger.warning("Refusing to delete outside upload dir", url=url)
            return False
        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning("Media file already gone", url=url)
            return False
        logger.info("Media deleted", url=url)
        return True


# Global storage instance
_storage: MediaStorage | None = None


def get_media_storage() -> MediaStorage:
    """Get media storage singleton."""
    global _storage
    if _storage is None:
        _storage = MediaStorage()
    return _storage


def set_media_storage(storage: MediaStorage | None) -> None:
    """Replace the media storage singleton (None resets it)."""
    global _storage
    _storage = storage
