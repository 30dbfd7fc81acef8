"""Local Image Storage — streams uploaded photos to disk under the upload directory.

Invariants:
    - Stored filenames are server-generated: <prefix>-<epoch ms>-<10 hex chars><ext>
    - Client-supplied names contribute only their extension (lower-cased)
    - A write that exceeds max_bytes leaves no partial file behind
    - Public URL is /uploads/<filename>; delete() only ever touches upload_dir

Design Decisions:
    - Chunked copy from the UploadFile: memory bounded by CHUNK_SIZE
    - The byte cap here backs up api/upload_limits.py, which refuses a too large
      Content-Length before the multipart parser spools the body
"""

import logging
import os
import re
import secrets
import time
from dataclasses import dataclass

from fastapi import UploadFile

from truckest.core.errors import InvalidRequestError, UploadTooLargeError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
PUBLIC_PREFIX = "/uploads/"
_SAFE_PREFIX = re.compile(r"[^A-Za-z0-9_-]+")
_SAFE_EXT = re.compile(r"^\.[A-Za-z0-9]{1,10}$")


def require_image_upload(upload: UploadFile) -> None:
    """Reject uploads whose declared content type is not image/*."""
    if upload.content_type and not upload.content_type.startswith("image/"):
        raise InvalidRequestError("Only image uploads are accepted", field="file")


@dataclass(frozen=True)
class StoredImage:
    filename: str
    path: str
    url: str
    size_bytes: int


class LocalImageStorage:
    """Writes uploads to `upload_dir` and serves them back as /uploads/ URLs."""

    def __init__(self, upload_dir: str, max_bytes: int):
        self.upload_dir = upload_dir
        self.max_bytes = max_bytes

    def build_filename(self, prefix: str, original_name: str | None) -> str:
        ext = os.path.splitext(original_name or "")[1].lower()
        if not _SAFE_EXT.match(ext):
            ext = ""
        safe_prefix = _SAFE_PREFIX.sub("_", prefix).strip("_") or "image"
        stamp = int(time.time() * 1000)
        return f"{safe_prefix}-{stamp}-{secrets.token_hex(5)}{ext}"

    async def save(self, upload: UploadFile, prefix: str) -> StoredImage:
        """Stream `upload` to disk. Raises UploadTooLargeError past max_bytes."""
        os.makedirs(self.upload_dir, exist_ok=True)
        filename = self.build_filename(prefix, upload.filename)
        path = os.path.join(self.upload_dir, filename)
        written = 0
        try:
            with open(path, "wb") as out:
                while chunk := await upload.read(CHUNK_SIZE):
                    written += len(chunk)
                    if written > self.max_bytes:
                        raise UploadTooLargeError(self.max_bytes)
                    out.write(chunk)
        except BaseException:
            self._remove(path)
            raise
        logger.info(f"Stored upload {filename} ({written} bytes)")
        return StoredImage(
            filename=filename, path=path,
            url=f"{PUBLIC_PREFIX}{filename}", size_bytes=written,
        )

    def delete(self, url: str) -> bool:
        """Remove the file behind a /uploads/ URL. Returns False if absent."""
        filename = os.path.basename(url)
        if not filename:
            return False
        return self._remove(os.path.join(self.upload_dir, filename))

    def _remove(self, path: str) -> bool:
        try:
            os.remove(path)
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning(f"Could not remove stored image {path}: {e}")
            return False
