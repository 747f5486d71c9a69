"""Local filesystem storage for uploaded documents and avatars.

Layout under the upload root::

    documents/{user_id}/{category}/{uuid}{ext}
    avatars/{user_id}/avatar{ext}
"""

import logging
import re
import uuid
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from neoori.exceptions import NotFound

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    "pdf": "application/pdf",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
    "txt": "text/plain",
}


def content_type_for(filename: str) -> str:
    """Resolve a content type from the file extension alone."""
    ext = PurePosixPath(filename).suffix.lstrip(".").lower()
    return CONTENT_TYPES.get(ext, "application/octet-stream")


def safe_extension(filename: str) -> str:
    """Client extension reduced to ASCII letters and digits, e.g. ``.pdf``; empty if nothing is left."""
    ext = re.sub(r"[^A-Za-z0-9]", "", PurePosixPath(filename).suffix).lower()
    return f".{ext}" if ext else ""


@dataclass(frozen=True)
class StoredFile:
    path: str
    url: str
    filename: str


class LocalStorageService:
    def __init__(self, root: str | Path, base_url: str):
        self.root = Path(root).resolve()
        self.documents_dir = self.root / "documents"
        self.avatars_dir = self.root / "avatars"
        self.base_url = base_url.rstrip("/")

    def ensure_directories(self) -> None:
        self.documents_dir.mkdir(parents=True, exist_ok=True)
        self.avatars_dir.mkdir(parents=True, exist_ok=True)

    def url_for(self, relative_path: str) -> str:
        return f"{self.base_url}/api/files/{relative_path}"

    def _resolve(self, relative_path: str) -> Path:
        """Map a stored relative path to an absolute one inside the upload root."""
        full_path = (self.root / relative_path).resolve()
        if not full_path.is_relative_to(self.root):
            raise NotFound("File not found")
        return full_path

    def _write(self, relative_path: str, content: bytes) -> Path:
        full_path = self._resolve(relative_path)
        full_path.parent.mkdir(parents=True, exist_ok=True)
        full_path.write_bytes(content)
        return full_path

    def save_document(self, user_id: str, filename: str, content: bytes, category: str = "other") -> StoredFile:
        ext = safe_extension(filename)
        unique_name = f"{uuid.uuid4()}{ext}"
        relative_path = f"documents/{user_id}/{category}/{unique_name}"

        self._write(relative_path, content)
        logger.info("Stored document %s (%d bytes)", relative_path, len(content))
        return StoredFile(path=relative_path, url=self.url_for(relative_path), filename=unique_name)

    def save_avatar(self, user_id: str, filename: str, content: bytes) -> StoredFile:
        """Store an avatar; the name is fixed, so a new upload replaces the old file."""
        ext = safe_extension(filename) or ".jpg"
        avatar_name = f"avatar{ext}"
        relative_path = f"avatars/{user_id}/{avatar_name}"

        self._write(relative_path, content)
        return StoredFile(path=relative_path, url=self.url_for(relative_path), filename=avatar_name)

    def read(self, relative_path: str) -> bytes:
        full_path = self._resolve(relative_path)
        if not full_path.is_file():
            raise NotFound("File not found")
        return full_path.read_bytes()

    def delete(self, relative_path: str) -> None:
        """Best-effort delete; a missing file is logged, not raised."""
        try:
            self._resolve(relative_path).unlink()
        except (FileNotFoundError, NotFound):
            logger.warning("File not found for deletion: %s", relative_path)
        except OSError as e:
            logger.warning("Could not delete %s: %s", relative_path, e)
