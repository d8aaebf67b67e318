"""Selfie image storage.

Images live under ``{UPLOAD_DIR}/users/{profile_id}/selfies/`` and are
served by the ``/uploads`` static mount, so a stored selfie's URL can be
used directly as a post's ``image_src``.
"""
import logging
import uuid
from pathlib import Path
from typing import Protocol
from uuid import UUID

from moodfeed.core.config import settings

logger = logging.getLogger(__name__)

SELFIE_DIR = "selfies"


class SelfieStore(Protocol):
    def save_selfie(self, profile_id: UUID, data: bytes, ext: str) -> str: ...


class LocalSelfieStore:
    def __init__(self, root: str | None = None, media_base_url: str | None = None):
        self.root = Path(root or settings.UPLOAD_DIR).resolve()
        self.media_base_url = (media_base_url or settings.MEDIA_BASE_URL).rstrip("/")

    def _relative(self, profile_id: UUID, filename: str) -> str:
        return f"users/{profile_id}/{SELFIE_DIR}/{filename}"

    def save_selfie(self, profile_id: UUID, data: bytes, ext: str) -> str:
        """Write the image and return its public URL."""
        rel = self._relative(profile_id, f"{uuid.uuid4().hex}{ext}")
        target = self.root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        logger.debug("Stored selfie %s (%d bytes)", rel, len(data))
        return f"{self.media_base_url}/uploads/{rel}"


_store: SelfieStore | None = None


def get_selfie_store() -> SelfieStore:
    global _store
    if _store is None:
        _store = LocalSelfieStore()
    return _store
