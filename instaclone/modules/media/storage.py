"""Local-disk object store for post images.

Objects are written with aiofiles under `root` using keys of the form
`{externalUserId}/{uuid}.{ext}` and published under `public_url/{key}`.
The store never raises on delete: compensation and cleanup paths treat a
failed delete as an orphaned object and only log it.
"""

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlsplit

import aiofiles
import aiofiles.os
from fastapi import Request

from instaclone.core.exceptions import FileStoreException

logger = logging.getLogger(__name__)

CONTENT_TYPE_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
}

_SAFE_SEGMENT = re.compile(r"^[A-Za-z0-9_.\-]+$")


@dataclass(frozen=True)
class StoredObject:
    key: str
    public_url: str


class LocalFileStore:
    """Filesystem-backed stand-in for a hosted bucket."""

    def __init__(self, root: str | Path, public_url: str):
        self.root = Path(root).resolve()
        self.public_url = public_url.rstrip("/")

    def url_for(self, key: str) -> str:
        return f"{self.public_url}/{key}"

    def key_from_url(self, url: str) -> Optional[str]:
        """Return the object key for a URL this store issued, or None."""
        if not url:
            return None
        base_path = urlsplit(self.public_url).path.rstrip("/")
        path = unquote(urlsplit(url).path)
        if url.startswith(self.public_url + "/"):
            key = url[len(self.public_url) + 1 :]
        elif base_path and path.startswith(base_path + "/"):
            key = path[len(base_path) + 1 :]
        else:
            return None
        key = unquote(key.split("?", 1)[0])
        return key if self._is_valid_key(key) else None

    def path_for(self, key: str) -> Path:
        if not self._is_valid_key(key):
            raise ValueError(f"Invalid object key: {key!r}")
        return self.root.joinpath(*key.split("/"))

    @staticmethod
    def _is_valid_key(key: str) -> bool:
        segments = key.split("/")
        return bool(segments) and all(
            segment not in ("", ".", "..") and _SAFE_SEGMENT.match(segment)
            for segment in segments
        )

    def build_key(self, owner: str, content_type: str) -> str:
        extension = CONTENT_TYPE_EXTENSIONS.get(content_type, "bin")
        folder = re.sub(r"[^A-Za-z0-9_.\-]", "_", owner).strip(".") or "anonymous"
        return f"{folder}/{uuid.uuid4()}.{extension}"

    async def upload(self, owner: str, data: bytes, content_type: str) -> StoredObject:
        """Persist `data` under a fresh key scoped to `owner`."""
        key = self.build_key(owner, content_type)
        path = self.path_for(key)
        try:
            await aiofiles.os.makedirs(path.parent, exist_ok=True)
            async with aiofiles.open(path, "wb") as out_file:
                await out_file.write(data)
        except OSError as exc:
            logger.error("Failed to store upload %s: %s", key, exc, exc_info=True)
            raise FileStoreException() from exc
        logger.debug("Stored upload at %s", path)
        return StoredObject(key=key, public_url=self.url_for(key))

    async def delete(self, key: str) -> bool:
        try:
            await aiofiles.os.remove(self.path_for(key))
        except FileNotFoundError:
            logger.info("Object %s already absent from file store", key)
            return False
        except (OSError, ValueError) as exc:
            logger.warning("Failed to delete object %s: %s", key, exc)
            return False
        return True

    async def delete_by_url(self, url: str) -> bool:
        key = self.key_from_url(url)
        if key is None:
            logger.warning("Could not derive storage key from url %s; skipping delete", url)
            return False
        return await self.delete(key)

    async def exists(self, key: str) -> bool:
        return await aiofiles.os.path.exists(self.path_for(key))


def get_file_store(request: Request) -> LocalFileStore:
    """FastAPI dependency returning the process-wide file store."""
    return request.app.state.file_store
