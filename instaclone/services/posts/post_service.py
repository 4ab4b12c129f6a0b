"""Business logic for creating and deleting image posts."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import UploadFile
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from instaclone.core.config import Settings, settings as default_settings
from instaclone.core.exceptions import (
    CaptionTooLongException,
    FileSizeLimitException,
    InvalidFileTypeException,
    ResourceNotFoundException,
    StoreUnavailableException,
    ValidationException,
)
from instaclone.modules.media.storage import LocalFileStore
from instaclone.modules.posts.models import Post
from instaclone.services.ownership import ensure_owner

logger = logging.getLogger(__name__)


class PostService:
    """Encapsulates the upload-then-insert and delete-file-then-row workflows."""

    def __init__(
        self,
        db: Session,
        file_store: LocalFileStore,
        settings: Optional[Settings] = None,
    ):
        self.db = db
        self.file_store = file_store
        self.settings = settings or default_settings

    def validate_caption(self, caption: Optional[str]) -> Optional[str]:
        if caption is None:
            return None
        if len(caption) > self.settings.MAX_CAPTION_LENGTH:
            raise CaptionTooLongException(self.settings.MAX_CAPTION_LENGTH)
        return caption if caption.strip() else None

    async def read_image(self, image: Optional[UploadFile]) -> tuple[bytes, str]:
        """Return the upload's bytes and content type once every limit has passed."""
        if image is None or not image.filename:
            raise ValidationException("Image file is required", field="image")

        content_type = (image.content_type or "").lower()
        allowed = self.settings.allowed_image_types
        if content_type not in allowed:
            raise InvalidFileTypeException(allowed_types=list(allowed))

        max_bytes = self.settings.MAX_IMAGE_BYTES
        if image.size is not None and image.size > max_bytes:
            raise FileSizeLimitException(max_size=max_bytes)
        data = await image.read(max_bytes + 1)
        if not data:
            raise ValidationException("Image file is empty", field="image")
        if len(data) > max_bytes:
            raise FileSizeLimitException(max_size=max_bytes)
        return data, content_type

    async def create_post(
        self,
        *,
        user_id: str,
        external_id: str,
        image: Optional[UploadFile],
        caption: Optional[str] = None,
    ) -> Post:
        caption = self.validate_caption(caption)
        data, content_type = await self.read_image(image)

        stored = await self.file_store.upload(external_id, data, content_type)

        post = Post(user_id=user_id, image_url=stored.public_url, caption=caption)
        try:
            self.db.add(post)
            self.db.commit()
            self.db.refresh(post)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Failed to insert post for user %s", user_id, exc_info=True)
            if not await self.file_store.delete(stored.key):
                logger.warning("Orphaned upload left in file store: %s", stored.key)
            raise StoreUnavailableException("Failed to create post") from exc

        logger.info("Post %s created by user %s", post.id, user_id)
        return post

    def get_post(self, post_id: str) -> Post:
        post = self.db.query(Post).filter(Post.id == post_id).first()
        if post is None:
            raise ResourceNotFoundException("Post", post_id)
        return post

    async def delete_post(self, *, post_id: str, user_id: str) -> None:
        post = self.get_post(post_id)
        ensure_owner(
            post.user_id,
            user_id,
            message="Forbidden: You can only delete your own posts",
        )

        if not await self.file_store.delete_by_url(post.image_url):
            logger.warning("Image for post %s was not removed: %s", post_id, post.image_url)

        try:
            self.db.query(Post).filter(Post.id == post_id).delete(
                synchronize_session=False
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Failed to delete post %s", post_id, exc_info=True)
            raise StoreUnavailableException("Failed to delete post") from exc

        logger.info("Post %s deleted by user %s", post_id, user_id)
