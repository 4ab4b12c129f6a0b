"""Post router: feed, detail, create (multipart upload) and delete."""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Path, Query, Request, UploadFile, status
from sqlalchemy.orm import Session

from instaclone import oauth2
from instaclone.core.config import Settings, get_request_settings
from instaclone.core.database import get_db
from instaclone.core.middleware.rate_limit import limiter
from instaclone.modules.media.storage import LocalFileStore, get_file_store
from instaclone.modules.posts.schemas import FeedPost, PostDetail, PostOut
from instaclone.schemas import ApiResponse, EmptyResponse, ok
from instaclone.services.posts import FeedAssembler, PostService

router = APIRouter(prefix="/posts", tags=["Posts"])


def get_post_service(
    db: Session = Depends(get_db),
    file_store: LocalFileStore = Depends(get_file_store),
    app_settings: Settings = Depends(get_request_settings),
) -> PostService:
    """Provide a PostService instance via FastAPI DI."""
    return PostService(db, file_store, app_settings)


def get_feed_assembler(
    db: Session = Depends(get_db),
    app_settings: Settings = Depends(get_request_settings),
) -> FeedAssembler:
    return FeedAssembler(db, app_settings)


@router.get("", response_model=ApiResponse[List[FeedPost]])
async def list_posts(
    limit: Optional[int] = Query(None, ge=1),
    offset: int = Query(0, ge=0),
    user_id: Optional[str] = Query(None, alias="userId"),
    feed: FeedAssembler = Depends(get_feed_assembler),
    viewer_id: Optional[str] = Depends(oauth2.get_optional_user_id),
):
    """
    Paginated feed, newest first.

    Filters to a single author when `userId` is given. Each post carries its
    author, counters, two most recent comments and the caller's like state.
    """
    return ok(
        feed.list_posts(limit=limit, offset=offset, user_id=user_id, viewer_id=viewer_id)
    )


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApiResponse[PostOut])
@limiter.limit("20/minute")
async def create_post(
    request: Request,
    image: Optional[UploadFile] = File(None),
    caption: Optional[str] = Form(None),
    identity: oauth2.Identity = Depends(oauth2.get_current_identity),
    user_id: str = Depends(oauth2.get_current_user_id),
    service: PostService = Depends(get_post_service),
):
    """
    Create a post from a multipart upload.

    Caption and image limits are checked before anything is uploaded. If the
    row insert fails after the upload, the stored image is removed again.
    """
    post = await service.create_post(
        user_id=user_id,
        external_id=identity.external_id,
        image=image,
        caption=caption,
    )
    return ok(PostOut.model_validate(post))


@router.get("/{post_id}", response_model=ApiResponse[PostDetail])
async def get_post(
    post_id: str = Path(...),
    feed: FeedAssembler = Depends(get_feed_assembler),
    viewer_id: Optional[str] = Depends(oauth2.get_optional_user_id),
):
    """Single post with its full comment list."""
    return ok(feed.get_post(post_id, viewer_id=viewer_id))


@router.delete("/{post_id}", response_model=EmptyResponse)
@limiter.limit("30/minute")
async def delete_post(
    request: Request,
    post_id: str = Path(...),
    user_id: str = Depends(oauth2.get_current_user_id),
    service: PostService = Depends(get_post_service),
):
    """Delete an owned post; its image is removed best-effort first."""
    await service.delete_post(post_id=post_id, user_id=user_id)
    return ok()
