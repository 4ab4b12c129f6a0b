"""Like router: idempotent like/unlike on a post."""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from instaclone import oauth2
from instaclone.core.database import get_db
from instaclone.core.middleware.rate_limit import limiter
from instaclone.modules.posts.schemas import LikeOut, LikeRequest
from instaclone.schemas import ApiResponse, EmptyResponse, ok
from instaclone.services.posts import LikeService

router = APIRouter(prefix="/likes", tags=["Likes"])


def get_like_service(db: Session = Depends(get_db)) -> LikeService:
    return LikeService(db)


@router.post("", response_model=ApiResponse[LikeOut])
@limiter.limit("60/minute")
async def like_post(
    request: Request,
    payload: LikeRequest,
    user_id: str = Depends(oauth2.get_current_user_id),
    service: LikeService = Depends(get_like_service),
):
    """Like a post. Repeating the call returns the existing like."""
    like = service.like_post(post_id=payload.post_id, user_id=user_id)
    return ok(LikeOut.model_validate(like))


@router.delete("", response_model=EmptyResponse)
@limiter.limit("60/minute")
async def unlike_post(
    request: Request,
    payload: LikeRequest,
    user_id: str = Depends(oauth2.get_current_user_id),
    service: LikeService = Depends(get_like_service),
):
    """Remove the caller's like; succeeds even when there was none."""
    service.unlike_post(post_id=payload.post_id, user_id=user_id)
    return ok()
