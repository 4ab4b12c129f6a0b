"""Follow router for follow/unfollow flows."""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from instaclone import oauth2
from instaclone.core.database import get_db
from instaclone.core.middleware.rate_limit import limiter
from instaclone.modules.social.schemas import FollowOut, FollowRequest
from instaclone.schemas import ApiResponse, EmptyResponse, ok
from instaclone.services.social import FollowService

router = APIRouter(prefix="/follows", tags=["Follow"])


def get_follow_service(db: Session = Depends(get_db)) -> FollowService:
    """Provide a FollowService instance via FastAPI DI."""
    return FollowService(db)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApiResponse[FollowOut])
@limiter.limit("30/minute")
async def follow_user(
    request: Request,
    payload: FollowRequest,
    follower_id: str = Depends(oauth2.get_current_user_id),
    service: FollowService = Depends(get_follow_service),
):
    """
    Follow a user.

    Self-follows and duplicate follows are rejected with 400.
    """
    follow = service.follow(follower_id=follower_id, following_id=payload.following_id)
    return ok(FollowOut.model_validate(follow))


@router.delete("", response_model=EmptyResponse)
@limiter.limit("30/minute")
async def unfollow_user(
    request: Request,
    payload: FollowRequest,
    follower_id: str = Depends(oauth2.get_current_user_id),
    service: FollowService = Depends(get_follow_service),
):
    """Unfollow a user; succeeds even when no follow existed."""
    service.unfollow(follower_id=follower_id, following_id=payload.following_id)
    return ok()
