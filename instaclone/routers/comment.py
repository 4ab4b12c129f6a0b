"""Comment router for adding and deleting comments."""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from instaclone import oauth2
from instaclone.core.database import get_db
from instaclone.core.middleware.rate_limit import limiter
from instaclone.modules.posts.schemas import CommentCreate, CommentDelete, CommentOut
from instaclone.schemas import ApiResponse, EmptyResponse, ok
from instaclone.services.comments import CommentService

router = APIRouter(prefix="/comments", tags=["Comments"])


def get_comment_service(db: Session = Depends(get_db)) -> CommentService:
    """Provide a CommentService instance via FastAPI DI."""
    return CommentService(db)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApiResponse[CommentOut])
@limiter.limit("30/minute")
async def create_comment(
    request: Request,
    payload: CommentCreate,
    user_id: str = Depends(oauth2.get_current_user_id),
    service: CommentService = Depends(get_comment_service),
):
    comment = service.add_comment(
        post_id=payload.post_id, user_id=user_id, content=payload.content
    )
    return ok(CommentOut.model_validate(comment))


@router.delete("", response_model=EmptyResponse)
@limiter.limit("30/minute")
async def delete_comment(
    request: Request,
    payload: CommentDelete,
    user_id: str = Depends(oauth2.get_current_user_id),
    service: CommentService = Depends(get_comment_service),
):
    service.delete_comment(comment_id=payload.comment_id, user_id=user_id)
    return ok()
