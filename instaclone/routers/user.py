"""User router: profile reads and identity provisioning."""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Path, Request, status
from fastapi.responses import ORJSONResponse
from sqlalchemy.orm import Session

from instaclone import oauth2
from instaclone.core.database import get_db
from instaclone.core.middleware.rate_limit import limiter
from instaclone.modules.users.schemas import UserOut, UserProfile, UserSyncRequest
from instaclone.schemas import ApiResponse, ok
from instaclone.services.users import UserService

router = APIRouter(prefix="/users", tags=["Users"])


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Provide a UserService instance via FastAPI DI."""
    return UserService(db)


@router.get("/me", response_model=ApiResponse[UserProfile], response_model_exclude_unset=True)
async def read_me(
    user_id: str = Depends(oauth2.get_current_user_id),
    service: UserService = Depends(get_user_service),
):
    """The caller's own profile with counters."""
    profile = service.get_profile(user_id)
    return ok(profile.model_dump(exclude={"is_following"}))


@router.post("/sync", response_model=ApiResponse[UserOut])
@limiter.limit("10/minute")
async def sync_user(
    request: Request,
    payload: Optional[UserSyncRequest] = Body(None),
    identity: oauth2.Identity = Depends(oauth2.get_current_identity),
    service: UserService = Depends(get_user_service),
):
    """
    Provision the users row for the caller's identity.

    Returns 201 when the row is created and 200 when it already existed.
    """
    name = (payload.name if payload else None) or identity.name
    user, created = service.sync_user(external_id=identity.external_id, name=name)
    body = ApiResponse[UserOut](data=UserOut.model_validate(user)).model_dump(mode="json")
    return ORJSONResponse(
        status_code=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        content=body,
    )


@router.get("/{user_id}", response_model=ApiResponse[UserProfile])
async def read_user(
    user_id: str = Path(...),
    viewer_id: Optional[str] = Depends(oauth2.get_optional_user_id),
    service: UserService = Depends(get_user_service),
):
    """A user's profile; `is_following` reflects the caller's follow state."""
    return ok(service.get_profile(user_id, viewer_id=viewer_id))
