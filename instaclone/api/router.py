"""Centralized API router registration.

Every resource router is mounted under `/api`; health probes stay at the root.
"""

from fastapi import APIRouter

from instaclone.routers import comment, follow, like, post, user

api_router = APIRouter(prefix="/api")

api_router.include_router(post.router)
api_router.include_router(like.router)
api_router.include_router(comment.router)
api_router.include_router(follow.router)
api_router.include_router(user.router)

__all__ = ["api_router"]
