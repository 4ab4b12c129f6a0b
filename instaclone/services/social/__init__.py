from .follow_service import FollowService

__all__ = ["FollowService"]
