"""Import every ORM model so `Base.metadata` describes the full schema."""

from instaclone.modules.posts.models import Comment, Like, Post
from instaclone.modules.social.models import Follow
from instaclone.modules.users.models import User

__all__ = ["User", "Post", "Like", "Comment", "Follow"]
