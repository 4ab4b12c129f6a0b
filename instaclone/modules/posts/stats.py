"""Aggregate selectables mirroring the `post_stats` and `user_stats` views.

Counts are computed by the store at read time with correlated subqueries;
nothing is cached or maintained on the rows themselves.
"""

from __future__ import annotations

from sqlalchemy import func, select

from instaclone.modules.posts.models import Comment, Like, Post
from instaclone.modules.social.models import Follow
from instaclone.modules.users.models import User


def post_likes_count():
    return (
        select(func.count(Like.id))
        .where(Like.post_id == Post.id)
        .correlate(Post)
        .scalar_subquery()
    )


def post_comments_count():
    return (
        select(func.count(Comment.id))
        .where(Comment.post_id == Post.id)
        .correlate(Post)
        .scalar_subquery()
    )


def post_stats():
    """SELECT over posts with `likes_count` and `comments_count` columns."""
    return select(
        Post,
        post_likes_count().label("likes_count"),
        post_comments_count().label("comments_count"),
    )


def user_stats():
    """SELECT over users with post/follower/following counters."""
    posts_count = (
        select(func.count(Post.id))
        .where(Post.user_id == User.id)
        .correlate(User)
        .scalar_subquery()
    )
    followers_count = (
        select(func.count(Follow.id))
        .where(Follow.following_id == User.id)
        .correlate(User)
        .scalar_subquery()
    )
    following_count = (
        select(func.count(Follow.id))
        .where(Follow.follower_id == User.id)
        .correlate(User)
        .scalar_subquery()
    )
    return select(
        User,
        posts_count.label("posts_count"),
        followers_count.label("followers_count"),
        following_count.label("following_count"),
    )
