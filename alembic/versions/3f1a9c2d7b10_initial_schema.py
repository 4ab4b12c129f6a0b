"""initial_schema

Revision ID: 3f1a9c2d7b10
Revises:
Create Date: 2025-12-08 14:21:13.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f1a9c2d7b10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamp(name: str, index: bool = False) -> sa.Column:
    return sa.Column(
        name,
        sa.TIMESTAMP(timezone=True),
        nullable=False,
        server_default=sa.text("CURRENT_TIMESTAMP"),
        index=index,
    )


def _user_fk(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.String(36),
        sa.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


def _post_fk() -> sa.Column:
    return sa.Column(
        "post_id",
        sa.String(36),
        sa.ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


POST_STATS_VIEW = """
CREATE VIEW post_stats AS
SELECT
    p.id AS post_id,
    p.user_id,
    p.image_url,
    p.caption,
    p.created_at,
    (SELECT COUNT(*) FROM likes l WHERE l.post_id = p.id) AS likes_count,
    (SELECT COUNT(*) FROM comments c WHERE c.post_id = p.id) AS comments_count
FROM posts p
"""

USER_STATS_VIEW = """
CREATE VIEW user_stats AS
SELECT
    u.id AS user_id,
    u.clerk_id,
    u.name,
    (SELECT COUNT(*) FROM posts p WHERE p.user_id = u.id) AS posts_count,
    (SELECT COUNT(*) FROM follows f WHERE f.following_id = u.id) AS followers_count,
    (SELECT COUNT(*) FROM follows f WHERE f.follower_id = u.id) AS following_count
FROM users u
"""


def upgrade() -> None:
    """Create users, posts, likes, comments and follows plus the stats views."""
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("clerk_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=True),
        _timestamp("created_at"),
    )
    op.create_index("ix_users_clerk_id", "users", ["clerk_id"], unique=True)

    op.create_table(
        "posts",
        sa.Column("id", sa.String(36), primary_key=True),
        _user_fk("user_id"),
        sa.Column("image_url", sa.String(), nullable=False),
        sa.Column("caption", sa.Text(), nullable=True),
        _timestamp("created_at", index=True),
        _timestamp("updated_at"),
    )

    op.create_table(
        "likes",
        sa.Column("id", sa.String(36), primary_key=True),
        _post_fk(),
        _user_fk("user_id"),
        _timestamp("created_at"),
        sa.UniqueConstraint("post_id", "user_id", name="likes_post_id_user_id_key"),
    )

    op.create_table(
        "comments",
        sa.Column("id", sa.String(36), primary_key=True),
        _post_fk(),
        _user_fk("user_id"),
        sa.Column("content", sa.Text(), nullable=False),
        _timestamp("created_at", index=True),
        _timestamp("updated_at"),
    )

    op.create_table(
        "follows",
        sa.Column("id", sa.String(36), primary_key=True),
        _user_fk("follower_id"),
        _user_fk("following_id"),
        _timestamp("created_at"),
        sa.UniqueConstraint(
            "follower_id", "following_id", name="follows_follower_id_following_id_key"
        ),
        sa.CheckConstraint("follower_id <> following_id", name="follows_no_self_follow"),
    )

    op.execute(POST_STATS_VIEW)
    op.execute(USER_STATS_VIEW)


def downgrade() -> None:
    op.execute("DROP VIEW IF EXISTS user_stats")
    op.execute("DROP VIEW IF EXISTS post_stats")
    op.drop_table("follows")
    op.drop_table("comments")
    op.drop_table("likes")
    op.drop_table("posts")
    op.drop_index("ix_users_clerk_id", table_name="users")
    op.drop_table("users")
