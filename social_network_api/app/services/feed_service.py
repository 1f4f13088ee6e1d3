"""
Read-only aggregations over posts and users: the personalised feed and
the two explore rankings.

The feed is computed on read from the ``follows`` table: posts by the
caller plus posts by everyone the caller follows, newest first.
Explore ranks posts by engagement (likes plus comments) and users by
follower count; both break ties newest first, then by id so that page
boundaries are stable.
"""

from typing import List, Tuple

from ..core.db import Database
from ..schemas.common import Pagination, page_offset
from ..schemas.post import PostRead
from ..schemas.user import ExploreUser
from .post_service import POST_COLUMNS, hydrate_posts
from .user_service import USER_COLUMNS, build_users


ENGAGEMENT_SCORE = (
    "((SELECT COUNT(*) FROM likes l WHERE l.post_id = posts.id) + "
    "(SELECT COUNT(*) FROM comments c WHERE c.post_id = posts.id))"
)
FOLLOWER_COUNT = "(SELECT COUNT(*) FROM follows f WHERE f.following_id = users.id)"


class FeedService:
    def __init__(self, db: Database) -> None:
        self.db = db

    async def feed(self, user_id: int, page: int, limit: int) -> Tuple[List[PostRead], Pagination]:
        """Posts by ``user_id`` and the users it follows, newest first."""
        audience = "(user_id = ? OR user_id IN (SELECT following_id FROM follows WHERE follower_id = ?))"
        with self.db.cursor() as cursor:
            rows = cursor.execute(
                f"SELECT {POST_COLUMNS} FROM posts WHERE {audience} "
                f"ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?",
                (user_id, user_id, limit, page_offset(page, limit)),
            ).fetchall()
            total = cursor.execute(
                f"SELECT COUNT(*) AS count FROM posts WHERE {audience}", (user_id, user_id)
            ).fetchone()["count"]
            posts = hydrate_posts(cursor, rows)
        return posts, Pagination.build(page, limit, total)

    async def explore_posts(self, page: int, limit: int) -> Tuple[List[PostRead], Pagination]:
        with self.db.cursor() as cursor:
            rows = cursor.execute(
                f"SELECT {POST_COLUMNS} FROM posts "
                f"ORDER BY {ENGAGEMENT_SCORE} DESC, created_at DESC, id DESC LIMIT ? OFFSET ?",
                (limit, page_offset(page, limit)),
            ).fetchall()
            total = cursor.execute("SELECT COUNT(*) AS count FROM posts").fetchone()["count"]
            posts = hydrate_posts(cursor, rows)
        return posts, Pagination.build(page, limit, total)

    async def explore_users(self, page: int, limit: int) -> Tuple[List[ExploreUser], Pagination]:
        with self.db.cursor() as cursor:
            rows = cursor.execute(
                f"SELECT {USER_COLUMNS} FROM users "
                f"ORDER BY {FOLLOWER_COUNT} DESC, created_at DESC, id DESC LIMIT ? OFFSET ?",
                (limit, page_offset(page, limit)),
            ).fetchall()
            total = cursor.execute("SELECT COUNT(*) AS count FROM users").fetchone()["count"]
            users = build_users(cursor, rows)
        ranked = [
            ExploreUser(**user.model_dump(), followers_count=len(user.followers)) for user in users
        ]
        return ranked, Pagination.build(page, limit, total)
