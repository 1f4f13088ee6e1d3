"""
Business logic for the follow graph.

A follow is one row in ``follows`` (follower -> following).  That row is
the only record of the relationship: follower/following lists and their
counts are read from the same table, so there is nothing to keep in sync.
"""

import logging
import sqlite3
from typing import List, Tuple

from ..core.db import Database
from ..core.errors import BadRequest, NotFound
from ..schemas.common import Pagination, page_offset
from ..schemas.user import UserRead
from .user_service import USER_COLUMNS, build_users


logger = logging.getLogger(__name__)


class FollowService:
    """Create and remove follow edges; list followers and following."""

    def __init__(self, db: Database) -> None:
        self.db = db

    async def follow(self, current_user_id: int, target_id: int) -> None:
        if target_id == current_user_id:
            raise BadRequest("Cannot follow yourself")
        with self.db.cursor() as cursor:
            target = cursor.execute("SELECT id FROM users WHERE id = ?", (target_id,)).fetchone()
            if not target:
                raise NotFound("User not found")
            existing = cursor.execute(
                "SELECT id FROM follows WHERE follower_id = ? AND following_id = ?",
                (current_user_id, target_id),
            ).fetchone()
            if existing:
                raise BadRequest("Already following this user")
            try:
                cursor.execute(
                    "INSERT INTO follows (follower_id, following_id) VALUES (?, ?)",
                    (current_user_id, target_id),
                )
            except sqlite3.IntegrityError as exc:
                # A concurrent request inserted the same edge.
                raise BadRequest("Already following this user") from exc
        logger.info("User %s followed user %s", current_user_id, target_id)

    async def unfollow(self, current_user_id: int, target_id: int) -> None:
        with self.db.cursor() as cursor:
            deleted = cursor.execute(
                "DELETE FROM follows WHERE follower_id = ? AND following_id = ?",
                (current_user_id, target_id),
            ).rowcount
        if not deleted:
            raise BadRequest("Not following this user")
        logger.info("User %s unfollowed user %s", current_user_id, target_id)

    async def _list_edge_side(
        self, user_id: int, page: int, limit: int, anchor: str, other: str
    ) -> Tuple[List[UserRead], Pagination]:
        # anchor: the column holding ``user_id``; other: the column whose users are listed.
        with self.db.cursor() as cursor:
            exists = cursor.execute("SELECT id FROM users WHERE id = ?", (user_id,)).fetchone()
            if not exists:
                raise NotFound("User not found")
            rows = cursor.execute(
                f"SELECT {USER_COLUMNS} FROM users WHERE id IN "
                f"(SELECT {other} FROM follows WHERE {anchor} = ?) "
                f"ORDER BY id LIMIT ? OFFSET ?",
                (user_id, limit, page_offset(page, limit)),
            ).fetchall()
            total = cursor.execute(
                f"SELECT COUNT(*) AS count FROM follows WHERE {anchor} = ?", (user_id,)
            ).fetchone()["count"]
            users = build_users(cursor, rows)
        return users, Pagination.build(page, limit, total)

    async def list_followers(self, user_id: int, page: int, limit: int) -> Tuple[List[UserRead], Pagination]:
        return await self._list_edge_side(user_id, page, limit, anchor="following_id", other="follower_id")

    async def list_following(self, user_id: int, page: int, limit: int) -> Tuple[List[UserRead], Pagination]:
        return await self._list_edge_side(user_id, page, limit, anchor="follower_id", other="following_id")
