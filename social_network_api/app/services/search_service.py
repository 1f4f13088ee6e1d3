"""
Case-insensitive substring search over users and posts.

Matching uses the ``casefold`` SQL function registered by
``core.db.Database`` together with ``instr``, so it folds case across
Unicode and treats every character of the query literally.  The
combined search runs the user and post queries concurrently in the
threadpool, each on its own connection.
"""

import asyncio
from typing import Any, Dict, List, Optional, Tuple

from fastapi.concurrency import run_in_threadpool

from ..core.db import Database
from ..core.errors import BadRequest
from ..schemas.common import Pagination, page_offset
from ..schemas.post import PostRead
from ..schemas.user import UserRead
from .post_service import POST_COLUMNS, hydrate_posts
from .user_service import USER_COLUMNS, build_users


USER_MATCH = (
    "(instr(casefold(username), :needle) > 0 OR instr(casefold(first_name), :needle) > 0 "
    "OR instr(casefold(last_name), :needle) > 0 OR instr(casefold(email), :needle) > 0)"
)
POST_MATCH = "instr(casefold(text), :needle) > 0"


def search_needle(query: Optional[str]) -> str:
    """Validate ``query`` and return the case-folded text to look for.

    Whitespace-only queries are rejected; otherwise the query is used
    as typed, surrounding spaces included.
    """
    if query is None or not query.strip():
        raise BadRequest("Search query is required")
    return query.casefold()


class SearchService:
    def __init__(self, db: Database) -> None:
        self.db = db

    def _users(self, needle: str, page: int, limit: int) -> Tuple[List[UserRead], Pagination]:
        params: Dict[str, Any] = {"needle": needle, "limit": limit, "offset": page_offset(page, limit)}
        with self.db.cursor() as cursor:
            rows = cursor.execute(
                f"SELECT {USER_COLUMNS} FROM users WHERE {USER_MATCH} "
                f"ORDER BY created_at DESC, id DESC LIMIT :limit OFFSET :offset",
                params,
            ).fetchall()
            total = cursor.execute(
                f"SELECT COUNT(*) AS count FROM users WHERE {USER_MATCH}", {"needle": needle}
            ).fetchone()["count"]
            users = build_users(cursor, rows)
        return users, Pagination.build(page, limit, total)

    def _posts(self, needle: str, page: int, limit: int) -> Tuple[List[PostRead], Pagination]:
        params: Dict[str, Any] = {"needle": needle, "limit": limit, "offset": page_offset(page, limit)}
        with self.db.cursor() as cursor:
            rows = cursor.execute(
                f"SELECT {POST_COLUMNS} FROM posts WHERE {POST_MATCH} "
                f"ORDER BY created_at DESC, id DESC LIMIT :limit OFFSET :offset",
                params,
            ).fetchall()
            total = cursor.execute(
                f"SELECT COUNT(*) AS count FROM posts WHERE {POST_MATCH}", {"needle": needle}
            ).fetchone()["count"]
            posts = hydrate_posts(cursor, rows)
        return posts, Pagination.build(page, limit, total)

    async def search_users(self, query: Optional[str], page: int, limit: int) -> Tuple[List[UserRead], Pagination]:
        return await run_in_threadpool(self._users, search_needle(query), page, limit)

    async def search_posts(self, query: Optional[str], page: int, limit: int) -> Tuple[List[PostRead], Pagination]:
        return await run_in_threadpool(self._posts, search_needle(query), page, limit)

    async def search_all(self, query: Optional[str], page: int, limit: int) -> Dict[str, Dict[str, Any]]:
        """Search users and posts at once; each side is paginated on its own."""
        needle = search_needle(query)
        (users, user_page), (posts, post_page) = await asyncio.gather(
            run_in_threadpool(self._users, needle, page, limit),
            run_in_threadpool(self._posts, needle, page, limit),
        )
        return {
            "users": {"results": users, **user_page.model_dump()},
            "posts": {"results": posts, **post_page.model_dump()},
        }
