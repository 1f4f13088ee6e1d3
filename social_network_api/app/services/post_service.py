"""
Business logic for posts, likes and comments.

Posts are stored in ``posts`` with their images, likes, comments and
shares in child tables.  ``hydrate_posts`` assembles the read model for
any list of post rows in a fixed number of queries, expanding the
owner, every liker and every commenter into a ``UserSummary``.  The
feed, explore, search and profile views reuse it.

Image uploads go to the injected ``ImageStorage``.  A storage that is
not configured is tolerated (the post simply has no new images); any
other storage failure aborts the request before the database is
touched.
"""

import logging
import sqlite3
from typing import Dict, List, Sequence, Tuple

from fastapi.concurrency import run_in_threadpool

from ..core.db import Database
from ..core.errors import Forbidden, NotFound, StorageNotConfigured
from ..schemas.common import Pagination, page_offset
from ..schemas.post import CommentCreate, CommentRead, LikeRead, PostCreate, PostRead, PostUpdate
from ..schemas.user import UserSummary
from .image_storage import ImageStorage, ImageUpload, validate_images
from .user_service import load_summaries, placeholders


logger = logging.getLogger(__name__)

POST_COLUMNS = "id, user_id, text, created_at, updated_at"

# Stand-in for a user row that vanished between queries.
_MISSING_USER = UserSummary(id=0, username="[deleted]")


def hydrate_posts(cursor: sqlite3.Cursor, rows: Sequence[sqlite3.Row]) -> List[PostRead]:
    """Build ``PostRead`` models for the given ``posts`` rows, preserving order."""
    post_ids = [row["id"] for row in rows]
    if not post_ids:
        return []
    marks = placeholders(post_ids)
    params = tuple(post_ids)

    images: Dict[int, List[str]] = {post_id: [] for post_id in post_ids}
    for row in cursor.execute(
        f"SELECT post_id, url FROM post_images WHERE post_id IN ({marks}) ORDER BY post_id, position",
        params,
    ).fetchall():
        images[row["post_id"]].append(row["url"])

    like_rows = cursor.execute(
        f"SELECT id, post_id, user_id, created_at FROM likes WHERE post_id IN ({marks}) ORDER BY id",
        params,
    ).fetchall()
    comment_rows = cursor.execute(
        f"SELECT id, post_id, user_id, text, created_at, updated_at FROM comments "
        f"WHERE post_id IN ({marks}) ORDER BY id",
        params,
    ).fetchall()
    shares: Dict[int, List[int]] = {post_id: [] for post_id in post_ids}
    for row in cursor.execute(
        f"SELECT post_id, user_id FROM post_shares WHERE post_id IN ({marks}) ORDER BY created_at",
        params,
    ).fetchall():
        shares[row["post_id"]].append(row["user_id"])

    summaries = load_summaries(
        cursor,
        [row["user_id"] for row in rows]
        + [row["user_id"] for row in like_rows]
        + [row["user_id"] for row in comment_rows],
    )

    likes: Dict[int, List[LikeRead]] = {post_id: [] for post_id in post_ids}
    for row in like_rows:
        likes[row["post_id"]].append(
            LikeRead(
                id=row["id"],
                user=summaries.get(row["user_id"], _MISSING_USER),
                created_at=row["created_at"],
            )
        )
    comments: Dict[int, List[CommentRead]] = {post_id: [] for post_id in post_ids}
    for row in comment_rows:
        comments[row["post_id"]].append(
            CommentRead(
                id=row["id"],
                user=summaries.get(row["user_id"], _MISSING_USER),
                text=row["text"],
                created_at=row["created_at"],
                updated_at=row["updated_at"],
            )
        )

    return [
        PostRead(
            id=row["id"],
            user=summaries.get(row["user_id"], _MISSING_USER),
            text=row["text"],
            images=images[row["id"]],
            likes=likes[row["id"]],
            comments=comments[row["id"]],
            shares=shares[row["id"]],
            likes_count=len(likes[row["id"]]),
            comments_count=len(comments[row["id"]]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
        for row in rows
    ]


def fetch_post(cursor: sqlite3.Cursor, post_id: int) -> PostRead:
    row = cursor.execute(f"SELECT {POST_COLUMNS} FROM posts WHERE id = ?", (post_id,)).fetchone()
    if not row:
        raise NotFound("Post not found")
    return hydrate_posts(cursor, [row])[0]


class PostService:
    """Post CRUD, like toggling and comments."""

    def __init__(self, db: Database, storage: ImageStorage, folder: str = "social-posts") -> None:
        self.db = db
        self.storage = storage
        self.folder = folder

    async def _upload_images(self, images: Sequence[ImageUpload]) -> List[str]:
        """Upload images and return their URLs.

        Returns an empty list when there is nothing to upload or the
        storage is not configured.  Other storage errors propagate.
        """
        if not images:
            return []
        try:
            return await run_in_threadpool(self.storage.upload, images, self.folder)
        except StorageNotConfigured as exc:
            logger.warning("%s; continuing without images", exc.message)
            return []

    def _owned_post_row(self, cursor: sqlite3.Cursor, post_id: int, current_user_id: int, action: str) -> sqlite3.Row:
        row = cursor.execute("SELECT id, user_id FROM posts WHERE id = ?", (post_id,)).fetchone()
        if not row:
            raise NotFound("Post not found")
        if row["user_id"] != current_user_id:
            raise Forbidden(f"Not authorized to {action} this post")
        return row

    async def list_posts(self, page: int, limit: int) -> Tuple[List[PostRead], Pagination]:
        """Return all posts newest first."""
        with self.db.cursor() as cursor:
            rows = cursor.execute(
                f"SELECT {POST_COLUMNS} FROM posts ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?",
                (limit, page_offset(page, limit)),
            ).fetchall()
            total = cursor.execute("SELECT COUNT(*) AS count FROM posts").fetchone()["count"]
            posts = hydrate_posts(cursor, rows)
        return posts, Pagination.build(page, limit, total)

    async def get_post(self, post_id: int) -> PostRead:
        with self.db.cursor() as cursor:
            return fetch_post(cursor, post_id)

    async def create_post(
        self, current_user_id: int, data: PostCreate, images: Sequence[ImageUpload] = ()
    ) -> PostRead:
        """Create a post owned by the caller."""
        validate_images(images)
        urls = await self._upload_images(images)
        with self.db.cursor() as cursor:
            cursor.execute("INSERT INTO posts (user_id, text) VALUES (?, ?)", (current_user_id, data.text))
            post_id = cursor.lastrowid
            cursor.executemany(
                "INSERT INTO post_images (post_id, position, url) VALUES (?, ?, ?)",
                [(post_id, position, url) for position, url in enumerate(urls)],
            )
            post = fetch_post(cursor, post_id)
        logger.info("User %s created post %s with %d image(s)", current_user_id, post_id, len(urls))
        return post

    async def update_post(
        self, post_id: int, current_user_id: int, data: PostUpdate, images: Sequence[ImageUpload] = ()
    ) -> PostRead:
        """Update text and/or images of the caller's post.

        New images replace the existing list; when none end up uploaded
        the current images are kept.
        """
        validate_images(images)
        with self.db.cursor() as cursor:
            self._owned_post_row(cursor, post_id, current_user_id, "update")
        urls = await self._upload_images(images)
        with self.db.cursor() as cursor:
            # The post may have been deleted while images were uploading.
            self._owned_post_row(cursor, post_id, current_user_id, "update")
            if data.text is not None:
                cursor.execute("UPDATE posts SET text = ? WHERE id = ?", (data.text, post_id))
            if urls:
                cursor.execute("DELETE FROM post_images WHERE post_id = ?", (post_id,))
                cursor.executemany(
                    "INSERT INTO post_images (post_id, position, url) VALUES (?, ?, ?)",
                    [(post_id, position, url) for position, url in enumerate(urls)],
                )
            cursor.execute("UPDATE posts SET updated_at = CURRENT_TIMESTAMP WHERE id = ?", (post_id,))
            post = fetch_post(cursor, post_id)
        logger.info("User %s updated post %s", current_user_id, post_id)
        return post

    async def delete_post(self, post_id: int, current_user_id: int) -> None:
        with self.db.cursor() as cursor:
            self._owned_post_row(cursor, post_id, current_user_id, "delete")
            cursor.execute("DELETE FROM posts WHERE id = ?", (post_id,))
        logger.info("User %s deleted post %s", current_user_id, post_id)

    async def toggle_like(self, post_id: int, current_user_id: int) -> Tuple[PostRead, bool]:
        """Like the post, or remove the caller's like if present.

        Returns the post and ``True`` when the call added a like.
        """
        with self.db.cursor() as cursor:
            exists = cursor.execute("SELECT id FROM posts WHERE id = ?", (post_id,)).fetchone()
            if not exists:
                raise NotFound("Post not found")
            removed = cursor.execute(
                "DELETE FROM likes WHERE post_id = ? AND user_id = ?", (post_id, current_user_id)
            ).rowcount
            if not removed:
                cursor.execute(
                    "INSERT INTO likes (post_id, user_id) VALUES (?, ?)", (post_id, current_user_id)
                )
            post = fetch_post(cursor, post_id)
        return post, not removed

    async def add_comment(self, post_id: int, current_user_id: int, data: CommentCreate) -> PostRead:
        with self.db.cursor() as cursor:
            exists = cursor.execute("SELECT id FROM posts WHERE id = ?", (post_id,)).fetchone()
            if not exists:
                raise NotFound("Post not found")
            cursor.execute(
                "INSERT INTO comments (post_id, user_id, text) VALUES (?, ?, ?)",
                (post_id, current_user_id, data.text),
            )
            post = fetch_post(cursor, post_id)
        return post

    async def delete_comment(self, post_id: int, comment_id: int, current_user_id: int) -> PostRead:
        """Delete a comment; allowed for its author and for the post owner."""
        with self.db.cursor() as cursor:
            post_row = cursor.execute("SELECT id, user_id FROM posts WHERE id = ?", (post_id,)).fetchone()
            if not post_row:
                raise NotFound("Post not found")
            comment = cursor.execute(
                "SELECT id, user_id FROM comments WHERE id = ? AND post_id = ?", (comment_id, post_id)
            ).fetchone()
            if not comment:
                raise NotFound("Comment not found")
            if current_user_id not in (comment["user_id"], post_row["user_id"]):
                raise Forbidden("Not authorized to delete this comment")
            cursor.execute("DELETE FROM comments WHERE id = ?", (comment_id,))
            post = fetch_post(cursor, post_id)
        return post
