"""
Business logic for user profiles.

Covers listing and reading users, partial profile updates and the
experience/education sub-records.  Every write is owner-only: the
caller's id must equal the profile id.

Follower and following lists are not stored on the user row; they are
read from the ``follows`` table each time a user is built.
"""

import logging
import sqlite3
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Tuple, Type

from ..core.db import Database
from ..core.errors import Forbidden, NotFound
from ..schemas.common import CamelModel, Pagination, page_offset
from ..schemas.post import PostRead
from ..schemas.user import (
    EducationCreate,
    EducationRead,
    EducationUpdate,
    ExperienceCreate,
    ExperienceRead,
    ExperienceUpdate,
    UserDetail,
    UserRead,
    UserSummary,
    UserUpdate,
)


logger = logging.getLogger(__name__)

USER_COLUMNS = (
    "id, username, email, first_name, last_name, bio, profile_picture, "
    "cover_picture, location, website, created_at, updated_at"
)
SUMMARY_COLUMNS = "id, username, first_name, last_name, profile_picture"


def placeholders(values: Iterable[Any]) -> str:
    return ", ".join("?" for _ in values)


@dataclass(frozen=True)
class SubRecordTable:
    """Describes one kind of profile sub-record stored in its own table."""

    table: str
    label: str
    columns: Tuple[str, ...]
    read_model: Type[CamelModel]


EXPERIENCES = SubRecordTable(
    table="experiences",
    label="Experience",
    columns=("title", "company", "location", "start_date", "end_date", "current", "description"),
    read_model=ExperienceRead,
)
EDUCATION = SubRecordTable(
    table="education",
    label="Education",
    columns=("school", "degree", "field_of_study", "start_date", "end_date", "current", "description"),
    read_model=EducationRead,
)


def _to_column_value(value: Any) -> Any:
    if isinstance(value, bool):
        return 1 if value else 0
    if isinstance(value, date):
        return value.isoformat()
    return value


def _load_sub_records(
    cursor: sqlite3.Cursor, kind: SubRecordTable, user_ids: List[int]
) -> Dict[int, List[CamelModel]]:
    grouped: Dict[int, List[CamelModel]] = {user_id: [] for user_id in user_ids}
    if not user_ids:
        return grouped
    rows = cursor.execute(
        f"SELECT id, user_id, {', '.join(kind.columns)}, created_at, updated_at "
        f"FROM {kind.table} WHERE user_id IN ({placeholders(user_ids)}) ORDER BY id",
        tuple(user_ids),
    ).fetchall()
    for row in rows:
        fields = {key: row[key] for key in row.keys() if key != "user_id"}
        fields["current"] = bool(fields["current"])
        grouped[row["user_id"]].append(kind.read_model(**fields))
    return grouped


def _load_follow_ids(
    cursor: sqlite3.Cursor, user_ids: List[int]
) -> Tuple[Dict[int, List[int]], Dict[int, List[int]]]:
    followers: Dict[int, List[int]] = {user_id: [] for user_id in user_ids}
    following: Dict[int, List[int]] = {user_id: [] for user_id in user_ids}
    if not user_ids:
        return followers, following
    marks = placeholders(user_ids)
    rows = cursor.execute(
        f"SELECT follower_id, following_id FROM follows "
        f"WHERE follower_id IN ({marks}) OR following_id IN ({marks}) ORDER BY id",
        tuple(user_ids) + tuple(user_ids),
    ).fetchall()
    for row in rows:
        if row["following_id"] in followers:
            followers[row["following_id"]].append(row["follower_id"])
        if row["follower_id"] in following:
            following[row["follower_id"]].append(row["following_id"])
    return followers, following


def build_users(cursor: sqlite3.Cursor, rows: List[sqlite3.Row]) -> List[UserRead]:
    """Turn ``users`` rows into ``UserRead`` models with sub-records and follow ids."""
    user_ids = [row["id"] for row in rows]
    experiences = _load_sub_records(cursor, EXPERIENCES, user_ids)
    education = _load_sub_records(cursor, EDUCATION, user_ids)
    followers, following = _load_follow_ids(cursor, user_ids)
    users: List[UserRead] = []
    for row in rows:
        fields = {key: row[key] for key in row.keys() if key in UserRead.model_fields}
        users.append(
            UserRead(
                **fields,
                experiences=experiences[row["id"]],
                education=education[row["id"]],
                followers=followers[row["id"]],
                following=following[row["id"]],
            )
        )
    return users


def load_summaries(cursor: sqlite3.Cursor, user_ids: Iterable[int]) -> Dict[int, UserSummary]:
    """Fetch shallow profile projections keyed by user id."""
    ids = sorted(set(user_ids))
    if not ids:
        return {}
    rows = cursor.execute(
        f"SELECT {SUMMARY_COLUMNS} FROM users WHERE id IN ({placeholders(ids)})",
        tuple(ids),
    ).fetchall()
    return {row["id"]: UserSummary(**dict(row)) for row in rows}


def fetch_user_detail(cursor: sqlite3.Cursor, user_id: int) -> Optional[UserDetail]:
    """Load one user with followers/following expanded to summaries."""
    row = cursor.execute(f"SELECT {USER_COLUMNS} FROM users WHERE id = ?", (user_id,)).fetchone()
    if not row:
        return None
    user = build_users(cursor, [row])[0]
    summaries = load_summaries(cursor, user.followers + user.following)
    data = user.model_dump(exclude={"followers", "following"})
    return UserDetail(
        **data,
        followers=[summaries[i] for i in user.followers if i in summaries],
        following=[summaries[i] for i in user.following if i in summaries],
    )


def ensure_owner(user_id: int, current_user_id: int) -> None:
    if user_id != current_user_id:
        raise Forbidden("Not authorized to update this profile")


class UserService:
    """Profiles, experience and education records."""

    def __init__(self, db: Database) -> None:
        self.db = db

    async def list_users(self, page: int, limit: int) -> Tuple[List[UserRead], Pagination]:
        """Return users newest first."""
        with self.db.cursor() as cursor:
            rows = cursor.execute(
                f"SELECT {USER_COLUMNS} FROM users ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?",
                (limit, page_offset(page, limit)),
            ).fetchall()
            total = cursor.execute("SELECT COUNT(*) AS count FROM users").fetchone()["count"]
            users = build_users(cursor, rows)
        return users, Pagination.build(page, limit, total)

    async def get_user(self, user_id: int) -> UserDetail:
        with self.db.cursor() as cursor:
            user = fetch_user_detail(cursor, user_id)
        if not user:
            raise NotFound("User not found")
        return user

    async def update_user(self, user_id: int, current_user_id: int, data: UserUpdate) -> UserDetail:
        """Apply the supplied profile fields and return the updated user."""
        ensure_owner(user_id, current_user_id)
        updates = data.model_dump(exclude_unset=True)
        with self.db.cursor() as cursor:
            exists = cursor.execute("SELECT id FROM users WHERE id = ?", (user_id,)).fetchone()
            if not exists:
                raise NotFound("User not found")
            if updates:
                assignments = ", ".join(f"{key} = ?" for key in updates)
                cursor.execute(
                    f"UPDATE users SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                    tuple(updates.values()) + (user_id,),
                )
            user = fetch_user_detail(cursor, user_id)
        logger.info("User %s updated profile fields %s", user_id, sorted(updates))
        return user

    # ------------------------------------------------------------------
    # Experience / education
    # ------------------------------------------------------------------

    async def _add_record(
        self, kind: SubRecordTable, user_id: int, current_user_id: int, data: CamelModel
    ) -> UserDetail:
        ensure_owner(user_id, current_user_id)
        values = data.model_dump()
        with self.db.cursor() as cursor:
            exists = cursor.execute("SELECT id FROM users WHERE id = ?", (user_id,)).fetchone()
            if not exists:
                raise NotFound("User not found")
            cursor.execute(
                f"INSERT INTO {kind.table} (user_id, {', '.join(kind.columns)}) "
                f"VALUES (?, {placeholders(kind.columns)})",
                (user_id,) + tuple(_to_column_value(values.get(col)) for col in kind.columns),
            )
            user = fetch_user_detail(cursor, user_id)
        logger.info("User %s added %s record", user_id, kind.table)
        return user

    async def _update_record(
        self, kind: SubRecordTable, user_id: int, record_id: int, current_user_id: int, data: CamelModel
    ) -> UserDetail:
        ensure_owner(user_id, current_user_id)
        updates = {key: _to_column_value(value) for key, value in data.model_dump(exclude_unset=True).items()}
        with self.db.cursor() as cursor:
            exists = cursor.execute("SELECT id FROM users WHERE id = ?", (user_id,)).fetchone()
            if not exists:
                raise NotFound("User not found")
            record = cursor.execute(
                f"SELECT id FROM {kind.table} WHERE id = ? AND user_id = ?", (record_id, user_id)
            ).fetchone()
            if not record:
                raise NotFound(f"{kind.label} not found")
            if updates:
                assignments = ", ".join(f"{key} = ?" for key in updates)
                cursor.execute(
                    f"UPDATE {kind.table} SET {assignments}, updated_at = CURRENT_TIMESTAMP "
                    f"WHERE id = ? AND user_id = ?",
                    tuple(updates.values()) + (record_id, user_id),
                )
            user = fetch_user_detail(cursor, user_id)
        return user

    async def _delete_record(
        self, kind: SubRecordTable, user_id: int, record_id: int, current_user_id: int
    ) -> UserDetail:
        ensure_owner(user_id, current_user_id)
        with self.db.cursor() as cursor:
            exists = cursor.execute("SELECT id FROM users WHERE id = ?", (user_id,)).fetchone()
            if not exists:
                raise NotFound("User not found")
            deleted = cursor.execute(
                f"DELETE FROM {kind.table} WHERE id = ? AND user_id = ?", (record_id, user_id)
            ).rowcount
            if not deleted:
                raise NotFound(f"{kind.label} not found")
            user = fetch_user_detail(cursor, user_id)
        logger.info("User %s deleted %s record %s", user_id, kind.table, record_id)
        return user

    async def add_experience(self, user_id: int, current_user_id: int, data: ExperienceCreate) -> UserDetail:
        return await self._add_record(EXPERIENCES, user_id, current_user_id, data)

    async def update_experience(
        self, user_id: int, exp_id: int, current_user_id: int, data: ExperienceUpdate
    ) -> UserDetail:
        return await self._update_record(EXPERIENCES, user_id, exp_id, current_user_id, data)

    async def delete_experience(self, user_id: int, exp_id: int, current_user_id: int) -> UserDetail:
        return await self._delete_record(EXPERIENCES, user_id, exp_id, current_user_id)

    async def add_education(self, user_id: int, current_user_id: int, data: EducationCreate) -> UserDetail:
        return await self._add_record(EDUCATION, user_id, current_user_id, data)

    async def update_education(
        self, user_id: int, edu_id: int, current_user_id: int, data: EducationUpdate
    ) -> UserDetail:
        return await self._update_record(EDUCATION, user_id, edu_id, current_user_id, data)

    async def delete_education(self, user_id: int, edu_id: int, current_user_id: int) -> UserDetail:
        return await self._delete_record(EDUCATION, user_id, edu_id, current_user_id)

    # ------------------------------------------------------------------
    # Posts by user
    # ------------------------------------------------------------------

    async def list_user_posts(self, user_id: int, page: int, limit: int) -> Tuple[List[PostRead], Pagination]:
        """Return the user's posts newest first."""
        from .post_service import POST_COLUMNS, hydrate_posts

        with self.db.cursor() as cursor:
            rows = cursor.execute(
                f"SELECT {POST_COLUMNS} FROM posts WHERE user_id = ? "
                f"ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?",
                (user_id, limit, page_offset(page, limit)),
            ).fetchall()
            total = cursor.execute(
                "SELECT COUNT(*) AS count FROM posts WHERE user_id = ?", (user_id,)
            ).fetchone()["count"]
            posts = hydrate_posts(cursor, rows)
        return posts, Pagination.build(page, limit, total)
