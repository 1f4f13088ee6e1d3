"""
Business logic for registration, login and the current identity.

Passwords are stored only as PBKDF2 hashes (see ``core.security``) and
every successful register/login returns a fresh stateless token bound
to the user's id.
"""

import logging
import sqlite3
from typing import Tuple

from ..core.config import Settings
from ..core.db import Database
from ..core.errors import Conflict, InvalidCredentials, NotFound
from ..core.security import hash_password, issue_token_for_user, verify_password
from ..schemas.user import LoginRequest, UserCreate, UserDetail
from .user_service import fetch_user_detail


logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, db: Database, settings: Settings) -> None:
        self.db = db
        self.settings = settings

    def _token(self, user_id: int) -> str:
        return issue_token_for_user(
            user_id, self.settings.secret_key, self.settings.access_token_expire_minutes
        )

    async def register(self, data: UserCreate) -> Tuple[UserDetail, str]:
        """Create an account and return it together with a session token."""
        logger.info("Registering user %s", data.username)
        with self.db.cursor() as cursor:
            if cursor.execute("SELECT id FROM users WHERE username = ?", (data.username,)).fetchone():
                raise Conflict("Username is already taken")
            if cursor.execute("SELECT id FROM users WHERE email = ?", (data.email,)).fetchone():
                raise Conflict("Email is already registered")
            try:
                cursor.execute(
                    "INSERT INTO users (username, email, password, first_name, last_name) "
                    "VALUES (?, ?, ?, ?, ?)",
                    (
                        data.username,
                        data.email,
                        hash_password(data.password),
                        data.first_name,
                        data.last_name,
                    ),
                )
            except sqlite3.IntegrityError as exc:
                raise Conflict("User already exists") from exc
            user_id = cursor.lastrowid
            user = fetch_user_detail(cursor, user_id)
        return user, self._token(user_id)

    async def login(self, data: LoginRequest) -> Tuple[UserDetail, str]:
        with self.db.cursor() as cursor:
            row = cursor.execute(
                "SELECT id, password FROM users WHERE email = ?", (data.email,)
            ).fetchone()
            if not row or not verify_password(data.password, row["password"]):
                logger.info("Failed login for %s", data.email)
                raise InvalidCredentials()
            user = fetch_user_detail(cursor, row["id"])
        return user, self._token(row["id"])

    async def me(self, user_id: int) -> UserDetail:
        with self.db.cursor() as cursor:
            user = fetch_user_detail(cursor, user_id)
        if not user:
            raise NotFound("User not found")
        return user
