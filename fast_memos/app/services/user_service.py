"""
Business logic for users.

``UserService`` is the credential store: it registers users with hashed
passwords, authenticates them, looks them up and changes passwords.  Users
are never deleted.
"""

import logging
import sqlite3

from fast_memos.app.core.db import Database, utc_now
from fast_memos.app.core.errors import AuthError, DuplicateError, NotFound, ValidationError
from fast_memos.app.core.ids import new_id
from fast_memos.app.core.security import hash_password, verify_password
from fast_memos.app.schemas.user import UserRead

logger = logging.getLogger(__name__)

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6


def _check_password(password: str) -> None:
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")


class UserService:
    """Credential store backed by the ``users`` table."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def register(self, username: str, password: str) -> UserRead:
        """Create a user and return it.

        Raises ``ValidationError`` for a short username or password and
        ``DuplicateError`` when the username is already taken.
        """
        username = (username or "").strip()
        if len(username) < MIN_USERNAME_LENGTH:
            raise ValidationError(f"Username must be at least {MIN_USERNAME_LENGTH} characters long")
        _check_password(password)

        user_id = new_id()
        now = utc_now()
        hashed = hash_password(password)
        with self.db.connect() as conn:
            try:
                conn.execute(
                    "INSERT INTO users (id, username, password, created_at, updated_at) VALUES (?, ?, ?, ?, ?)",
                    (user_id, username, hashed, now, now),
                )
            except sqlite3.IntegrityError as exc:
                if "username" in str(exc):
                    raise DuplicateError(f"Username {username!r} is already taken") from exc
                raise
        logger.info("Registered user %s (%s)", username, user_id)
        return UserRead(id=user_id, username=username)

    def authenticate(self, username: str, password: str) -> UserRead:
        """Return the user if the credentials match.

        Unknown usernames and wrong passwords both raise the same
        ``AuthError``.
        """
        with self.db.connect() as conn:
            row = conn.execute(
                "SELECT id, username, password FROM users WHERE username = ?",
                ((username or "").strip(),),
            ).fetchone()
        if not row or not verify_password(password or "", row["password"]):
            logger.info("Failed login for %r", username)
            raise AuthError("Invalid username or password")
        return self._row_to_user_read(row)

    def get_by_username(self, username: str) -> UserRead:
        with self.db.connect() as conn:
            row = conn.execute(
                "SELECT id, username FROM users WHERE username = ?",
                (username,),
            ).fetchone()
        if not row:
            raise NotFound(f"User {username!r} not found")
        return self._row_to_user_read(row)

    def get_by_id(self, user_id: str) -> UserRead:
        with self.db.connect() as conn:
            row = conn.execute(
                "SELECT id, username FROM users WHERE id = ?",
                (user_id,),
            ).fetchone()
        if not row:
            raise NotFound(f"User {user_id} not found")
        return self._row_to_user_read(row)

    def change_password(self, user_id: str, new_password: str) -> UserRead:
        """Replace a user's password hash."""
        _check_password(new_password)
        hashed = hash_password(new_password)
        with self.db.connect() as conn:
            cursor = conn.execute(
                "UPDATE users SET password = ?, updated_at = ? WHERE id = ?",
                (hashed, utc_now(), user_id),
            )
            if cursor.rowcount == 0:
                raise NotFound(f"User {user_id} not found")
            row = conn.execute("SELECT id, username FROM users WHERE id = ?", (user_id,)).fetchone()
        logger.info("Password changed for user %s", user_id)
        return self._row_to_user_read(row)

    @staticmethod
    def _row_to_user_read(row: sqlite3.Row) -> UserRead:
        return UserRead(id=row["id"], username=row["username"])
