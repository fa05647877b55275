"""
User repository on top of SQLite.
Hand-written SQL, soft deletes through a `deleted_at` column.
"""

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Iterator, List

from src.core.user_models import CreateUserRequest, UpdateUserRequest, UserRecord

logger = logging.getLogger(__name__)

_COLUMNS = "id, name, email, created_at, updated_at"


class UserNotFoundError(LookupError):
    """No live user matches the lookup."""


class DuplicateEmailError(ValueError):
    """Another live user already owns the email."""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class UserRepository:
    """CRUD operations over the `users` table."""

    def __init__(self, db_name: str):
        self.db_name = db_name
        self._init_db()

    @contextmanager
    def _get_conn(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self.db_name)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._get_conn() as conn:
            cursor = conn.cursor()

            cursor.execute(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    email TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    deleted_at TEXT
                    )
                """
            )

            # Only live rows compete for an email
            cursor.execute(
                """
                CREATE UNIQUE INDEX IF NOT EXISTS idx_users_live_email
                    ON users(email) WHERE deleted_at IS NULL
                """
            )

            conn.commit()

    def create(self, req: CreateUserRequest) -> UserRecord:
        """
        Inserts a new user and returns it with id and timestamps populated.
        """
        now = _now()
        with self._get_conn() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    """
                    INSERT INTO users (name, email, created_at, updated_at)
                        VALUES (?, ?, ?, ?)
                    """,
                    (req.name, req.email, now, now),
                )
            except sqlite3.IntegrityError as e:
                raise DuplicateEmailError(f"email {req.email} is already registered") from e
            conn.commit()
            user_id = cursor.lastrowid

        logger.info("Created user %s", user_id)
        return self.get_by_id(user_id)

    def get_by_id(self, user_id: int) -> UserRecord:
        return self._fetch_one(
            f"SELECT {_COLUMNS} FROM users WHERE id = ? AND deleted_at IS NULL",
            (user_id,),
        )

    def get_by_email(self, email: str) -> UserRecord:
        return self._fetch_one(
            f"SELECT {_COLUMNS} FROM users WHERE email = ? AND deleted_at IS NULL",
            (email.strip().lower(),),
        )

    def get_all(self) -> List[UserRecord]:
        """Returns all live users, oldest first."""
        with self._get_conn() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT {_COLUMNS} FROM users
                    WHERE deleted_at IS NULL
                    ORDER BY created_at ASC, id ASC
                """
            )
            return [UserRecord(**dict(row)) for row in cursor.fetchall()]

    def update(self, user_id: int, req: UpdateUserRequest) -> UserRecord:
        """
        Writes the fields set on `req` and refreshes `updated_at`.
        A request without fields just returns the current row.
        """
        sets: List[str] = []
        args: List[Any] = []
        if req.name is not None:
            sets.append("name = ?")
            args.append(req.name)
        if req.email is not None:
            sets.append("email = ?")
            args.append(req.email)

        if not sets:
            return self.get_by_id(user_id)

        sets.append("updated_at = ?")
        args.append(_now())
        args.append(user_id)

        with self._get_conn() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    f"UPDATE users SET {', '.join(sets)} WHERE id = ? AND deleted_at IS NULL",
                    args,
                )
            except sqlite3.IntegrityError as e:
                raise DuplicateEmailError(f"email {req.email} is already registered") from e
            if cursor.rowcount == 0:
                raise UserNotFoundError(f"user {user_id} not found")
            conn.commit()

        return self.get_by_id(user_id)

    def delete(self, user_id: int) -> None:
        """Soft-deletes a user by stamping `deleted_at`."""
        with self._get_conn() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE users SET deleted_at = ?
                    WHERE id = ? AND deleted_at IS NULL
                """,
                (_now(), user_id),
            )
            if cursor.rowcount == 0:
                raise UserNotFoundError(f"user {user_id} not found")
            conn.commit()

        logger.info("Deleted user %s", user_id)

    def count(self) -> int:
        with self._get_conn() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) FROM users WHERE deleted_at IS NULL")
            return cursor.fetchone()[0]

    def _fetch_one(self, query: str, params: tuple) -> UserRecord:
        with self._get_conn() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            row = cursor.fetchone()

        if row is None:
            raise UserNotFoundError("user not found")
        return UserRecord(**dict(row))
