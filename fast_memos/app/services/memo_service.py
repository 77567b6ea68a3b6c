"""
Business logic for memos.

Every operation is scoped to an owner id that the caller has already
authenticated.  Memos are always fetched with ``id = ? AND user_id = ?``
before anything is done with them, so a memo belonging to another user is
reported exactly like a memo that does not exist.

Concurrent updates of the same memo are last-writer-wins; there is no
version column.
"""

import logging
import sqlite3
from typing import Iterable, List, Optional

from fast_memos.app.core.db import Database, utc_now
from fast_memos.app.core.errors import NotFound, ValidationError
from fast_memos.app.core.ids import new_id
from fast_memos.app.core.relations import decode_related_ids, encode_related_ids
from fast_memos.app.schemas.memo import MemoRead

logger = logging.getLogger(__name__)

MEMO_COLUMNS = "id, user_id, title, content, related_memo_ids, created_at, updated_at"


class _Unset:
    """Marker for an update field the caller did not supply."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"


UNSET = _Unset()


def _require_title(title) -> str:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("Title is required")
    return title


def _require_related_ids(ids) -> List[str]:
    if not isinstance(ids, (list, tuple)):
        raise ValidationError("related_memo_ids must be a list of strings")
    ids = list(ids)
    if not all(isinstance(i, str) for i in ids):
        raise ValidationError("related_memo_ids must be a list of strings")
    return ids


class MemoService:
    """Owner-scoped CRUD and search over the ``memos`` table."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def create_memo(
        self,
        owner_id: str,
        title: str,
        content: str = "",
        related_memo_ids: Optional[Iterable[str]] = None,
    ) -> MemoRead:
        """Insert a memo owned by ``owner_id`` and return it."""
        _require_title(title)
        if content is None:
            content = ""
        related = encode_related_ids(_require_related_ids(related_memo_ids or []))
        memo_id = new_id()
        now = utc_now()
        with self.db.connect() as conn:
            conn.execute(
                f"INSERT INTO memos ({MEMO_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?)",
                (memo_id, owner_id, title, content, related, now, now),
            )
        logger.info("User %s created memo %s", owner_id, memo_id)
        return MemoRead(
            id=memo_id,
            title=title,
            content=content,
            user_id=owner_id,
            related_memo_ids=decode_related_ids(related),
            created_at=now,
            updated_at=now,
        )

    def list_memos(self, owner_id: str, keyword: Optional[str] = None) -> List[MemoRead]:
        """Return the owner's memos, newest first.

        When ``keyword`` is given, only memos whose title or content
        contains it (case-insensitive substring) are returned.  A blank
        keyword is rejected rather than treated as "match everything".
        """
        query = f"SELECT {MEMO_COLUMNS} FROM memos WHERE user_id = ?"
        params: list = [owner_id]
        if keyword is not None:
            if not isinstance(keyword, str) or not keyword.strip():
                raise ValidationError("Search query 'q' is required")
            folded = keyword.casefold()
            query += " AND (instr(casefold(title), ?) > 0 OR instr(casefold(content), ?) > 0)"
            params.extend([folded, folded])
        # rowid breaks ties between memos created within the same microsecond
        query += " ORDER BY created_at DESC, rowid DESC"
        with self.db.connect() as conn:
            rows = conn.execute(query, tuple(params)).fetchall()
        return [self._row_to_memo_read(row) for row in rows]

    def get_memo(self, owner_id: str, memo_id: str) -> MemoRead:
        with self.db.connect() as conn:
            row = self._fetch_owned(conn, owner_id, memo_id)
        return self._row_to_memo_read(row)

    def update_memo(
        self,
        owner_id: str,
        memo_id: str,
        *,
        title=UNSET,
        content=UNSET,
        related_memo_ids=UNSET,
    ) -> MemoRead:
        """Apply a partial update.

        Only arguments that are not ``UNSET`` are applied; passing
        ``related_memo_ids=[]`` clears the relations.  When nothing is
        supplied, or every supplied value matches what is stored, the memo
        is returned as is and ``updated_at`` is left alone.
        Relations are compared as the list a reader would get back, so
        ``[" a "]`` equals a stored ``"a"``.
        """
        with self.db.connect() as conn:
            row = self._fetch_owned(conn, owner_id, memo_id)
            new_title = row["title"]
            new_content = row["content"]
            new_related = row["related_memo_ids"]
            if title is not UNSET:
                new_title = _require_title(title)
            if content is not UNSET:
                if not isinstance(content, str):
                    raise ValidationError("Content must be a string")
                new_content = content
            if related_memo_ids is not UNSET:
                new_related = encode_related_ids(_require_related_ids(related_memo_ids))

            changed = (
                new_title != row["title"]
                or new_content != row["content"]
                or decode_related_ids(new_related) != decode_related_ids(row["related_memo_ids"])
            )
            if not changed:
                return self._row_to_memo_read(row)

            conn.execute(
                "UPDATE memos SET title = ?, content = ?, related_memo_ids = ?, updated_at = ? "
                "WHERE id = ? AND user_id = ?",
                (new_title, new_content, new_related, utc_now(), memo_id, owner_id),
            )
            row = self._fetch_owned(conn, owner_id, memo_id)
        logger.info("User %s updated memo %s", owner_id, memo_id)
        return self._row_to_memo_read(row)

    def delete_memo(self, owner_id: str, memo_id: str) -> str:
        """Permanently delete a memo and return a confirmation message."""
        with self.db.connect() as conn:
            self._fetch_owned(conn, owner_id, memo_id)
            cursor = conn.execute(
                "DELETE FROM memos WHERE id = ? AND user_id = ?",
                (memo_id, owner_id),
            )
            if cursor.rowcount == 0:
                raise NotFound("Memo not found")
        logger.info("User %s deleted memo %s", owner_id, memo_id)
        return f"Memo with ID {memo_id} deleted successfully"

    @staticmethod
    def _fetch_owned(conn: sqlite3.Connection, owner_id: str, memo_id: str) -> sqlite3.Row:
        row = conn.execute(
            f"SELECT {MEMO_COLUMNS} FROM memos WHERE id = ? AND user_id = ?",
            (memo_id, owner_id),
        ).fetchone()
        if not row:
            raise NotFound("Memo not found")
        return row

    @staticmethod
    def _row_to_memo_read(row: sqlite3.Row) -> MemoRead:
        """Convert a database row to a MemoRead with decoded relations."""
        return MemoRead(
            id=row["id"],
            title=row["title"],
            content=row["content"] or "",
            user_id=row["user_id"],
            related_memo_ids=decode_related_ids(row["related_memo_ids"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
