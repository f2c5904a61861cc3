from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Generator, List, Optional

from .models import PostEntity
from .repositories import Repository
from .schemas import PostCreate, PostUpdate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Cols:
    table: str = "posts"
    id: str = "id"
    title: str = "title"
    content: str = "content"
    created_at: str = "created_at"
    updated_at: str = "updated_at"


_COLS = _Cols()


class SQLiteRepository(Repository):
    """
    Lightweight SQLite repository implementing the Repository interface.
    """

    def __init__(self, db_path: str) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._init_db()

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_COLS.table} (
                    {_COLS.id} INTEGER PRIMARY KEY AUTOINCREMENT,
                    {_COLS.title} TEXT NOT NULL,
                    {_COLS.content} TEXT NOT NULL,
                    {_COLS.created_at} TEXT NOT NULL,
                    {_COLS.updated_at} TEXT NOT NULL
                )
                """
            )
        logger.debug("Initialized sqlite schema at %s", self._db_path)

    def _row_to_entity(self, row: sqlite3.Row) -> PostEntity:
        return {
            "id": int(row[_COLS.id]),
            "title": str(row[_COLS.title]),
            "content": str(row[_COLS.content]),
            "created_at": datetime.fromisoformat(row[_COLS.created_at]),
            "updated_at": datetime.fromisoformat(row[_COLS.updated_at]),
        }

    def _fetch(self, conn: sqlite3.Connection, post_id: int) -> Optional[PostEntity]:
        row = conn.execute(f"SELECT * FROM {_COLS.table} WHERE {_COLS.id} = ?", (post_id,)).fetchone()
        return self._row_to_entity(row) if row else None

    def create(self, data: PostCreate) -> PostEntity:
        now = datetime.now().isoformat()
        with self._conn() as conn:
            cur = conn.execute(
                f"""
                INSERT INTO {_COLS.table} ({_COLS.title}, {_COLS.content}, {_COLS.created_at}, {_COLS.updated_at})
                VALUES (?, ?, ?, ?)
                """,
                (data.title, data.content, now, now),
            )
            created = self._fetch(conn, int(cur.lastrowid))
            assert created is not None
            return created

    def get(self, post_id: int) -> Optional[PostEntity]:
        with self._conn() as conn:
            return self._fetch(conn, post_id)

    def update(self, post_id: int, data: PostUpdate) -> Optional[PostEntity]:
        with self._conn() as conn:
            current = self._fetch(conn, post_id)
            if current is None:
                return None

            changes = data.changes()
            conn.execute(
                f"""
                UPDATE {_COLS.table}
                SET {_COLS.title} = ?, {_COLS.content} = ?, {_COLS.updated_at} = ?
                WHERE {_COLS.id} = ?
                """,
                (
                    changes.get("title", current["title"]),
                    changes.get("content", current["content"]),
                    datetime.now().isoformat(),
                    post_id,
                ),
            )
            return self._fetch(conn, post_id)

    def delete(self, post_id: int) -> Optional[PostEntity]:
        with self._conn() as conn:
            current = self._fetch(conn, post_id)
            if current is None:
                return None
            conn.execute(f"DELETE FROM {_COLS.table} WHERE {_COLS.id} = ?", (post_id,))
            return current

    def list(self) -> List[PostEntity]:
        with self._conn() as conn:
            rows = conn.execute(f"SELECT * FROM {_COLS.table} ORDER BY {_COLS.id} ASC").fetchall()
            return [self._row_to_entity(r) for r in rows]
