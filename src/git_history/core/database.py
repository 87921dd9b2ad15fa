"""DuckDB storage for extracted commits and file changes."""

import logging
from pathlib import Path
from typing import Any, List, Optional, Sequence, Set, Union

import duckdb

from git_history.core import schema
from git_history.errors import DatabaseError, IoError
from git_history.models.change import FileChange
from git_history.models.commit import Commit

logger = logging.getLogger(__name__)

INSERT_COMMIT = """
INSERT OR IGNORE INTO commits
(commit_hash, parent_hash, message, author_name, author_email, commit_date)
VALUES (?, ?, ?, ?, ?, ?)
"""

INSERT_FILE_CHANGE = """
INSERT OR IGNORE INTO file_changes
(commit_hash, file_path, lines_added, lines_deleted, total_lines, commit_count, change_type)
VALUES (?, ?, ?, ?, ?, ?, ?)
"""


class Database:
    """Owns the DuckDB connection and the history schema.

    Batch inserts run in one transaction each and skip rows whose primary
    key already exists, so ingesting the same history twice is a no-op.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise IoError(f"cannot create {self.path.parent}: {e}") from e

        try:
            self._conn = duckdb.connect(str(self.path))
        except duckdb.Error as e:
            raise DatabaseError(f"cannot open {self.path}: {e}") from e
        self._closed = False
        logger.debug("Opened database %s", self.path)

    @classmethod
    def open(cls, path: Union[str, Path]) -> "Database":
        return cls(path)

    def close(self) -> None:
        if not self._closed:
            self._conn.close()
            self._closed = True

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def create_tables(self) -> None:
        """Create the schema; safe to call on an existing database."""
        try:
            schema.create_tables(self._conn)
        except duckdb.Error as e:
            raise DatabaseError(f"schema creation failed: {e}") from e

    def insert_commits(self, commits: Sequence[Commit]) -> None:
        """Insert a batch of commits in one transaction."""
        rows = [
            (
                c.commit_hash,
                c.parent_hash,
                c.message,
                c.author_name,
                c.author_email,
                c.commit_date,
            )
            for c in commits
        ]
        self._insert_batch(INSERT_COMMIT, rows, "commits")

    def insert_file_changes(self, changes: Sequence[FileChange]) -> None:
        """Insert a batch of file changes in one transaction."""
        rows = [
            (
                c.commit_hash,
                c.file_path,
                c.lines_added,
                c.lines_deleted,
                c.total_lines,
                c.commit_count,
                c.change_type.value,
            )
            for c in changes
        ]
        self._insert_batch(INSERT_FILE_CHANGE, rows, "file_changes")

    def _insert_batch(self, statement: str, rows: List[tuple], table: str) -> None:
        if not rows:
            return

        try:
            self._conn.begin()
            try:
                self._conn.executemany(statement, rows)
            except duckdb.Error:
                self._conn.rollback()
                raise
            self._conn.commit()
        except duckdb.Error as e:
            raise DatabaseError(f"insert into {table} failed: {e}") from e
        logger.debug("Wrote %d rows to %s", len(rows), table)

    def get_commit_count(self, file_path: str) -> int:
        """Number of recorded commits that touched ``file_path``."""
        return self._scalar(
            "SELECT COUNT(*) FROM file_changes WHERE file_path = ?", [file_path]
        )

    def get_total_commits(self) -> int:
        return self._scalar("SELECT COUNT(*) FROM commits")

    def get_total_files(self) -> int:
        return self._scalar("SELECT COUNT(DISTINCT file_path) FROM file_changes")

    def has_commit(self, commit_hash: str) -> bool:
        return (
            self._scalar(
                "SELECT COUNT(*) FROM commits WHERE commit_hash = ?", [commit_hash]
            )
            > 0
        )

    def get_recorded_paths(self, commit_hash: str) -> Set[str]:
        """Paths that already have a file_changes row for ``commit_hash``."""
        try:
            rows = self._conn.execute(
                "SELECT file_path FROM file_changes WHERE commit_hash = ?",
                [commit_hash],
            ).fetchall()
        except duckdb.Error as e:
            raise DatabaseError(str(e)) from e
        return {row[0] for row in rows}

    def _scalar(self, query: str, params: Optional[List[Any]] = None) -> int:
        try:
            row = self._conn.execute(query, params or []).fetchone()
        except duckdb.Error as e:
            raise DatabaseError(str(e)) from e
        return int(row[0]) if row and row[0] is not None else 0
