"""Tests for the DuckDB history store."""

import duckdb
import pytest

from git_history.core.database import Database
from git_history.errors import DatabaseError
from git_history.models import ChangeType, Commit, FileChange


def make_commit(commit_hash, parent=None, date=1_700_000_000):
    return Commit(
        commit_hash=commit_hash,
        parent_hash=parent,
        message=f"commit {commit_hash}",
        author_name="Test User",
        author_email="test@example.com",
        commit_date=date,
    )


@pytest.fixture
def database(db_path):
    db = Database(db_path)
    db.create_tables()
    yield db
    db.close()


def test_open_creates_file_and_parent_dirs(tmp_path):
    path = tmp_path / "nested" / "dir" / "history.db"

    with Database.open(path) as db:
        db.create_tables()

    assert path.exists()


def test_schema_layout(database, db_path):
    database.close()
    conn = duckdb.connect(str(db_path))
    try:
        commit_columns = {
            row[1]: row[2] for row in conn.execute("PRAGMA table_info('commits')").fetchall()
        }
        change_columns = {
            row[1]: row[2]
            for row in conn.execute("PRAGMA table_info('file_changes')").fetchall()
        }
        indexes = {
            row[0] for row in conn.execute("SELECT index_name FROM duckdb_indexes()").fetchall()
        }
    finally:
        conn.close()

    assert list(commit_columns) == [
        "commit_hash",
        "parent_hash",
        "message",
        "author_name",
        "author_email",
        "commit_date",
        "created_at",
    ]
    assert commit_columns["commit_date"] == "BIGINT"
    assert list(change_columns) == [
        "commit_hash",
        "file_path",
        "lines_added",
        "lines_deleted",
        "total_lines",
        "commit_count",
        "change_type",
        "created_at",
    ]
    assert change_columns["commit_count"] == "INTEGER"
    assert {"idx_file_path", "idx_commit_hash", "idx_commit_date"} <= indexes


def test_create_tables_is_idempotent(database):
    database.insert_commits([make_commit("c1")])
    database.create_tables()
    assert database.get_total_commits() == 1


def test_insert_commits_skips_existing_keys(database):
    database.insert_commits([make_commit("c1"), make_commit("c2", parent="c1")])
    database.insert_commits([make_commit("c2", parent="c1"), make_commit("c3", parent="c2")])

    assert database.get_total_commits() == 3
    assert database.has_commit("c2")
    assert not database.has_commit("c4")


def test_insert_file_changes_and_aggregates(database):
    database.insert_file_changes(
        [
            FileChange(commit_hash="c1", file_path="a.txt", lines_added=3, change_type=ChangeType.ADD),
            FileChange(commit_hash="c1", file_path="b.txt", lines_added=1, change_type=ChangeType.ADD),
            FileChange(
                commit_hash="c2",
                file_path="a.txt",
                lines_added=1,
                lines_deleted=1,
                commit_count=2,
            ),
        ]
    )
    # Same keys with different values are ignored, not updated
    database.insert_file_changes(
        [FileChange(commit_hash="c2", file_path="a.txt", lines_added=99, commit_count=7)]
    )

    assert database.get_total_files() == 2
    assert database.get_commit_count("a.txt") == 2
    assert database.get_commit_count("b.txt") == 1
    assert database.get_commit_count("missing.txt") == 0
    assert database.get_recorded_paths("c1") == {"a.txt", "b.txt"}
    assert database.get_recorded_paths("c9") == set()

    row = database._conn.execute(
        "SELECT lines_added, lines_deleted, commit_count, change_type, total_lines "
        "FROM file_changes WHERE commit_hash = 'c2' AND file_path = 'a.txt'"
    ).fetchone()
    assert row == (1, 1, 2, "MODIFY", None)


def test_empty_batches_are_noops(database):
    database.insert_commits([])
    database.insert_file_changes([])

    assert database.get_total_commits() == 0
    assert database.get_total_files() == 0


def test_invalid_database_file(tmp_path):
    path = tmp_path / "not-a-db.db"
    path.write_text("this is not a duckdb file\n" * 100)

    with pytest.raises(DatabaseError) as exc_info:
        Database(path)
    assert str(exc_info.value).startswith("Database error")


def test_failed_batch_rolls_back_whole_transaction(database):
    good = make_commit("c1")
    # Skips validation so the NOT NULL message column rejects the row
    bad = Commit.model_construct(
        commit_hash="c2",
        parent_hash="c1",
        message=None,
        author_name="Test User",
        author_email="test@example.com",
        commit_date=1_700_000_100,
    )

    with pytest.raises(DatabaseError):
        database.insert_commits([good, bad])

    assert database.get_total_commits() == 0

    database.insert_commits([good])
    assert database.get_total_commits() == 1
    assert database.has_commit("c1")
