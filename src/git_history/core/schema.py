"""Table and index definitions for the history database.

Other tools query these tables directly, so names, column types and keys
must stay as they are.
"""

import duckdb

COMMITS_TABLE = """
CREATE TABLE IF NOT EXISTS commits (
    commit_hash VARCHAR PRIMARY KEY,
    parent_hash VARCHAR,
    message TEXT NOT NULL,
    author_name VARCHAR NOT NULL,
    author_email VARCHAR NOT NULL,
    commit_date BIGINT NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
)
"""

FILE_CHANGES_TABLE = """
CREATE TABLE IF NOT EXISTS file_changes (
    commit_hash VARCHAR NOT NULL,
    file_path VARCHAR NOT NULL,
    lines_added INTEGER DEFAULT 0,
    lines_deleted INTEGER DEFAULT 0,
    total_lines INTEGER,
    commit_count INTEGER DEFAULT 1,
    change_type VARCHAR NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    PRIMARY KEY (commit_hash, file_path)
)
"""

INDEXES = (
    "CREATE INDEX IF NOT EXISTS idx_file_path ON file_changes(file_path)",
    "CREATE INDEX IF NOT EXISTS idx_commit_hash ON file_changes(commit_hash)",
    "CREATE INDEX IF NOT EXISTS idx_commit_date ON commits(commit_date)",
)


def create_tables(conn: duckdb.DuckDBPyConnection) -> None:
    """Create both tables and their indexes if they do not exist."""
    conn.execute(COMMITS_TABLE)
    conn.execute(FILE_CHANGES_TABLE)
    for statement in INDEXES:
        conn.execute(statement)
