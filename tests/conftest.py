"""Shared fixtures: real git repositories built with GitPython."""

import tempfile
from pathlib import Path

import pytest
from git import Repo

BASE_TIMESTAMP = 1_700_000_000


@pytest.fixture
def temp_git_repo():
    """Create an empty git repository with a test identity."""
    with tempfile.TemporaryDirectory() as temp_dir:
        repo_path = Path(temp_dir) / "project"
        repo = Repo.init(repo_path)

        with repo.config_writer() as config:
            config.set_value("user", "name", "Test User")
            config.set_value("user", "email", "test@example.com")

        yield repo
        repo.close()


@pytest.fixture
def commit_files(temp_git_repo):
    """Return a helper that writes files and commits them.

    Each call gets a timestamp one hour after the previous one, so commit
    order by time matches creation order.
    """
    counter = {"n": 0}

    def _commit(files, message="update", timestamp=None):
        repo = temp_git_repo
        root = Path(repo.working_tree_dir)
        for path, content in files.items():
            target = root / path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
        if files:
            repo.index.add(list(files))

        if timestamp is None:
            timestamp = BASE_TIMESTAMP + counter["n"] * 3600
        counter["n"] += 1
        date = f"{timestamp} +0000"
        return repo.index.commit(message, author_date=date, commit_date=date)

    return _commit


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "history.db"
