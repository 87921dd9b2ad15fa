"""Read access to the analyzed git repository using GitPython."""

import logging
import re
from pathlib import Path
from typing import List, Optional, Union

import git
from git import Repo

from git_history.errors import (
    AnalysisError,
    BranchNotFound,
    GitError,
    RepositoryNotFound,
)
from git_history.models.commit import (
    DEFAULT_AUTHOR_EMAIL,
    DEFAULT_AUTHOR_NAME,
    DEFAULT_MESSAGE,
    Commit,
)

logger = logging.getLogger(__name__)

# Errors GitPython raises for unreadable history or unknown objects
GIT_READ_ERRORS = (git.exc.GitError, git.exc.ODBError, ValueError)

# Committer header with a signed epoch, e.g. "committer A <a@x> -100 +0000"
COMMITTER_DATE_RE = re.compile(rb"^committer .* (-?\d+) [+-]\d{4}$", re.MULTILINE)


class GitRepository:
    """Wraps a GitPython ``Repo`` for commit traversal and metadata reads."""

    def __init__(self, repo: Repo, path: Optional[Path] = None):
        self._repo = repo
        self.path = Path(path) if path is not None else Path(repo.git_dir)

    @classmethod
    def open(cls, path: Union[str, Path]) -> "GitRepository":
        """Open the repository at ``path``.

        Parent directories are not searched, so ``path`` must be the
        repository itself (work tree root or bare git dir).
        """
        repo_path = Path(path)
        try:
            repo = Repo(repo_path)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
            raise RepositoryNotFound(str(repo_path)) from e
        logger.debug("Opened repository %s", repo.git_dir)
        return cls(repo, repo_path)

    @property
    def repo(self) -> Repo:
        """Get the underlying GitPython repository."""
        return self._repo

    def list_commits(
        self, branch: Optional[str] = None, limit: Optional[int] = None
    ) -> List[str]:
        """Return commit hashes reachable from a branch tip or HEAD.

        Hashes are ordered newest to oldest by commit time, never listing a
        parent before its children. ``limit`` keeps only the newest ones.
        """
        if branch is not None:
            rev = self._resolve_branch(branch)
        elif self._repo.head.is_valid():
            rev = "HEAD"
        else:
            # Unborn HEAD, the repository has no commits yet
            logger.info("HEAD of %s has no commits", self.path)
            return []

        if limit == 0:
            # GitPython drops falsy options, so max_count=0 would walk everything
            return []

        kwargs = {"date_order": True}
        if limit is not None:
            kwargs["max_count"] = limit

        try:
            commits = [c.hexsha for c in self._repo.iter_commits(rev, **kwargs)]
        except GIT_READ_ERRORS as e:
            raise GitError(f"failed to walk history from {rev}: {e}") from e

        logger.debug("Resolved %d commits from %s", len(commits), rev)
        return commits

    def _resolve_branch(self, branch: str) -> str:
        try:
            head = self._repo.heads[branch]
        except IndexError as e:
            raise BranchNotFound(branch) from e

        try:
            return head.commit.hexsha
        except GIT_READ_ERRORS as e:
            raise AnalysisError(f"Branch {branch} not found") from e

    def extract_commit_info(self, commit_hash: str) -> Commit:
        """Read message, author, commit time and first parent of a commit."""
        try:
            commit = self._repo.commit(commit_hash)
            parent_hash = commit.parents[0].hexsha if commit.parents else None
            author = commit.author
            message = commit.message
            commit_date = commit.committed_date
            if commit_date == 0:
                # GitPython reads negative epochs as 0
                commit_date = self._read_committer_date(commit)
        except GIT_READ_ERRORS as e:
            raise GitError(f"failed to read commit {commit_hash}: {e}") from e

        if message is None:
            message = DEFAULT_MESSAGE
        elif isinstance(message, bytes):
            message = message.decode("utf-8", "replace")

        return Commit(
            commit_hash=commit.hexsha,
            parent_hash=parent_hash,
            message=message,
            author_name=(author.name if author else None) or DEFAULT_AUTHOR_NAME,
            author_email=(author.email if author else None) or DEFAULT_AUTHOR_EMAIL,
            commit_date=int(commit_date),
        )

    def _read_committer_date(self, commit: git.Commit) -> int:
        """Parse the committer epoch from the raw commit object."""
        raw = self._repo.odb.stream(commit.binsha).read()
        header = raw.split(b"\n\n", 1)[0]
        match = COMMITTER_DATE_RE.search(header)
        if match is None:
            return commit.committed_date
        return int(match.group(1))
