"""Exception hierarchy for Git History.

Every error aborts the analysis run. Component boundaries wrap the
underlying library exception (GitPython, DuckDB, OSError) so callers only
need to handle ``GitHistoryError``.
"""


class GitHistoryError(Exception):
    """Base exception for all analysis failures."""

    prefix = "Error"

    def __init__(self, detail: str):
        super().__init__(f"{self.prefix}: {detail}")
        self.detail = detail


class RepositoryNotFound(GitHistoryError):
    """Raised when the path is missing or is not a git repository."""

    prefix = "Git repository not found"

    def __init__(self, path: str):
        super().__init__(str(path))
        self.path = str(path)


class GitError(GitHistoryError):
    """Raised when traversing or reading repository history fails."""

    prefix = "Git error"


class DiffError(GitError):
    """Raised when a commit tree cannot be diffed."""


class DatabaseError(GitHistoryError):
    """Raised when a schema or query operation fails in the store."""

    prefix = "Database error"


class IoError(GitHistoryError):
    """Raised on filesystem failures."""

    prefix = "IO error"


class ConfigError(GitHistoryError):
    """Raised for invalid run parameters."""

    prefix = "Invalid configuration"


class BranchNotFound(ConfigError):
    """Raised when the requested branch does not exist."""

    def __init__(self, branch: str):
        super().__init__(f"branch '{branch}' not found")
        self.branch = branch


class AnalysisError(GitHistoryError):
    """Raised when the pipeline hits an invariant violation."""

    prefix = "Analysis error"
