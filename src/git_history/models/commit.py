"""Commit model for analyzed repository history."""

from typing import Optional

from pydantic import BaseModel

DEFAULT_AUTHOR_NAME = "Unknown"
DEFAULT_AUTHOR_EMAIL = "unknown@example.com"
DEFAULT_MESSAGE = "(no message)"


class Commit(BaseModel):
    """Represents a commit extracted from the analyzed repository."""

    commit_hash: str
    parent_hash: Optional[str] = None  # First parent only
    message: str = ""
    author_name: str = DEFAULT_AUTHOR_NAME
    author_email: str = DEFAULT_AUTHOR_EMAIL
    commit_date: int  # Unix timestamp, not validated

    model_config = {"frozen": True}

    @property
    def short_hash(self) -> str:
        return self.commit_hash[:8]

    @property
    def summary(self) -> str:
        """First line of the commit message."""
        lines = self.message.splitlines()
        return lines[0] if lines else ""
