"""File change model for per-commit file statistics."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class ChangeType(str, Enum):
    """Type of change a commit made to a file."""

    ADD = "ADD"
    MODIFY = "MODIFY"
    DELETE = "DELETE"
    RENAME = "RENAME"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_git_status(cls, status: Optional[str]) -> "ChangeType":
        """Map a git status letter (A, M, D, R, ...) to a ChangeType.

        Statuses without a dedicated variant (type changes, copies,
        unmerged entries, unknown) are treated as modifications.
        """
        if not status:
            return cls.MODIFY
        return _STATUS_MAP.get(status[0].upper(), cls.MODIFY)


_STATUS_MAP = {
    "A": ChangeType.ADD,
    "M": ChangeType.MODIFY,
    "D": ChangeType.DELETE,
    "R": ChangeType.RENAME,
}


class FileChange(BaseModel):
    """Represents the changes one commit made to one file."""

    commit_hash: str
    file_path: str
    lines_added: int = 0
    lines_deleted: int = 0
    total_lines: Optional[int] = None  # Reserved, never populated
    commit_count: int = 1  # Running count of commits touching this file
    change_type: ChangeType = ChangeType.MODIFY
