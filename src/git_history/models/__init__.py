"""Data models for Git History."""

from .change import ChangeType, FileChange
from .commit import Commit
from .result import AnalysisResult

__all__ = ["ChangeType", "FileChange", "Commit", "AnalysisResult"]
