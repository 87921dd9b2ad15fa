"""Summary model returned by an analysis run."""

from pydantic import BaseModel


class AnalysisResult(BaseModel):
    """Aggregate statistics for a completed analysis run."""

    total_commits: int
    total_files: int
    processing_time: float  # Seconds of wall-clock time
    processed_commits: int = 0
    skipped_commits: int = 0

    @property
    def is_empty(self) -> bool:
        """Check if the store holds no commits after the run."""
        return self.total_commits == 0
