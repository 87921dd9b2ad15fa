"""Run configuration for the history analyzer."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ValidationError, field_validator

from git_history.errors import ConfigError

DEFAULT_OUTPUT_DB = "git-history.db"


class AnalysisConfig(BaseModel):
    """Parameters for one analysis run."""

    repo_path: Path = Path(".")
    output_db: Path = Path(DEFAULT_OUTPUT_DB)
    branch: Optional[str] = None  # None traverses from HEAD
    incremental: bool = False
    verbose: bool = False
    limit: Optional[int] = None

    model_config = {"frozen": True}

    @field_validator("limit")
    @classmethod
    def _check_limit(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value < 0:
            raise ValueError("limit must not be negative")
        return value

    @field_validator("branch")
    @classmethod
    def _check_branch(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("branch name must not be empty")
        return value

    @classmethod
    def build(cls, **kwargs) -> "AnalysisConfig":
        """Create a config, converting validation failures to ConfigError."""
        try:
            return cls(**kwargs)
        except ValidationError as e:
            details = "; ".join(
                f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                for err in e.errors()
            )
            raise ConfigError(details) from e

    def _replace(self, **changes) -> "AnalysisConfig":
        return self.build(**{**self.model_dump(), **changes})

    def with_branch(self, branch: Optional[str]) -> "AnalysisConfig":
        return self._replace(branch=branch)

    def with_incremental(self, incremental: bool) -> "AnalysisConfig":
        return self._replace(incremental=incremental)

    def with_verbose(self, verbose: bool) -> "AnalysisConfig":
        return self._replace(verbose=verbose)

    def with_limit(self, limit: Optional[int]) -> "AnalysisConfig":
        return self._replace(limit=limit)
