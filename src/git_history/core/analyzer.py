"""Analysis workflow: traverse, diff, count and persist commit history."""

import logging
import time
from pathlib import Path
from typing import List, Optional

from git_history.config import AnalysisConfig
from git_history.core import diff
from git_history.core.counter import CommitCounter
from git_history.core.database import Database
from git_history.core.repository import GitRepository
from git_history.models.change import FileChange
from git_history.models.commit import Commit
from git_history.models.result import AnalysisResult

logger = logging.getLogger(__name__)

# Commits diffed per transactional flush
BATCH_SIZE = 100


class ProgressReporter:
    """Receives progress events from an analysis run.

    The base implementation ignores every event; the CLI overrides the
    hooks it wants to display.
    """

    def on_repository_opened(self, path: Path) -> None:
        pass

    def on_database_ready(self, path: Path) -> None:
        pass

    def on_commits_found(self, total: int, skipped: int) -> None:
        pass

    def on_batch(self, start: int, end: int, total: int) -> None:
        pass

    def on_commit(self, commit: Commit) -> None:
        pass

    def on_complete(self, result: AnalysisResult) -> None:
        pass


class Analyzer:
    """Drives the history extraction pipeline for one configuration."""

    def __init__(
        self, config: AnalysisConfig, reporter: Optional[ProgressReporter] = None
    ):
        self.config = config
        self.reporter = reporter or ProgressReporter()

    def analyze(self) -> AnalysisResult:
        """Run the analysis and return aggregate totals from the store."""
        start_time = time.perf_counter()
        config = self.config

        logger.info("Analyzing repository %s", config.repo_path)
        git_repo = GitRepository.open(config.repo_path)
        self.reporter.on_repository_opened(config.repo_path)

        with Database.open(config.output_db) as database:
            database.create_tables()
            self.reporter.on_database_ready(config.output_db)

            commit_hashes = git_repo.list_commits(config.branch, config.limit)
            # Oldest first so running counts grow along history
            commit_hashes.reverse()

            skipped = 0
            if config.incremental:
                pending = [h for h in commit_hashes if not database.has_commit(h)]
                skipped = len(commit_hashes) - len(pending)
                commit_hashes = pending
            self.reporter.on_commits_found(len(commit_hashes), skipped)
            logger.info(
                "Found %d commits to process (%d already stored)",
                len(commit_hashes),
                skipped,
            )

            counter = CommitCounter(database.get_commit_count)
            total = len(commit_hashes)
            for start in range(0, total, BATCH_SIZE):
                chunk = commit_hashes[start : start + BATCH_SIZE]
                self.reporter.on_batch(start + 1, start + len(chunk), total)
                self.process_commit_batch(git_repo, database, counter, chunk)

            result = AnalysisResult(
                total_commits=database.get_total_commits(),
                total_files=database.get_total_files(),
                processing_time=time.perf_counter() - start_time,
                processed_commits=total,
                skipped_commits=skipped,
            )

        logger.info(
            "Analysis complete: %d commits, %d files in %.2fs",
            result.total_commits,
            result.total_files,
            result.processing_time,
        )
        self.reporter.on_complete(result)
        return result

    def process_commit_batch(
        self,
        git_repo: GitRepository,
        database: Database,
        counter: CommitCounter,
        commit_hashes: List[str],
    ) -> None:
        """Extract, diff and count a batch of commits, then persist it.

        Commits are written first, then file changes, each in its own
        transaction. File changes already stored by an earlier run are
        neither counted nor rewritten.
        """
        commits: List[Commit] = []
        file_changes: List[FileChange] = []

        for commit_hash in commit_hashes:
            commit = git_repo.extract_commit_info(commit_hash)
            self.reporter.on_commit(commit)
            commits.append(commit)

            changes = diff.extract_file_changes(git_repo.repo, commit_hash)
            recorded = database.get_recorded_paths(commit_hash)
            new_changes = [c for c in changes if c.file_path not in recorded]
            counter.stamp(new_changes)
            file_changes.extend(new_changes)

        database.insert_commits(commits)
        database.insert_file_changes(file_changes)
        logger.debug(
            "Persisted %d commits and %d file changes",
            len(commits),
            len(file_changes),
        )
