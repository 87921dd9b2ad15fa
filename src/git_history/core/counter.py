"""Running per-file commit counts for one analysis run."""

import logging
from typing import Callable, Dict, Iterable

from git_history.models.change import FileChange

logger = logging.getLogger(__name__)


class CommitCounter:
    """Counts how many commits have touched each file so far.

    A path is seeded once from ``seed`` (the number of touches already
    persisted) the first time it is seen; every touch after that is an
    in-memory increment, so counts stay strictly increasing even when
    several commits in the same batch touch the same file.
    """

    def __init__(self, seed: Callable[[str], int]):
        self._seed = seed
        self._counts: Dict[str, int] = {}

    def count(self, file_path: str) -> int:
        """Record one more touch of ``file_path`` and return its count."""
        current = self._counts.get(file_path)
        if current is None:
            current = self._seed(file_path)
            logger.debug("Seeded %s with %d prior commits", file_path, current)
        current += 1
        self._counts[file_path] = current
        return current

    def stamp(self, changes: Iterable[FileChange]) -> None:
        """Set ``commit_count`` on each change from the running tally."""
        for change in changes:
            change.commit_count = self.count(change.file_path)
