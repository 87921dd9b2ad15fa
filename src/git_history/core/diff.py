"""Per-commit tree diff reduced to one FileChange per touched path."""

import logging
from typing import Dict, Iterable, List, Optional, Tuple, Union

import git
from git import Repo
from git.diff import Diff
from git.objects import Tree

from git_history.errors import DiffError
from git_history.models.change import ChangeType, FileChange

logger = logging.getLogger(__name__)

# Git's well-known empty tree, used as the base of root commits
EMPTY_TREE_SHA = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"


def extract_file_changes(repo: Repo, commit_hash: str) -> List[FileChange]:
    """Diff a commit against its first parent (or the empty tree).

    The returned changes carry line counts and change type; their
    ``commit_count`` is left at its default for the counter to stamp.
    """
    try:
        commit = repo.commit(commit_hash)
        if commit.parents:
            base = commit.parents[0].tree
        else:
            base = Tree(repo, bytes.fromhex(EMPTY_TREE_SHA))
        diff_index = base.diff(commit.tree, create_patch=True)
    except (git.exc.GitError, git.exc.ODBError, ValueError) as e:
        raise DiffError(f"failed to diff commit {commit_hash}: {e}") from e

    return analyze_diff(diff_index, commit.hexsha)


def analyze_diff(diffs: Iterable[Diff], commit_hash: str) -> List[FileChange]:
    """Reduce diff deltas to one FileChange per path.

    The change type comes from the first delta seen for a path; line
    counts accumulate across every delta and hunk for that path.
    """
    changes: Dict[str, FileChange] = {}

    for delta in diffs:
        file_path = delta.b_path or delta.a_path
        if not file_path:
            raise DiffError(f"delta without a path in commit {commit_hash}")

        added, deleted = count_patch_lines(delta.diff)
        change = changes.get(file_path)
        if change is None:
            changes[file_path] = FileChange(
                commit_hash=commit_hash,
                file_path=file_path,
                lines_added=added,
                lines_deleted=deleted,
                change_type=classify_change(delta),
            )
        else:
            change.lines_added += added
            change.lines_deleted += deleted

    logger.debug("Commit %s touched %d files", commit_hash[:8], len(changes))
    return list(changes.values())


def classify_change(delta: Diff) -> ChangeType:
    """Classify a delta as ADD, DELETE, RENAME or MODIFY."""
    if delta.new_file:
        return ChangeType.ADD
    if delta.deleted_file:
        return ChangeType.DELETE
    if delta.renamed_file:
        return ChangeType.RENAME
    return ChangeType.from_git_status(delta.change_type)


def count_patch_lines(patch: Optional[Union[bytes, str]]) -> Tuple[int, int]:
    """Count added and removed lines in the hunks of a patch."""
    if not patch:
        return 0, 0
    if isinstance(patch, str):
        patch = patch.encode("utf-8", "surrogateescape")

    added = deleted = 0
    in_hunk = False
    for line in patch.split(b"\n"):
        if line.startswith(b"@@"):
            in_hunk = True
        elif not in_hunk:
            # File headers and binary notices precede the first hunk
            continue
        elif line.startswith(b"+"):
            added += 1
        elif line.startswith(b"-"):
            deleted += 1

    return added, deleted
