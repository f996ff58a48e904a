"""Diff engine: positional line comparison, working-vs-staged and branch-vs-branch."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from .errors import (
    BranchNotFoundError,
    FileNotStagedError,
    InvalidStateError,
    NotFoundError,
    ObjectNotFoundError,
)
from .index import staged_hash
from .refs import resolve_branch
from .repo import Repository
from .util import split_lines

ADDED = "added"
REMOVED = "removed"
MODIFIED = "modified"


@dataclass
class LineChange:
    """A mismatch at one line position: the old line removed, the new line added."""

    index: int
    removed: str
    added: str


@dataclass
class FileChange:
    """One file's status between two snapshots; lines only for modified files."""

    path: str
    status: str
    lines: List[LineChange] = field(default_factory=list)


def compare_lines(old: Sequence[str], new: Sequence[str]) -> List[LineChange]:
    """Compare line i of old with line i of new; out of range reads as ''.

    Positional, not LCS: one inserted line makes every later line mismatch.
    """
    changes: List[LineChange] = []
    for i in range(max(len(old), len(new))):
        old_line = old[i] if i < len(old) else ""
        new_line = new[i] if i < len(new) else ""
        if old_line != new_line:
            changes.append(LineChange(i, old_line, new_line))
    return changes


def diff_working_vs_staged(repo: Repository, filename: str) -> List[LineChange]:
    """Compare the staged blob of filename (old) with the working file (new)."""
    repo.require_repo()
    p = repo.safe_path(filename)
    if not p.is_file():
        raise NotFoundError(f"File not found in working directory: {filename}")
    current = split_lines(p.read_bytes())
    sha = staged_hash(repo.load_index(), repo.rel_path(p))
    if sha is None:
        raise FileNotStagedError(f"File not staged: {filename}")
    try:
        staged = split_lines(repo.load_object(sha))
    except ObjectNotFoundError:
        raise ObjectNotFoundError(f"Staged object not found: {sha}") from None
    return compare_lines(staged, current)


def _branch_files(repo: Repository, branch: str) -> Dict[str, str]:
    commit_hash = resolve_branch(repo.git_dir, branch)
    if commit_hash is None:
        raise BranchNotFoundError(f"Branch '{branch}' does not exist.")
    if not commit_hash:
        raise InvalidStateError(f"Branch '{branch}' has no commits.")
    commit = repo.read_commit(commit_hash)
    if not commit.tree_hash:
        raise InvalidStateError(f"Commit {commit_hash} does not record a snapshot.")
    return repo.read_snapshot(commit.tree_hash).as_mapping()


def _blob_lines(repo: Repository, sha: str) -> List[str]:
    try:
        return split_lines(repo.load_object(sha))
    except ObjectNotFoundError:
        return []


def diff_branches(repo: Repository, branch1: str, branch2: str) -> List[FileChange]:
    """Compare the snapshots at the tips of branch1 and branch2, sorted by path."""
    repo.require_repo()
    files1 = _branch_files(repo, branch1)
    files2 = _branch_files(repo, branch2)
    changes: List[FileChange] = []
    for path in sorted(set(files1) | set(files2)):
        sha1 = files1.get(path)
        sha2 = files2.get(path)
        if sha1 is None:
            changes.append(FileChange(path, ADDED))
        elif sha2 is None:
            changes.append(FileChange(path, REMOVED))
        elif sha1 != sha2:
            lines = compare_lines(_blob_lines(repo, sha1), _blob_lines(repo, sha2))
            changes.append(FileChange(path, MODIFIED, lines))
    return changes
