"""Merge engine: common ancestor, three-way resolution of versioned text, merge commit."""

from __future__ import annotations

from dataclasses import dataclass

from .constants import MARKER_CURRENT, MARKER_SEPARATOR, MARKER_SOURCE, MERGE_OUTPUT_FILE
from .errors import BranchNotFoundError, InvalidStateError, NoCommonAncestorError
from .graph import find_common_ancestor
from .objects import Commit
from .plumbing import commit_tree
from .refs import current_branch_name, resolve_branch, set_branch
from .repo import Repository
from .util import write_text_atomic


@dataclass
class MergeResult:
    """Result of resolving three versions of a text: merged body and conflict flag."""

    text: str
    conflict: bool


def merge_texts(base: str, ours: str, theirs: str) -> MergeResult:
    """Resolve whole texts: identical sides, then one-side-unchanged, else conflict markers."""
    if ours == theirs:
        return MergeResult(ours, False)
    if base == ours:
        return MergeResult(theirs, False)
    if base == theirs:
        return MergeResult(ours, False)
    text = f"{MARKER_CURRENT}\n{ours}\n{MARKER_SEPARATOR}\n{theirs}\n{MARKER_SOURCE}\n"
    return MergeResult(text, True)


def read_commit_record(repo: Repository, commit_hash: str) -> str:
    """Serialized commit record as trimmed text: the unit the merge resolves."""
    return repo.load_object(commit_hash).decode("utf-8", errors="replace").strip()


def write_merge_output(repo: Repository, text: str) -> None:
    """Write the merged (or conflict-marked) text to the side-channel file in the working root."""
    write_text_atomic(repo.path / MERGE_OUTPUT_FILE, text)


def merge_branch(repo: Repository, source: str) -> bool:
    """Merge branch source into the current branch. Returns True on conflict.

    The three versions compared are the whole serialized commit records of the
    common ancestor and both tips, not the files in their snapshots. Differing
    metadata (date, author, message) therefore conflicts even when the files
    match. On success a two-parent commit is written and the current branch is
    moved to it directly; the index is not touched.
    """
    repo.require_repo()
    current = current_branch_name(repo.git_dir)
    if current is None:
        raise InvalidStateError("No current branch found (HEAD is detached or unreadable).")
    if current == source:
        raise InvalidStateError(f"Already on branch '{source}'. Nothing to merge.")
    source_hash = resolve_branch(repo.git_dir, source)
    if source_hash is None:
        raise BranchNotFoundError(f"Branch '{source}' does not exist.")
    current_hash = resolve_branch(repo.git_dir, current) or ""
    if not current_hash or not source_hash:
        raise InvalidStateError("One of the branches has no commits to merge.")

    base_hash = find_common_ancestor(repo, current_hash, source_hash)
    if base_hash is None:
        raise NoCommonAncestorError(f"No common ancestor found for '{current}' and '{source}'.")

    result = merge_texts(
        read_commit_record(repo, base_hash),
        read_commit_record(repo, current_hash),
        read_commit_record(repo, source_hash),
    )
    write_merge_output(repo, result.text)
    if result.conflict:
        return True

    resolved = Commit.from_content(result.text.encode("utf-8"))
    merge_hash = commit_tree(
        repo,
        resolved.tree_hash,
        [current_hash, source_hash],
        f"Merge branch '{source}'",
    )
    set_branch(repo.git_dir, current, merge_hash)
    return False
