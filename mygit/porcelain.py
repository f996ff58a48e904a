"""Porcelain commands: add, unstage, status, commit, log, branch, checkout, merge, diff, config."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from .config import get_value as config_get_value
from .config import list_values as config_list_values
from .config import set_value as config_set_value
from .config import unset_value as config_unset_value
from .constants import MERGE_OUTPUT_FILE, OBJ_COMMIT, REF_HEADS_PREFIX
from .diff import ADDED, MODIFIED, REMOVED, LineChange, diff_branches, diff_working_vs_staged
from .errors import BranchNotFoundError, InvalidRefError, InvalidStateError, NothingToCommitError
from .graph import walk_history
from .ignore import IgnoreMatcher, load_ignore_patterns
from .index import append_entry, clear_index, index_exists, remove_entries
from .merge import merge_branch
from .objects import Blob
from .objectstore import is_full_digest
from .plumbing import commit_tree, object_kind, rev_parse, write_snapshot
from .refs import (
    advance_head,
    branch_exists,
    current_branch_name,
    delete_branch,
    head_commit,
    list_branches,
    read_head,
    resolve_branch,
    set_branch,
    validate_branch_name,
    write_head_detached,
    write_head_ref,
)
from .repo import Repository
from .util import read_bytes


def add_path(repo: Repository, path: str, force: bool = False) -> int:
    """Stage a file, or every file under a directory ('.' for all). Returns files staged.

    Ignored paths are skipped unless force=True.
    """
    repo.require_repo()
    p = repo.safe_path(path)
    ign = load_ignore_patterns(repo.path)
    if p.is_file():
        rel = repo.rel_path(p)
        if not force and ign.is_ignored(rel):
            print(f"Ignored: {path}")
            return 0
        _stage_file(repo, p)
        print(f"Staged {rel}")
        return 1
    if p.is_dir():
        count = _stage_directory(repo, p, force, ign)
        if count:
            print(f"Staged {count} files from directory {path}")
        else:
            print(f"Nothing to stage in {path}")
        return count
    raise FileNotFoundError(f"{path} does not exist.")


def _stage_file(repo: Repository, full: Path) -> str:
    sha = repo.store_object(Blob(read_bytes(full)))
    append_entry(repo.git_dir, sha, repo.rel_path(full))
    return sha


def _stage_directory(repo: Repository, full: Path, force: bool, ign: IgnoreMatcher) -> int:
    count = 0
    for f in sorted(full.rglob("*")):
        if not f.is_file() or repo.git_dir in f.parents:
            continue
        if not force and ign.is_ignored(repo.rel_path(f)):
            continue
        _stage_file(repo, f)
        count += 1
    return count


def unstage(repo: Repository, paths: List[str]) -> None:
    """Remove every index record for the given files."""
    repo.require_repo()
    if not index_exists(repo.git_dir):
        print("No files are staged.")
        return
    names = [repo.rel_path(repo.safe_path(p)) for p in paths]
    found = remove_entries(repo.git_dir, names)
    for name in names:
        if name in found:
            print(f"Unstaged {name}")
        else:
            print(f"File {name} is not staged.")


def unstage_all(repo: Repository) -> None:
    """Empty the index."""
    repo.require_repo()
    if not index_exists(repo.git_dir):
        print("No files are staged.")
        return
    clear_index(repo.git_dir)
    print("All files have been unstaged.")


def status(repo: Repository) -> None:
    """Print branch/detached state and the staged entries."""
    repo.require_repo()
    branch = current_branch_name(repo.git_dir)
    if branch is not None:
        print(f"On branch {branch}")
    else:
        head = head_commit(repo.git_dir)
        print(f"HEAD detached at {head[:7] if head else '???????'}")
    entries = repo.load_index()
    if not entries:
        print("No files are staged.")
        return
    print("Staged files:")
    for sha, name in entries:
        print(f"{sha} {name}")


def commit(repo: Repository, message: str, author: Optional[str] = None) -> str:
    """Commit the staged entries: snapshot, record with HEAD as parent, advance HEAD, clear index.

    Raises NothingToCommitError (with nothing written) if the index is empty or missing.
    """
    repo.require_repo()
    if not repo.load_index():
        raise NothingToCommitError("Nothing to commit. The staging area is empty.")
    parent_hash = head_commit(repo.git_dir)
    tree_hash = write_snapshot(repo)
    commit_hash = commit_tree(
        repo,
        tree_hash,
        [parent_hash] if parent_hash else [],
        message,
        author=author,
    )
    branch = advance_head(repo.git_dir, commit_hash)
    clear_index(repo.git_dir)
    where = f"branch {branch}" if branch else "detached HEAD"
    print(f"Created commit {commit_hash[:7]} on {where}")
    return commit_hash


def log(
    repo: Repository,
    rev: Optional[str] = None,
    max_count: Optional[int] = None,
    oneline: bool = False,
) -> None:
    """Show first-parent history from rev (default HEAD). -n limits count."""
    repo.require_repo()
    h = rev_parse(repo, rev) if rev is not None else head_commit(repo.git_dir)
    if not h:
        print("No commits yet!")
        return
    n = 0
    for sha, c in walk_history(repo, h):
        if max_count is not None and n >= max_count:
            break
        if oneline:
            first_line = c.message.split("\n")[0].strip()
            print(f"{sha[:7]} {first_line}")
        else:
            print(f"commit {sha}")
            if len(c.parent_hashes) >= 2:
                print("Merge: " + " ".join(p[:7] for p in c.parent_hashes))
            print(f"Author: {c.author}")
            print(f"Date:   {c.date}")
            print()
            for line in c.message.strip().split("\n"):
                print(f"    {line}")
            print()
        n += 1
    if n == 0:
        print(f"Error: Commit object not found for hash: {h}")


def branch_list(repo: Repository) -> None:
    """List branches with current marked."""
    repo.require_repo()
    current = current_branch_name(repo.git_dir)
    branches = list_branches(repo.git_dir)
    if not branches:
        print("No branches found.")
        return
    for b in branches:
        mark = "* " if b == current else "  "
        print(f"{mark}{b}")


def branch_create(repo: Repository, name: str) -> str:
    """Create branch at current HEAD commit."""
    repo.require_repo()
    validate_branch_name(name)
    h = head_commit(repo.git_dir)
    if not h:
        raise InvalidStateError("No commits found. Please make a commit first.")
    if branch_exists(repo.git_dir, name):
        raise InvalidRefError(f"Branch '{name}' already exists.")
    set_branch(repo.git_dir, name, h)
    print(f"Branch '{name}' created successfully.")
    return h


def branch_delete(repo: Repository, name: str) -> None:
    """Delete a branch other than the current one."""
    repo.require_repo()
    if not branch_exists(repo.git_dir, name):
        raise BranchNotFoundError(f"Branch '{name}' does not exist.")
    if current_branch_name(repo.git_dir) == name:
        raise InvalidStateError(f"Cannot delete current branch {name}")
    delete_branch(repo.git_dir, name)
    print(f"Deleted branch {name}")


def checkout_branch(repo: Repository, target: str, create: bool = False) -> None:
    """Point HEAD at a branch (optionally creating it) or detach it at a commit.

    Only HEAD changes; the working tree and index are left as they are.
    """
    repo.require_repo()
    if create:
        branch_create(repo, target)
    elif not branch_exists(repo.git_dir, target):
        if is_full_digest(target) and repo.odb.exists(target):
            if object_kind(repo.load_object(target)) != OBJ_COMMIT:
                raise InvalidRefError(f"object {target} is not a commit")
            write_head_detached(repo.git_dir, target)
            print(f"Switched to detached HEAD at {target[:7]}")
            return
        raise BranchNotFoundError(f"Branch '{target}' does not exist.")
    write_head_ref(repo.git_dir, f"{REF_HEADS_PREFIX}{target}")
    print(f"Switched to branch '{target}'.")


def show_current_branch(repo: Repository) -> Optional[str]:
    """Print the current branch name, or report a detached HEAD."""
    repo.require_repo()
    branch = current_branch_name(repo.git_dir)
    if branch is not None:
        print(f"Current branch: {branch}")
        return branch
    state = read_head(repo.git_dir)
    if state is not None and state.kind == "detached":
        print(f"HEAD detached at {state.value[:7]}")
    else:
        print("Error: Could not determine the current branch.")
    return None


def merge(repo: Repository, source: str) -> bool:
    """Merge source into the current branch; report the outcome. Returns True on conflict."""
    conflict = merge_branch(repo, source)
    if conflict:
        print(f"Merge completed with conflicts; see {MERGE_OUTPUT_FILE}. Please resolve them manually.")
        return True
    branch = current_branch_name(repo.git_dir) or ""
    new_hash = resolve_branch(repo.git_dir, branch) or ""
    print(f"Merge completed successfully. New commit {new_hash[:7]}")
    return False


def _print_line_changes(changes: List[LineChange]) -> None:
    for ch in changes:
        print(f"- {ch.removed}")
        print(f"+ {ch.added}")


def diff_file(repo: Repository, filename: str) -> None:
    """Print the staged-vs-working diff of one file."""
    changes = diff_working_vs_staged(repo, filename)
    print(f"Diff for {filename}:")
    _print_line_changes(changes)


def diff_branch_pair(repo: Repository, branch1: str, branch2: str) -> None:
    """Print file-level and line-level differences between two branch tips."""
    changes = diff_branches(repo, branch1, branch2)
    if not changes:
        print(f"No differences between {branch1} and {branch2}.")
        return
    for fc in changes:
        if fc.status == ADDED:
            print(f"File added in second branch: {fc.path}")
        elif fc.status == REMOVED:
            print(f"File deleted in second branch: {fc.path}")
        elif fc.status == MODIFIED:
            print(f"File modified: {fc.path}")
            print(f"--- {fc.path} ({branch1})")
            print(f"+++ {fc.path} ({branch2})")
            _print_line_changes(fc.lines)


def config_get(repo: Repository, key: str) -> None:
    """Print value for key or exit with error if missing."""
    val = config_get_value(repo, key)
    if val is None:
        raise InvalidStateError(f"config key {key!r} not set")
    print(val)


def config_set(repo: Repository, key: str, value: str) -> None:
    """Set config key to value."""
    config_set_value(repo, key, value)


def config_unset(repo: Repository, key: str) -> None:
    """Unset config key. Error if key was not set."""
    if not config_unset_value(repo, key):
        raise InvalidStateError(f"config key {key!r} not set")


def config_list(repo: Repository) -> None:
    """Print all key=value lines."""
    for k, v in config_list_values(repo):
        print(f"{k}={v}")
