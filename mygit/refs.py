"""HEAD and branch refs: symbolic HEAD, detached HEAD, refs/heads/<name> files."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Literal, Optional

from .constants import HEAD_FILE, REF_HEADS_PREFIX, SHA1_HEX_LEN
from .errors import InvalidRefError, NotARepositoryError
from .util import read_text_safe, write_text_atomic


@dataclass
class HeadState:
    """HEAD state: either symbolic ref or detached commit hash."""
    kind: Literal["ref", "detached"]
    value: str  # refs/heads/main or 40-char commit hash

    @property
    def branch(self) -> Optional[str]:
        if self.kind == "ref" and self.value.startswith(REF_HEADS_PREFIX):
            name = self.value[len(REF_HEADS_PREFIX) :]
            if is_valid_branch_name(name):
                return name
        return None


def _head_file(repo_git: Path) -> Path:
    return repo_git / HEAD_FILE


def _branch_path(repo_git: Path, name: str) -> Path:
    """Path of the branch file under refs/heads. Raises InvalidRefError for unsafe names."""
    validate_branch_name(name)
    return repo_git / (REF_HEADS_PREFIX + name)


def _is_hex_sha(s: str) -> bool:
    return len(s) == SHA1_HEX_LEN and bool(re.fullmatch(r"[0-9a-fA-F]{40}", s))


# Characters disallowed in branch names (git refname rules)
_BRANCH_FORBIDDEN = set(" \t~^:?*[]\\")


def validate_branch_name(name: str) -> None:
    """Raise InvalidRefError if branch name is invalid (spaces, .., leading /, ~^:?*[], etc.)."""
    if not name or name.startswith("/") or name.endswith("/"):
        raise InvalidRefError(f"invalid branch name: {name!r}")
    if ".." in name or "//" in name:
        raise InvalidRefError(f"invalid branch name: {name!r}")
    for c in name:
        if c in _BRANCH_FORBIDDEN:
            raise InvalidRefError(f"invalid branch name: {name!r}")
    if any(part.startswith(".") for part in name.split("/")):
        raise InvalidRefError(f"invalid branch name: {name!r}")


def is_valid_branch_name(name: str) -> bool:
    try:
        validate_branch_name(name)
    except InvalidRefError:
        return False
    return True


def read_head(repo_git: Path) -> Optional[HeadState]:
    """Read HEAD; return HeadState or None if no HEAD file or unreadable content."""
    raw = read_text_safe(_head_file(repo_git))
    if raw is None:
        return None
    raw = raw.strip()
    if raw.startswith("ref:"):
        refname = raw[4:].strip()
        return HeadState("ref", refname)
    if _is_hex_sha(raw):
        return HeadState("detached", raw.lower())
    return None


def write_head_ref(repo_git: Path, refname: str) -> None:
    """Set HEAD to symbolic ref (e.g. refs/heads/main)."""
    if not refname.startswith(REF_HEADS_PREFIX):
        raise InvalidRefError(f"symbolic ref must be refs/heads/... (got {refname})")
    validate_branch_name(refname[len(REF_HEADS_PREFIX) :])
    write_text_atomic(_head_file(repo_git), f"ref: {refname}\n")


def write_head_detached(repo_git: Path, commit_hash: str) -> None:
    """Set HEAD to detached commit hash (40 hex chars)."""
    if not _is_hex_sha(commit_hash):
        raise InvalidRefError(f"invalid commit hash: {commit_hash}")
    write_text_atomic(_head_file(repo_git), commit_hash.lower() + "\n")


def branch_exists(repo_git: Path, name: str) -> bool:
    """True if refs/heads/<name> exists; an unsafe name never exists."""
    if not is_valid_branch_name(name):
        return False
    return _branch_path(repo_git, name).is_file()


def resolve_branch(repo_git: Path, name: str) -> Optional[str]:
    """Return the branch's commit hash, '' for a branch with no commits, None if missing."""
    if not is_valid_branch_name(name):
        return None
    content = read_text_safe(_branch_path(repo_git, name))
    if content is None:
        return None
    return content.strip().lower()


def set_branch(repo_git: Path, name: str, commit_hash: str) -> None:
    """Write branch to point at commit_hash (40 hex, or '' for an empty branch)."""
    if commit_hash and not _is_hex_sha(commit_hash):
        raise InvalidRefError(f"invalid hash: {commit_hash}")
    path = _branch_path(repo_git, name)
    path.parent.mkdir(parents=True, exist_ok=True)
    write_text_atomic(path, commit_hash.lower() + "\n" if commit_hash else "")


def delete_branch(repo_git: Path, name: str) -> bool:
    """Remove the branch file; return False if it did not exist."""
    if not is_valid_branch_name(name):
        return False
    path = _branch_path(repo_git, name)
    if not path.is_file():
        return False
    path.unlink()
    heads = repo_git / REF_HEADS_PREFIX.rstrip("/")
    parent = path.parent
    while parent != heads and parent.exists() and not any(parent.iterdir()):
        parent.rmdir()
        parent = parent.parent
    return True


def current_branch_name(repo_git: Path) -> Optional[str]:
    """Return current branch name (e.g. main) or None if detached or unreadable."""
    state = read_head(repo_git)
    if state is None:
        return None
    return state.branch


def head_commit(repo_git: Path) -> Optional[str]:
    """Resolve HEAD to commit hash; None if no HEAD, missing branch or branch without commits."""
    state = read_head(repo_git)
    if state is None:
        return None
    if state.kind == "detached":
        return state.value
    branch = state.branch
    if branch is None:
        return None
    return resolve_branch(repo_git, branch) or None


def advance_head(repo_git: Path, commit_hash: str) -> Optional[str]:
    """Move HEAD's branch to commit_hash, or HEAD itself when detached.

    Returns the branch name that moved, None when HEAD was detached.
    """
    state = read_head(repo_git)
    if state is None:
        raise NotARepositoryError("HEAD is missing or unreadable")
    if state.kind == "detached":
        write_head_detached(repo_git, commit_hash)
        return None
    branch = state.branch
    if branch is None:
        raise InvalidRefError(f"HEAD points outside refs/heads: {state.value}")
    set_branch(repo_git, branch, commit_hash)
    return branch


def list_branches(repo_git: Path) -> List[str]:
    """List branch names under refs/heads (nested names like feature/x included)."""
    heads_dir = repo_git / REF_HEADS_PREFIX.rstrip("/")
    if not heads_dir.is_dir():
        return []
    return sorted(
        p.relative_to(heads_dir).as_posix()
        for p in heads_dir.rglob("*")
        if p.is_file() and not p.name.startswith(".")
    )
