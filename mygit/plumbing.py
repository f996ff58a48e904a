"""Plumbing commands: hash-object, cat-file, write-snapshot, commit-tree, rev-parse, merge-base."""

from __future__ import annotations

import re
from typing import List, Optional

from .config import get_user_identity
from .constants import OBJ_BLOB, OBJ_COMMIT, OBJ_SNAPSHOT
from .errors import InvalidRefError, ObjectNotFoundError
from .graph import find_common_ancestor
from .objects import Blob, Commit
from .objectstore import is_full_digest
from .refs import head_commit, resolve_branch
from .repo import Repository
from .util import current_date, read_bytes

_SNAPSHOT_LINE = re.compile(r"[0-9a-f]{40} .+")


def rev_parse(repo: Repository, name: str) -> str:
    """Resolve HEAD, a branch name, or a (possibly abbreviated) digest to a full digest."""
    repo.require_repo()
    name = name.strip()
    if name == "HEAD":
        h = head_commit(repo.git_dir)
        if h is None:
            raise InvalidRefError("HEAD does not resolve to a commit")
        return h
    branch = resolve_branch(repo.git_dir, name)
    if branch is not None:
        if not branch:
            raise InvalidRefError(f"branch '{name}' has no commits")
        return branch
    try:
        return repo.odb.resolve_prefix(name)
    except ObjectNotFoundError:
        raise InvalidRefError(f"invalid ref or object: {name}") from None


def hash_object(repo: Repository, path: str, write: bool) -> str:
    """Compute blob hash of file; optionally write to the object store. Return hash."""
    repo.require_repo()
    p = repo.safe_path(path)
    if not p.is_file():
        raise FileNotFoundError(f"path {path} is not a file")
    blob = Blob(read_bytes(p))
    if write:
        return repo.store_object(blob)
    return blob.hash_id()


def object_kind(content: bytes) -> str:
    """Guess an object's kind from its bytes (objects carry no type header)."""
    text = content.decode("utf-8", errors="replace")
    if text.startswith("tree "):
        c = Commit.from_content(content)
        if is_full_digest(c.tree_hash) and c.author and c.date:
            return OBJ_COMMIT
        return OBJ_BLOB
    lines = text.splitlines()
    if lines and all(_SNAPSHOT_LINE.fullmatch(line) for line in lines):
        return OBJ_SNAPSHOT
    return OBJ_BLOB


def cat_file(repo: Repository, obj_ref: str) -> bytes:
    """Return the raw bytes of an object named by ref, branch or digest."""
    repo.require_repo()
    return repo.load_object(rev_parse(repo, obj_ref))


def write_snapshot(repo: Repository) -> str:
    """Store the index as a flat snapshot; return its digest. Does not commit."""
    repo.require_repo()
    return repo.create_snapshot_from_index()


def commit_tree(
    repo: Repository,
    tree_hash: str,
    parent_hashes: List[str],
    message: str,
    author: Optional[str] = None,
    date: Optional[str] = None,
) -> str:
    """Create and store a commit record; return its hash. Does not update refs."""
    repo.require_repo()
    if not repo.odb.exists(tree_hash):
        raise ObjectNotFoundError(f"snapshot {tree_hash} not found")
    c = Commit(
        tree_hash=tree_hash,
        parent_hashes=parent_hashes,
        author=author or get_user_identity(repo),
        date=date or current_date(),
        message=message,
    )
    return repo.store_object(c)


def merge_base(repo: Repository, a: str, b: str) -> Optional[str]:
    """Resolve a and b, then return a common ancestor (or None)."""
    repo.require_repo()
    return find_common_ancestor(repo, rev_parse(repo, a), rev_parse(repo, b))
