"""Commit graph helpers: parents, first-parent history walk, common ancestor search."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Generator, Optional, Set, Tuple

from .errors import ObjectNotFoundError
from .objects import Commit
from .repo import Repository


def get_commit_parents(repo: Repository, commit_hash: str) -> list[str]:
    """Return all parent hashes of a commit in record order; [] if the object is missing."""
    try:
        commit = repo.read_commit(commit_hash)
    except ObjectNotFoundError:
        return []
    return [p for p in commit.parent_hashes if p]


def walk_history(
    repo: Repository,
    start_hash: Optional[str],
) -> Generator[Tuple[str, Commit], None, None]:
    """Yield (hash, commit) from start_hash following the first parent only.

    A merge commit's second parent is not visited. Stops at a root commit or
    at the first hash whose object cannot be read.
    """
    h = start_hash
    while h:
        try:
            commit = repo.read_commit(h)
        except ObjectNotFoundError:
            return
        yield h, commit
        h = commit.first_parent


@dataclass
class Frontier:
    """One side of the ancestor search: BFS queue plus the nodes it has visited."""
    queue: Deque[str] = field(default_factory=deque)
    visited: Set[str] = field(default_factory=set)

    @classmethod
    def seeded(cls, start: str) -> "Frontier":
        return cls(deque([start]), set())


def _bfs_step(repo: Repository, side: Frontier, other: Frontier) -> Optional[str]:
    """Pop one node from side; return it if other has visited it, else expand its parents."""
    if not side.queue:
        return None
    h = side.queue.popleft()
    if h in other.visited:
        return h
    side.visited.add(h)
    side.queue.extend(get_commit_parents(repo, h))
    return None


def find_common_ancestor(repo: Repository, a: str, b: str) -> Optional[str]:
    """Find a common ancestor of a and b by alternating BFS steps from each side.

    The first node one side pops that the other side has already visited is
    returned. With several merge paths this is a common ancestor, not
    necessarily the nearest one. Returns None if the searches never meet.
    """
    side_a = Frontier.seeded(a)
    side_b = Frontier.seeded(b)
    while side_a.queue or side_b.queue:
        hit = _bfs_step(repo, side_a, side_b)
        if hit is not None:
            return hit
        hit = _bfs_step(repo, side_b, side_a)
        if hit is not None:
            return hit
    return None
