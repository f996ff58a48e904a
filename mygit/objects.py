"""Stored objects: Blob, Snapshot, Commit with serialization/parsing."""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Tuple

from .constants import OBJ_BLOB, OBJ_COMMIT, OBJ_SNAPSHOT
from .util import sha1_hash


class StoredObject:
    """Base object: a kind tag plus the exact bytes that get hashed and stored."""

    def __init__(self, obj_type: str, content: bytes) -> None:
        self.type = obj_type
        self.content = content

    def hash_id(self) -> str:
        """SHA-1 of the raw content (no header)."""
        return sha1_hash(self.content)

    def serialize(self) -> bytes:
        """Bytes for storage: the content itself, uncompressed."""
        return self.content


class Blob(StoredObject):
    """Blob object: raw file content."""

    def __init__(self, content: bytes) -> None:
        super().__init__(OBJ_BLOB, content)


class Snapshot(StoredObject):
    """Flat snapshot ("tree"): ordered (digest, filename) pairs, one per line.

    Filenames may contain '/' but are never split into sub-snapshots.
    """

    def __init__(self, entries: List[Tuple[str, str]] | None = None) -> None:
        self.entries: List[Tuple[str, str]] = list(entries or [])
        super().__init__(OBJ_SNAPSHOT, self._serialize_entries())

    def _serialize_entries(self) -> bytes:
        return "".join(f"{sha} {name}\n" for sha, name in self.entries).encode()

    def iterate(self) -> Iterator[Tuple[str, str]]:
        """Yield (path, digest) pairs in stored order."""
        for sha, name in self.entries:
            yield name, sha

    def as_mapping(self) -> Dict[str, str]:
        """filename -> digest; a later entry for the same name wins."""
        return {name: sha for name, sha in self.iterate()}

    @classmethod
    def from_content(cls, content: bytes) -> "Snapshot":
        snap = cls()
        for line in content.decode("utf-8", errors="replace").splitlines():
            parts = line.split(" ", 1)
            if len(parts) == 2:
                snap.entries.append((parts[0], parts[1]))
        snap.content = content  # keep exact bytes for correct hash
        return snap


class Commit(StoredObject):
    """Commit record: tree, 0-2 parents, author, date, blank line, message."""

    def __init__(
        self,
        tree_hash: str,
        parent_hashes: List[str],
        author: str,
        date: str,
        message: str,
    ) -> None:
        self.tree_hash = tree_hash
        self.parent_hashes = list(parent_hashes)
        self.author = author
        self.date = date
        self.message = message
        super().__init__(OBJ_COMMIT, self._serialize_commit())

    def _serialize_commit(self) -> bytes:
        lines = [f"tree {self.tree_hash}"]
        for p in self.parent_hashes:
            lines.append(f"parent {p}")
        lines.append(f"author {self.author}")
        lines.append(f"date {self.date}")
        lines.append("")
        lines.append(self.message)
        return ("\n".join(lines) + "\n").encode()

    @property
    def first_parent(self) -> Optional[str]:
        return self.parent_hashes[0] if self.parent_hashes else None

    @classmethod
    def from_content(cls, content: bytes) -> "Commit":
        """Parse commit record; preserve exact bytes for hash consistency."""
        text = content.decode("utf-8", errors="replace")
        lines = text.split("\n")
        tree_hash = ""
        parent_hashes: List[str] = []
        author = ""
        date = ""
        message_start = len(lines)
        for i, line in enumerate(lines):
            if line.startswith("tree "):
                tree_hash = line[5:].strip()
            elif line.startswith("parent "):
                parent_hashes.append(line[7:].strip())
            elif line.startswith("author "):
                author = line[7:]
            elif line.startswith("date "):
                date = line[5:]
            elif line == "":
                message_start = i + 1
                break
        message = "\n".join(lines[message_start:])
        if message.endswith("\n"):
            message = message[:-1]
        commit = cls.__new__(cls)
        commit.tree_hash = tree_hash
        commit.parent_hashes = parent_hashes
        commit.author = author
        commit.date = date
        commit.message = message
        commit.content = content
        commit.type = OBJ_COMMIT
        return commit
