"""Object store: write-once raw objects under .mygit/objects/<digest>, prefix lookup."""

from __future__ import annotations

from pathlib import Path
from typing import List

from .constants import MIN_PREFIX_LEN, SHA1_HEX_LEN
from .errors import AmbiguousRefError, ObjectNotFoundError
from .util import sha1_hash, write_bytes

_HEX = "0123456789abcdef"


def is_full_digest(s: str) -> bool:
    """Return True if s is a full 40-char lowercase-able hex digest."""
    return len(s) == SHA1_HEX_LEN and all(c in _HEX for c in s.lower())


class ObjectStore:
    """Content-addressed storage: one uncompressed file per object, named by its SHA-1.

    Blobs, snapshots and commits share this representation. Reads are not
    checked against the digest; a corrupted file is returned as-is.
    """

    def __init__(self, objects_dir: Path) -> None:
        self.objects_dir = Path(objects_dir)

    def path_for(self, digest: str) -> Path:
        """Path to object file. digest must be full 40-char hex."""
        if not is_full_digest(digest):
            raise ValueError(f"invalid full digest: {digest}")
        return self.objects_dir / digest.lower()

    def exists(self, digest: str) -> bool:
        """Return True if object exists (digest must be full 40-char)."""
        if not is_full_digest(digest):
            return False
        return self.path_for(digest).is_file()

    def put(self, content: bytes) -> str:
        """Store content; return its digest. Existing objects are never rewritten."""
        digest = sha1_hash(content)
        path = self.path_for(digest)
        if path.exists():
            return digest
        write_bytes(path, content)
        return digest

    def get(self, digest: str) -> bytes:
        """Load object bytes by full digest. Raises ObjectNotFoundError."""
        if not is_full_digest(digest):
            raise ObjectNotFoundError(f"object {digest!r} not found")
        path = self.path_for(digest)
        if not path.is_file():
            raise ObjectNotFoundError(f"object {digest} not found")
        return path.read_bytes()

    def prefix_lookup(self, prefix: str) -> List[str]:
        """Return sorted list of full digests that start with prefix. Prefix min 4 chars."""
        if len(prefix) < MIN_PREFIX_LEN:
            return []
        prefix = prefix.lower()
        if not all(c in _HEX for c in prefix):
            return []
        if not self.objects_dir.is_dir():
            return []
        if len(prefix) == SHA1_HEX_LEN:
            return [prefix] if self.exists(prefix) else []
        return sorted(
            f.name
            for f in self.objects_dir.iterdir()
            if f.is_file() and f.name.startswith(prefix) and len(f.name) == SHA1_HEX_LEN
        )

    def resolve_prefix(self, prefix: str) -> str:
        """Resolve prefix to full digest. Raises ObjectNotFoundError or AmbiguousRefError."""
        if is_full_digest(prefix):
            if self.exists(prefix):
                return prefix.lower()
            raise ObjectNotFoundError(f"object {prefix} not found")
        matches = self.prefix_lookup(prefix)
        if not matches:
            raise ObjectNotFoundError(f"object {prefix} not found")
        if len(matches) > 1:
            raise AmbiguousRefError(f"prefix '{prefix}' is ambiguous: {matches}")
        return matches[0]
