"""Repository: ties paths, object store, refs, and index together."""

from __future__ import annotations

from pathlib import Path
from typing import List

from .constants import (
    DEFAULT_BRANCH,
    GIT_DIR,
    HEAD_FILE,
    INDEX_FILENAME,
    OBJECTS_DIRNAME,
    REF_HEADS_PREFIX,
    REFS_DIRNAME,
)
from .errors import NotARepositoryError, PathOutsideRepoError
from .index import IndexEntry, load_index as index_load, save_index as index_save
from .objects import Commit, Snapshot, StoredObject
from .objectstore import ObjectStore
from .refs import set_branch, write_head_ref
from .util import normalize_path


class Repository:
    """mygit repository: working root, .mygit dir, objects, refs, index."""

    def __init__(self, path: str | Path = ".") -> None:
        self.path = Path(path).resolve()
        self.git_dir = self.path / GIT_DIR
        self.objects_dir = self.git_dir / OBJECTS_DIRNAME
        self.refs_dir = self.git_dir / REFS_DIRNAME
        self.heads_dir = self.git_dir / REF_HEADS_PREFIX.rstrip("/")
        self.head_file = self.git_dir / HEAD_FILE
        self.index_file = self.git_dir / INDEX_FILENAME
        self.odb = ObjectStore(self.objects_dir)

    def require_repo(self) -> None:
        """Raise NotARepositoryError if not a mygit repo."""
        if not self.git_dir.is_dir():
            raise NotARepositoryError(f"not a mygit repository: {self.path}")

    def safe_path(self, path: str) -> Path:
        """Resolve path relative to repo root; reject escaping."""
        try:
            return normalize_path(self.path, path)
        except ValueError as e:
            raise PathOutsideRepoError(str(e)) from e

    def rel_path(self, full: Path) -> str:
        """Path relative to the working root, '/'-separated."""
        return full.resolve().relative_to(self.path).as_posix()

    def init(self) -> bool:
        """Create new repo with an empty main branch. Return False if already exists."""
        if self.git_dir.exists():
            return False
        self.git_dir.mkdir(parents=True)
        self.objects_dir.mkdir()
        self.heads_dir.mkdir(parents=True)
        set_branch(self.git_dir, DEFAULT_BRANCH, "")
        write_head_ref(self.git_dir, f"{REF_HEADS_PREFIX}{DEFAULT_BRANCH}")
        index_save(self.git_dir, [])
        print(f"Initialized empty MyGit repository in {self.git_dir}")
        return True

    def load_index(self) -> List[IndexEntry]:
        """Load staged (digest, filename) entries in order."""
        return index_load(self.git_dir)

    def store_object(self, obj: StoredObject) -> str:
        """Store object in the object store; return its digest."""
        return self.odb.put(obj.serialize())

    def load_object(self, sha: str) -> bytes:
        """Load raw object bytes by full digest."""
        return self.odb.get(sha)

    def read_commit(self, sha: str) -> Commit:
        """Load and parse a commit record."""
        return Commit.from_content(self.load_object(sha))

    def read_snapshot(self, sha: str) -> Snapshot:
        """Load and parse a flat snapshot."""
        return Snapshot.from_content(self.load_object(sha))

    def create_snapshot_from_index(self) -> str:
        """Store the current index as a snapshot; return its digest."""
        return self.store_object(Snapshot(self.load_index()))
