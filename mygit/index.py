"""Staging area: newline-delimited '<digest> <filename>' records in .mygit/index."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple

from .constants import INDEX_FILENAME
from .util import read_text_safe, write_text_atomic

IndexEntry = Tuple[str, str]  # (digest, filename)


def _index_path(repo_git: Path) -> Path:
    return repo_git / INDEX_FILENAME


def index_exists(repo_git: Path) -> bool:
    return _index_path(repo_git).is_file()


def _parse_entries(text: Optional[str]) -> List[IndexEntry]:
    out: List[IndexEntry] = []
    if not text:
        return out
    for line in text.splitlines():
        parts = line.split(" ", 1)
        if len(parts) == 2 and parts[0] and parts[1]:
            out.append((parts[0], parts[1]))
    return out


def load_index(repo_git: Path) -> List[IndexEntry]:
    """Load staged entries in file order. Missing index -> []."""
    return _parse_entries(read_text_safe(_index_path(repo_git)))


def save_index(repo_git: Path, entries: Iterable[IndexEntry]) -> None:
    """Rewrite the index with entries (atomic)."""
    text = "".join(f"{sha} {name}\n" for sha, name in entries)
    write_text_atomic(_index_path(repo_git), text)


def append_entry(repo_git: Path, sha: str, name: str) -> None:
    """Append one record. The index is append-only until cleared."""
    path = _index_path(repo_git)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        f.write(f"{sha} {name}\n")


def clear_index(repo_git: Path) -> None:
    """Empty the index (file kept, zero length)."""
    write_text_atomic(_index_path(repo_git), "")


def remove_entries(repo_git: Path, names: Iterable[str]) -> Set[str]:
    """Drop every record for the given filenames; return the names that were found."""
    wanted = set(names)
    entries = load_index(repo_git)
    kept = [(sha, name) for sha, name in entries if name not in wanted]
    found = {name for _sha, name in entries if name in wanted}
    if found:
        save_index(repo_git, kept)
    return found


def staged_hash(entries: Iterable[IndexEntry], filename: str) -> Optional[str]:
    """Digest of the first record for filename, or None if not staged."""
    for sha, name in entries:
        if name == filename:
            return sha
    return None
