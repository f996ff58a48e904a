"""Helper functions: safe file ops, read/write bytes, hashing, author and date."""

from __future__ import annotations

import getpass
import hashlib
import os
import tempfile
import time
from pathlib import Path
from typing import List, Optional

from .constants import DATE_FORMAT


def sha1_hash(data: bytes) -> str:
    """Compute SHA-1 hex digest of data."""
    return hashlib.sha1(data).hexdigest()


def read_bytes(path: Path) -> bytes:
    """Read file as bytes. Raises FileNotFoundError if not found."""
    return path.read_bytes()


def write_bytes_atomic(path: Path, data: bytes) -> None:
    """Write bytes to file atomically (temp then replace)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=".tmp_")
    try:
        os.write(fd, data)
        os.close(fd)
        os.replace(tmp, path)
    except Exception:
        try:
            os.close(fd)
        except OSError:
            pass
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise


def write_bytes(path: Path, data: bytes) -> None:
    """Write bytes to file. Alias for write_bytes_atomic."""
    write_bytes_atomic(path, data)


def write_text_atomic(path: Path, text: str) -> None:
    """Write text to file atomically."""
    write_bytes(path, text.encode("utf-8"))


def read_text_safe(path: Path) -> Optional[str]:
    """Read file as text; return None if not found or error."""
    try:
        return path.read_text(encoding="utf-8")
    except (FileNotFoundError, OSError, UnicodeDecodeError):
        return None


def split_lines(data: bytes) -> List[str]:
    """Decode bytes and split into lines without terminators."""
    return data.decode("utf-8", errors="replace").splitlines()


def current_date() -> str:
    """Commit date: MYGIT_AUTHOR_DATE if set, else local time as yyyy-MM-dd HH:mm:ss."""
    val = os.environ.get("MYGIT_AUTHOR_DATE")
    if val and val.strip():
        return val.strip()
    return time.strftime(DATE_FORMAT, time.localtime())


def user_name_from_env() -> str:
    """Author name from MYGIT_AUTHOR_NAME, else the OS login name, else 'unknown'."""
    val = os.environ.get("MYGIT_AUTHOR_NAME")
    if val and val.strip():
        return val.strip()
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "unknown"


def normalize_path(repo_root: Path, path: str) -> Path:
    """Resolve path relative to repo root; reject paths escaping root."""
    repo_root = repo_root.resolve()
    resolved = (repo_root / path).resolve()
    try:
        resolved.relative_to(repo_root)
    except ValueError:
        raise ValueError(f"path escapes repository: {path}") from None
    return resolved
