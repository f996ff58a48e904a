"""Clone logic: copy a working directory that holds a .mygit repository."""

from __future__ import annotations

import shutil
from pathlib import Path

from .errors import MygitError, NotARepositoryError
from .repo import Repository


def clone(src_path: str | Path, dest_path: str | Path) -> Repository:
    """Recursively copy src (working files and .mygit) to dest_path; return the new repo."""
    src = Path(src_path).resolve()
    src_repo = Repository(src)
    if not src_repo.git_dir.is_dir():
        raise NotARepositoryError(f"The source path is not a valid repository: {src}")
    dest = Path(dest_path).resolve()
    if dest.exists() and any(dest.iterdir()):
        raise MygitError(f"destination path {dest} already exists and is not an empty directory")
    if dest == src or src in dest.parents:
        raise MygitError(f"cannot clone {src} into itself")
    shutil.copytree(src, dest, dirs_exist_ok=True)
    return Repository(dest)
