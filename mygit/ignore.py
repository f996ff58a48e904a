"""Ignore engine: .mygitignore patterns with * and ? wildcards."""

from __future__ import annotations

import fnmatch
from pathlib import Path
from typing import List, Optional

from .constants import GIT_DIR, IGNORE_FILE
from .util import read_text_safe


def _match_pattern(pat: str, rel_path: str) -> bool:
    """Match one pattern: '/' in pat = whole path from root; else basename or whole path."""
    if not pat:
        return False
    rel_path = rel_path.replace("\\", "/")
    if "/" in pat:
        pat = pat.strip("/")
        if rel_path == pat or rel_path.startswith(pat + "/"):
            return True
        return fnmatch.fnmatchcase(rel_path, pat)
    if fnmatch.fnmatchcase(rel_path, pat):
        return True
    parts = rel_path.split("/")
    return any(fnmatch.fnmatchcase(part, pat) for part in parts)


class IgnoreMatcher:
    """Match paths against ignore patterns (blank/# lines skipped, * and ?)."""

    def __init__(self, patterns: List[str]) -> None:
        self.patterns = patterns

    def is_ignored(self, rel_path: str) -> bool:
        """Return True if rel_path (relative to repo root) should be ignored."""
        rel_path = rel_path.replace("\\", "/")
        if rel_path.startswith("./"):
            rel_path = rel_path[2:]
        if rel_path == GIT_DIR or rel_path.startswith(GIT_DIR + "/"):
            return True
        return any(_match_pattern(pat, rel_path) for pat in self.patterns)


def _parse_patterns(text: Optional[str]) -> List[str]:
    out: List[str] = []
    if not text:
        return out
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        out.append(line)
    return out


def load_ignore_patterns(repo_root: Path) -> IgnoreMatcher:
    """Load patterns from .mygitignore in the working root."""
    return IgnoreMatcher(_parse_patterns(read_text_safe(repo_root / IGNORE_FILE)))
