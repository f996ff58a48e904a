"""Constants for mygit: repository layout, default branch, record formats."""

from __future__ import annotations

# Repository directory inside the working root
GIT_DIR = ".mygit"

# Default branch name created by init
DEFAULT_BRANCH = "main"

# Paths under .mygit
OBJECTS_DIRNAME = "objects"
REFS_DIRNAME = "refs"
REF_HEADS_PREFIX = "refs/heads/"
HEAD_FILE = "HEAD"
INDEX_FILENAME = "index"
CONFIG_FILENAME = "config"

# Files in the working root
IGNORE_FILE = ".mygitignore"
MERGE_OUTPUT_FILE = "merged_file.txt"

# Object kinds (all stored as raw bytes; kind only matters to readers)
OBJ_BLOB = "blob"
OBJ_SNAPSHOT = "snapshot"
OBJ_COMMIT = "commit"

# Commit record date format (yyyy-MM-dd HH:mm:ss)
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Merge conflict markers
MARKER_CURRENT = "<<<<<<< CURRENT BRANCH"
MARKER_SEPARATOR = "======="
MARKER_SOURCE = ">>>>>>> SOURCE BRANCH"

# Minimum prefix length for abbreviated digests
MIN_PREFIX_LEN = 4

# SHA-1 hex length
SHA1_HEX_LEN = 40
