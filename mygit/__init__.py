"""MyGit: a minimal version control system (init, add, commit, log, branch, checkout, merge, diff, clone)."""

from .repo import Repository
from .errors import MygitError, NotARepositoryError

__all__ = ["Repository", "MygitError", "NotARepositoryError"]
