"""Custom exceptions for mygit."""

from __future__ import annotations


class MygitError(Exception):
    """Base exception for mygit."""

    pass


class NotARepositoryError(MygitError):
    """Raised when not in a mygit repository."""

    pass


class NotFoundError(MygitError):
    """Raised when a file, branch, object or digest does not exist."""

    pass


class ObjectNotFoundError(NotFoundError):
    """Raised when an object is not found in the object store."""

    pass


class BranchNotFoundError(NotFoundError):
    """Raised when a branch name has no ref file."""

    pass


class FileNotStagedError(NotFoundError):
    """Raised when a file has no entry in the index."""

    pass


class InvalidStateError(MygitError):
    """Raised when the repository is not in a state the command can act on."""

    pass


class NothingToCommitError(InvalidStateError):
    """Raised when the staging area is empty or missing."""

    pass


class NoCommonAncestorError(InvalidStateError):
    """Raised when two commits share no ancestor."""

    pass


class AmbiguousRefError(MygitError):
    """Raised when a digest prefix matches multiple objects."""

    pass


class InvalidRefError(MygitError):
    """Raised when a ref name or rev cannot be used or resolved."""

    pass


class PathOutsideRepoError(MygitError):
    """Raised when a path would escape the repository root."""

    pass


class InvalidConfigKeyError(MygitError):
    """Raised when a config key is invalid (e.g. not section.option)."""

    pass


class StorageError(MygitError):
    """Raised when reading or writing repository files fails."""

    pass
