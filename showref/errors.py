"""Custom exceptions for showref."""

from __future__ import annotations

from .constants import EXIT_FATAL


class ShowRefError(Exception):
    """Base exception for showref."""

    pass


class FatalError(ShowRefError):
    """Unrecoverable error: the command stops and exits with exit_code."""

    exit_code = EXIT_FATAL


class NotARepositoryError(FatalError):
    """Raised when not in a git repository."""

    pass


class UsageError(FatalError):
    """Raised when the command line is missing a required argument."""

    pass


class InvalidRefError(FatalError):
    """Raised by --verify when a ref name does not resolve."""

    pass


class BadRefError(FatalError):
    """Raised when a ref points at an object missing from the object store."""

    pass


class ObjectNotFoundError(ShowRefError):
    """Raised when an object is not found in the ODB."""

    pass


class IdxError(ShowRefError):
    """Raised when pack index file is invalid or unsupported."""

    pass
