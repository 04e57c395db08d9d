"""Exception types raised at the I/O boundaries of ``monthly_recap``.

Row validation and fuzzy matching never raise; their problems travel as data
on the parsed candidates. Only file reading and the record store raise the
errors below.
"""

from __future__ import annotations

from collections.abc import Iterable


class RecapError(Exception):
    """Base class for all errors surfaced to callers of ``monthly_recap``."""


class FormatError(RecapError):
    """The uploaded file cannot be parsed at all (too short, wrong type, not text)."""


class StorageError(RecapError):
    """Generic persistence failure (connectivity, constraint, malformed payload)."""


class DuplicateNameError(StorageError):
    """A product name collides with an existing catalog record.

    ``names`` lists the colliding names when known. ``duplicates`` carries the
    names a bulk import had already skipped before the failing write, so the
    caller can still report them.
    """

    def __init__(
        self,
        message: str = "A product with this name already exists",
        *,
        names: Iterable[str] = (),
        duplicates: Iterable[str] = (),
    ) -> None:
        super().__init__(message)
        self.names: tuple[str, ...] = tuple(names)
        self.duplicates: tuple[str, ...] = tuple(duplicates)


class NotFoundError(StorageError):
    """The record addressed by id does not exist."""


class InvalidRecordError(RecapError):
    """A single record entered by hand failed validation.

    ``errors`` maps each offending field to its message.
    """

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__("; ".join(errors.values()))
        self.errors: dict[str, str] = dict(errors)


__all__ = [
    "DuplicateNameError",
    "FormatError",
    "InvalidRecordError",
    "NotFoundError",
    "RecapError",
    "StorageError",
]
