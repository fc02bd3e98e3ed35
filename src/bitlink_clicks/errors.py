"""Fatal errors raised while reading record files."""

from __future__ import annotations

from collections.abc import Iterable


class RecordSourceError(Exception):
    """Base class for failures that abort reading a whole file."""


class UnsupportedFormatError(RecordSourceError):
    def __init__(self, path: str, extension: str, supported: Iterable[str]) -> None:
        self.path = path
        self.extension = extension
        self.supported = tuple(supported)
        shown = extension or "(none)"
        super().__init__(
            f"Unsupported file extension {shown!r} for {path}; "
            f"supported: {', '.join(self.supported)}"
        )


class InputFileNotFoundError(RecordSourceError):
    def __init__(self, path: str, reason: str = "file not found") -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read {path}: {reason}")


class MissingFieldsError(RecordSourceError):
    def __init__(self, path: str, missing: Iterable[str], found: Iterable[str]) -> None:
        self.path = path
        self.missing = list(missing)
        self.found = list(found)
        super().__init__(
            f"{path} is missing required fields {self.missing}; "
            f"found fields {self.found}"
        )


class RecordSyntaxError(RecordSourceError):
    """The file's encoding is not well-formed."""

    def __init__(self, kind: str, path: str, message: str) -> None:
        self.kind = kind
        self.path = path
        self.message = message
        super().__init__(f"Invalid {kind} in {path}: {message}")


class RecordReadError(RecordSourceError):
    """An I/O failure on an already opened file."""

    def __init__(self, path: str, cause: OSError) -> None:
        self.path = path
        super().__init__(f"Failed reading {path}: {cause}")
