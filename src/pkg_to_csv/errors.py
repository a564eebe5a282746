"""Error hierarchy for the manifest-to-report pipeline.

Discovery and parse failures abort a run. Registry lookups never raise one of
these: a failed lookup degrades to empty metadata instead.
"""

from __future__ import annotations

from pathlib import Path


class PkgToCsvError(RuntimeError):
    """Base error for failures that abort a run."""


class NotFoundError(PkgToCsvError):
    """Raised when the input path does not exist."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Cannot find {path}")


class ParseError(PkgToCsvError):
    """Raised when a manifest is not valid JSON or has an invalid shape."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to read or parse {path}: {reason}")


class NoManifestsFoundError(PkgToCsvError):
    """Raised when discovery yields zero manifests."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        super().__init__("No package.json files found")


class OutputWriteError(PkgToCsvError):
    """Raised when the report cannot be written to its destination."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Failed to write {path}: {reason}")
