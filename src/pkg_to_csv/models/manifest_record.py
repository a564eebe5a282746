"""Manifest record model."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class ManifestRecord:
    """A discovered package.json file together with its parsed content."""

    file_path: Path
    project_name: str
    content: dict[str, Any] = field(compare=False, repr=False)

    def __post_init__(self) -> None:
        if not self.file_path.is_absolute():
            raise ValueError("file_path must be absolute")
        if not self.project_name:
            raise ValueError("project_name must be non-empty")

    @property
    def directory(self) -> Path:
        return self.file_path.parent

    @classmethod
    def from_content(cls, file_path: Path, content: dict[str, Any]) -> ManifestRecord:
        """Build a record, naming the project after its directory when unnamed."""
        declared = content.get("name")
        if isinstance(declared, str) and declared:
            name = declared
        else:
            name = file_path.parent.name or str(file_path.parent)
        return cls(file_path=file_path, project_name=name, content=content)
