"""Dependency model."""

from __future__ import annotations

from dataclasses import dataclass

PRODUCTION_SECTION = "dependencies"
DEVELOPMENT_SECTION = "devDependencies"

_VALID_SCOPES = {PRODUCTION_SECTION, DEVELOPMENT_SECTION}


@dataclass(frozen=True)
class Dependency:
    """A dependency declared in a manifest, with its version range verbatim."""

    name: str
    version_range: str
    scope: str

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Dependency name must be non-empty")
        if self.scope not in _VALID_SCOPES:
            raise ValueError(f"Invalid scope: {self.scope}")

    @property
    def is_development(self) -> bool:
        return self.scope == DEVELOPMENT_SECTION

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "version": self.version_range,
            "type": self.scope,
        }
