"""Registry metadata model."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PackageMetadata:
    """Enrichment data for a single package name.

    Every field is an empty string when the registry lookup failed.
    """

    latest_version: str = ""
    license: str = ""
    description: str = ""
    registry_link: str = ""

    @classmethod
    def empty(cls) -> PackageMetadata:
        return cls()

    def to_dict(self) -> dict[str, str]:
        return {
            "latestVersion": self.latest_version,
            "license": self.license,
            "description": self.description,
            "npmLink": self.registry_link,
        }
