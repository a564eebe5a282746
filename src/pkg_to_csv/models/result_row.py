"""Report row model."""

from __future__ import annotations

from dataclasses import dataclass

from .dependency import Dependency
from .manifest_record import ManifestRecord
from .package_metadata import PackageMetadata

BASE_COLUMNS = ("projectName", "projectPath", "package", "version", "type")


@dataclass(frozen=True)
class ResultRow:
    """One report line for a (manifest, dependency) pair.

    The metadata fields stay ``None`` unless their enrichment was requested for
    the run.
    """

    project_name: str
    project_path: str
    package: str
    version: str
    scope: str
    latest_version: str | None = None
    license: str | None = None
    description: str | None = None
    registry_link: str | None = None

    @classmethod
    def assemble(
        cls,
        *,
        manifest: ManifestRecord,
        dependency: Dependency,
        project_path: str,
        metadata: PackageMetadata | None = None,
        latest: bool = False,
        license: bool = False,
        description: bool = False,
        npm_link: bool = False,
    ) -> ResultRow:
        meta = metadata if metadata is not None else PackageMetadata.empty()
        return cls(
            project_name=manifest.project_name,
            project_path=project_path,
            package=dependency.name,
            version=dependency.version_range,
            scope=dependency.scope,
            latest_version=meta.latest_version if latest else None,
            license=meta.license if license else None,
            description=meta.description if description else None,
            registry_link=meta.registry_link if npm_link else None,
        )

    def to_dict(self) -> dict[str, str]:
        """Return the populated columns in report order."""
        data = {
            "projectName": self.project_name,
            "projectPath": self.project_path,
            "package": self.package,
            "version": self.version,
            "type": self.scope,
        }
        optional = (
            ("latestVersion", self.latest_version),
            ("license", self.license),
            ("description", self.description),
            ("npmLink", self.registry_link),
        )
        for column, value in optional:
            if value is not None:
                data[column] = value
        return data
