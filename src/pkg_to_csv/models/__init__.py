"""Data models for manifest records, dependencies and report rows."""

from __future__ import annotations

from .dependency import Dependency
from .manifest_record import ManifestRecord
from .package_metadata import PackageMetadata
from .result_row import ResultRow

__all__ = [
    "Dependency",
    "ManifestRecord",
    "PackageMetadata",
    "ResultRow",
]
