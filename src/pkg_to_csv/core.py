"""Core pipeline entrypoints.

This module does not depend on either configuration front-end (flags or the
interactive wizard) so both can drive the same run.
"""

from __future__ import annotations

import asyncio
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

import structlog

from .config import RunConfig, Settings, load_settings
from .discovery import locate_manifests
from .errors import NoManifestsFoundError
from .models import Dependency, ManifestRecord, PackageMetadata, ResultRow
from .parsers.package_json import parse as parse_package_json
from .registry import RegistryClient
from .report import write_csv
from .summary import render_table

logger = structlog.get_logger(__name__)

NO_DEPENDENCIES_MESSAGE = "No dependencies found"


@dataclass
class RunResult:
    """Outcome of a completed run."""

    manifests: list[ManifestRecord]
    rows: list[ResultRow] = field(default_factory=list)
    output_path: Path | None = None

    @property
    def status(self) -> str:
        if not self.rows:
            return "no-dependencies"
        return "csv" if self.output_path else "table"


def project_path(manifest: ManifestRecord, cwd: Path) -> str:
    """Manifest directory relative to the working directory ("" for cwd itself)."""
    rel = os.path.relpath(manifest.directory, cwd)
    return "" if rel == "." else rel


async def collect(
    config: RunConfig,
    client: RegistryClient | None = None,
    settings: Settings | None = None,
    cwd: Path | None = None,
) -> tuple[list[ManifestRecord], list[ResultRow]]:
    """Locate manifests, extract dependencies, enrich once per name, build rows.

    Raises:
        NotFoundError: If the input path does not exist.
        ParseError: If a manifest cannot be parsed.
        NoManifestsFoundError: If no manifest was found.
    """
    base = cwd or Path.cwd()

    manifests = locate_manifests(config.input_path, config.recursive, cwd=base)
    if not manifests:
        raise NoManifestsFoundError(config.input_path)

    per_manifest: list[tuple[ManifestRecord, list[Dependency]]] = []
    all_names: dict[str, None] = {}
    for manifest in manifests:
        logger.debug(
            "processing_manifest",
            project=manifest.project_name,
            path=str(manifest.file_path),
        )
        deps = parse_package_json(manifest.content, config.scope)
        for dep in deps:
            all_names.setdefault(dep.name, None)
        per_manifest.append((manifest, deps))

    metadata: dict[str, PackageMetadata] = {}
    enrichment = config.enrichment
    if enrichment.any() and all_names:
        if client is None:
            client = RegistryClient.from_settings(settings or load_settings())
        metadata = await client.fetch_batch(all_names)
        logger.info("metadata_fetched", packages=len(metadata))

    rows: list[ResultRow] = []
    for manifest, deps in per_manifest:
        rel = project_path(manifest, base)
        for dep in deps:
            rows.append(
                ResultRow.assemble(
                    manifest=manifest,
                    dependency=dep,
                    project_path=rel,
                    metadata=metadata.get(dep.name),
                    latest=enrichment.latest,
                    license=enrichment.license,
                    description=enrichment.description,
                    npm_link=enrichment.npm_link,
                )
            )

    return manifests, rows


async def build_rows(
    config: RunConfig,
    client: RegistryClient | None = None,
    settings: Settings | None = None,
    cwd: Path | None = None,
) -> list[ResultRow]:
    """Return the report rows for ``config``."""
    _, rows = await collect(config, client=client, settings=settings, cwd=cwd)
    return rows


def run(
    config: RunConfig,
    client: RegistryClient | None = None,
    settings: Settings | None = None,
    cwd: Path | None = None,
    out: TextIO | None = None,
) -> RunResult:
    """Run the pipeline and emit the report.

    Writes a CSV when ``config.output_path`` is set, otherwise prints a table.
    A run that finds manifests but no dependencies prints a notice and writes
    nothing.
    """
    out = out or sys.stdout

    manifests, rows = asyncio.run(collect(config, client=client, settings=settings, cwd=cwd))
    print(f"Found {len(manifests)} package.json file(s)", file=out)
    for manifest in manifests:
        print(f"Processing {manifest.project_name} ({manifest.file_path})", file=out)

    result = RunResult(manifests=manifests, rows=rows)
    if not rows:
        print(NO_DEPENDENCIES_MESSAGE, file=out)
        return result

    if config.output_path is not None:
        result.output_path = write_csv(config.output_path, rows, config.enrichment)
        print(f"CSV written to {result.output_path}", file=out)
    else:
        out.write(render_table(rows, config.enrichment))

    return result
