"""Manifest discovery utilities."""

from __future__ import annotations

import os
from pathlib import Path

import structlog

from .errors import NotFoundError
from .models import ManifestRecord
from .parsers.package_json import load

logger = structlog.get_logger(__name__)

MANIFEST_NAME = "package.json"
EXCLUDES = {"node_modules"}

# Hard ceiling on walk depth, on top of the visited-directory guard.
MAX_DEPTH = 64


def _should_skip(directory: Path) -> bool:
    return directory.name.startswith(".") or directory.name in EXCLUDES


def _load_record(path: Path) -> ManifestRecord:
    return ManifestRecord.from_content(path, load(path))


def locate_manifests(
    input_path: str | Path,
    recursive: bool = False,
    cwd: Path | None = None,
) -> list[ManifestRecord]:
    """Find and parse package.json files for ``input_path``.

    A path to a ``package.json`` file yields that manifest. A directory yields
    its own ``package.json`` (if any) and, when ``recursive`` is set, the
    manifests of every nested directory that is neither hidden nor
    ``node_modules``, depth-first with each directory before its children.

    Directories are tracked by canonical path so symlink loops are walked once.

    Raises:
        NotFoundError: If ``input_path`` does not exist.
        ParseError: If a discovered manifest cannot be parsed.
    """
    base = cwd or Path.cwd()
    resolved = Path(os.path.normpath(Path(base, input_path).absolute()))

    if not resolved.exists():
        raise NotFoundError(resolved)

    if resolved.is_file():
        if resolved.name != MANIFEST_NAME:
            logger.debug("input_not_manifest", path=str(resolved))
            return []
        return [_load_record(resolved)]

    found: list[ManifestRecord] = []
    visited: set[Path] = set()

    def walk(directory: Path, depth: int) -> None:
        canonical = directory.resolve()
        if canonical in visited:
            logger.debug("directory_already_visited", path=str(directory))
            return
        visited.add(canonical)

        manifest = directory / MANIFEST_NAME
        if manifest.is_file():
            found.append(_load_record(manifest))

        if not recursive:
            return
        if depth >= MAX_DEPTH:
            logger.warning("max_depth_reached", path=str(directory), depth=depth)
            return

        try:
            children = sorted(p for p in directory.iterdir() if p.is_dir())
        except OSError as exc:
            logger.warning("directory_unreadable", path=str(directory), error=str(exc))
            return

        for child in children:
            if _should_skip(child):
                continue
            walk(child, depth + 1)

    walk(resolved, 0)
    logger.info("manifests_located", root=str(resolved), count=len(found))
    return found
