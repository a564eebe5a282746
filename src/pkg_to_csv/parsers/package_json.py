"""Parse package.json and extract dependencies for the requested scope."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..config import Scope
from ..errors import ParseError
from ..models import Dependency
from ..validators.package_json import validate_manifest


def load(path: Path) -> dict[str, Any]:
    """Read and validate a package.json file.

    Raises:
        ParseError: If the file cannot be read, is not JSON, or is not a
            manifest-shaped object.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ParseError(path, str(exc)) from exc

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(path, f"invalid JSON ({exc.msg} at line {exc.lineno})") from exc

    return validate_manifest(data, path)


def parse(content: dict[str, Any], scope: Scope = Scope.BOTH) -> list[Dependency]:
    """Return dependencies from the sections selected by ``scope``.

    Production entries come before development entries, each in the order the
    manifest declares them. Other sections (peer, optional, bundled) are
    ignored.
    """
    deps: list[Dependency] = []
    for section in scope.sections:
        entries = content.get(section) or {}
        for name, version in entries.items():
            deps.append(Dependency(name=name, version_range=str(version), scope=section))

    return deps
