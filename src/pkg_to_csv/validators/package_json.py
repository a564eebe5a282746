"""Shape validation for parsed package.json documents."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

from ..errors import ParseError

# npm tolerates null sections and names; they read as absent.
_DEPENDENCY_MAP = {
    "type": ["object", "null"],
    "propertyNames": {"minLength": 1},
    "additionalProperties": {"type": "string"},
}

MANIFEST_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "name": {"type": ["string", "null"]},
        "dependencies": _DEPENDENCY_MAP,
        "devDependencies": _DEPENDENCY_MAP,
    },
}

_VALIDATOR = Draft202012Validator(MANIFEST_SCHEMA)


def _format_errors(errors: Iterable) -> str:
    messages = []
    for error in errors:
        pointer = "/".join(str(p) for p in error.path)
        messages.append(f"{pointer or '<root>'}: {error.message}")
    return "; ".join(messages)


def validate_manifest(data: Any, path: Path) -> dict[str, Any]:
    """Return ``data`` unchanged if it looks like a manifest, else raise ParseError."""
    errors = sorted(_VALIDATOR.iter_errors(data), key=lambda e: "/".join(str(p) for p in e.path))
    if errors:
        raise ParseError(path, _format_errors(errors))
    return data
