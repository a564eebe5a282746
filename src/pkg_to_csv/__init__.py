"""pkg-to-csv core package.

Turns package.json manifests into a dependency report, optionally enriched
with npm registry metadata. The pipeline in ``core`` is shared by the
command-line flags and the interactive wizard.
"""

__all__ = [
    "core",
]
