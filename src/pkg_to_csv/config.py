"""Run configuration and environment settings.

A ``RunConfig`` is produced either by the command-line flag parser or by the
interactive wizard; the pipeline only ever sees the finished object.

``Settings`` holds the tunables read from the environment:

- ``PKG_TO_CSV_REGISTRY_URL``: registry metadata endpoint base
- ``PKG_TO_CSV_WEB_URL``: base for the package links written to reports
- ``PKG_TO_CSV_CACHE_TTL``: metadata cache lifetime in seconds
- ``PKG_TO_CSV_TIMEOUT``: per-request timeout in seconds
- ``PKG_TO_CSV_RETRIES``: retries after the first registry attempt
- ``PKG_TO_CSV_LOG_LEVEL`` / ``PKG_TO_CSV_LOG_FORMAT``: logging setup
"""

from __future__ import annotations

import enum
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .models.dependency import DEVELOPMENT_SECTION, PRODUCTION_SECTION

DEFAULT_INPUT = "package.json"
DEFAULT_OUTPUT_NAME = "packages.csv"

DEFAULT_REGISTRY_URL = "https://registry.npmjs.org"
DEFAULT_WEB_URL = "https://www.npmjs.com"
DEFAULT_CACHE_TTL = 300.0
DEFAULT_TIMEOUT = 10.0
DEFAULT_RETRIES = 2

ENV_PREFIX = "PKG_TO_CSV_"

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_VALID_LOG_FORMATS = {"console", "json"}


class ConfigError(RuntimeError):
    """Raised when flags or environment settings are invalid."""


class Scope(str, enum.Enum):
    """Which manifest sections a run extracts."""

    BOTH = "both"
    PRODUCTION = "production"
    DEVELOPMENT = "development"

    @property
    def sections(self) -> tuple[str, ...]:
        if self is Scope.PRODUCTION:
            return (PRODUCTION_SECTION,)
        if self is Scope.DEVELOPMENT:
            return (DEVELOPMENT_SECTION,)
        return (PRODUCTION_SECTION, DEVELOPMENT_SECTION)

    @classmethod
    def from_flags(cls, *, deps_only: bool = False, dev_only: bool = False) -> Scope:
        if deps_only and dev_only:
            raise ConfigError("--deps-only and --dev-only cannot be combined")
        if deps_only:
            return cls.PRODUCTION
        if dev_only:
            return cls.DEVELOPMENT
        return cls.BOTH


@dataclass(frozen=True)
class Enrichment:
    """Registry metadata columns requested for a run."""

    latest: bool = False
    license: bool = False
    description: bool = False
    npm_link: bool = False

    def any(self) -> bool:
        return self.latest or self.license or self.description or self.npm_link

    def labels(self) -> list[str]:
        flags = (
            ("latest", self.latest),
            ("license", self.license),
            ("description", self.description),
            ("npm-link", self.npm_link),
        )
        return [label for label, enabled in flags if enabled]


@dataclass(frozen=True)
class RunConfig:
    """Validated configuration for one pipeline run."""

    input_path: Path = Path(DEFAULT_INPUT)
    output_path: Path | None = None
    enrichment: Enrichment = field(default_factory=Enrichment)
    scope: Scope = Scope.BOTH
    recursive: bool = False

    @classmethod
    def from_flags(
        cls,
        *,
        input_path: str | Path = DEFAULT_INPUT,
        output: str | bool | None = None,
        latest: bool = False,
        license: bool = False,
        description: bool = False,
        npm_link: bool = False,
        deps_only: bool = False,
        dev_only: bool = False,
        recursive: bool = False,
        cwd: Path | None = None,
    ) -> RunConfig:
        """Build a config from independent toggles, rejecting conflicting scopes."""
        return cls(
            input_path=Path(input_path),
            output_path=resolve_output_path(output, cwd),
            enrichment=Enrichment(
                latest=latest,
                license=license,
                description=description,
                npm_link=npm_link,
            ),
            scope=Scope.from_flags(deps_only=deps_only, dev_only=dev_only),
            recursive=recursive,
        )

    def describe(self) -> list[str]:
        """Return option labels for display, e.g. in the wizard summary."""
        labels = self.enrichment.labels()
        if self.scope is Scope.PRODUCTION:
            labels.append("deps-only")
        elif self.scope is Scope.DEVELOPMENT:
            labels.append("dev-only")
        if self.recursive:
            labels.append("recursive")
        return labels


def resolve_output_path(output: str | bool | None, cwd: Path | None = None) -> Path | None:
    """Resolve the output option.

    ``None`` or ``False`` selects the console table, ``True`` (flag given
    without a value) selects ``packages.csv`` in the working directory, and a
    string is resolved against the working directory.
    """
    if output is None or output is False:
        return None
    base = cwd or Path.cwd()
    if output is True or output == "":
        return (base / DEFAULT_OUTPUT_NAME).resolve()
    return (base / output).resolve()


@dataclass(slots=True, frozen=True)
class Settings:
    """Environment-driven tunables for the registry client and logging."""

    registry_url: str = DEFAULT_REGISTRY_URL
    web_url: str = DEFAULT_WEB_URL
    cache_ttl: float = DEFAULT_CACHE_TTL
    timeout: float = DEFAULT_TIMEOUT
    retries: int = DEFAULT_RETRIES
    log_level: str = "WARNING"
    log_format: str = "console"


def _read_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(ENV_PREFIX + key)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{ENV_PREFIX}{key} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{ENV_PREFIX}{key} must be positive, got {raw!r}")
    return value


def _read_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(ENV_PREFIX + key)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ConfigError(f"{ENV_PREFIX}{key} must be an integer, got {raw!r}") from exc
    if value < 0:
        raise ConfigError(f"{ENV_PREFIX}{key} must not be negative, got {raw!r}")
    return value


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Read settings from the environment.

    Raises:
        ConfigError: If a numeric value does not parse or a log option is unknown.
    """
    env = os.environ if environ is None else environ

    log_level = env.get(ENV_PREFIX + "LOG_LEVEL", "WARNING").strip().upper() or "WARNING"
    if log_level not in _VALID_LOG_LEVELS:
        raise ConfigError(f"Unknown log level: {log_level}")

    log_format = env.get(ENV_PREFIX + "LOG_FORMAT", "console").strip().lower() or "console"
    if log_format not in _VALID_LOG_FORMATS:
        raise ConfigError(f"Unknown log format: {log_format}")

    return Settings(
        registry_url=env.get(ENV_PREFIX + "REGISTRY_URL", DEFAULT_REGISTRY_URL).rstrip("/"),
        web_url=env.get(ENV_PREFIX + "WEB_URL", DEFAULT_WEB_URL).rstrip("/"),
        cache_ttl=_read_float(env, "CACHE_TTL", DEFAULT_CACHE_TTL),
        timeout=_read_float(env, "TIMEOUT", DEFAULT_TIMEOUT),
        retries=_read_int(env, "RETRIES", DEFAULT_RETRIES),
        log_level=log_level,
        log_format=log_format,
    )
