"""Shared fixtures: manifest builders and a fake registry."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import structlog

from pkg_to_csv.registry import MetadataCache, RegistryClient, RetryPolicy


def json_body(payload: Any) -> bytes:
    return json.dumps(payload).encode("utf-8")


def write_manifest(directory: Path, content: dict[str, Any] | str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "package.json"
    text = content if isinstance(content, str) else json.dumps(content)
    path.write_text(text, encoding="utf-8")
    return path


class FakeRegistry:
    """Callable standing in for the HTTP getter; records requested URLs."""

    def __init__(self, packuments: dict[str, Any] | None = None) -> None:
        self.packuments = packuments or {}
        self.calls: list[str] = []

    def __call__(self, url: str, timeout: float) -> tuple[int, bytes]:
        self.calls.append(url)
        name = url.rsplit("/", 1)[1]
        payload = self.packuments.get(name)
        if payload is None:
            return 404, json_body({"error": "Not found"})
        if isinstance(payload, Exception):
            raise payload
        return 200, json_body(payload)

    def count(self, name: str) -> int:
        return sum(1 for url in self.calls if url.endswith("/" + name))


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


async def no_sleep(_delay: float) -> None:
    return None


def packument(latest: str, license: Any = "MIT", description: str = "") -> dict[str, Any]:
    data: dict[str, Any] = {
        "dist-tags": {"latest": latest},
        "description": description,
        "versions": {latest: {"license": "MIT"}},
    }
    if license is not None:
        data["license"] = license
    return data


@pytest.fixture
def fake_registry() -> FakeRegistry:
    return FakeRegistry(
        {
            "lodash": packument("4.17.21", description="Lodash modular utilities."),
            "express": packument("4.19.2", description="Fast, unopinionated, minimalist web framework"),
            "jest": packument("29.7.0", description="Delightful JavaScript Testing."),
        }
    )


@pytest.fixture
def make_client(fake_registry: FakeRegistry) -> Callable[..., RegistryClient]:
    def _make(**overrides: Any) -> RegistryClient:
        kwargs: dict[str, Any] = {
            "cache": MetadataCache(),
            "retry_policy": RetryPolicy(sleep=no_sleep),
            "http_get": fake_registry,
        }
        kwargs.update(overrides)
        return RegistryClient(**kwargs)

    return _make


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo ``setup_logging`` so handlers never outlive a captured stderr."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)
    root.setLevel(level)
    structlog.reset_defaults()
