"""npm registry metadata lookups with caching, retry and timeouts."""

from __future__ import annotations

import asyncio
import json
import time
from collections.abc import Callable, Iterable
from typing import Any
from urllib.parse import quote

import requests
import structlog
from requests import Response

from ..config import Settings
from ..models import PackageMetadata
from .cache import MetadataCache
from .retry import RetryPolicy

logger = structlog.get_logger(__name__)

USER_AGENT = "pkg-to-csv"
CHUNK_SIZE = 16 * 1024

# (status code, body bytes)
HttpGetter = Callable[[str, float], tuple[int, bytes]]


class RegistryResponseError(RuntimeError):
    """Raised internally when a registry response cannot be used."""


def read_body(
    response: Response,
    deadline: float,
    clock: Callable[[], float] = time.monotonic,
) -> bytes:
    """Read a streamed response, giving up once ``deadline`` has passed.

    ``requests`` only bounds connect and per-read waits, so a server that
    trickles bytes would otherwise never time out.
    """
    chunks: list[bytes] = []
    try:
        for chunk in response.iter_content(CHUNK_SIZE):
            if clock() > deadline:
                raise requests.Timeout(f"Read exceeded deadline for {response.url}")
            chunks.append(chunk)
    finally:
        response.close()
    return b"".join(chunks)


def _http_get(url: str, timeout: float) -> tuple[int, bytes]:  # pragma: no cover - network
    deadline = time.monotonic() + timeout
    response = requests.get(
        url,
        headers={"Accept": "application/json", "User-Agent": USER_AGENT},
        timeout=timeout,
        stream=True,
    )
    return response.status_code, read_body(response, deadline)


def _license_text(value: Any) -> str:
    # Older packages publish {"type": "MIT", "url": ...} instead of a string.
    if isinstance(value, dict):
        value = value.get("type")
    return value if isinstance(value, str) else ""


def extract_metadata(name: str, data: dict[str, Any], web_url: str) -> PackageMetadata:
    """Build metadata from a registry packument."""
    dist_tags = data.get("dist-tags") or {}
    latest = dist_tags.get("latest") if isinstance(dist_tags, dict) else None
    latest = latest if isinstance(latest, str) else ""

    license_ = _license_text(data.get("license"))
    if not license_:
        versions = data.get("versions") or {}
        version_info = versions.get(latest) if isinstance(versions, dict) else None
        if isinstance(version_info, dict):
            license_ = _license_text(version_info.get("license"))

    description = data.get("description")
    return PackageMetadata(
        latest_version=latest,
        license=license_,
        description=description if isinstance(description, str) else "",
        registry_link=f"{web_url}/package/{name}",
    )


class RegistryClient:
    """Fetch package metadata from the registry.

    ``fetch_one`` never raises: after the retry policy gives up it returns and
    caches empty metadata. ``fetch_batch`` runs one ``fetch_one`` per name
    concurrently and waits for all of them.
    """

    def __init__(
        self,
        cache: MetadataCache | None = None,
        retry_policy: RetryPolicy | None = None,
        registry_url: str = "https://registry.npmjs.org",
        web_url: str = "https://www.npmjs.com",
        timeout: float = 10.0,
        http_get: HttpGetter | None = None,
    ) -> None:
        self.cache = cache if cache is not None else MetadataCache()
        self.retry_policy = retry_policy or RetryPolicy()
        self.registry_url = registry_url.rstrip("/")
        self.web_url = web_url.rstrip("/")
        self.timeout = timeout
        self._http_get = http_get or _http_get

    @classmethod
    def from_settings(
        cls, settings: Settings, cache: MetadataCache | None = None
    ) -> RegistryClient:
        return cls(
            cache=cache if cache is not None else MetadataCache(ttl=settings.cache_ttl),
            retry_policy=RetryPolicy(max_attempts=settings.retries + 1),
            registry_url=settings.registry_url,
            web_url=settings.web_url,
            timeout=settings.timeout,
        )

    def package_url(self, name: str) -> str:
        # Scoped names keep the leading "@" but escape the separator slash.
        return f"{self.registry_url}/{quote(name, safe='@')}"

    async def _request(self, name: str) -> PackageMetadata:
        url = self.package_url(name)
        try:
            status, body = await asyncio.wait_for(
                asyncio.to_thread(self._http_get, url, self.timeout),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as exc:
            raise requests.Timeout(f"No response for {name} within {self.timeout}s") from exc

        if status != 200:
            raise RegistryResponseError(f"Unexpected status code {status} fetching {name}")

        try:
            data = json.loads(body)
        except ValueError as exc:
            raise RegistryResponseError(f"Invalid JSON for {name}: {exc}") from exc
        if not isinstance(data, dict):
            raise RegistryResponseError(f"Unexpected payload type for {name}")

        return extract_metadata(name, data, self.web_url)

    async def fetch_one(self, name: str) -> PackageMetadata:
        cached = self.cache.get(name)
        if cached is not None:
            logger.debug("metadata_cache_hit", package=name)
            return cached

        try:
            meta = await self.retry_policy.call(self._request, name)
        except Exception as exc:  # any failure degrades to empty metadata
            logger.warning("metadata_fetch_failed", package=name, error=str(exc))
            meta = PackageMetadata.empty()

        self.cache.put(name, meta)
        return meta

    async def fetch_batch(self, names: Iterable[str]) -> dict[str, PackageMetadata]:
        unique = list(dict.fromkeys(names))
        outcomes = await asyncio.gather(
            *(self.fetch_one(name) for name in unique),
            return_exceptions=True,
        )

        results: dict[str, PackageMetadata] = {}
        for name, outcome in zip(unique, outcomes):
            if isinstance(outcome, BaseException):
                logger.error("metadata_fetch_crashed", package=name, error=repr(outcome))
                outcome = PackageMetadata.empty()
            results[name] = outcome
        return results
