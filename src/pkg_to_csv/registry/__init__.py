"""Registry metadata retrieval: TTL cache, retry policy and batch client."""

from .cache import MetadataCache
from .client import RegistryClient, RegistryResponseError, extract_metadata, read_body
from .retry import RetryPolicy

__all__ = [
    "MetadataCache",
    "RegistryClient",
    "RegistryResponseError",
    "RetryPolicy",
    "extract_metadata",
    "read_body",
]
