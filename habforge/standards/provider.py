"""Standards providers.

The validation engine only ever sees a ``StandardsConfig``. Where it came
from (a packaged table, a YAML file, or a remote standards service) is the
provider's concern.
"""

from pathlib import Path
from typing import Optional, Protocol, Union
from urllib.parse import urlparse

import requests
from loguru import logger

from ..errors import StandardsUnavailable
from .schema import StandardsConfig, load_standards


class StandardsProvider(Protocol):
    """Protocol for anything that can supply a standards configuration."""

    def get(self) -> StandardsConfig:
        """Return the current standards configuration."""
        ...


class StaticStandardsProvider:
    """In-memory provider wrapping an already built configuration."""

    def __init__(self, standards: StandardsConfig):
        self._standards = standards

    def get(self) -> StandardsConfig:
        return self._standards


class YamlStandardsProvider:
    """Provider reading a YAML standards table once and caching it."""

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path else None
        self._standards: Optional[StandardsConfig] = None

    def get(self) -> StandardsConfig:
        if self._standards is None:
            self._standards = load_standards(self.path)
        return self._standards


class HttpStandardsProvider:
    """Provider fetching standards from a remote standards service.

    A failed request or a malformed payload is logged and answered with the
    fallback provider's configuration, so validation can always proceed.
    Only a successful response is cached.
    """

    ENDPOINT = "nasa-standards"

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        api_key: Optional[str] = None,
        fallback: Optional[StandardsProvider] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.fallback = fallback if fallback is not None else YamlStandardsProvider()
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        if api_key:
            self.session.headers.update({"X-API-Key": api_key})
        self._standards: Optional[StandardsConfig] = None

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.ENDPOINT}"

    def get(self) -> StandardsConfig:
        if self._standards is not None:
            return self._standards

        try:
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            standards = StandardsConfig.model_validate(response.json())
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Failed to fetch standards from {self.url}: {e}")
            return self._fallback()

        logger.info(f"Fetched standards from {self.url}")
        self._standards = standards
        return standards

    def _fallback(self) -> StandardsConfig:
        try:
            standards = self.fallback.get()
        except Exception as e:
            raise StandardsUnavailable(
                f"Remote standards unavailable and fallback failed: {e}"
            ) from e
        logger.warning("Using fallback standards configuration")
        return standards


# Global default provider instance
_default_provider: Optional[StandardsProvider] = None


def get_standards_provider(source: Optional[str] = None) -> StandardsProvider:
    """Build a provider for a standards source.

    Args:
        source: ``None`` for the packaged table, an ``http(s)://`` base URL
            for a standards service, or a path to a YAML file

    Returns:
        A standards provider; the packaged-table provider is shared
    """
    global _default_provider

    if source is None:
        if _default_provider is None:
            _default_provider = YamlStandardsProvider()
        return _default_provider

    scheme = urlparse(source).scheme
    if scheme in ("http", "https"):
        return HttpStandardsProvider(source)
    if scheme == "file":
        return YamlStandardsProvider(urlparse(source).path)
    return YamlStandardsProvider(source)
