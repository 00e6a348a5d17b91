"""
Forecasting service client for archetype data.

Endpoints:
    GET  {forecasting}/building/available          - archetype listing
    POST {forecasting}/building?archetype=true     - full BUI + system payload

The blocking ``ForecastingClient`` owns transport concerns (timeouts,
retries with backoff). ``ForecastingArchetypeSource`` exposes it to the
async archetype catalog by running calls in the default executor.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Protocol

import requests

from ..core.config import Settings, settings as default_settings
from ..core.models import ArchetypeRecord
from ..utils.retry import RetryConfig, RetryableRequest

logger = logging.getLogger(__name__)


class ArchetypeServiceError(Exception):
    """Base class for archetype retrieval failures."""


class RetrievalError(ArchetypeServiceError):
    """Upstream unreachable, failed, or returned a malformed response."""


class NotFoundError(ArchetypeServiceError):
    """No archetype matches the requested key."""


class ArchetypeSource(Protocol):
    """Where the catalog gets archetype data from."""

    async def fetch_listing(self) -> List[Dict[str, Any]]:
        ...

    async def fetch_detail(self, record: ArchetypeRecord) -> Dict[str, Any]:
        ...


class ForecastingClient:
    """
    Blocking HTTP client for the archetype endpoints of the forecasting service.

    Usage:
        client = ForecastingClient()
        listing = client.list_archetypes()
        detail = client.get_archetype_detail("Single Family House", "Greece", "SFH_Greece_1961_1980")
    """

    LISTING_PATH = "/building/available"
    DETAIL_PATH = "/building"

    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        config: Optional[Settings] = None,
        retry_config: Optional[RetryConfig] = None,
    ):
        config = config or default_settings
        self.base_url = (base_url or config.forecasting_url).rstrip("/")
        self.retry_config = retry_config or RetryConfig(
            max_retries=config.max_retries,
            base_delay=config.retry_base_delay,
        )
        self._request = RetryableRequest(
            config=self.retry_config,
            session=session,
            timeout=config.request_timeout,
        )

    def close(self) -> None:
        self._request.close()

    def __enter__(self) -> "ForecastingClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def _send(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}{path}"
        try:
            if method == "GET":
                response = self._request.get(url, **kwargs)
            else:
                response = self._request.post(url, **kwargs)
        except requests.RequestException as e:
            raise RetrievalError(f"{method} {url} failed: {e}") from e

        if response.status_code == 404:
            raise NotFoundError(f"{method} {url} returned 404")
        if not response.ok:
            raise RetrievalError(
                f"{method} {url} returned {response.status_code}: {response.text[:200]}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise RetrievalError(f"{method} {url} returned invalid JSON") from e

    def list_archetypes(self) -> List[Dict[str, Any]]:
        """
        Fetch the archetype listing.

        Returns:
            List of {category, country, name} mappings

        Raises:
            RetrievalError: transport failure or non-list body
        """
        data = self._send("GET", self.LISTING_PATH)
        if not isinstance(data, list):
            raise RetrievalError(f"Archetype listing is not a list: {type(data).__name__}")
        logger.info(f"Fetched {len(data)} archetypes from forecasting service")
        return data

    def get_archetype_detail(self, category: str, country: str, name: str) -> Dict[str, Any]:
        """
        Fetch the technical payload of one archetype.

        Returns:
            {"bui": <building payload>, "system": <system payload>}

        Raises:
            NotFoundError: archetype does not exist upstream
            RetrievalError: transport failure or malformed body
        """
        data = self._send(
            "POST",
            self.DETAIL_PATH,
            params={"archetype": "true"},
            json={"category": category, "country": country, "name": name},
        )
        if not isinstance(data, dict):
            raise RetrievalError("Archetype detail is not an object")

        # Older gateway versions name the building payload "building"
        bui = data.get("bui", data.get("building"))
        system = data.get("system")
        if not isinstance(bui, dict) or not isinstance(system, dict):
            raise RetrievalError(
                f"Archetype detail for {country}:{category}:{name} lacks bui/system payloads"
            )
        return {"bui": bui, "system": system}


class ForecastingArchetypeSource:
    """Async adapter running ``ForecastingClient`` calls in the default executor."""

    def __init__(self, client: Optional[ForecastingClient] = None):
        self.client = client or ForecastingClient()

    async def fetch_listing(self) -> List[Dict[str, Any]]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.client.list_archetypes)

    async def fetch_detail(self, record: ArchetypeRecord) -> Dict[str, Any]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None,
            self.client.get_archetype_detail,
            record.category,
            record.country,
            record.name,
        )
