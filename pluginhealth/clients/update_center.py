"""Client for the update-center and plugin documentation documents."""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from pluginhealth.consts import (
    DOCUMENTATION_URLS,
    UPDATE_CENTER_CACHE_TTL,
    UPDATE_CENTER_TIMEOUT,
    UPDATE_CENTER_URL,
)
from pluginhealth.errors import UpdateCenterError
from pluginhealth.models.model_update_center import UpdateCenter
from pluginhealth.storage.cache import FileCache

logger = logging.getLogger(__name__)

CACHE_NAMESPACE = "update_center"


class UpdateCenterClient:
    """Downloads the update-center JSON documents, with an optional file cache."""

    def __init__(
        self,
        update_center_url: str = UPDATE_CENTER_URL,
        documentation_urls: str = DOCUMENTATION_URLS,
        cache: FileCache | None = None,
        cache_ttl: int = UPDATE_CENTER_CACHE_TTL,
        timeout: float = UPDATE_CENTER_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.update_center_url = update_center_url
        self.documentation_urls = documentation_urls
        self.cache = cache
        self.cache_ttl = cache_ttl
        self.timeout = timeout
        self._transport = transport

    async def _fetch_json(self, url: str) -> Any:
        if self.cache is not None:
            cached = self.cache.get(url, CACHE_NAMESPACE)
            if cached is not None:
                logger.debug(f"Cache hit: {url}")
                return cached

        logger.info(f"Downloading {url}")
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            raise UpdateCenterError(f"Could not download {url}: {e}") from e
        except ValueError as e:
            raise UpdateCenterError(f"Invalid JSON document at {url}") from e

        if self.cache is not None:
            self.cache.put(url, data, CACHE_NAMESPACE, ttl=self.cache_ttl)
        return data

    async def fetch_update_center(self) -> UpdateCenter:
        """Download and validate the update-center snapshot.

        Raises:
            UpdateCenterError: If the document cannot be downloaded or validated
        """
        data = await self._fetch_json(self.update_center_url)
        try:
            update_center = UpdateCenter.model_validate(data)
        except ValidationError as e:
            if self.cache is not None:
                self.cache.invalidate(self.update_center_url, CACHE_NAMESPACE)
            raise UpdateCenterError(f"Invalid update-center document: {e}") from e

        logger.info(
            f"Update-center: {len(update_center.plugins)} plugins, "
            f"{len(update_center.deprecations)} deprecations, {len(update_center.warnings)} warnings"
        )
        return update_center

    async def fetch_documentation_links(self) -> dict[str, str]:
        """Download the plugin documentation links.

        Returns:
            Mapping of plugin name to documentation URL. Entries without a URL
            are left out.
        """
        data = await self._fetch_json(self.documentation_urls)
        if not isinstance(data, dict):
            raise UpdateCenterError("Invalid documentation links document")

        links = {}
        for name, entry in data.items():
            url = entry.get("url") if isinstance(entry, dict) else None
            if url:
                links[name] = url
        return links
