"""
Gallery Client — NuGet v2 feed access for PowerShell module galleries.

Looks up the latest published version of a module and downloads .nupkg
archives. Requests are made one at a time and never retried; a failed request
surfaces as an error for the caller to handle.
"""

import logging
import xml.etree.ElementTree as ET

import httpx

from module_update_checker import __version__
from module_update_checker.core.config import DEFAULT_REPOSITORY, resolve_repository_url
from module_update_checker.core.errors import InstallError, RegistryQueryError
from module_update_checker.core.versioning import parse_version
from module_update_checker.models.module import RemoteRecord
from module_update_checker.parsers.odata import find_next_link, parse_feed

logger = logging.getLogger(__name__)

# Upper bound on followed rel="next" links for a single module
MAX_FEED_PAGES = 50


class GalleryClient:
    """
    Async client for one gallery feed.

    Use as an async context manager, or pass an existing httpx.AsyncClient
    whose lifetime the caller manages.
    """

    def __init__(
        self,
        repository: str = DEFAULT_REPOSITORY,
        client: httpx.AsyncClient | None = None,
    ):
        self.repository = repository
        self.base_url = resolve_repository_url(repository)
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(30.0, connect=60.0),
            follow_redirects=True,
            headers={"User-Agent": f"module-update-checker/{__version__}"},
        )

    async def __aenter__(self) -> "GalleryClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    # ──────────────────────────────────────────────
    # Lookup
    # ──────────────────────────────────────────────

    async def find_module(self, name: str) -> RemoteRecord | None:
        """
        Find the latest published version of a module.

        Args:
            name: Module name (matched case-insensitively by the gallery).

        Returns:
            The RemoteRecord, or None if the gallery has no such module.

        Raises:
            RegistryQueryError: on transport errors, unexpected statuses or
                unparseable feeds.
        """
        entries = await self._fetch_entries(name)
        entries = [e for e in entries if e["id"] and e["version"] and e["id"].lower() == name.lower()]
        if not entries:
            logger.debug(f"[{self.repository}] No entries for {name}")
            return None

        entry = _select_latest(entries)
        logger.debug(f"[{self.repository}] {entry['id']} latest is {entry['version']}")

        last_updated = entry["last_updated"]
        return RemoteRecord(
            name=entry["id"],
            version=entry["version"],
            published_date=entry["published"],
            download_count=entry["download_count"],
            tags=entry["tags"],
            license_uri=entry["license_url"],
            project_uri=entry["project_url"],
            is_prerelease=entry["is_prerelease"],
            last_updated=last_updated.date() if last_updated else None,
            provider="NuGet",
            repository=self.repository,
        )

    async def _fetch_entries(self, name: str) -> list[dict]:
        url: str | None = f"{self.base_url}/FindPackagesById()"
        params: dict | None = {"id": f"'{name}'"}
        entries: list[dict] = []

        for _page in range(MAX_FEED_PAGES):
            if url is None:
                break
            resp = await self._get(url, params)
            if resp.status_code == 404:
                return []
            if resp.status_code != 200:
                raise RegistryQueryError(
                    f"{self.repository} returned HTTP {resp.status_code} for {name!r}"
                )
            try:
                entries.extend(parse_feed(resp.content))
                url = find_next_link(resp.content)
            except ET.ParseError as e:
                raise RegistryQueryError(f"Malformed feed from {self.repository} for {name!r}: {e}") from e
            # Paging links already carry the query string
            params = None

        return entries

    async def _get(self, url: str, params: dict | None = None) -> httpx.Response:
        try:
            return await self.client.get(url, params=params)
        except httpx.HTTPError as e:
            raise RegistryQueryError(f"Request to {self.repository} failed ({type(e).__name__}): {e}") from e

    # ──────────────────────────────────────────────
    # Download
    # ──────────────────────────────────────────────

    async def download_package(self, name: str, version: str) -> bytes:
        """Download the .nupkg archive of a module version."""
        url = f"{self.base_url}/package/{name}/{version}"
        try:
            resp = await self.client.get(url)
        except httpx.HTTPError as e:
            raise InstallError(f"Download of {name} {version} failed ({type(e).__name__}): {e}") from e

        if resp.status_code != 200:
            raise InstallError(f"Download of {name} {version} returned HTTP {resp.status_code}")

        logger.debug(f"[{self.repository}] Downloaded {name} {version} ({len(resp.content)} bytes)")
        return resp.content


def _select_latest(entries: list[dict]) -> dict:
    """
    Pick the entry the gallery considers the latest stable release.

    Falls back to the highest stable version, then to the highest version
    overall when only prereleases exist.
    """
    flagged = [e for e in entries if e["is_latest_version"]]
    if flagged:
        return flagged[0]

    stable = [e for e in entries if not e["is_prerelease"]]
    return max(stable or entries, key=lambda e: parse_version(e["version"]))
