"""Catalog data sources and the catalog document schema check."""

import asyncio
import json
from pathlib import Path
from typing import Any, Protocol

import httpx
import structlog

from .errors import DataSourceError
from .http_client import HttpClientService

log = structlog.stdlib.get_logger()

INVALID_FORMAT_MESSAGE = "Invalid data format: expected games array"


class CatalogSource(Protocol):
    """Read-only source of the raw catalog document."""

    @property
    def location(self) -> str: ...

    async def fetch(self) -> Any:
        """Return the decoded JSON document.

        Raises:
            DataSourceError: On transport failure, non-success status or bad JSON
        """
        ...


class HttpCatalogSource:
    """Fetches ``{"games": [...]}`` from a URL."""

    def __init__(self, http_client: HttpClientService, url: str) -> None:
        self.http_client = http_client
        self.url = url

    @property
    def location(self) -> str:
        return self.url

    async def fetch(self) -> Any:
        try:
            return await self.http_client.get_json(self.url)
        except httpx.HTTPStatusError as e:
            raise DataSourceError(
                f"Failed to load games: HTTP error status {e.response.status_code}",
                source=self.url,
                status_code=e.response.status_code,
                original_error=e,
            ) from e
        except httpx.RequestError as e:
            raise DataSourceError(
                f"Failed to load games: {e}",
                source=self.url,
                original_error=e,
            ) from e
        except ValueError as e:
            raise DataSourceError(
                "Failed to load games: response is not valid JSON",
                source=self.url,
                original_error=e,
            ) from e


class FileCatalogSource:
    """Reads the catalog document from a local JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    @property
    def location(self) -> str:
        return str(self.path)

    async def fetch(self) -> Any:
        try:
            text = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
        except OSError as e:
            raise DataSourceError(
                f"Failed to load games: cannot read {self.path}",
                source=str(self.path),
                original_error=e,
            ) from e
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise DataSourceError(
                "Failed to load games: file is not valid JSON",
                source=str(self.path),
                original_error=e,
            ) from e


def create_catalog_source(location: str, http_client: HttpClientService) -> CatalogSource:
    """Pick an HTTP source for http(s) URLs and a file source for anything else."""
    if location.startswith(("http://", "https://")):
        return HttpCatalogSource(http_client, location)
    return FileCatalogSource(Path(location).expanduser())


def parse_catalog_document(document: Any, source: str | None = None) -> list[Any]:
    """Check the document shape and return its raw rows.

    Raises:
        DataSourceError: Unless the document is an object with a ``games`` array
    """
    if not isinstance(document, dict):
        raise DataSourceError(INVALID_FORMAT_MESSAGE, source=source)
    rows = document.get("games")
    if not isinstance(rows, list):
        raise DataSourceError(INVALID_FORMAT_MESSAGE, source=source)
    return rows
