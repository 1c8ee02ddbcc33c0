"""Smithsonian Open Access API client."""

import logging
from typing import Any, Callable
from urllib.parse import quote

import httpx

from smithsonian_open_access.exceptions import (
    ConfigurationError,
    PreconditionError,
    ResponseDecodeError,
    SmithsonianAPIError,
    TransportError,
    UpstreamStatusError,
)
from smithsonian_open_access.models import (
    CATEGORY_VALUES,
    IMAGES_ONLY_CLAUSE,
    ROW_GROUP_VALUES,
    SORT_VALUES,
    TYPE_VALUES,
    ApiSettings,
)

ConfigProvider = Callable[[], ApiSettings]


class OpenAccessClient:
    """Client for the Smithsonian Open Access API v1.0.

    Configuration comes from ``config_provider`` and is read again on every
    call. Each operation issues exactly one GET through ``http``; the caller
    owns the ``httpx.Client`` and its timeout.
    """

    def __init__(
        self,
        config_provider: ConfigProvider,
        http: httpx.Client,
        logger: logging.Logger | None = None,
    ):
        self.config_provider = config_provider
        self.http = http
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def _url(config: ApiSettings, path: str) -> str:
        return f"{config.base_uri.rstrip('/')}/{path.lstrip('/')}"

    @staticmethod
    def _require_path(path: str, name: str) -> str:
        if not path:
            raise ConfigurationError(f"The {name} endpoint is not configured")
        return path

    def _allowed(self, name: str, value: Any, allowed: tuple[str, ...]) -> bool:
        """Check ``value`` against an allow-list, warning when it is not on it."""
        if value in allowed:
            return True
        self.logger.warning(
            f"Invalid {name} value: {value}. Allowed values: {', '.join(allowed)}"
        )
        return False

    def _get(self, config: ApiSettings, path: str, params: dict[str, Any]) -> dict[str, Any]:
        url = self._url(config, path)
        params["api_key"] = config.api_key

        self.logger.info(f"Open Access API request: {url}")
        try:
            response = self.http.get(url, params=params)
        except httpx.RequestError as e:
            self.logger.error(f"Network error connecting to Open Access API: {e}")
            raise TransportError(f"Network error connecting to Open Access API: {e}") from e

        self.logger.debug(f"Open Access API response: {response.status_code}")
        if response.status_code != 200:
            error_text = response.text[:1000] if response.text else ""
            self.logger.error(
                f"Open Access API error {response.status_code}: URL={url}, Response={error_text}"
            )
            raise UpstreamStatusError(
                status_code=response.status_code,
                message=f"API returned {response.status_code}",
                response_text=error_text,
            )

        try:
            return response.json()
        except ValueError as e:
            self.logger.error(f"Open Access API returned invalid JSON from {url}: {e}")
            raise ResponseDecodeError(f"Invalid JSON in response from {url}") from e

    def fetch(self, endpoint: str, params: dict[str, Any] | None = None) -> dict[str, Any] | None:
        """
        Perform a raw GET against ``endpoint`` relative to the base URI.

        Returns:
            Decoded JSON, or None when the request failed for any reason.
            Failures are logged, never raised.
        """
        try:
            return self._get(self.config_provider(), endpoint, dict(params or {}))
        except SmithsonianAPIError as e:
            self.logger.error(f"Error while performing API request: {e}")
            return None

    def search(
        self,
        query: str,
        start: int = 0,
        rows: int = 10,
        sort: str | None = "relevancy",
        type: str = "edanmdm",
        row_group: str = "objects",
        images_only: bool = True,
        filters: list[str] | None = None,
    ) -> dict[str, Any]:
        """
        Search the collection.

        Args:
            query: Search query
            start: Start offset
            rows: Number of rows to return
            sort: One of relevancy, id, newest, updated, random
            type: One of edanmdm, ead_collection, ead_component, all
            row_group: One of objects, archives
            images_only: Only records with online visual material
            filters: Additional filter queries, sent as repeated ``fq``

        Invalid sort, type or row_group values are dropped with a warning.

        Raises:
            TransportError: On network errors
            UpstreamStatusError: On a non-200 response
        """
        config = self.config_provider()
        path = self._require_path(config.search_endpoint, "search")

        params: dict[str, Any] = {
            "q": f"{query}{IMAGES_ONLY_CLAUSE}" if images_only else query,
            "start": start,
            "rows": rows,
        }
        if sort and self._allowed("sort", sort, SORT_VALUES):
            params["sort"] = sort
        if self._allowed("type", type, TYPE_VALUES):
            params["type"] = type
        if self._allowed("row_group", row_group, ROW_GROUP_VALUES):
            params["row_group"] = row_group
        if filters:
            params["fq"] = list(filters)

        return self._get(config, path, params)

    def get_content(self, id: str) -> dict[str, Any]:
        """Fetch one record by its ID or URL."""
        config = self.config_provider()
        path = self._require_path(config.content_endpoint, "content")
        # record URLs keep their "/" and ":"
        return self._get(config, f"{path.rstrip('/')}/{quote(id, safe=':/')}", {})

    def get_stats(self) -> dict[str, Any]:
        """Fetch collection statistics."""
        config = self.config_provider()
        path = self._require_path(config.stats_endpoint, "stats")
        return self._get(config, path, {})

    def category_search(
        self,
        query: str,
        category: str,
        start: int = 0,
        rows: int = 10,
        sort: str | None = "relevancy",
    ) -> dict[str, Any]:
        """
        Search within one category.

        The category is substituted into the endpoint path whether or not it
        is one of the known categories; an unknown one only logs a warning.

        Raises:
            PreconditionError: If category is empty
            TransportError: On network errors
            UpstreamStatusError: On a non-200 response
        """
        if not category:
            raise PreconditionError("Category parameter is required for category_search.")

        config = self.config_provider()
        template = self._require_path(config.category_endpoint, "category search")

        params: dict[str, Any] = {"q": query, "start": start, "rows": rows}
        if sort and self._allowed("sort", sort, SORT_VALUES):
            params["sort"] = sort
        if self._allowed("category", category, CATEGORY_VALUES):
            params["cat"] = category

        return self._get(config, template.replace(":cat", category), params)

    def terms_search(self, category: str, starts_with: str | None = None) -> dict[str, Any]:
        """
        List the terms of a term category (culture, data_source, place, ...).

        Raises:
            PreconditionError: If category is empty
            TransportError: On network errors
            UpstreamStatusError: On a non-200 response
        """
        if not category:
            raise PreconditionError("Category parameter is required for terms_search.")

        config = self.config_provider()
        template = self._require_path(config.terms_endpoint, "terms")

        params: dict[str, Any] = {"category": category}
        if starts_with is not None:
            params["starts_with"] = starts_with

        return self._get(config, template.replace(":category", category), params)
