"""
KLADR API Async Client

This module provides the main KladrClient class for interacting with
the KLADR address directory API (kladr-api.ru / kladr-api.com).
"""

import copy
import json
import logging
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import quote, urlencode

import httpx

from lib import utils

from .constants import (
    API_URL_FREE,
    API_URL_PAID,
    CONTENT_TYPE_JSON,
    DEFAULT_LIMIT,
    DEFAULT_OFFSET,
    DEFAULT_TIMEOUT,
    HTTP_GET,
    JSON_INT_MAX,
    JSON_INT_MIN,
    PARAM_LIMIT,
    PARAM_OFFSET,
    PARAM_QUERY,
    PARAM_TOKEN,
    PARAM_WITH_PARENT,
    VERSION,
)
from .exceptions import ClientError, ConfigurationError, DecodeError, ServerError, TransportError
from .models import ApiResult, QueryFieldOptions, QueryStringOptions
from .options import resolveQueryFieldOptions, resolveQueryStringOptions

logger = logging.getLogger(__name__)


def parseJsonInt(value: str) -> Union[int, str]:
    """Parse JSON integer literal, keeping values outside of int64 range as strings."""
    number = int(value)
    if number < JSON_INT_MIN or number > JSON_INT_MAX:
        return value
    return number


def rejectJsonConstant(value: str) -> Any:
    """Reject non-standard NaN, Infinity and -Infinity literals."""
    raise ValueError(f"Invalid JSON literal: {value}")


def decodeResponse(content: Union[str, bytes]) -> ApiResult:
    """Decode API response body, dood!

    Bytes are decoded strictly, invalid UTF-8 is an error.

    Raises:
        DecodeError: If content is not valid JSON
    """
    try:
        return json.loads(content, parse_int=parseJsonInt, parse_constant=rejectJsonConstant)
    except ValueError as e:
        raise DecodeError(f"API Client error: error on parse response: {e}") from e


def encodeParamValue(value: Any) -> Any:
    """Convert param value to its wire representation (booleans are sent as 1/0)."""
    if isinstance(value, bool):
        return int(value)
    return value


class KladrClient:
    """Async client for KLADR API, dood!

    Performs exactly one HTTP GET per search call and returns decoded JSON
    as is. Errors are raised to the caller, there are no retries and no caching.

    If no token is given, the free API endpoint is used, otherwise the paid one.
    Both may be overridden with `config={"url": ...}`.

    Example:
        >>> from lib.kladr import ContentType, KladrClient
        >>>
        >>> async with KladrClient("your_token") as client:
        ...     result = await client.queryField("Тверская", {"contentType": ContentType.STREET, "cityId": "7700000000000"})
        ...     print(result["result"][0]["name"])
    """

    __slots__ = (
        "_token",
        "_config",
        "_httpClient",
        "_ownHttpClient",
        "_transport",
    )

    def __init__(
        self,
        token: Optional[str] = None,
        config: Optional[Mapping[str, Any]] = None,
        *,
        httpClient: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize KLADR client.

        Args:
            token: API token. If empty, free version of the service is used
            config: Client settings, deep-merged over defaults:
                url: API endpoint URL
                timeout: Request timeout in seconds (for internally created HTTP client only)
                headers: Additional HTTP headers (for internally created HTTP client only)
            httpClient: HTTP client to use instead of creating own one
            transport: Transport for internally created HTTP client

        Raises:
            ConfigurationError: If resolved API URL is empty or malformed
        """
        self._token: Optional[str] = token if token else None

        defaults: Dict[str, Any] = {
            "url": API_URL_PAID if self._token else API_URL_FREE,
            "timeout": DEFAULT_TIMEOUT,
            "headers": {
                "User-Agent": f"KladrClient/{VERSION}",
                "Accept": CONTENT_TYPE_JSON,
            },
        }
        self._config: Dict[str, Any] = utils.mergeDicts(defaults, copy.deepcopy(dict(config or {})))

        if not self._config.get("url"):
            raise ConfigurationError("KLADR API URL is not configured")
        try:
            httpx.URL(self._config["url"])
        except (httpx.InvalidURL, TypeError) as e:
            raise ConfigurationError(f"Invalid KLADR API URL {self._config['url']!r}: {e}") from e

        self._httpClient: Optional[httpx.AsyncClient] = httpClient
        self._ownHttpClient = httpClient is None
        self._transport = transport

        logger.debug(f"KladrClient initialized for {self.baseUrl}")

    async def __aenter__(self) -> "KladrClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def baseUrl(self) -> str:
        return self._config["url"]

    @property
    def config(self) -> Dict[str, Any]:
        """Copy of effective client config."""
        return copy.deepcopy(self._config)

    def _getHttpClient(self) -> httpx.AsyncClient:
        """Get injected HTTP client or create own one on first use.

        No awaits here, so the client is created at most once even
        if several requests start concurrently.

        Raises:
            ConfigurationError: If injected HTTP client is unusable or closed
        """
        if not self._ownHttpClient:
            client = self._httpClient
            if not callable(getattr(client, "build_request", None)) or not callable(getattr(client, "send", None)):
                raise ConfigurationError(f"Unusable HTTP client: {client!r}")
            if getattr(client, "is_closed", False) is True:
                raise ConfigurationError("Injected HTTP client is closed")
            return client  # type: ignore[return-value]

        if self._httpClient is None or self._httpClient.is_closed:
            self._httpClient = httpx.AsyncClient(
                timeout=httpx.Timeout(self._config.get("timeout")),
                headers=self._config.get("headers") or {},
                transport=self._transport,
            )
            logger.debug("Created new HTTP client")

        return self._httpClient

    async def aclose(self) -> None:
        """Close internally created HTTP client. Injected client is left to its owner."""
        if self._ownHttpClient and self._httpClient is not None and not self._httpClient.is_closed:
            await self._httpClient.aclose()
            logger.debug("HTTP client closed")

    async def queryString(
        self,
        query: str,
        options: Optional[Union[QueryStringOptions, Mapping[str, Any]]] = None,
        limit: int = DEFAULT_LIMIT,
        offset: int = DEFAULT_OFFSET,
    ) -> ApiResult:
        """Search across all address fields, dood!

        Args:
            query: What to search for
            options: Search options (withParent, regionId, districtId, cityId, contentType)
            limit: Max number of results, not sent if not positive
            offset: Results offset for pagination, sent only with positive limit

        Returns:
            Decoded API response

        Raises:
            ValidationError: If options are invalid
            TransportError, ClientError, ServerError, DecodeError: On request failure
        """
        params = resolveQueryStringOptions(options)
        return await self._execute(query, params, limit, offset)

    async def queryField(
        self,
        query: str,
        options: Optional[Union[QueryFieldOptions, Mapping[str, Any]]] = None,
        limit: int = DEFAULT_LIMIT,
        offset: int = DEFAULT_OFFSET,
    ) -> ApiResult:
        """Search in single address field, dood!

        Args:
            query: What to search for
            options: Search options, `contentType` is required.
                If `zip` is given, `contentType` is forced to `building`
            limit: Max number of results, not sent if not positive
            offset: Results offset for pagination, sent only with positive limit

        Returns:
            Decoded API response

        Raises:
            ValidationError: If options are invalid or contentType is missing
            TransportError, ClientError, ServerError, DecodeError: On request failure
        """
        params = resolveQueryFieldOptions(options)
        return await self._execute(query, params, limit, offset)

    def buildUrl(self, params: Mapping[str, Any]) -> str:
        """Build full request URL from params.

        Token param is set from client token only, caller-supplied one is dropped.
        """
        params = dict(params)
        params.pop(PARAM_TOKEN, None)
        if self._token is not None:
            params[PARAM_TOKEN] = self._token

        queryString = urlencode({k: encodeParamValue(v) for k, v in params.items()}, quote_via=quote)

        separator = "&" if "?" in self.baseUrl else "?"
        return f"{self.baseUrl}{separator}{queryString}"

    def _maskUrl(self, url: str) -> str:
        if self._token is None:
            return url
        return url.replace(f"{PARAM_TOKEN}={quote(self._token, safe='')}", f"{PARAM_TOKEN}=***")

    async def _execute(
        self,
        query: str,
        params: Dict[str, Any],
        limit: int = DEFAULT_LIMIT,
        offset: int = DEFAULT_OFFSET,
    ) -> ApiResult:
        """Make request to KLADR API and decode response."""
        params = dict(params)
        params[PARAM_QUERY] = query.strip()

        if limit > 0:
            params[PARAM_LIMIT] = limit
            if offset > 0:
                params[PARAM_OFFSET] = offset

        if PARAM_WITH_PARENT in params:
            params[PARAM_WITH_PARENT] = int(bool(params[PARAM_WITH_PARENT]))

        url = self.buildUrl(params)
        client = self._getHttpClient()
        try:
            request = client.build_request(HTTP_GET, url)
        except httpx.InvalidURL as e:
            raise ConfigurationError(f"Invalid request URL: {e}") from e

        logger.debug(f"Making request to {self._maskUrl(url)}")
        try:
            response = await client.send(request)
        except httpx.RequestError as e:
            raise TransportError(f"HTTP Client error: {e}") from e

        status = response.status_code
        logger.debug(f"API responded with status {status}")

        if 400 <= status < 500:
            raise ClientError(f"HTTP Client error: {response.reason_phrase}", status, response.reason_phrase)
        if 500 <= status < 600:
            raise ServerError(f"HTTP Server error: {response.reason_phrase}", status, response.reason_phrase)

        return decodeResponse(response.content)
