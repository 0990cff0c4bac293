"""
KLADR API Client Library

This module provides a Python async client library for the KLADR API
(Russian address classification directory), dood!

Example usage:
    from lib.kladr import ContentType, KladrClient, LocalityTypeCode

    async with KladrClient("your_token") as client:
        # Search across all address fields
        result = await client.queryString("Москва Тверская", {"withParent": True}, limit=5)

        # Search settlements only
        result = await client.queryField(
            "Анга",
            {"contentType": ContentType.CITY, "typeCode": LocalityTypeCode.CITY | LocalityTypeCode.VILLAGE},
        )

        # Search buildings by postal code
        result = await client.queryField("", {"zip": 665830})
"""

from lib.kladr.client import KladrClient
from lib.kladr.exceptions import (
    ClientError,
    ConfigurationError,
    DecodeError,
    HttpError,
    KladrError,
    ServerError,
    TransportError,
    ValidationError,
)
from lib.kladr.models import (
    ALLOWED_TYPE_CODES,
    ApiResult,
    ContentType,
    JsonValue,
    LocalityTypeCode,
    QueryFieldOptions,
    QueryStringOptions,
)
from lib.kladr.options import resolveQueryFieldOptions, resolveQueryStringOptions

__all__ = [
    "KladrClient",
    "ContentType",
    "LocalityTypeCode",
    "ALLOWED_TYPE_CODES",
    "QueryStringOptions",
    "QueryFieldOptions",
    "ApiResult",
    "JsonValue",
    "resolveQueryStringOptions",
    "resolveQueryFieldOptions",
    "KladrError",
    "ConfigurationError",
    "ValidationError",
    "TransportError",
    "HttpError",
    "ClientError",
    "ServerError",
    "DecodeError",
]
