"""
KLADR API Data Models

This module defines enums for address content types and locality codes,
TypedDict records for search options and the generic JSON result type.
"""

import sys
from enum import IntFlag, StrEnum
from typing import Dict, FrozenSet, List, Union

if sys.version_info >= (3, 14):
    from typing import TypedDict
else:
    from typing_extensions import TypedDict


class ContentType(StrEnum):
    """Address field to search in, dood!"""

    REGION = "region"  # Регион
    DISTRICT = "district"  # Район
    CITY = "city"  # Населённый пункт
    STREET = "street"  # Улица
    BUILDING = "building"  # Дом


class LocalityTypeCode(IntFlag):
    """Settlement kinds, can be combined with `|`"""

    CITY = 1  # Город
    VILLAGE = 2  # Село
    RURAL = 4  # Деревня


# All non-empty combinations of LocalityTypeCode
ALLOWED_TYPE_CODES: FrozenSet[int] = frozenset(
    int(code)
    for code in (
        LocalityTypeCode.CITY,
        LocalityTypeCode.VILLAGE,
        LocalityTypeCode.RURAL,
        LocalityTypeCode.CITY | LocalityTypeCode.VILLAGE,
        LocalityTypeCode.CITY | LocalityTypeCode.RURAL,
        LocalityTypeCode.VILLAGE | LocalityTypeCode.RURAL,
        LocalityTypeCode.CITY | LocalityTypeCode.VILLAGE | LocalityTypeCode.RURAL,
    )
)


class QueryStringOptions(TypedDict, total=False):
    """Options for search across all address fields (`queryString`), dood!

    All fields are optional. Keys not listed here are ignored.
    """

    withParent: Union[bool, int]  # Include parent objects into result
    regionId: str  # Restrict search to region
    districtId: str  # Restrict search to district
    cityId: str  # Restrict search to settlement
    contentType: Union[ContentType, str]


class QueryFieldOptions(TypedDict, total=False):
    """Options for search in single address field (`queryField`), dood!

    `contentType` is required. Passing `zip` forces `contentType` to `building`.
    """

    withParent: Union[bool, int]
    regionId: str
    districtId: str
    cityId: str
    streetId: str
    buildingId: str
    zip: Union[int, str]  # Postal code, works only for buildings
    typeCode: Union[LocalityTypeCode, int]  # One of ALLOWED_TYPE_CODES
    contentType: Union[ContentType, str]


JsonValue = Union[str, int, float, bool, None, List["JsonValue"], Dict[str, "JsonValue"]]
# Decoded API response, passed through as is
ApiResult = JsonValue
