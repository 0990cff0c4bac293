"""
KLADR search options resolver

Validates and normalizes caller-supplied options for both search modes:
search across all address fields (`queryString`) and search in a single
address field (`queryField`). Each mode has an explicit table of recognized
options; unknown keys are dropped, recognized keys with wrong type or value
raise ValidationError.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Collection, Dict, Mapping, Optional, Tuple

from .constants import PARAM_CONTENT_TYPE, PARAM_ONE_STRING, PARAM_ZIP
from .exceptions import ValidationError
from .models import ALLOWED_TYPE_CODES, ContentType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OptionRule:
    """Validation rule for single option, dood!

    Attributes:
        types: Allowed value types. `bool` is accepted only if listed explicitly
        allowedValues: If set, value must be one of them
        required: Whether option must be present
        normalize: Conversion applied to valid value
    """

    types: Tuple[type, ...]
    allowedValues: Optional[Collection[Any]] = None
    required: bool = False
    normalize: Optional[Callable[[Any], Any]] = None


def _normalizeContentType(value: Any) -> str:
    return ContentType(value).value


def _normalizeTypeCode(value: Any) -> int:
    return int(value)


_CONTENT_TYPES = frozenset(item.value for item in ContentType)

QUERY_STRING_RULES: Dict[str, OptionRule] = {
    "withParent": OptionRule(types=(bool, int)),
    "regionId": OptionRule(types=(str,)),
    "districtId": OptionRule(types=(str,)),
    "cityId": OptionRule(types=(str,)),
    "contentType": OptionRule(types=(str,), allowedValues=_CONTENT_TYPES, normalize=_normalizeContentType),
}

QUERY_FIELD_RULES: Dict[str, OptionRule] = {
    "withParent": OptionRule(types=(bool, int)),
    "regionId": OptionRule(types=(str,)),
    "districtId": OptionRule(types=(str,)),
    "cityId": OptionRule(types=(str,)),
    "streetId": OptionRule(types=(str,)),
    "buildingId": OptionRule(types=(str,)),
    "zip": OptionRule(types=(int, str)),
    "typeCode": OptionRule(types=(int,), allowedValues=ALLOWED_TYPE_CODES, normalize=_normalizeTypeCode),
    "contentType": OptionRule(
        types=(str,), allowedValues=_CONTENT_TYPES, required=True, normalize=_normalizeContentType
    ),
}


def isAllowedType(value: Any, types: Tuple[type, ...]) -> bool:
    """Check value type against allowed types.

    bool is a subclass of int in Python, so it is rejected unless
    `bool` is listed in types explicitly.
    """
    if isinstance(value, bool) and bool not in types:
        return False
    return isinstance(value, types)


def resolveOptions(options: Optional[Mapping[str, Any]], rules: Mapping[str, OptionRule]) -> Dict[str, Any]:
    """Validate options against rules and return normalized copy, dood!

    Args:
        options: Caller-supplied options (not modified)
        rules: Recognized options and their rules

    Returns:
        New dict with recognized options only, ordered as in rules

    Raises:
        ValidationError: If required option is missing or option has wrong type or value
    """
    options = options or {}
    resolved: Dict[str, Any] = {}

    for key, rule in rules.items():
        if key not in options:
            if rule.required:
                raise ValidationError(f'The required option "{key}" is missing', key)
            continue

        value = options[key]
        if not isAllowedType(value, rule.types):
            expected = " or ".join(t.__name__ for t in rule.types)
            raise ValidationError(
                f'The option "{key}" with value {value!r} is expected to be of type {expected}, '
                f"but is of type {type(value).__name__}",
                key,
            )

        if rule.allowedValues is not None and value not in rule.allowedValues:
            allowed = ", ".join(repr(v) for v in sorted(rule.allowedValues))
            raise ValidationError(
                f'The option "{key}" with value {value!r} is invalid. Accepted values are: {allowed}',
                key,
            )

        resolved[key] = rule.normalize(value) if rule.normalize is not None else value

    ignored = [key for key in options if key not in rules]
    if ignored:
        logger.debug(f"Ignoring unknown options: {ignored}")

    return resolved


def resolveQueryStringOptions(options: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Resolve options for search across all address fields.

    Adds `oneString=1` to the result.
    """
    resolved = resolveOptions(options, QUERY_STRING_RULES)
    resolved[PARAM_ONE_STRING] = 1
    return resolved


def resolveQueryFieldOptions(options: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Resolve options for search in single address field.

    Postal code search works only for buildings, so `contentType` is
    forced to `building` whenever `zip` is present, before validation.
    """
    effective = dict(options or {})
    if PARAM_ZIP in effective:
        effective[PARAM_CONTENT_TYPE] = ContentType.BUILDING
    return resolveOptions(effective, QUERY_FIELD_RULES)
