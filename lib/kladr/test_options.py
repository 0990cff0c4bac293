"""
Unit tests for KLADR search options resolver

Covers recognized/unknown keys, type and value checks for both search modes
and the zip -> building rule of field search.
"""

import pytest

from lib.kladr import (
    ContentType,
    LocalityTypeCode,
    ValidationError,
    resolveQueryFieldOptions,
    resolveQueryStringOptions,
)
from lib.kladr.options import isAllowedType

# ============================================================================
# Search across all fields
# ============================================================================


def test_query_string_adds_one_string():
    """oneString=1 is always present, dood!"""
    assert resolveQueryStringOptions() == {"oneString": 1}
    assert resolveQueryStringOptions({}) == {"oneString": 1}
    assert resolveQueryStringOptions({"regionId": "7700000000000"})["oneString"] == 1


def test_query_string_keeps_recognized_options():
    options = {
        "withParent": True,
        "regionId": "3800000000000",
        "districtId": "3800100000000",
        "cityId": "3800000300000",
        "contentType": ContentType.CITY,
    }

    resolved = resolveQueryStringOptions(options)

    assert resolved == {
        "withParent": True,
        "regionId": "3800000000000",
        "districtId": "3800100000000",
        "cityId": "3800000300000",
        "contentType": "city",
        "oneString": 1,
    }
    assert type(resolved["contentType"]) is str


def test_query_string_ignores_unknown_options():
    resolved = resolveQueryStringOptions({"cityId": "1", "streetId": "2", "foo": object(), "token": "t"})

    assert resolved == {"cityId": "1", "oneString": 1}


def test_query_string_does_not_modify_caller_options():
    options = {"cityId": "1", "foo": "bar"}
    resolveQueryStringOptions(options)
    assert options == {"cityId": "1", "foo": "bar"}


@pytest.mark.parametrize(
    "key,value",
    [
        ("regionId", 38),
        ("districtId", None),
        ("cityId", ["1"]),
        ("withParent", "1"),
        ("withParent", 1.0),
        ("contentType", "country"),
        ("contentType", 1),
    ],
)
def test_query_string_rejects_invalid_values(key, value):
    with pytest.raises(ValidationError) as excInfo:
        resolveQueryStringOptions({key: value})

    assert excInfo.value.key == key
    assert key in str(excInfo.value)


@pytest.mark.parametrize("value", [True, False, 0, 1])
def test_with_parent_accepts_bool_and_int(value):
    assert resolveQueryStringOptions({"withParent": value})["withParent"] == value


# ============================================================================
# Search in single field
# ============================================================================


def test_query_field_requires_content_type():
    """contentType is required for field search, dood!"""
    with pytest.raises(ValidationError) as excInfo:
        resolveQueryFieldOptions({"cityId": "1"})
    assert excInfo.value.key == "contentType"

    with pytest.raises(ValidationError):
        resolveQueryFieldOptions()


@pytest.mark.parametrize("contentType", list(ContentType))
def test_query_field_accepts_all_content_types(contentType):
    assert resolveQueryFieldOptions({"contentType": contentType}) == {"contentType": contentType.value}
    assert resolveQueryFieldOptions({"contentType": contentType.value}) == {"contentType": contentType.value}


def test_query_field_rejects_unknown_content_type():
    with pytest.raises(ValidationError) as excInfo:
        resolveQueryFieldOptions({"contentType": "house"})
    assert excInfo.value.key == "contentType"


def test_query_field_does_not_add_one_string():
    assert "oneString" not in resolveQueryFieldOptions({"contentType": "street"})


def test_query_field_keeps_recognized_options():
    options = {
        "contentType": ContentType.BUILDING,
        "withParent": 0,
        "regionId": "r",
        "districtId": "d",
        "cityId": "c",
        "streetId": "s",
        "buildingId": "b",
        "typeCode": LocalityTypeCode.CITY,
        "limit": 100,
        "unknown": "value",
    }

    resolved = resolveQueryFieldOptions(options)

    assert resolved == {
        "withParent": 0,
        "regionId": "r",
        "districtId": "d",
        "cityId": "c",
        "streetId": "s",
        "buildingId": "b",
        "typeCode": 1,
        "contentType": "building",
    }


@pytest.mark.parametrize("zipCode", [665830, "665830"])
def test_zip_forces_building_content_type(zipCode):
    """zip search works only for buildings, dood!"""
    resolved = resolveQueryFieldOptions({"zip": zipCode, "contentType": ContentType.STREET})

    assert resolved["contentType"] == "building"
    assert resolved["zip"] == zipCode


def test_zip_without_content_type_is_valid():
    assert resolveQueryFieldOptions({"zip": 101000}) == {"zip": 101000, "contentType": "building"}


def test_zip_overrides_invalid_content_type():
    assert resolveQueryFieldOptions({"zip": "101000", "contentType": "nonsense"})["contentType"] == "building"


def test_zip_does_not_modify_caller_options():
    options = {"zip": 101000, "contentType": "city"}
    resolveQueryFieldOptions(options)
    assert options == {"zip": 101000, "contentType": "city"}


@pytest.mark.parametrize("zipCode", [True, None, 1.5, [101000]])
def test_zip_rejects_invalid_types(zipCode):
    with pytest.raises(ValidationError) as excInfo:
        resolveQueryFieldOptions({"zip": zipCode})
    assert excInfo.value.key == "zip"


@pytest.mark.parametrize("typeCode", [1, 2, 3, 4, 5, 6, 7])
def test_type_code_accepts_valid_combinations(typeCode):
    resolved = resolveQueryFieldOptions({"contentType": "city", "typeCode": typeCode})
    assert resolved["typeCode"] == typeCode


def test_type_code_accepts_flags():
    resolved = resolveQueryFieldOptions(
        {"contentType": "city", "typeCode": LocalityTypeCode.VILLAGE | LocalityTypeCode.RURAL}
    )
    assert resolved["typeCode"] == 6
    assert type(resolved["typeCode"]) is int


@pytest.mark.parametrize("typeCode", [0, 8, -1, 15, 100, "1", True, None])
def test_type_code_rejects_invalid_values(typeCode):
    with pytest.raises(ValidationError) as excInfo:
        resolveQueryFieldOptions({"contentType": "city", "typeCode": typeCode})
    assert excInfo.value.key == "typeCode"


@pytest.mark.parametrize("key", ["regionId", "districtId", "cityId", "streetId", "buildingId"])
def test_query_field_ids_must_be_strings(key):
    with pytest.raises(ValidationError) as excInfo:
        resolveQueryFieldOptions({"contentType": "street", key: 7700000000000})
    assert excInfo.value.key == key


def test_is_allowed_type_treats_bool_separately():
    assert isAllowedType(True, (bool, int))
    assert isAllowedType(1, (bool, int))
    assert not isAllowedType(True, (int,))
    assert not isAllowedType(False, (int, str))
    assert isAllowedType("x", (int, str))
    assert isAllowedType(ContentType.CITY, (str,))
