# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the name mapping helpers."""

from malstubgen import naming
from malstubgen.model import TypeReference

# ###############
# Helpers
# ###############


def _ref(text: str) -> TypeReference:
    return TypeReference.model_validate(text)


# ###############
# Normal Cases
# ###############


def test_file_and_package_names() -> None:
    """Files use the lower-cased type name and packages the lower-cased owner."""
    assert naming.file_basename(_ref("DEMO:Drawing:Canvas")) == "canvas"
    assert naming.package_name(_ref("DEMO:Drawing:Canvas")) == "drawing"
    assert naming.package_name(_ref("DEMO::Point")) == "demo"
    assert naming.owner_package("DEMO", None) == "demo"


def test_constants() -> None:
    """Constant names are upper-cased with a fixed suffix."""
    assert naming.short_form_const("Point") == "POINT_SHORT_FORM"
    assert naming.list_short_form_const("Point") == "POINT_LIST_SHORT_FORM"
    assert naming.type_short_form_const("Point") == "POINT_TYPE_SHORT_FORM"
    assert naming.operation_number_const("addPoint") == "ADDPOINT_OPERATION_NUMBER"
    assert naming.error_const("Duplicate") == "ERROR_DUPLICATE"
    assert naming.operation_error_const("export", "bad_format") == "EXPORT_ERROR_BAD_FORMAT"


def test_c_names() -> None:
    """C names join area, service and name in lower case."""
    assert naming.c_type_name(_ref("DEMO:Drawing:Canvas")) == "demo_drawing_canvas"
    assert naming.c_qualified_name("DEMO", None, "Point") == "demo_point"
    assert naming.c_struct_field("sourceURI") == "f_sourceuri"


def test_go_names() -> None:
    """Go names are package-qualified only outside their own package."""
    point = _ref("DEMO::Point")
    assert naming.go_type_name(point, "demo") == "Point"
    assert naming.go_type_name(point, "drawing") == "demo.Point"
    assert naming.go_null_value(point.as_list(), "demo") == "NullPointList"
    assert naming.go_null_value(_ref("MAL::String"), "demo") == "mal.NullString"
    assert naming.upper_first("addPoint") == "AddPoint"
    assert naming.mal_name("DEMO", None, "Point") == "DEMO:_:Point"
