# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the C type mapping and the C data type emitter."""

from pathlib import Path

import pytest

from malstubgen.backends.c import C_ATTRIBUTE_MAP, CAreaContext, CCategory, CTypeEmitter, resolve_c_type
from malstubgen.emit import CFileWriter
from malstubgen.errors import UnexpectedConstructError, UnknownTypeError
from malstubgen.loader import parse_specification
from malstubgen.model import Area, Composite, Enumeration, TypeReference
from malstubgen.registry import MalbinaryEnumSize, TypeRegistry

# ###############
# Helpers
# ###############

_SPEC = """\
areas:
  - name: DEMO
    number: 42
    version: 1
    data_types:
      - kind: enumeration
        name: Color
        short_form_part: 2
        items:
          - {value: RED, nvalue: 1}
          - {value: GREEN, nvalue: 2}
          - {value: BLUE, nvalue: 4}
      - kind: enumeration
        name: Empty
        short_form_part: 3
        items: []
      - kind: composite
        name: Shape
        extends: MAL::Composite
      - kind: composite
        name: Point
        short_form_part: 1
        extends: DEMO::Shape
        fields:
          - {name: x, type: MAL::Integer, can_be_null: false}
          - {name: label, type: MAL::String}
          - {name: color, type: DEMO::Color}
          - {name: value, type: MAL::Attribute}
      - kind: composite
        name: Nothing
        short_form_part: 4
"""


class _Emitter:
    """A type emitter writing every file to an in-memory buffer."""

    def __init__(self, tmp_path: Path, area: Area | None = None) -> None:
        self.area = area if area is not None else parse_specification(_SPEC).areas[0]
        self.registry = TypeRegistry([self.area], C_ATTRIBUTE_MAP)
        self.files: dict[str, CFileWriter] = {}
        self.context = CAreaContext(self.area, tmp_path / "demo", CFileWriter.buffered(), CFileWriter.buffered())
        self.emitter = CTypeEmitter(self.registry, self.context, self._open)

    def _open(self, path: Path) -> CFileWriter:
        writer = CFileWriter.buffered()
        self.files[f"{path.parent.name}/{path.name}"] = writer
        return writer

    def data_type(self, name: str) -> Composite | Enumeration:
        found = next(t for t in self.area.data_types if t.name == name)
        assert isinstance(found, (Composite, Enumeration))
        return found

    def text(self, key: str) -> str:
        writer = self.files[key]
        writer.close()
        return "\n".join(writer.statements)


def _lines(writer: CFileWriter) -> list[str]:
    writer.close()
    return [line.strip() for line in writer.statements]


def _ref(text: str) -> TypeReference:
    return TypeReference.model_validate(text)


def _area() -> Area:
    return parse_specification(_SPEC).areas[0]


def _sized_enum_area(count: int) -> Area:
    items = [{"value": f"V{i}", "nvalue": i} for i in range(count)]
    return Area.model_validate(
        {
            "name": "DEMO",
            "number": 42,
            "version": 1,
            "data_types": [{"kind": "enumeration", "name": "Big", "short_form_part": 1, "items": items}],
        }
    )


def _function_body(text: str, name: str) -> list[str]:
    """Stripped lines between the braces of a top-level function definition."""
    lines = text.splitlines()
    start = next(i for i, line in enumerate(lines) if line.startswith(f"int {name}(") and not line.endswith(";"))
    end = lines.index("}", start)
    return [line.strip() for line in lines[start + 2 : end]]


def _visit_order(body: list[str], members: list[str]) -> list[str]:
    order: list[str] = []
    for line in body:
        for member in members:
            if f"self->{member}" in line and member not in order:
                order.append(member)
    return order


# ###############
# Normal Cases
# ###############


def test_resolve_c_types() -> None:
    """Attributes, enumerations, composites and lists map to their C declarations."""
    registry = TypeRegistry([_area()], C_ATTRIBUTE_MAP)
    string = resolve_c_type(registry, _ref("MAL::String"))
    assert (string.category, string.c_type, string.is_pointer) == (CCategory.ATTRIBUTE, "mal_string_t *", True)
    integer = resolve_c_type(registry, _ref("MAL::Integer"))
    assert (integer.c_type, integer.has_presence_flag) == ("mal_integer_t", True)
    color = resolve_c_type(registry, _ref("DEMO::Color"))
    assert (color.c_type, color.enum_size) == ("demo_color_t", MalbinaryEnumSize.SMALL)
    assert resolve_c_type(registry, _ref("DEMO::Point")).c_type == "demo_point_t *"
    points = resolve_c_type(registry, _ref("DEMO::Point[]"))
    assert (points.category, points.c_type, points.short_form) == (
        CCategory.LIST,
        "demo_point_list_t *",
        "DEMO_POINT_LIST_SHORT_FORM",
    )
    attribute = resolve_c_type(registry, _ref("MAL::Attribute"))
    assert (attribute.category, attribute.c_type) == (CCategory.ABSTRACT_ATTRIBUTE, "union mal_attribute_t")


def test_emit_enumeration(tmp_path: Path) -> None:
    """An enumeration gets a typedef, its numeric values, two short forms and a list type."""
    emitter = _Emitter(tmp_path)
    basenames = emitter.emitter.emit_enumeration(emitter.data_type("Color"))
    assert basenames == ["demo_color_list"]

    types = _lines(emitter.context.types)
    assert "typedef enum {" in types
    assert "DEMO_COLOR_RED," in types
    assert "DEMO_COLOR_BLUE" in types
    assert "} demo_color_t;" in types
    assert "#define DEMO_COLOR_SHORT_FORM 0x2a000001000002L" in types
    assert "#define DEMO_COLOR_LIST_SHORT_FORM 0x2a000001fffffeL" in types
    assert "typedef struct _demo_color_list_t demo_color_list_t;" in types

    source = _lines(emitter.context.source)
    assert "int DEMO_COLOR_NUMERIC_VALUES[] =" in source
    assert source[source.index("int DEMO_COLOR_NUMERIC_VALUES[] =") + 2 : source.index("};")] == ["1,", "2,", "4"]

    list_source = emitter.text("src/demo_color_list.c")
    assert "mal_encoder_encode_small_enum(encoder, cursor, content[i])" in list_source
    assert "self->content[i] = (demo_color_t) enumerated_value;" in list_source
    assert "include/demo_color_list.h" in emitter.files
    assert _lines(emitter.context.structure_includes) == ['#include "demo_color_list.h"']


def test_emit_composite(tmp_path: Path) -> None:
    """A concrete composite gets its structure, accessors, codec and list files."""
    emitter = _Emitter(tmp_path)
    basenames = emitter.emitter.emit_composite(emitter.data_type("Point"))
    assert basenames == ["demo_point", "demo_point_list"]
    assert set(emitter.files) == {
        "include/demo_point.h",
        "src/demo_point.c",
        "include/demo_point_list.h",
        "src/demo_point_list.c",
    }

    source = [line.strip() for line in emitter.text("src/demo_point.c").splitlines()]
    assert "mal_integer_t f_x;" in source
    assert "bool f_x_is_present;" not in source
    assert "mal_string_t * f_label;" in source
    assert "bool f_color_is_present;" in source
    assert "unsigned char f_value_attribute_tag;" in source
    assert "union mal_attribute_t f_value;" in source
    assert "mal_string_destroy(& (*self_p)->f_label);" in source
    assert "mal_attribute_destroy(&(*self_p)->f_value, (*self_p)->f_value_attribute_tag);" in source

    header = emitter.text("include/demo_point.h")
    assert "#ifndef __DEMO_POINT_H_INCLUDED__" in header
    assert "demo_point_t * demo_point_new(void);" in header
    assert "int demo_point_encode_malbinary(demo_point_t * self, mal_encoder_t * encoder, void * cursor);" in header
    assert "bool demo_point_color_is_present(demo_point_t * self);" in header
    assert "void demo_point_set_label(demo_point_t * self, mal_string_t * f_label);" in header

    types = _lines(emitter.context.types)
    assert "#define DEMO_POINT_SHORT_FORM 0x2a000001000001L" in types
    assert "#define DEMO_POINT_LIST_SHORT_FORM 0x2a000001ffffffL" in types


def test_composite_codec_field_order(tmp_path: Path) -> None:
    """Length, encode and decode visit the fields in the same declared order."""
    emitter = _Emitter(tmp_path)
    emitter.emitter.emit_composite(emitter.data_type("Point"))
    source = emitter.text("src/demo_point.c")
    members = ["f_x", "f_label", "f_color", "f_value"]
    for function in ("add_encoding_length", "encode", "decode"):
        body = _function_body(source, f"demo_point_{function}_malbinary")
        assert _visit_order(body, members) == members

    decode = _function_body(source, "demo_point_decode_malbinary")
    assert "rc = mal_decoder_decode_small_enum(decoder, cursor, &enumerated_value);" in decode
    assert "self->f_color_is_present = presence_flag;" in decode
    assert "self->f_label = NULL;" in decode


def test_composite_without_fields(tmp_path: Path) -> None:
    """A composite with no field gets an empty structure and codecs that code nothing."""
    emitter = _Emitter(tmp_path)
    assert emitter.emitter.emit_composite(emitter.data_type("Nothing")) == ["demo_nothing", "demo_nothing_list"]
    source = emitter.text("src/demo_nothing.c")
    lines = [line.strip() for line in source.splitlines()]
    start = lines.index("struct _demo_nothing_t {")
    assert lines[start + 1] == "};"
    for function in ("add_encoding_length", "encode", "decode"):
        assert _function_body(source, f"demo_nothing_{function}_malbinary") == ["int rc = 0;", "return rc;"]


def test_enumeration_size_classes(tmp_path: Path) -> None:
    """Enumerations above 256 and 65536 items are coded as medium and large enums."""
    medium = _Emitter(tmp_path, _sized_enum_area(300))
    medium.emitter.emit_enumeration(medium.data_type("Big"))
    medium_list = medium.text("src/demo_big_list.c")
    assert "mal_encoder_encode_medium_enum(encoder, cursor, content[i])" in medium_list
    assert "mal_encoder_encode_small_enum" not in medium_list

    large = _Emitter(tmp_path, _sized_enum_area(70000))
    large.emitter.emit_enumeration(large.data_type("Big"))
    large_list = large.text("src/demo_big_list.c")
    assert "mal_encoder_encode_large_enum(encoder, cursor, content[i])" in large_list
    assert "mal_decoder_decode_large_enum(decoder, cursor, &enumerated_value)" in large_list


def test_abstract_composite_has_no_files(tmp_path: Path) -> None:
    """An abstract composite only gets a note in the area header."""
    emitter = _Emitter(tmp_path)
    assert emitter.emitter.emit_composite(emitter.data_type("Shape")) == []
    assert emitter.files == {}
    assert any("abstract composite DEMO:_:Shape" in line for line in _lines(emitter.context.types))


# ###############
# Error Cases
# ###############


def test_resolve_abstract_and_unknown_types() -> None:
    """Abstract composites have no C value and unknown types cannot be mapped."""
    registry = TypeRegistry([_area()], C_ATTRIBUTE_MAP)
    with pytest.raises(UnexpectedConstructError):
        resolve_c_type(registry, _ref("DEMO::Shape"))
    with pytest.raises(UnknownTypeError):
        resolve_c_type(registry, _ref("OTHER::Thing"))


def test_enumeration_without_items(tmp_path: Path) -> None:
    """An enumeration needs at least one item."""
    emitter = _Emitter(tmp_path)
    with pytest.raises(UnexpectedConstructError, match="no item"):
        emitter.emitter.emit_enumeration(emitter.data_type("Empty"))
