# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the Go back-end data types and package layout."""

from pathlib import Path

import pytest

from malstubgen.backends.go import GoPackages
from malstubgen.config import GeneratorOptions
from malstubgen.driver import generate
from malstubgen.errors import UnexpectedConstructError, UnknownTypeError
from malstubgen.loader import load_specification, parse_specification
from malstubgen.model import Area, Specification

# ###############
# Helpers
# ###############

DEMO_SPEC = Path(__file__).parents[3] / "docs" / "examples" / "demo.yaml"


def _generate_demo(tmp_path: Path) -> Path:
    options = GeneratorOptions(destination=tmp_path, go_base_package="example.org/stubs")
    generate(load_specification(DEMO_SPEC), options, "go")
    return tmp_path / "demo"


def _lines(path: Path) -> list[str]:
    return [line.strip() for line in path.read_text(encoding="utf-8").splitlines()]


def _composite(name: str, fields: list[dict[str, object]]) -> dict[str, object]:
    return {"kind": "composite", "name": name, "short_form_part": 1, "fields": fields}


def _sized_enum_area(count: int) -> dict[str, object]:
    items = [{"value": f"V{i}", "nvalue": i} for i in range(count)]
    enumeration = {"kind": "enumeration", "name": "Big", "short_form_part": 1, "items": items}
    return {"name": "DEMO", "number": 42, "version": 1, "data_types": [enumeration]}


def _generate_area(destination: Path, area: dict[str, object]) -> Path:
    specification = Specification(areas=[Area.model_validate(area)])
    generate(specification, GeneratorOptions(destination=destination), "go")
    return destination / "demo"


def _function_body(text: str, signature: str) -> list[str]:
    """Stripped lines of a top-level Go function whose first line starts with the signature."""
    lines = text.splitlines()
    start = next(i for i, line in enumerate(lines) if line.startswith(signature))
    end = lines.index("}", start)
    return [line.strip() for line in lines[start + 1 : end]]


# ###############
# Normal Cases
# ###############


def test_package_layout(tmp_path: Path) -> None:
    """Area types live in the area package and service types in a sub-package."""
    folder = _generate_demo(tmp_path)
    for name in ("helper", "color", "color_list", "shape", "point", "point_list"):
        assert (folder / f"{name}.go").is_file()
    for name in ("canvas", "canvas_list", "helper", "consumer", "provider"):
        assert (folder / "drawing" / f"{name}.go").is_file()
    assert _lines(folder / "drawing" / "canvas.go")[0] == "package drawing"


def test_area_helper(tmp_path: Path) -> None:
    """The area helper defines the area identifiers and the area errors."""
    lines = _lines(_generate_demo(tmp_path) / "helper.go")
    assert lines[0] == "package demo"
    assert '"github.com/CNES/ccsdsmo-malgo/mal"' in lines
    assert "AREA_NUMBER mal.UShort = 42" in lines
    assert "AREA_VERSION mal.UOctet = 1" in lines
    assert 'AREA_NAME = mal.Identifier("DEMO")' in lines
    assert "ERROR_DUPLICATE mal.UInteger = 100" in lines


def test_enumeration(tmp_path: Path) -> None:
    """An enumeration maps ordinals to numeric values and uses the small wire size."""
    lines = _lines(_generate_demo(tmp_path) / "color.go")
    assert "type Color uint32" in lines
    assert "COLOR_BLUE_OVAL = 2" in lines
    assert "COLOR_BLUE_NVAL = 4" in lines
    assert "var colorNvalTable = []uint32{" in lines
    assert "COLOR_GREEN = Color(COLOR_GREEN_OVAL)" in lines
    assert "value := mal.NewUOctet(uint8(uint32(*receiver)))" in lines
    assert "const COLOR_SHORT_FORM mal.Long = 0x2a000001000002" in lines
    assert "const COLOR_TYPE_SHORT_FORM mal.Integer = 2" in lines


def test_composite(tmp_path: Path) -> None:
    """A composite holds its fields, implements its abstract parent and registers itself."""
    lines = _lines(_generate_demo(tmp_path) / "point.go")
    assert "type Point struct {" in lines
    assert "X mal.Integer" in lines
    assert "Label *mal.String" in lines
    assert "Color *Color" in lines
    assert "Value mal.Attribute" in lines
    assert "func (receiver *Point) Shape() Shape {" in lines
    assert "mal.RegisterMALElement(POINT_SHORT_FORM, NullPoint)" in lines
    assert "return mal.NULL_SERVICE_NUMBER" in lines
    assert "err := encoder.EncodeInteger(&receiver.X)" in lines
    assert "err = encoder.EncodeNullableString(receiver.Label)" in lines
    assert "Color, err := decoder.DecodeNullableElement(NullColor)" in lines


def test_service_composite_refers_to_area(tmp_path: Path) -> None:
    """Service types qualify the area constants and types with the area package."""
    lines = _lines(_generate_demo(tmp_path) / "drawing" / "canvas.go")
    assert '"example.org/stubs/demo"' in lines
    assert "Points *demo.PointList" in lines
    assert "return demo.AREA_NUMBER" in lines
    assert "return SERVICE_NUMBER" in lines


def test_abstract_composite(tmp_path: Path) -> None:
    """An abstract composite only defines its marker interfaces."""
    lines = _lines(_generate_demo(tmp_path) / "shape.go")
    assert "type Shape interface {" in lines
    assert "type ShapeList interface {" in lines
    assert "var NullShape Shape = nil" in lines


def test_default_import_prefix(tmp_path: Path) -> None:
    """Without a base package, generated areas are imported under the project name."""
    options = GeneratorOptions(destination=tmp_path, project_name="areas")
    generate(load_specification(DEMO_SPEC), options, "go")
    assert '"areas/demo"' in _lines(tmp_path / "demo" / "drawing" / "consumer.go")
    packages = GoPackages([], "areas")
    assert packages.import_path("MAL") == "github.com/CNES/ccsdsmo-malgo/mal"
    assert packages.import_path("COM", "Archive") == "github.com/CNES/ccsdsmo-malgo/com/archive"


def test_list_encode_stops_on_error(tmp_path: Path) -> None:
    """A list encoder returns the error of the first element that fails to encode."""
    lines = _lines(_generate_demo(tmp_path) / "point_list.go")
    assert "err := encoder.EncodeUInteger(mal.NewUInteger(uint32(len([]*Point(*receiver)))))" in lines
    index = lines.index("err = encoder.EncodeNullableElement(e)")
    assert lines[index + 1 : index + 4] == ["if err != nil {", "return err", "}"]
    assert "elem, err := decoder.DecodeNullableElement(NullPoint)" in lines


def test_composite_without_fields(tmp_path: Path) -> None:
    """A composite with no field gets an empty structure and codecs that code nothing."""
    area = {"name": "DEMO", "number": 42, "version": 1, "data_types": [_composite("Nothing", [])]}
    folder = _generate_area(tmp_path, area)
    text = (folder / "nothing.go").read_text(encoding="utf-8")
    lines = _lines(folder / "nothing.go")
    start = lines.index("type Nothing struct {")
    assert lines[start + 1] == "}"

    encode = _function_body(text, "func (receiver *Nothing) Encode(")
    assert not any("err" in line for line in encode)
    assert encode[-1] == "return nil"
    decode = _function_body(text, "func (receiver *Nothing) Decode(")
    assert not any("decoder.Decode" in line for line in decode)
    assert decode[-3:] == ["var composite = Nothing {", "}", "return &composite, nil"]


def test_enumeration_size_classes(tmp_path: Path) -> None:
    """Enumerations above 256 and 65536 items use UShort and UInteger ordinals."""
    medium = _lines(_generate_area(tmp_path / "medium", _sized_enum_area(300)) / "big.go")
    assert "value := mal.NewUShort(uint16(uint32(*receiver)))" in medium
    assert "return encoder.EncodeUShort(value)" in medium
    assert "elem, err := decoder.DecodeUShort()" in medium

    large = _lines(_generate_area(tmp_path / "large", _sized_enum_area(70000)) / "big.go")
    assert "value := mal.NewUInteger(uint32(*receiver))" in large
    assert "elem, err := decoder.DecodeUInteger()" in large
    assert "value := Big(uint32(*elem))" in large


# ###############
# Error Cases
# ###############


def test_package_collision(tmp_path: Path) -> None:
    """A service named like its area would share the area package."""
    specification = parse_specification(
        "areas:\n  - {name: SAME, number: 5, version: 1, services: [{name: Same, number: 1}]}\n"
    )
    with pytest.raises(UnexpectedConstructError, match="Go package same"):
        generate(specification, GeneratorOptions(destination=tmp_path), "go")


def test_abstract_composite_field(tmp_path: Path) -> None:
    """A composite field may not have a named abstract type."""
    specification = parse_specification(
        """\
areas:
  - name: BAD
    number: 6
    version: 1
    data_types:
      - {kind: composite, name: Base}
      - kind: composite
        name: Holder
        short_form_part: 1
        fields:
          - {name: base, type: BAD::Base}
"""
    )
    with pytest.raises(UnexpectedConstructError) as exc_info:
        generate(specification, GeneratorOptions(destination=tmp_path), "go")
    assert exc_info.value.context == ("BAD", "Holder", "base")


def test_unknown_composite_field(tmp_path: Path) -> None:
    """A composite field whose type is not registered cannot be coded."""
    specification = parse_specification(
        """\
areas:
  - name: BAD
    number: 6
    version: 1
    data_types:
      - kind: composite
        name: Holder
        short_form_part: 1
        fields:
          - {name: base, type: OTHER::Missing}
"""
    )
    with pytest.raises(UnknownTypeError, match="cannot map type OTHER::Missing") as exc_info:
        generate(specification, GeneratorOptions(destination=tmp_path), "go")
    assert exc_info.value.context == ("BAD", "Holder", "base")
