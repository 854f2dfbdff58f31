# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the type registry."""

import logging

import pytest

from malstubgen.errors import IllegalShortFormError, UnexpectedConstructError, UnknownTypeError
from malstubgen.model import Area, TypeReference
from malstubgen.registry import (
    AbstractKind,
    MalbinaryEnumSize,
    TypeKind,
    TypeRegistry,
    absolute_short_form,
    split_short_form,
)

# ###############
# Helpers
# ###############


def _ref(text: str) -> TypeReference:
    return TypeReference.model_validate(text)


def _demo_area() -> Area:
    """DEMO area with an abstract parent, two concrete composites, an enumeration and a service type."""
    return Area.model_validate(
        {
            "name": "DEMO",
            "number": 42,
            "version": 1,
            "data_types": [
                {"kind": "composite", "name": "Shape", "extends": "MAL::Composite"},
                {
                    "kind": "composite",
                    "name": "Parent",
                    "short_form_part": 1,
                    "extends": "DEMO::Shape",
                    "fields": [
                        {"name": "p1", "type": "MAL::Integer"},
                        {"name": "p2", "type": "MAL::String"},
                    ],
                },
                {
                    "kind": "composite",
                    "name": "Child",
                    "short_form_part": 2,
                    "extends": "DEMO::Parent",
                    "fields": [{"name": "c1", "type": "MAL::Boolean"}],
                },
                {
                    "kind": "enumeration",
                    "name": "Color",
                    "short_form_part": 3,
                    "items": [{"value": "RED", "nvalue": 10}, {"value": "BLUE", "nvalue": 20}],
                },
            ],
            "services": [
                {
                    "name": "Svc",
                    "number": 3,
                    "data_types": [{"kind": "composite", "name": "Local", "short_form_part": 1}],
                }
            ],
        }
    )


def _registry() -> TypeRegistry:
    return TypeRegistry([_demo_area()], {"Integer": "mal_integer_t", "String": "mal_string_t *"})


# ###############
# Normal Cases
# ###############


def test_builtin_mal_area_is_always_known() -> None:
    """The MAL catalogue is registered without being supplied."""
    registry = TypeRegistry([])
    assert registry.is_attribute(_ref("MAL::String"))
    assert registry.is_enum(_ref("MAL::InteractionType"))
    assert registry.is_composite(_ref("MAL::Subscription"))
    assert registry.area("MAL").number == 1


def test_classification_of_demo_types() -> None:
    """Concrete, abstract and root types are classified from their declaration."""
    registry = _registry()
    assert registry.kind(_ref("DEMO::Parent")) is TypeKind.COMPOSITE
    assert registry.kind(_ref("DEMO::Color[]")) is TypeKind.ENUMERATION
    assert registry.is_abstract(_ref("DEMO::Shape"))
    assert registry.abstract_kind(_ref("DEMO::Shape")) is AbstractKind.NAMED_ABSTRACT_COMPOSITE
    assert registry.abstract_kind(_ref("MAL::Attribute")) is AbstractKind.ATTRIBUTE_ROOT
    assert registry.abstract_kind(_ref("MAL::Composite")) is AbstractKind.COMPOSITE_ROOT
    assert registry.abstract_kind(_ref("MAL::Element")) is AbstractKind.ELEMENT_ROOT
    assert registry.abstract_kind(_ref("DEMO::Parent")) is None
    assert registry.is_abstract_attribute(_ref("MAL::Attribute[]"))


def test_unknown_type_is_an_opaque_element(caplog: pytest.LogCaptureFixture) -> None:
    """An unknown reference is abstract, maps to the Element root and is warned about once."""
    registry = _registry()
    unknown = _ref("OTHER::Thing")
    assert not registry.is_known(unknown)
    assert registry.is_abstract(unknown)
    assert registry.abstract_kind(unknown) is AbstractKind.ELEMENT_ROOT
    with caplog.at_level(logging.WARNING, logger="malstubgen"):
        assert registry.check_known(unknown, "a field") is False
        assert registry.check_known(unknown.as_list(), "a parameter") is False
    warnings = [record for record in caplog.records if "OTHER::Thing" in record.getMessage()]
    assert len(warnings) == 1


def test_attribute_details_reads_pointer_marker() -> None:
    """A trailing star in the attribute mapping marks a nullable pointer type."""
    registry = _registry()
    integer = registry.attribute_details(_ref("MAL::Integer"))
    string = registry.attribute_details(_ref("MAL::String"))
    assert (integer.target_type, integer.is_nullable_pointer) == ("mal_integer_t", False)
    assert (string.target_type, string.is_nullable_pointer) == ("mal_string_t", True)


def test_enumeration_size_classes() -> None:
    """The wire size class depends only on the number of items."""
    assert MalbinaryEnumSize.for_item_count(3) is MalbinaryEnumSize.SMALL
    assert MalbinaryEnumSize.for_item_count(256) is MalbinaryEnumSize.SMALL
    assert MalbinaryEnumSize.for_item_count(300) is MalbinaryEnumSize.MEDIUM
    assert MalbinaryEnumSize.for_item_count(65536) is MalbinaryEnumSize.MEDIUM
    assert MalbinaryEnumSize.for_item_count(70000) is MalbinaryEnumSize.LARGE
    assert _registry().enum_wire_size(_ref("DEMO::Color")) is MalbinaryEnumSize.SMALL


def test_inherited_fields_come_first() -> None:
    """Composite fields list the ancestors' fields before the own fields."""
    registry = _registry()
    assert registry.parent_chain(_ref("DEMO::Child")) == [_ref("DEMO::Parent"), _ref("DEMO::Shape")]
    names = [field.name for field in registry.composite_fields(_ref("DEMO::Child"))]
    assert names == ["p1", "p2", "c1"]


def test_concrete_types_of_named_abstract_composite() -> None:
    """A named abstract composite resolves to its concrete descendants."""
    registry = _registry()
    assert registry.concrete_types_of(_ref("DEMO::Shape")) == [_ref("DEMO::Parent"), _ref("DEMO::Child")]
    attributes = registry.concrete_types_of(_ref("MAL::Attribute"))
    assert len(attributes) == 18
    assert all(registry.is_attribute(ref) for ref in attributes)


def test_absolute_short_forms() -> None:
    """The short form packs area, service, version and the signed relative part."""
    registry = _registry()
    assert registry.absolute_short_form(_ref("DEMO::Parent")) == 0x002A000001000001
    assert registry.absolute_short_form(_ref("DEMO::Parent[]")) == 0x002A000001FFFFFF
    assert registry.absolute_short_form(_ref("DEMO:Svc:Local")) == 0x002A000301000001
    assert split_short_form(0x002A000001FFFFFF) == (42, 0, 1, -1)


def test_list_short_form_mirrors_element_short_form() -> None:
    """The list short form shares area, service and version and negates the relative part."""
    registry = _registry()
    element = split_short_form(registry.absolute_short_form(_ref("DEMO::Color")))
    listed = split_short_form(registry.absolute_short_form(_ref("DEMO::Color[]")))
    assert listed[:3] == element[:3]
    assert listed[3] == -element[3]


def test_all_concrete_types_skips_abstract_composites() -> None:
    """Abstract composites never appear among the concrete types."""
    concrete = list(_registry().all_concrete_types())
    assert _ref("DEMO::Shape") not in concrete
    assert concrete[0] == _ref("MAL::Blob")
    assert concrete[-1] == _ref("DEMO:Svc:Local")


# ###############
# Error Cases
# ###############


def test_short_form_out_of_range() -> None:
    """A relative part outside the signed 24-bit range is rejected."""
    with pytest.raises(IllegalShortFormError):
        absolute_short_form(1, 0, 1, 0x00800000)


def test_duplicate_short_form_part() -> None:
    """Two types of one namespace cannot share a short form part."""
    area = _demo_area()
    duplicate = Area.model_validate(
        {
            "name": "DUP",
            "number": 2,
            "version": 1,
            "data_types": [
                {"kind": "composite", "name": "A", "short_form_part": 1},
                {"kind": "composite", "name": "B", "short_form_part": 1},
            ],
        }
    )
    with pytest.raises(UnexpectedConstructError):
        TypeRegistry([area, duplicate])


def test_unknown_area_and_attribute_mapping() -> None:
    """Unknown areas and unmapped attributes raise UnknownType."""
    registry = _registry()
    with pytest.raises(UnknownTypeError):
        registry.area("NOPE")
    with pytest.raises(UnknownTypeError):
        registry.attribute_details(_ref("MAL::Double"))


def test_cyclic_inheritance() -> None:
    """A composite inheriting from itself through a parent is rejected."""
    area = Area.model_validate(
        {
            "name": "LOOP",
            "number": 5,
            "version": 1,
            "data_types": [
                {"kind": "composite", "name": "A", "short_form_part": 1, "extends": "LOOP::B"},
                {"kind": "composite", "name": "B", "short_form_part": 2, "extends": "LOOP::A"},
            ],
        }
    )
    with pytest.raises(UnexpectedConstructError):
        TypeRegistry([area]).parent_chain(_ref("LOOP::A"))
