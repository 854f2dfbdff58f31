# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the specification model and the built-in MAL catalogue."""

import pytest
from pydantic import ValidationError

from malstubgen.model import (
    Area,
    Composite,
    Enumeration,
    ErrorDefinition,
    ErrorReference,
    InteractionPattern,
    TypeInfo,
    TypeReference,
    parse_type_shorthand,
)
from malstubgen.model.mal import (
    ATTRIBUTE_NAMES,
    build_mal_area,
    mal_type,
    pubsub_notify_types,
    pubsub_publish_types,
)

# ###############
# Normal Cases
# ###############


def test_shorthand_area_type() -> None:
    """AREA::Name designates an area type."""
    ref = TypeReference.model_validate("MAL::String")
    assert (ref.area, ref.service, ref.name, ref.is_list) == ("MAL", None, "String", False)
    assert ref.owner == "MAL"
    assert str(ref) == "MAL::String"


def test_shorthand_service_list_type() -> None:
    """AREA:Service:Name[] designates the list form of a service type."""
    ref = TypeReference.model_validate("DEMO:Drawing:Canvas[]")
    assert (ref.area, ref.service, ref.name, ref.is_list) == ("DEMO", "Drawing", "Canvas", True)
    assert ref.owner == "Drawing"
    assert ref.element() == TypeReference(area="DEMO", service="Drawing", name="Canvas")
    assert ref.element().as_list() == ref


def test_mapping_form_uses_list_alias() -> None:
    """The mapping form accepts the 'list' key."""
    ref = TypeReference.model_validate({"area": "MAL", "name": "Integer", "list": True})
    assert ref == mal_type("Integer", True)


def test_area_assigns_type_owners() -> None:
    """Area and service types learn the namespace that declares them."""
    area = Area.model_validate(
        {
            "name": "DEMO",
            "number": 42,
            "version": 1,
            "data_types": [{"kind": "composite", "name": "Shape"}],
            "services": [
                {
                    "name": "Drawing",
                    "number": 1,
                    "data_types": [
                        {"kind": "enumeration", "name": "Mode", "short_form_part": 1, "items": []},
                    ],
                }
            ],
        }
    )
    shape = area.data_types[0]
    mode = area.services[0].data_types[0]
    assert isinstance(shape, Composite)
    assert shape.is_abstract
    assert shape.reference == TypeReference.model_validate("DEMO::Shape")
    assert isinstance(mode, Enumeration)
    assert mode.reference == TypeReference.model_validate("DEMO:Drawing:Mode")
    assert area.find_service("Drawing") is area.services[0]
    assert area.find_service("Other") is None


def test_operation_errors_are_discriminated() -> None:
    """Operation errors are either definitions or references to errors defined elsewhere."""
    area = Area.model_validate(
        {
            "name": "DEMO",
            "number": 42,
            "version": 1,
            "services": [
                {
                    "name": "Drawing",
                    "number": 1,
                    "operations": [
                        {
                            "name": "addPoint",
                            "number": 2,
                            "pattern": "SUBMIT",
                            "errors": [
                                {"kind": "reference", "error": "DEMO::DUPLICATE", "extra_info": "MAL::String"},
                                {"kind": "definition", "name": "FULL", "number": 101},
                            ],
                        }
                    ],
                }
            ],
        }
    )
    operation = area.services[0].operations[0]
    assert operation.pattern is InteractionPattern.SUBMIT
    reference, definition = operation.errors
    assert isinstance(reference, ErrorReference)
    assert reference.error.name == "DUPLICATE"
    assert reference.extra_info == mal_type("String")
    assert isinstance(definition, ErrorDefinition)
    assert definition.extra_info is None


def test_mal_catalogue() -> None:
    """The MAL area holds the attributes, the enumerations and the pub/sub composites."""
    area = build_mal_area()
    assert (area.number, area.version) == (1, 1)
    parts = {data_type.name: data_type.short_form_part for data_type in area.data_types}
    assert len(ATTRIBUTE_NAMES) == 18
    assert parts["Blob"] == 1
    assert parts["URI"] == 18
    assert parts["InteractionType"] == 19
    assert parts["UpdateType"] == 22
    assert parts["Subscription"] == 23
    assert parts["File"] == 30
    interaction = next(t for t in area.data_types if t.name == "InteractionType")
    assert [item.nvalue for item in interaction.items] == [1, 2, 3, 4, 5, 6]
    assert build_mal_area() is not area


def test_pubsub_bodies() -> None:
    """Publish carries the update headers then one list per update, Notify prepends the subscription id."""
    updates = [TypeInfo(field_name="point", type=TypeReference.model_validate("DEMO::Point"))]
    publish = pubsub_publish_types(updates)
    assert [info.field_name for info in publish] == ["updateHeaders", "point"]
    assert publish[0].type == mal_type("UpdateHeader", True)
    assert publish[1].type.is_list
    notify = pubsub_notify_types(updates)
    assert [info.field_name for info in notify] == ["subscriptionid", "updateHeaders", "point"]


# ###############
# Error Cases
# ###############


def test_shorthand_requires_three_parts() -> None:
    """A reference without area, service and name separators is rejected."""
    with pytest.raises(ValueError, match="expected AREA:SERVICE:Name"):
        parse_type_shorthand("MAL.String")
    with pytest.raises(ValidationError):
        TypeReference.model_validate("String")


def test_pubsub_rejects_list_update() -> None:
    """An update already declared as a list cannot be wrapped again."""
    updates = [TypeInfo(field_name="points", type=TypeReference.model_validate("DEMO::Point[]"))]
    with pytest.raises(ValueError, match="already a list"):
        pubsub_publish_types(updates)


def test_unknown_data_type_kind() -> None:
    """A data type kind outside attribute, composite and enumeration fails validation."""
    with pytest.raises(ValidationError):
        Area.model_validate(
            {"name": "X", "number": 1, "version": 1, "data_types": [{"kind": "union", "name": "U"}]}
        )
