# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Built-in catalogue of the MAL area: attributes, enumerations and pub/sub composites."""

from __future__ import annotations

from malstubgen.model.entities import Area
from malstubgen.model.types import TypeInfo, TypeReference

MAL_AREA_NAME = "MAL"
MAL_AREA_NUMBER = 1
MAL_AREA_VERSION = 1

ELEMENT = "Element"
COMPOSITE = "Composite"
ATTRIBUTE = "Attribute"

ATTRIBUTE_NAMES = (
    "Blob",
    "Boolean",
    "Duration",
    "Float",
    "Double",
    "Identifier",
    "Octet",
    "UOctet",
    "Short",
    "UShort",
    "Integer",
    "UInteger",
    "Long",
    "ULong",
    "String",
    "Time",
    "FineTime",
    "URI",
)

# ###############
# Public Interface
# ###############


def build_mal_area() -> Area:
    """Return a fresh copy of the MAL area definition."""
    return Area.model_validate(_MAL_AREA)


def mal_type(name: str, is_list: bool = False) -> TypeReference:
    """Reference to a type of the MAL area."""
    return TypeReference(area=MAL_AREA_NAME, name=name, is_list=is_list)


def pubsub_register_types() -> list[TypeInfo]:
    """Body of a subscriber Register message."""
    return [TypeInfo(field_name="subscription", type=mal_type("Subscription"))]


def pubsub_publish_register_types() -> list[TypeInfo]:
    """Body of a publisher Register message."""
    return [TypeInfo(field_name="entitykeys", type=mal_type("EntityKey", True))]


def pubsub_deregister_types() -> list[TypeInfo]:
    """Body of a subscriber Deregister message."""
    return [TypeInfo(field_name="subscriptionids", type=mal_type("Identifier", True))]


def pubsub_publish_types(update_types: list[TypeInfo]) -> list[TypeInfo]:
    """Body of a Publish message: the update headers, then one list per declared update type.

    Raises:
        ValueError: If an update type is declared as a list.
    """
    result = [TypeInfo(field_name="updateHeaders", type=mal_type("UpdateHeader", True))]
    for update in update_types:
        if update.type.is_list:
            raise ValueError(f"update type {update.field_name} of a PUBSUB operation is already a list")
        result.append(TypeInfo(field_name=update.field_name, type=update.type.as_list()))
    return result


def pubsub_notify_types(update_types: list[TypeInfo]) -> list[TypeInfo]:
    """Body of a Notify message: the subscription identifier, then the Publish body."""
    identifier = TypeInfo(field_name="subscriptionid", type=mal_type("Identifier"))
    return [identifier, *pubsub_publish_types(update_types)]


# ################
# Implementation
# ################


def _attribute(name: str, short_form_part: int) -> dict[str, object]:
    return {"kind": "attribute", "name": name, "short_form_part": short_form_part}


def _enumeration(name: str, short_form_part: int, values: list[str]) -> dict[str, object]:
    return {
        "kind": "enumeration",
        "name": name,
        "short_form_part": short_form_part,
        "items": [{"value": value, "nvalue": index + 1} for index, value in enumerate(values)],
    }


def _composite(name: str, short_form_part: int, fields: list[tuple[str, str, bool]]) -> dict[str, object]:
    return {
        "kind": "composite",
        "name": name,
        "short_form_part": short_form_part,
        "fields": [{"name": field, "type": type_, "can_be_null": nullable} for field, type_, nullable in fields],
    }


_MAL_AREA: dict[str, object] = {
    "name": MAL_AREA_NAME,
    "number": MAL_AREA_NUMBER,
    "version": MAL_AREA_VERSION,
    "data_types": [
        *(_attribute(name, index + 1) for index, name in enumerate(ATTRIBUTE_NAMES)),
        _enumeration(
            "InteractionType",
            19,
            ["SEND", "SUBMIT", "REQUEST", "INVOKE", "PROGRESS", "PUBSUB"],
        ),
        _enumeration("SessionType", 20, ["LIVE", "SIMULATION", "REPLAY"]),
        _enumeration("QoSLevel", 21, ["BESTEFFORT", "ASSURED", "QUEUED", "TIMELY"]),
        _enumeration("UpdateType", 22, ["CREATION", "UPDATE", "MODIFICATION", "DELETION"]),
        _composite(
            "Subscription",
            23,
            [("subscriptionId", "MAL::Identifier", False), ("entities", "MAL::EntityRequest[]", False)],
        ),
        _composite(
            "EntityRequest",
            24,
            [
                ("subDomain", "MAL::Identifier[]", True),
                ("allAreas", "MAL::Boolean", False),
                ("allServices", "MAL::Boolean", False),
                ("allOperations", "MAL::Boolean", False),
                ("onlyOnChange", "MAL::Boolean", False),
                ("entityKeys", "MAL::EntityKey[]", False),
            ],
        ),
        _composite(
            "EntityKey",
            25,
            [
                ("firstSubKey", "MAL::Identifier", True),
                ("secondSubKey", "MAL::Long", True),
                ("thirdSubKey", "MAL::Long", True),
                ("fourthSubKey", "MAL::Long", True),
            ],
        ),
        _composite(
            "UpdateHeader",
            26,
            [
                ("timestamp", "MAL::Time", False),
                ("sourceURI", "MAL::URI", False),
                ("updateType", "MAL::UpdateType", False),
                ("key", "MAL::EntityKey", False),
            ],
        ),
        _composite("IdBooleanPair", 27, [("id", "MAL::Identifier", True), ("value", "MAL::Boolean", True)]),
        _composite("Pair", 28, [("first", "MAL::Attribute", True), ("second", "MAL::Attribute", True)]),
        _composite("NamedValue", 29, [("name", "MAL::Identifier", True), ("value", "MAL::Attribute", True)]),
        _composite(
            "File",
            30,
            [
                ("name", "MAL::Identifier", False),
                ("mimeType", "MAL::String", True),
                ("creationDate", "MAL::Time", True),
                ("modificationDate", "MAL::Time", True),
                ("size", "MAL::ULong", True),
                ("content", "MAL::Blob", True),
                ("metaData", "MAL::NamedValue[]", True),
            ],
        ),
    ],
    "errors": [
        {"name": "DELIVERY_FAILED", "number": 65536},
        {"name": "DELIVERY_TIMEDOUT", "number": 65537},
        {"name": "DELIVERY_DELAYED", "number": 65538},
        {"name": "DESTINATION_UNKNOWN", "number": 65539},
        {"name": "DESTINATION_TRANSIENT", "number": 65540},
        {"name": "DESTINATION_LOST", "number": 65541},
        {"name": "AUTHENTICATION_FAILED", "number": 65542},
        {"name": "AUTHORISATION_FAILED", "number": 65543},
        {"name": "ENCRYPTION_FAILED", "number": 65544},
        {"name": "UNSUPPORTED_AREA", "number": 65545},
        {"name": "UNSUPPORTED_AREA_VERSION", "number": 65546},
        {"name": "UNSUPPORTED_SERVICE", "number": 65547},
        {"name": "UNSUPPORTED_OPERATION", "number": 65548},
        {"name": "BAD_ENCODING", "number": 65549},
        {"name": "INTERNAL", "number": 65550},
        {"name": "UNKNOWN", "number": 65551},
        {"name": "INCORRECT_STATE", "number": 65552},
        {"name": "TOO_MANY", "number": 65553},
        {"name": "SHUTDOWN", "number": 65554},
    ],
}
