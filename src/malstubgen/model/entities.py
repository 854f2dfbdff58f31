# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Areas, services, operations and data types of a MAL specification."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, model_validator
from pydantic import Field as _Field

from malstubgen.model.types import TypeInfo, TypeReference

# ###############
# Public Interface
# ###############


class InteractionPattern(Enum):
    """The MAL interaction patterns."""

    SEND = "SEND"
    SUBMIT = "SUBMIT"
    REQUEST = "REQUEST"
    INVOKE = "INVOKE"
    PROGRESS = "PROGRESS"
    PUBSUB = "PUBSUB"


class Field(BaseModel):
    """A field of a composite. Fields are nullable unless stated otherwise."""

    name: str
    type: TypeReference
    can_be_null: bool = True
    comment: str | None = None


class _OwnedType(BaseModel):
    """Common part of the data types declared in an area or a service."""

    name: str
    comment: str | None = None
    area: str = ""
    service: str | None = None

    @property
    def reference(self) -> TypeReference:
        """The reference designating this type."""
        return TypeReference(area=self.area, service=self.service, name=self.name)


class AttributeType(_OwnedType):
    """A MAL attribute (primitive) type. Only the MAL area declares attributes."""

    kind: Literal["attribute"] = "attribute"
    short_form_part: int


class Composite(_OwnedType):
    """A composite type. A composite without short form part is abstract."""

    kind: Literal["composite"] = "composite"
    short_form_part: int | None = None
    extends: TypeReference | None = None
    fields: list[Field] = _Field(default_factory=list)

    @property
    def is_abstract(self) -> bool:
        return self.short_form_part is None


class EnumItem(BaseModel):
    """An enumeration item. Its position is the wire ordinal, nvalue the numeric value."""

    value: str
    nvalue: int
    comment: str | None = None


class Enumeration(_OwnedType):
    """An enumeration type."""

    kind: Literal["enumeration"] = "enumeration"
    short_form_part: int
    items: list[EnumItem] = _Field(default_factory=list)


DataType = Annotated[AttributeType | Composite | Enumeration, _Field(discriminator="kind")]


class ErrorDefinition(BaseModel):
    """An error code defined by an area, a service or an operation."""

    kind: Literal["definition"] = "definition"
    name: str
    number: int
    extra_info: TypeReference | None = None
    comment: str | None = None


class ErrorReference(BaseModel):
    """An operation error pointing at an error defined elsewhere.

    ``error`` uses the type reference syntax: ``AREA::NAME`` for an area
    error, ``AREA:Service:NAME`` for a service error.
    """

    kind: Literal["reference"] = "reference"
    error: TypeReference
    extra_info: TypeReference | None = None
    comment: str | None = None


OperationError = Annotated[ErrorDefinition | ErrorReference, _Field(discriminator="kind")]


class Operation(BaseModel):
    """An operation of a service."""

    name: str
    number: int
    pattern: InteractionPattern
    arg_types: list[TypeInfo] = _Field(default_factory=list)
    ack_types: list[TypeInfo] = _Field(default_factory=list)
    update_types: list[TypeInfo] = _Field(default_factory=list)
    ret_types: list[TypeInfo] = _Field(default_factory=list)
    errors: list[OperationError] = _Field(default_factory=list)
    comment: str | None = None


class Service(BaseModel):
    """A service: numbered operations plus service-level data types and errors."""

    name: str
    number: int
    operations: list[Operation] = _Field(default_factory=list)
    data_types: list[DataType] = _Field(default_factory=list)
    errors: list[ErrorDefinition] = _Field(default_factory=list)
    comment: str | None = None


class Area(BaseModel):
    """An area: the top-level MAL namespace."""

    name: str
    number: int
    version: int
    services: list[Service] = _Field(default_factory=list)
    data_types: list[DataType] = _Field(default_factory=list)
    errors: list[ErrorDefinition] = _Field(default_factory=list)
    comment: str | None = None

    @model_validator(mode="after")
    def _assign_owners(self) -> Area:
        for data_type in self.data_types:
            data_type.area = self.name
            data_type.service = None
        for service in self.services:
            for data_type in service.data_types:
                data_type.area = self.name
                data_type.service = service.name
        return self

    def find_service(self, name: str) -> Service | None:
        return next((service for service in self.services if service.name == name), None)


class Specification(BaseModel):
    """A set of areas, processed in order."""

    areas: list[Area] = _Field(default_factory=list)


Specification.model_rebuild()
