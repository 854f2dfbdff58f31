# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type references used throughout the MAL specification model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic import Field as _Field

LIST_SUFFIX = "[]"

# ###############
# Public Interface
# ###############


class TypeReference(BaseModel):
    """Identifies a MAL type by area, optional service and name, plus list-ness.

    The reference may be written as a mapping or with the shorthand
    ``AREA:SERVICE:Name`` (``AREA::Name`` for area types), suffixed with
    ``[]`` for the list form.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    area: str
    service: str | None = None
    name: str
    is_list: bool = _Field(default=False, alias="list")

    @model_validator(mode="before")
    @classmethod
    def _parse_shorthand(cls, data: Any) -> Any:
        if isinstance(data, str):
            return parse_type_shorthand(data)
        return data

    @property
    def owner(self) -> str:
        """Name of the service owning the type, or of the area for area types."""
        return self.service if self.service is not None else self.area

    def element(self) -> TypeReference:
        """Return the reference to the element type of this (possibly list) type."""
        if not self.is_list:
            return self
        return TypeReference(area=self.area, service=self.service, name=self.name)

    def as_list(self) -> TypeReference:
        """Return the reference to the list form of this type."""
        return TypeReference(area=self.area, service=self.service, name=self.name, is_list=True)

    def __str__(self) -> str:
        text = f"{self.area}:{self.service or ''}:{self.name}"
        return text + LIST_SUFFIX if self.is_list else text


class TypeInfo(BaseModel):
    """A named, typed slot of an operation message (an argument or a result)."""

    field_name: str
    type: TypeReference


def parse_type_shorthand(text: str) -> dict[str, Any]:
    """Split the ``AREA:SERVICE:Name[]`` shorthand into TypeReference fields.

    Raises:
        ValueError: If the text does not have three ':'-separated parts.
    """
    raw = text.strip()
    is_list = raw.endswith(LIST_SUFFIX)
    if is_list:
        raw = raw[: -len(LIST_SUFFIX)]
    parts = raw.split(":")
    if len(parts) != 3 or not parts[0] or not parts[2]:
        raise ValueError(f"invalid type reference '{text}', expected AREA:SERVICE:Name")
    area, service, name = parts
    return {"area": area, "service": service or None, "name": name, "list": is_list}
