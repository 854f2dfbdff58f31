# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Per-area state of the C back-end and the C mapping of MAL type references."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from malstubgen.emit import CFileWriter
from malstubgen.errors import UnexpectedConstructError, UnknownTypeError
from malstubgen.model import Area, Service, TypeReference
from malstubgen.model.mal import MAL_AREA_NAME
from malstubgen.naming import c_qualified_name, c_type_name
from malstubgen.registry import MalbinaryEnumSize, TypeRegistry

INCLUDE_FOLDER = "include"
SOURCE_FOLDER = "src"

# ###############
# Public Interface
# ###############


class CCategory(Enum):
    """How a concrete value is held and encoded in C."""

    ABSTRACT_ATTRIBUTE = "abstract-attribute"
    ATTRIBUTE = "attribute"
    ENUMERATION = "enumeration"
    COMPOSITE = "composite"
    LIST = "list"


@dataclass(frozen=True)
class CType:
    """C mapping of a type used by a composite field, a parameter or an error.

    Attributes:
        ref: The MAL type.
        category: Encoding category.
        qualified: Lower-case qualified name of the element type
            (``<area>_[<service>_]<name>``), ``mal_attribute`` for the
            Attribute root.
        c_type: The C declaration type.
        enum_size: Malbinary size class for enumerations.
    """

    ref: TypeReference
    category: CCategory
    qualified: str
    c_type: str
    enum_size: MalbinaryEnumSize | None = None

    @property
    def is_pointer(self) -> bool:
        return self.c_type.endswith("*")

    @property
    def has_presence_flag(self) -> bool:
        """Whether the presence of a value is carried by a separate flag rather than NULL."""
        return not self.is_pointer

    @property
    def is_list(self) -> bool:
        return self.category is CCategory.LIST

    @property
    def type_suffix(self) -> str:
        """Qualified name used in function names: ``<qualified>[_list]``."""
        return f"{self.qualified}_list" if self.is_list else self.qualified

    @property
    def short_form(self) -> str:
        """Name of the short form define of the type."""
        return f"{self.type_suffix.upper()}_SHORT_FORM"

    @property
    def attribute_codec(self) -> str:
        """Infix of the runtime attribute codec functions (``mal_encoder_encode_<infix>``)."""
        return self.ref.name.lower()


def resolve_c_type(registry: TypeRegistry, ref: TypeReference) -> CType:
    """Map a MAL type to its C declaration.

    Lists always map to a pointer on the list structure, whatever their
    element type.

    Raises:
        UnexpectedConstructError: If the type is abstract and not the MAL Attribute root.
        UnknownTypeError: If the type cannot be mapped.
    """
    qualified = c_type_name(ref)
    if ref.is_list:
        return CType(ref, CCategory.LIST, qualified, f"{qualified}_list_t *")
    if registry.is_abstract_attribute(ref):
        return CType(ref, CCategory.ABSTRACT_ATTRIBUTE, "mal_attribute", "union mal_attribute_t")
    if registry.is_attribute(ref):
        details = registry.attribute_details(ref)
        c_type = details.target_type + (" *" if details.is_nullable_pointer else "")
        return CType(ref, CCategory.ATTRIBUTE, qualified, c_type)
    if registry.is_enum(ref):
        return CType(ref, CCategory.ENUMERATION, qualified, f"{qualified}_t", registry.enum_wire_size(ref))
    if registry.is_composite(ref):
        return CType(ref, CCategory.COMPOSITE, qualified, f"{qualified}_t *")
    if registry.is_known(ref):
        raise UnexpectedConstructError(f"abstract type {ref} cannot be mapped to a C value")
    raise UnknownTypeError(f"cannot map type {ref}")


class CAreaContext:
    """Writers and buffers of the area being generated.

    The area header is streamed while the area is walked (operation error
    defines only); the type declarations, the operation declarations and the
    structure includes are buffered and spliced in when the area completes.

    Args:
        area: The area being generated.
        folder: Area output folder, holding ``include/`` and ``src/``.
        header: Writer of ``include/<area>.h``.
        source: Writer of ``src/<area>.c``.
    """

    def __init__(self, area: Area, folder: Path, header: CFileWriter, source: CFileWriter) -> None:
        self.area = area
        self.folder = folder
        self.header = header
        self.source = source
        self.types = CFileWriter.buffered()
        self.content = CFileWriter.buffered()
        self.structure_includes = CFileWriter.buffered()
        self._required_areas: dict[str, None] = {MAL_AREA_NAME: None}

    @property
    def name_l(self) -> str:
        return self.area.name.lower()

    @property
    def name_u(self) -> str:
        return self.area.name.upper()

    @property
    def include_folder(self) -> Path:
        return self.folder / INCLUDE_FOLDER

    @property
    def source_folder(self) -> Path:
        return self.folder / SOURCE_FOLDER

    def require(self, area: str) -> None:
        """Record an area whose header the area header must include."""
        self._required_areas.setdefault(area, None)

    def required_includes(self) -> list[str]:
        """Headers of the required areas, except the MAL runtime and the area itself."""
        return [
            f"{name.lower()}.h"
            for name in self._required_areas
            if name not in (MAL_AREA_NAME, self.area.name)
        ]


@dataclass
class COperationScope:
    """The operation whose functions are being written and its qualified names."""

    context: CAreaContext
    service: Service
    name: str
    number: int

    @property
    def qualified(self) -> str:
        """Lower-case ``<area>_<service>_<operation>``."""
        return c_qualified_name(self.context.area.name, self.service.name, self.name)

    @property
    def service_number_define(self) -> str:
        return f"{self.context.name_u}_{self.service.name.upper()}_SERVICE_NUMBER"

    @property
    def operation_number_define(self) -> str:
        return f"{self.qualified.upper()}_OPERATION_NUMBER"

    def stage(self, stage: str) -> str:
        return f"{self.qualified}_{stage}"
