# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Type registry: resolution and classification of MAL type references.

The registry is built once per run from the areas to generate, the
reference areas and the built-in MAL catalogue. Every back-end query about
a type (kind, attribute mapping, enumeration wire size, parent chain,
short forms) goes through it.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum

from malstubgen.errors import IllegalShortFormError, UnexpectedConstructError, UnknownTypeError
from malstubgen.logging_config import get_logger
from malstubgen.model import Area, AttributeType, Composite, Enumeration, Field, Service, TypeReference
from malstubgen.model.mal import ATTRIBUTE, COMPOSITE, ELEMENT, MAL_AREA_NAME, build_mal_area

logger = get_logger(__name__)

TYPE_SHORT_FORM_MAX = 0x007FFFFF
TYPE_SHORT_FORM_MIN = -TYPE_SHORT_FORM_MAX

# ###############
# Public Interface
# ###############


class TypeKind(Enum):
    """Classification of a resolved type."""

    ATTRIBUTE = "attribute"
    COMPOSITE = "composite"
    ENUMERATION = "enumeration"
    ABSTRACT = "abstract"


class AbstractKind(Enum):
    """The abstract types a reference may designate."""

    ATTRIBUTE_ROOT = "attribute-root"
    COMPOSITE_ROOT = "composite-root"
    ELEMENT_ROOT = "element-root"
    NAMED_ABSTRACT_COMPOSITE = "named-abstract-composite"


class MalbinaryEnumSize(Enum):
    """On-wire size class of an enumeration ordinal in the malbinary encodings."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"

    @property
    def c_prefix(self) -> str:
        """Infix of the C encoder functions (``mal_encoder_encode_<prefix>_enum``)."""
        return self.value

    @property
    def c_size_constant(self) -> str:
        return f"MALBINARY_{self.value.upper()}_ENUM_SIZE"

    @property
    def go_wire_type(self) -> str:
        """MAL attribute carrying the ordinal in the Go mapping."""
        return _GO_WIRE_TYPES[self][0]

    @property
    def go_native_type(self) -> str:
        return _GO_WIRE_TYPES[self][1]

    @staticmethod
    def for_item_count(count: int) -> MalbinaryEnumSize:
        """Return the size class for an enumeration with the given number of items."""
        if count <= 256:
            return MalbinaryEnumSize.SMALL
        if count <= 65536:
            return MalbinaryEnumSize.MEDIUM
        return MalbinaryEnumSize.LARGE


@dataclass(frozen=True)
class AttributeDetails:
    """Target-language mapping of a MAL attribute.

    Attributes:
        target_type: The target type name, without pointer marker.
        is_nullable_pointer: Whether the target type is a pointer whose nullness
            carries the presence of the value.
    """

    target_type: str
    is_nullable_pointer: bool


def absolute_short_form(area: int, service: int, version: int, type_part: int) -> int:
    """Compose the 64-bit absolute short form of a type.

    Raises:
        IllegalShortFormError: If the relative part is outside the signed 24-bit range.
    """
    if type_part < TYPE_SHORT_FORM_MIN or type_part > TYPE_SHORT_FORM_MAX:
        raise IllegalShortFormError(f"invalid type short form: {type_part}")
    result = type_part & 0xFFFFFF
    result |= (version & 0xFF) << 24
    result |= (service & 0xFFFF) << 32
    result |= (area & 0xFFFF) << 48
    return result


def split_short_form(short_form: int) -> tuple[int, int, int, int]:
    """Split an absolute short form into (area, service, version, signed type part)."""
    type_part = short_form & 0xFFFFFF
    if type_part & 0x800000:
        type_part -= 0x1000000
    return (short_form >> 48) & 0xFFFF, (short_form >> 32) & 0xFFFF, (short_form >> 24) & 0xFF, type_part


RegisteredType = AttributeType | Composite | Enumeration


class TypeRegistry:
    """Resolves type references against every known area.

    Args:
        areas: Areas that will be generated, in generation order.
        attribute_map: Back-end mapping of MAL attribute names to target types.
            A trailing ``*`` marks a pointer type.
        references: Additional areas known for resolution only.
    """

    def __init__(
        self,
        areas: Iterable[Area],
        attribute_map: Mapping[str, str] | None = None,
        references: Iterable[Area] = (),
    ) -> None:
        self._attribute_map = dict(attribute_map or {})
        self._areas: dict[str, Area] = {}
        self._services: dict[tuple[str, str], Service] = {}
        self._types: dict[TypeReference, RegisteredType] = {}
        self._short_forms: dict[tuple[str, str | None, int], TypeReference] = {}
        self._enum_sizes: dict[TypeReference, MalbinaryEnumSize] = {}
        self._parent_chains: dict[TypeReference, list[TypeReference]] = {}
        self._warned: set[TypeReference] = set()

        generated = list(areas)
        known = generated + list(references)
        if not any(area.name == MAL_AREA_NAME for area in known):
            known.insert(0, build_mal_area())
        for area in known:
            self._register_area(area)

    # ---- namespaces ----

    def area(self, name: str) -> Area:
        """Return the area with the given name.

        Raises:
            UnknownTypeError: If the area is unknown.
        """
        try:
            return self._areas[name]
        except KeyError:
            raise UnknownTypeError(f"unknown area {name}") from None

    def service(self, area: str, name: str) -> Service:
        """Return a service of an area.

        Raises:
            UnknownTypeError: If the service is unknown.
        """
        try:
            return self._services[(area, name)]
        except KeyError:
            raise UnknownTypeError(f"unknown service {area}:{name}") from None

    # ---- classification ----

    def is_known(self, ref: TypeReference) -> bool:
        """Whether the reference resolves to a registered type or an abstract root."""
        element = ref.element()
        return element in self._types or _root_kind(element) is not None

    def check_known(self, ref: TypeReference, usage: str) -> bool:
        """Return whether the reference is known, logging a warning once when it is not."""
        if self.is_known(ref):
            return True
        element = ref.element()
        if element not in self._warned:
            self._warned.add(element)
            logger.warning(f"Unknown type ({element}) is being referenced as {usage}")
        return False

    def kind(self, ref: TypeReference) -> TypeKind:
        """Classify the element type of a reference. Unknown types are opaque Elements."""
        registered = self._types.get(ref.element())
        if isinstance(registered, AttributeType):
            return TypeKind.ATTRIBUTE
        if isinstance(registered, Enumeration):
            return TypeKind.ENUMERATION
        if isinstance(registered, Composite) and not registered.is_abstract:
            return TypeKind.COMPOSITE
        return TypeKind.ABSTRACT

    def abstract_kind(self, ref: TypeReference) -> AbstractKind | None:
        """Return which abstract type the reference designates, None for concrete types."""
        element = ref.element()
        root = _root_kind(element)
        if root is not None:
            return root
        registered = self._types.get(element)
        if registered is None:
            return AbstractKind.ELEMENT_ROOT
        if isinstance(registered, Composite) and registered.is_abstract:
            return AbstractKind.NAMED_ABSTRACT_COMPOSITE
        return None

    def is_attribute(self, ref: TypeReference) -> bool:
        return self.kind(ref) is TypeKind.ATTRIBUTE

    def is_composite(self, ref: TypeReference) -> bool:
        return self.kind(ref) is TypeKind.COMPOSITE

    def is_enum(self, ref: TypeReference) -> bool:
        return self.kind(ref) is TypeKind.ENUMERATION

    def is_abstract(self, ref: TypeReference) -> bool:
        return self.kind(ref) is TypeKind.ABSTRACT

    def is_abstract_attribute(self, ref: TypeReference) -> bool:
        """Whether the element type is the MAL Attribute root."""
        return _root_kind(ref.element()) is AbstractKind.ATTRIBUTE_ROOT

    # ---- lookups ----

    def lookup_composite(self, ref: TypeReference) -> Composite | None:
        registered = self._types.get(ref.element())
        return registered if isinstance(registered, Composite) else None

    def lookup_enum(self, ref: TypeReference) -> Enumeration | None:
        registered = self._types.get(ref.element())
        return registered if isinstance(registered, Enumeration) else None

    def attribute_details(self, ref: TypeReference) -> AttributeDetails:
        """Return the target mapping of an attribute type.

        Raises:
            UnknownTypeError: If the type is not an attribute or has no mapping.
        """
        if not self.is_attribute(ref):
            raise UnknownTypeError(f"{ref.element()} is not an attribute type")
        mapped = self._attribute_map.get(ref.name)
        if mapped is None:
            raise UnknownTypeError(f"no target mapping for attribute {ref.name}")
        if mapped.endswith("*"):
            return AttributeDetails(target_type=mapped[:-1].rstrip(), is_nullable_pointer=True)
        return AttributeDetails(target_type=mapped, is_nullable_pointer=False)

    def enum_wire_size(self, ref: TypeReference) -> MalbinaryEnumSize:
        """Return the malbinary size class of an enumeration, computed once per type.

        Raises:
            UnknownTypeError: If the type is not an enumeration.
        """
        element = ref.element()
        cached = self._enum_sizes.get(element)
        if cached is not None:
            return cached
        enumeration = self.lookup_enum(element)
        if enumeration is None:
            raise UnknownTypeError(f"unknown enumeration type {element}")
        size = MalbinaryEnumSize.for_item_count(len(enumeration.items))
        self._enum_sizes.setdefault(element, size)
        return size

    def all_concrete_types(self) -> Iterator[TypeReference]:
        """Yield every concrete registered type in registration order."""
        for ref, registered in self._types.items():
            if isinstance(registered, Composite) and registered.is_abstract:
                continue
            yield ref

    def concrete_types_of(self, ref: TypeReference) -> list[TypeReference]:
        """Return the concrete types an abstract type may hold at run time."""
        kind = self.abstract_kind(ref)
        if kind is None:
            return [ref.element()]
        if kind is AbstractKind.ELEMENT_ROOT:
            return list(self.all_concrete_types())
        if kind is AbstractKind.ATTRIBUTE_ROOT:
            return [t for t in self.all_concrete_types() if self.is_attribute(t)]
        if kind is AbstractKind.COMPOSITE_ROOT:
            return [t for t in self.all_concrete_types() if self.is_composite(t)]
        element = ref.element()
        return [t for t in self.all_concrete_types() if self.is_composite(t) and element in self.parent_chain(t)]

    # ---- composites ----

    def parent_chain(self, ref: TypeReference) -> list[TypeReference]:
        """Return the ancestors of a composite, nearest first, excluding the root Composite.

        Raises:
            UnknownTypeError: If the type or one of its ancestors is not a known composite.
            UnexpectedConstructError: If the inheritance is cyclic.
        """
        element = ref.element()
        cached = self._parent_chains.get(element)
        if cached is not None:
            return list(cached)
        composite = self.lookup_composite(element)
        if composite is None:
            raise UnknownTypeError(f"unknown composite type {element}")

        chain: list[TypeReference] = []
        current = composite
        while current.extends is not None and not _is_root_composite(current.extends):
            parent = current.extends.element()
            if parent == element or parent in chain:
                raise UnexpectedConstructError(f"cyclic inheritance through {parent}", (str(element),))
            chain.append(parent)
            next_composite = self.lookup_composite(parent)
            if next_composite is None:
                raise UnknownTypeError(f"unknown parent composite {parent}", (str(element),))
            current = next_composite
        self._parent_chains[element] = chain
        return list(chain)

    def composite_fields(self, ref: TypeReference) -> list[Field]:
        """Return the fields of a composite, inherited fields first then own fields."""
        composite = self.lookup_composite(ref)
        if composite is None:
            raise UnknownTypeError(f"unknown composite type {ref.element()}")
        fields: list[Field] = []
        for parent in reversed(self.parent_chain(ref)):
            parent_composite = self.lookup_composite(parent)
            if parent_composite is not None:
                fields.extend(parent_composite.fields)
        fields.extend(composite.fields)
        return fields

    # ---- short forms ----

    def relative_short_form(self, ref: TypeReference) -> int:
        """Return the signed relative short form, negated for the list form.

        Raises:
            UnknownTypeError: If the type is unknown or abstract.
        """
        registered = self._types.get(ref.element())
        part = getattr(registered, "short_form_part", None)
        if part is None:
            raise UnknownTypeError(f"no short form for type {ref}")
        return -part if ref.is_list else part

    def absolute_short_form(self, ref: TypeReference) -> int:
        """Return the 64-bit absolute short form of a type or of its list form."""
        area = self.area(ref.area)
        service_number = self.service(ref.area, ref.service).number if ref.service is not None else 0
        try:
            return absolute_short_form(area.number, service_number, area.version, self.relative_short_form(ref))
        except IllegalShortFormError as exc:
            raise exc.with_context(str(ref.element()))

    # ################
    # Implementation
    # ################

    def _register_area(self, area: Area) -> None:
        if area.name in self._areas:
            raise UnexpectedConstructError("area defined twice", (area.name,))
        self._areas[area.name] = area
        logger.debug(f"Registering area {area.name}")
        for data_type in area.data_types:
            self._register_type(area, None, data_type)
        for service in area.services:
            self._services[(area.name, service.name)] = service
            for data_type in service.data_types:
                self._register_type(area, service, data_type)

    def _register_type(self, area: Area, service: Service | None, data_type: RegisteredType) -> None:
        ref = data_type.reference
        if ref in self._types:
            raise UnexpectedConstructError("type defined twice", (str(ref),))
        self._types[ref] = data_type
        part = data_type.short_form_part
        if part is None:
            return
        scope = (area.name, service.name if service is not None else None, part)
        previous = self._short_forms.get(scope)
        if previous is not None:
            raise UnexpectedConstructError(f"short form part {part} already used by {previous.name}", (str(ref),))
        self._short_forms[scope] = ref


_GO_WIRE_TYPES = {
    MalbinaryEnumSize.SMALL: ("UOctet", "uint8"),
    MalbinaryEnumSize.MEDIUM: ("UShort", "uint16"),
    MalbinaryEnumSize.LARGE: ("UInteger", "uint32"),
}

_ROOTS = {
    ELEMENT: AbstractKind.ELEMENT_ROOT,
    COMPOSITE: AbstractKind.COMPOSITE_ROOT,
    ATTRIBUTE: AbstractKind.ATTRIBUTE_ROOT,
}


def _root_kind(ref: TypeReference) -> AbstractKind | None:
    if ref.area != MAL_AREA_NAME or ref.service is not None:
        return None
    return _ROOTS.get(ref.name)


def _is_root_composite(ref: TypeReference) -> bool:
    return _root_kind(ref) is AbstractKind.COMPOSITE_ROOT
