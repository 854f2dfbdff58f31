# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Resolution checks for MAL specifications.

Every type a generator would have to encode is looked up in the type
registry: composite parents and fields, operation message bodies and error
extra information. Unknown types are not fatal, the generators treat them as
opaque Elements, so they are reported as warnings.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from malstubgen.model import Area, Composite, Specification, TypeReference
from malstubgen.registry import TypeRegistry

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class UnresolvedReference:
    """A type reference the registry cannot resolve.

    Attributes:
        path: Names of the constructs holding the reference, joined with ':'.
        reference: The unresolved type.
    """

    path: str
    reference: TypeReference

    @property
    def message(self) -> str:
        return f"{self.path}: unknown type {self.reference}"


@dataclass
class CheckResult:
    """Result of the reference checks.

    Attributes:
        warnings: Unresolved references, in specification order.
        checked: Number of references looked up.
    """

    warnings: list[UnresolvedReference] = field(default_factory=list)
    checked: int = 0

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0


def check_references(specification: Specification, references: Sequence[Area] = ()) -> CheckResult:
    """Resolve every type reference of a specification.

    Args:
        specification: The areas to check.
        references: Additional areas known for resolution only.

    Returns:
        The unresolved references and the number of references checked.
    """
    registry = TypeRegistry(specification.areas, references=references)
    result = CheckResult()
    for path, ref in _walk_references(specification):
        result.checked += 1
        if not registry.is_known(ref):
            result.warnings.append(UnresolvedReference(path, ref))
    return result


# ################
# Implementation
# ################


def _walk_references(specification: Specification) -> Iterator[tuple[str, TypeReference]]:
    for area in specification.areas:
        yield from _data_type_references(area.name, area.data_types)
        for error in area.errors:
            if error.extra_info is not None:
                yield f"{area.name}:{error.name}", error.extra_info
        for service in area.services:
            service_path = f"{area.name}:{service.name}"
            yield from _data_type_references(service_path, service.data_types)
            for error in service.errors:
                if error.extra_info is not None:
                    yield f"{service_path}:{error.name}", error.extra_info
            for operation in service.operations:
                operation_path = f"{service_path}:{operation.name}"
                for body in (operation.arg_types, operation.ack_types, operation.update_types, operation.ret_types):
                    for info in body:
                        yield f"{operation_path}:{info.field_name}", info.type
                for operation_error in operation.errors:
                    if operation_error.extra_info is not None:
                        yield f"{operation_path}:error", operation_error.extra_info


def _data_type_references(path: str, data_types: Sequence[object]) -> Iterator[tuple[str, TypeReference]]:
    for data_type in data_types:
        if not isinstance(data_type, Composite):
            continue
        type_path = f"{path}:{data_type.name}"
        if data_type.extends is not None:
            yield type_path, data_type.extends
        for composite_field in data_type.fields:
            yield f"{type_path}:{composite_field.name}", composite_field.type
