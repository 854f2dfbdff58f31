# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Deterministic mapping of MAL names to file names, packages and identifiers."""

from __future__ import annotations

from malstubgen.model import TypeReference

C_FIELD_PREFIX = "f_"

# ###############
# Public Interface
# ###############


def upper_first(name: str) -> str:
    """Upper-case the first letter, keeping the rest of the name."""
    return name[:1].upper() + name[1:]


def file_basename(ref: TypeReference) -> str:
    """Base name of the file defining a type: the lower-cased type name."""
    return ref.name.lower()


def package_name(ref: TypeReference) -> str:
    """Package of a type: the lower-cased service name, else the lower-cased area name."""
    return ref.owner.lower()


def owner_package(area: str, service: str | None) -> str:
    return (service if service is not None else area).lower()


def mal_name(area: str, service: str | None, name: str) -> str:
    """Qualified MAL name used in logs and comments (``AREA:_:Name`` for area types)."""
    return f"{area}:{service if service is not None else '_'}:{name}"


# ---- constants ----


def type_short_form_const(name: str) -> str:
    return f"{name.upper()}_TYPE_SHORT_FORM"


def short_form_const(name: str) -> str:
    return f"{name.upper()}_SHORT_FORM"


def list_short_form_const(name: str) -> str:
    return f"{name.upper()}_LIST_SHORT_FORM"


def operation_number_const(operation: str) -> str:
    return f"{operation.upper()}_OPERATION_NUMBER"


def error_const(name: str) -> str:
    """Error code constant at area or service scope."""
    return f"ERROR_{name.upper()}"


def operation_error_const(operation: str, name: str) -> str:
    """Error code constant at operation scope."""
    return f"{operation.upper()}_ERROR_{name.upper()}"


# ---- C mapping ----


def c_qualified_name(area: str, service: str | None, name: str) -> str:
    """Lower-case ``<area>_[<service>_]<name>`` used for C types, files and functions."""
    parts = [area, service, name] if service is not None else [area, name]
    return "_".join(parts).lower()


def c_type_name(ref: TypeReference) -> str:
    return c_qualified_name(ref.area, ref.service, ref.name)


def c_field_name(name: str) -> str:
    """Lower-case field name, as used in accessor names."""
    return name.lower()


def c_struct_field(name: str) -> str:
    """Structure member name, prefixed to avoid clashes with C keywords."""
    return C_FIELD_PREFIX + c_field_name(name)


# ---- Go mapping ----


def go_type_name(ref: TypeReference, from_package: str | None) -> str:
    """Package-qualified Go name of a type seen from a package: ``[pkg.]Name``."""
    package = package_name(ref)
    prefix = "" if package == from_package else f"{package}."
    return prefix + upper_first(ref.name)


def go_null_value(ref: TypeReference, from_package: str | None) -> str:
    """Name of the nil value of a type: ``[pkg.]Null<Name>[List]``."""
    package = package_name(ref)
    prefix = "" if package == from_package else f"{package}."
    suffix = "List" if ref.is_list else ""
    return f"{prefix}Null{upper_first(ref.name)}{suffix}"
