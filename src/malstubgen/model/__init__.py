# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Specification model for MAL areas, services, operations and data types."""

from malstubgen.model.entities import (
    Area,
    AttributeType,
    Composite,
    DataType,
    EnumItem,
    Enumeration,
    ErrorDefinition,
    ErrorReference,
    Field,
    InteractionPattern,
    Operation,
    OperationError,
    Service,
    Specification,
)
from malstubgen.model.types import TypeInfo, TypeReference, parse_type_shorthand

__all__ = [
    # Type references
    "TypeReference",
    "TypeInfo",
    "parse_type_shorthand",
    # Data types
    "AttributeType",
    "Composite",
    "Field",
    "Enumeration",
    "EnumItem",
    "DataType",
    # Errors
    "ErrorDefinition",
    "ErrorReference",
    "OperationError",
    # Namespaces
    "InteractionPattern",
    "Operation",
    "Service",
    "Area",
    "Specification",
]
