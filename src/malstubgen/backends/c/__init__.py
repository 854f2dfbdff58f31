# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""C back-end emitting sources for the CNES MAL/C runtime."""

from malstubgen.backends.c.context import CAreaContext, CCategory, CType, resolve_c_type
from malstubgen.backends.c.generator import C_ATTRIBUTE_MAP, CBackend
from malstubgen.backends.c.operations import COperationEmitter
from malstubgen.backends.c.types import CTypeEmitter

__all__ = [
    "C_ATTRIBUTE_MAP",
    "CBackend",
    "CAreaContext",
    "CCategory",
    "CType",
    "COperationEmitter",
    "CTypeEmitter",
    "resolve_c_type",
]
