# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Go back-end emitting packages for the ccsdsmo-malgo runtime."""

from malstubgen.backends.go.context import GoPackages
from malstubgen.backends.go.generator import GO_ATTRIBUTE_MAP, GoBackend

__all__ = [
    "GO_ATTRIBUTE_MAP",
    "GoBackend",
    "GoPackages",
]
