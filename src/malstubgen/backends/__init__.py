# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Language back-ends, looked up by language name."""

from __future__ import annotations

from malstubgen.backends.base import Backend, GenerationReport
from malstubgen.backends.c import CBackend
from malstubgen.backends.go import GoBackend
from malstubgen.errors import UnsupportedOptionError

BACKENDS: dict[str, type[Backend]] = {
    CBackend.language: CBackend,
    GoBackend.language: GoBackend,
}

# ###############
# Public Interface
# ###############


def backend_for(language: str) -> type[Backend]:
    """Return the back-end class of a language.

    Raises:
        UnsupportedOptionError: If no back-end handles the language.
    """
    try:
        return BACKENDS[language]
    except KeyError:
        supported = ", ".join(sorted(BACKENDS))
        raise UnsupportedOptionError(f"unsupported language '{language}' (expected one of: {supported})") from None


__all__ = [
    "BACKENDS",
    "Backend",
    "GenerationReport",
    "backend_for",
]
