# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Reference checks run on a specification before any code is generated."""

from malstubgen.validation.checks import CheckResult, UnresolvedReference, check_references

__all__ = [
    "CheckResult",
    "UnresolvedReference",
    "check_references",
]
