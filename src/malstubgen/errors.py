# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Error kinds raised while loading a specification or emitting code."""

from __future__ import annotations

# ###############
# Public Interface
# ###############


class GeneratorError(Exception):
    """Base class of every fatal generator error.

    Attributes:
        kind: Short name of the error kind, printed in diagnostics.
        message: Human-readable description of the problem.
        context: Names of the enclosing constructs, outermost first
            (area, service, operation, type, field).
    """

    kind = "GeneratorError"

    def __init__(self, message: str, context: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.context = tuple(context)

    @property
    def path(self) -> str:
        """The context names joined with ':'."""
        return ":".join(self.context)

    def with_context(self, *names: str) -> GeneratorError:
        """Prefix the context with the names of enclosing constructs and return self."""
        self.context = tuple(names) + self.context
        return self

    def __str__(self) -> str:
        if self.context:
            return f"{self.kind}: {self.path}: {self.message}"
        return f"{self.kind}: {self.message}"


class UnsupportedOptionError(GeneratorError):
    """Raised when a requested option cannot be honoured."""

    kind = "UnsupportedOption"


class UnknownTypeError(GeneratorError):
    """Raised when code must be emitted for a type the registry does not know."""

    kind = "UnknownType"


class UnexpectedConstructError(GeneratorError):
    """Raised when the specification holds a shape the back-ends cannot map."""

    kind = "UnexpectedConstruct"


class IllegalShortFormError(GeneratorError):
    """Raised when a relative short form does not fit the 24-bit signed range."""

    kind = "IllegalShortForm"


class IOFailureError(GeneratorError):
    """Raised when an output file or directory cannot be written."""

    kind = "IOFailure"


class SpecificationLoadError(GeneratorError):
    """Raised when a specification document cannot be read or fails validation."""

    kind = "InvalidSpecification"
