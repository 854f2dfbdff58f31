# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Go flavour of the code writer: package clauses, declaration blocks, methods."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from malstubgen.emit.statements import StatementWriter
from malstubgen.emit.writer import CodeWriter

FUNC_RECEIVER = "receiver"

# ###############
# Public Interface
# ###############


class GoFileWriter(CodeWriter):
    """Writer for Go sources.

    Attributes:
        package_name: Go package of the file, used to decide whether type names
            need a package qualifier.
        is_err_defined: Whether the ``err`` variable is already declared in the
            function being written, selecting ``err :=`` or ``err =``.
    """

    def __init__(self, out: StatementWriter, package_name: str | None = None) -> None:
        super().__init__(out)
        self.package_name = package_name
        self.is_err_defined = False

    @classmethod
    def to_file(cls, path: Path, package_name: str | None = None) -> GoFileWriter:  # type: ignore[override]
        return cls(StatementWriter(path), package_name)

    @classmethod
    def buffered(cls, package_name: str | None = None) -> GoFileWriter:  # type: ignore[override]
        return cls(StatementWriter(), package_name)

    def add_package(self, package_name: str | None = None) -> None:
        if package_name is not None:
            self.package_name = package_name
        self.statement(f"package {self.package_name}")

    def open_import_block(self) -> None:
        self.statement("import (", 1)

    def add_import(self, path: str, alias: str | None = None) -> None:
        self.statement(f'{alias} "{path}"' if alias else f'"{path}"')

    def close_import_block(self) -> None:
        self.statement(")", -1, True)

    def open_const_block(self) -> None:
        self.statement("const (", 1)

    def close_const_block(self) -> None:
        self.statement(")", -1, True)

    def open_var_block(self) -> None:
        self.statement("var (", 1)

    def close_var_block(self) -> None:
        self.statement(")", -1, True)

    def add_variable_declare(self, var_type: str | None, var_name: str, value: str | None = None) -> None:
        """Write ``<name>[ <type>][ = <value>]``."""
        text = var_name
        if var_type is not None:
            text += f" {var_type}"
        if value is not None:
            text += f" = {value}"
        self.statement(text)

    def open_struct(self, struct_name: str) -> None:
        self.statement(f"type {struct_name} struct {{", 1)

    def add_struct_field(self, field_type: str, field_name: str) -> None:
        self.add_variable_declare(field_type, field_name)

    def close_struct(self) -> None:
        self.statement("}", -1, True)

    def open_function(
        self,
        name: str,
        receiver_type: str | None = None,
        params: Sequence[tuple[str, str]] = (),
    ) -> None:
        """Write ``func [(receiver <type>) ]<name>(<params>`` without closing the parameter list.

        Args:
            name: Function name.
            receiver_type: Type of the method receiver, None for a plain function.
            params: (name, type) pairs.
        """
        self.is_err_defined = False
        self.add_indent()
        self.append("func ")
        if receiver_type is not None:
            self.append(f"({FUNC_RECEIVER} {receiver_type}) ")
        self.append(f"{name}(")
        self.append(", ".join(f"{param_name} {param_type}" for param_name, param_type in params))

    def open_function_body(self, return_types: Sequence[str] = ()) -> None:
        """Close the parameter list, write the result types and open the body."""
        self.append(")")
        if len(return_types) == 1:
            self.append(f" {return_types[0]}")
        elif return_types:
            self.append(f" ({', '.join(return_types)})")
        self.append(" {")
        self.newline()
        self._indent += 1

    def close_function_body(self) -> None:
        self.statement("}", -1, True)

    def err_assign(self) -> str:
        """Return ``err :=`` the first time in a function, ``err =`` afterwards."""
        if self.is_err_defined:
            return "err ="
        self.is_err_defined = True
        return "err :="

    def return_on_error(self, result: str = "err") -> None:
        self.statement("if err != nil {", 1)
        self.statement(f"return {result}")
        self.statement("}", -1, True)
