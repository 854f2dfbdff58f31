# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""C flavour of the code writer: preprocessor lines, typedefs, structs, functions."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from malstubgen.emit.statements import StatementWriter
from malstubgen.emit.writer import CodeWriter

Parameter = tuple[str, str | None]

# ###############
# Public Interface
# ###############


class CFileWriter(CodeWriter):
    """Writer for C headers and sources."""

    @classmethod
    def to_file(cls, path: Path) -> CFileWriter:
        return cls(StatementWriter(path))

    @classmethod
    def buffered(cls) -> CFileWriter:
        return cls(StatementWriter())

    def open_define(self, mark: str) -> None:
        self.append(f"#ifndef {mark}")
        self.newline()
        self.append(f"#define {mark}")
        self.newline()
        self.newline()

    def close_define(self, mark: str) -> None:
        self.newline()
        self.append(f"#endif // {mark}")
        self.newline()

    def open_c(self) -> None:
        """Open the extern "C" guard used by C++ compilers."""
        for line in ("#ifdef __cplusplus", 'extern "C" {', "#endif // __cplusplus"):
            self.append(line)
            self.newline()
        self.newline()

    def close_c(self) -> None:
        self.newline()
        for line in ("#ifdef __cplusplus", "}", "#endif // __cplusplus"):
            self.append(line)
            self.newline()

    def add_include(self, file_name: str, system: bool = False) -> None:
        if system:
            self.append(f"#include <{file_name}>")
        else:
            self.append(f'#include "{file_name}"')
        self.newline()

    def add_define(self, name: str, value: str) -> None:
        self.append(f"#define {name} {value}")
        self.newline()

    def add_typedef_struct(self, struct_name: str, type_name: str) -> None:
        self.statement(f"typedef struct {struct_name} {type_name};")

    def open_typedef_enum(self, enum_name: str | None = None) -> None:
        self.statement(f"typedef enum {enum_name} {{" if enum_name else "typedef enum {", 1)

    def add_typedef_enum_element(self, name: str, value: str | None = None, last: bool = False) -> None:
        text = name if value is None else f"{name} = {value}"
        self.statement(text if last else text + ",")

    def close_typedef_enum(self, type_name: str) -> None:
        self.statement(f"}} {type_name};", -1, True)

    def open_struct(self, struct_name: str | None = None) -> None:
        self.statement(f"struct {struct_name} {{" if struct_name else "struct {", 1)

    def add_struct_field(self, field_type: str, field_name: str) -> None:
        self.add_variable_declare(field_type, field_name)

    def close_struct(self) -> None:
        self.statement("};", -1, True)

    def add_variable_declare(self, var_type: str, var_name: str, value: str | None = None) -> None:
        if value is None:
            self.statement(f"{var_type} {var_name};")
        else:
            self.statement(f"{var_type} {var_name} = {value};")

    def open_function(self, return_type: str, name: str, params: Sequence[Parameter] = ()) -> None:
        """Write ``<return_type> <name>(<params>`` without closing the parameter list."""
        self.add_indent()
        self.append(f"{return_type} {name}(")
        if params:
            self.append(", ".join(_format_parameter(param) for param in params))
        else:
            self.append("void")

    def add_function_prototype(self, return_type: str, name: str, params: Sequence[Parameter] = ()) -> None:
        self.open_function(return_type, name, params)
        self.close_function_prototype()

    def close_function_prototype(self) -> None:
        self.append(");")
        self.newline()

    def open_function_body(self) -> None:
        self.append(")")
        self.newline()
        self.statement("{", 1)

    def close_function_body(self) -> None:
        self.statement("}", -1, True)

    def return_on_error(self, call: str) -> None:
        """Write ``rc = <call>;`` followed by the negative return-code check."""
        self.statement(f"rc = {call};")
        self.statement("if (rc < 0)", 1)
        self.statement("return rc;", -1)


# ################
# Implementation
# ################


def _format_parameter(param: Parameter) -> str:
    param_type, param_name = param
    return param_type if param_name is None else f"{param_type} {param_name}"
