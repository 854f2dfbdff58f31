# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Indentation-tracking text emitters for the generated C and Go sources."""

from malstubgen.emit.c_writer import CFileWriter
from malstubgen.emit.go_writer import GoFileWriter
from malstubgen.emit.statements import LINE_SEPARATOR, StatementWriter
from malstubgen.emit.writer import INDENT, CodeWriter

__all__ = [
    "LINE_SEPARATOR",
    "INDENT",
    "StatementWriter",
    "CodeWriter",
    "CFileWriter",
    "GoFileWriter",
]
