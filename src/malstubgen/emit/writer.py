# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Language-neutral part of the code writers: indentation, statements, blocks."""

from __future__ import annotations

from pathlib import Path

from malstubgen.emit.statements import StatementWriter

INDENT = "  "

# ###############
# Public Interface
# ###############


class CodeWriter:
    """Indentation-tracking writer over a StatementWriter.

    Every statement is prefixed by the current indent level times two
    spaces. Language writers add their own struct and function syntax.
    """

    def __init__(self, out: StatementWriter) -> None:
        self.out = out
        self._indent = 0

    @classmethod
    def to_file(cls, path: Path) -> CodeWriter:
        """Create a writer streaming to a new file."""
        return cls(StatementWriter(path))

    @classmethod
    def buffered(cls) -> CodeWriter:
        """Create a writer keeping its statements in memory."""
        return cls(StatementWriter())

    @property
    def indent_level(self) -> int:
        return self._indent

    @property
    def closed(self) -> bool:
        return self.out.closed

    @property
    def statements(self) -> list[str]:
        return self.out.statements

    def append(self, text: str) -> None:
        self.out.append(text)

    def newline(self) -> None:
        self.out.newline()

    def add_indent(self, delta: int = 0) -> None:
        """Apply an indent change then write the indentation of a new statement."""
        self._indent += delta
        self.out.append(INDENT * self._indent)

    def statement(self, text: str, delta: int = 0, indent_first: bool = False) -> None:
        """Write an indented line.

        Args:
            text: The statement. An empty statement writes a bare line break.
            delta: Indent change, applied after the line unless indent_first.
            indent_first: Apply the indent change before writing the line.
        """
        if indent_first:
            self._indent += delta
        if text:
            self.add_indent()
            self.out.append(text)
        self.out.newline()
        if not indent_first:
            self._indent += delta

    def comment(self, text: str) -> None:
        self.statement(f"// {text}")

    def open_block(self) -> None:
        self.statement("{", 1)

    def close_block(self) -> None:
        self.statement("}", -1, True)

    def continue_block(self, text: str = "} else {") -> None:
        """Close the current block and open the next branch on the same line."""
        self.statement(text, -1, True)
        self._indent += 1

    def splice_statements(self, buffer: CodeWriter) -> None:
        """Write the lines of a buffered writer at the current indent."""
        for line in buffer.statements:
            self.statement(line)

    def close(self) -> None:
        self.out.close()
