# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Line sink used by the code writers, backed by a file or by memory."""

from __future__ import annotations

from pathlib import Path
from typing import TextIO

from malstubgen.errors import IOFailureError

LINE_SEPARATOR = "\n"

# ###############
# Public Interface
# ###############


class StatementWriter:
    """Receives text fragments and line breaks.

    In streaming mode every fragment goes straight to the target file. In
    buffered mode completed lines are kept as statements so that a code writer
    can splice them into another file later.

    Args:
        path: Target file, created with its parent directories. None selects
            buffered mode.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self._file: TextIO | None = None
        self._statements: list[str] = []
        self._current: list[str] = []
        self._closed = False
        if path is not None:
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                self._file = path.open("w", encoding="utf-8", newline="")
            except OSError as exc:
                raise IOFailureError(f"cannot create file: {exc}", (str(path),)) from exc

    @property
    def is_buffered(self) -> bool:
        return self.path is None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def statements(self) -> list[str]:
        """The completed lines of a buffered writer."""
        return list(self._statements)

    def append(self, text: str) -> None:
        if self._file is not None:
            self._write(text)
        else:
            self._current.append(text)

    def newline(self) -> None:
        if self._file is not None:
            self._write(LINE_SEPARATOR)
        else:
            self._statements.append("".join(self._current))
            self._current.clear()

    def close(self) -> None:
        """Close the target file, or complete the pending line of a buffer."""
        if self._closed:
            return
        self._closed = True
        if self._file is not None:
            try:
                self._file.close()
            except OSError as exc:
                raise IOFailureError(f"cannot close file: {exc}", (str(self.path),)) from exc
        elif self._current:
            self.newline()

    # ################
    # Implementation
    # ################

    def _write(self, text: str) -> None:
        assert self._file is not None
        try:
            self._file.write(text)
        except OSError as exc:
            raise IOFailureError(f"cannot write file: {exc}", (str(self.path),)) from exc
