# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Common surface of the language back-ends and the report of a generator run."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import ClassVar

from malstubgen.config import GeneratorOptions
from malstubgen.emit import CodeWriter
from malstubgen.model import Area
from malstubgen.registry import TypeRegistry

# ###############
# Public Interface
# ###############


@dataclass
class GenerationReport:
    """Outcome of a generator run.

    Attributes:
        language: Back-end that produced the files.
        destination: Root output directory.
        files: Every written file, in creation order.
        areas: For each emitted area, the base names of its types in emission
            order, as needed by an external project-manifest packager.
    """

    language: str
    destination: Path
    files: list[Path] = field(default_factory=list)
    areas: dict[str, list[str]] = field(default_factory=dict)

    @property
    def area_count(self) -> int:
        return len(self.areas)

    def record_file(self, path: Path) -> None:
        self.files.append(path)

    def record_area(self, area: str) -> None:
        self.areas.setdefault(area, [])

    def record_type(self, area: str, basename: str) -> None:
        self.areas.setdefault(area, []).append(basename)


class Backend(ABC):
    """A code emitter for one target language.

    The driver builds the type registry with the back-end's attribute mapping,
    calls :meth:`prepare` once with every area to generate, then
    :meth:`generate_area` for each of them in order.

    Args:
        options: Options of the run.
        registry: Registry resolving every type reference.
        report: Report receiving the written files.
    """

    language: ClassVar[str]
    attribute_map: ClassVar[Mapping[str, str]]

    def __init__(self, options: GeneratorOptions, registry: TypeRegistry, report: GenerationReport) -> None:
        self.options = options
        self.registry = registry
        self.report = report
        self.malbinary, self.malsplitbinary = options.effective_transports()
        self._writers: list[CodeWriter] = []

    def prepare(self, areas: Sequence[Area]) -> None:  # noqa: B027
        """Inspect the areas to generate before the first one is processed."""

    @abstractmethod
    def generate_area(self, area: Area) -> None:
        """Emit every file of an area."""

    def track(self, writer: CodeWriter) -> None:
        """Register a file writer so that :meth:`close_files` releases it."""
        self._writers.append(writer)

    def close_files(self) -> None:
        """Close every file writer opened since the last call, finished or not."""
        writers, self._writers = self._writers, []
        for writer in writers:
            writer.close()
