# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Go back-end: one package per area and one sub-package per service."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from malstubgen.backends.base import Backend
from malstubgen.backends.go.context import MAL_IMPORT, GoPackages, GoScope, ImportSet
from malstubgen.backends.go.operations import GoServiceEmitter
from malstubgen.backends.go.types import GoTypeEmitter
from malstubgen.emit import GoFileWriter
from malstubgen.errors import GeneratorError, UnexpectedConstructError
from malstubgen.logging_config import get_logger
from malstubgen.model import Area, Composite, DataType, Enumeration, Service
from malstubgen.model.mal import ATTRIBUTE_NAMES
from malstubgen.naming import error_const

logger = get_logger(__name__)

GO_ATTRIBUTE_MAP = {name: f"mal.{name}" for name in ATTRIBUTE_NAMES}

# ###############
# Public Interface
# ###############


class GoBackend(Backend):
    """Emits Go packages for the ccsdsmo-malgo runtime."""

    language = "go"
    attribute_map = GO_ATTRIBUTE_MAP

    _packages: GoPackages | None = None

    def prepare(self, areas: Sequence[Area]) -> None:
        self._packages = GoPackages(areas, self.options.go_import_prefix())

    @property
    def packages(self) -> GoPackages:
        if self._packages is None:
            raise RuntimeError("prepare() must run before the first area is generated")
        return self._packages

    def generate_area(self, area: Area) -> None:
        """Write the area package, then one sub-package per service.

        Raises:
            UnexpectedConstructError: If the area defines attribute types.
        """
        logger.info(f"Processing area: {area.name}")
        self.report.record_area(area.name)
        folder = self.options.destination / area.name.lower()
        scope = GoScope(area, None, folder)
        types = GoTypeEmitter(self.registry, self.packages, self._open_file)
        try:
            for data_type in area.data_types:
                self._emit_type(types, scope, data_type)
            for service in area.services:
                try:
                    self._generate_service(types, area, service, folder)
                except GeneratorError as exc:
                    raise exc.with_context(service.name)
            self._write_area_helper(scope)
        finally:
            self.close_files()

    # ################
    # Implementation
    # ################

    def _generate_service(self, types: GoTypeEmitter, area: Area, service: Service, area_folder: Path) -> None:
        logger.info(f"Processing service: {service.name}")
        scope = GoScope(area, service, area_folder / service.name.lower())
        for data_type in service.data_types:
            self._emit_type(types, scope, data_type)
        emitter = GoServiceEmitter(self.registry, self.packages, scope, self._open_file)
        for operation in service.operations:
            try:
                emitter.emit_operation(operation)
            except GeneratorError as exc:
                raise exc.with_context(operation.name)
        emitter.close()

    def _emit_type(self, types: GoTypeEmitter, scope: GoScope, data_type: DataType) -> None:
        try:
            if isinstance(data_type, Enumeration):
                basenames = types.emit_enumeration(scope, data_type)
            elif isinstance(data_type, Composite):
                basenames = types.emit_composite(scope, data_type)
            else:
                raise UnexpectedConstructError("attribute types cannot be generated")
        except GeneratorError as exc:
            raise exc.with_context(data_type.name)
        for basename in basenames:
            self.report.record_type(scope.area.name, basename)

    def _write_area_helper(self, scope: GoScope) -> None:
        area = scope.area
        writer = self._open_file(scope.folder / "helper.go", scope.package)
        writer.add_package()
        writer.newline()
        imports = ImportSet(scope.package)
        imports.add("mal", MAL_IMPORT)
        imports.write(writer)
        writer.newline()
        writer.open_const_block()
        writer.add_variable_declare("mal.UShort", "AREA_NUMBER", str(area.number))
        writer.add_variable_declare("mal.UOctet", "AREA_VERSION", str(area.version))
        writer.add_variable_declare(None, "AREA_NAME", f'mal.Identifier("{area.name}")')
        for error in area.errors:
            writer.add_variable_declare("mal.UInteger", error_const(error.name), str(error.number))
        writer.close_const_block()
        writer.close()

    def _open_file(self, path: Path, package: str) -> GoFileWriter:
        logger.debug(f"Creating file {path}")
        writer = GoFileWriter.to_file(path, package)
        self.track(writer)
        self.report.record_file(path)
        return writer
