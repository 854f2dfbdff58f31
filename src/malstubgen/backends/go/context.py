# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Go package resolution and the scopes shared by the Go emitters."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from malstubgen.config import BASE_PACKAGE_DEFAULT
from malstubgen.emit import GoFileWriter
from malstubgen.errors import UnexpectedConstructError
from malstubgen.model import Area, Service, TypeReference
from malstubgen.model.mal import MAL_AREA_NAME
from malstubgen.naming import owner_package, package_name

MAL_IMPORT = f"{BASE_PACKAGE_DEFAULT}/mal"
MALAPI_IMPORT = f"{BASE_PACKAGE_DEFAULT}/mal/api"
MALAPI_ALIAS = "malapi"

# ###############
# Public Interface
# ###############


class GoPackages:
    """Import paths of the Go packages, generated or provided by the MAL runtime.

    Generated areas live under the import prefix, one package per area and one
    sub-package per service. Any other area resolves under the MAL runtime
    module.

    Args:
        areas: The areas being generated.
        prefix: Import path prefix of the generated areas.

    Raises:
        UnexpectedConstructError: If two generated areas or services map to the same package.
    """

    def __init__(self, areas: Iterable[Area], prefix: str) -> None:
        self.prefix = prefix
        self._generated: dict[tuple[str, str | None], str] = {}
        owners: dict[str, str] = {}
        for area in areas:
            area_package = area.name.lower()
            self._declare(owners, area_package, area.name, None)
            for service in area.services:
                self._declare(owners, service.name.lower(), area.name, service.name)

    def import_path(self, area: str, service: str | None = None) -> str:
        """Return the import path of the package owning an area or a service."""
        generated = self._generated.get((area, service))
        if generated is not None:
            return generated
        if area == MAL_AREA_NAME and service is None:
            return MAL_IMPORT
        path = BASE_PACKAGE_DEFAULT
        if service is not None:
            path += f"/{area.lower()}"
        return f"{path}/{owner_package(area, service)}"

    def import_path_of(self, ref: TypeReference) -> str:
        return self.import_path(ref.area, ref.service)

    # ################
    # Implementation
    # ################

    def _declare(self, owners: dict[str, str], package: str, area: str, service: str | None) -> None:
        owner = f"{area}:{service}" if service is not None else area
        previous = owners.get(package)
        if previous is not None:
            raise UnexpectedConstructError(f"Go package {package} is used by both {previous} and {owner}")
        owners[package] = owner
        path = f"{self.prefix}/{area.lower()}"
        if service is not None:
            path += f"/{package}"
        self._generated[(area, service)] = path


@dataclass
class GoScope:
    """The area, and optionally the service, whose package is being written."""

    area: Area
    service: Service | None
    folder: Path

    @property
    def package(self) -> str:
        return owner_package(self.area.name, self.service.name if self.service is not None else None)

    @property
    def area_package(self) -> str:
        return self.area.name.lower()

    @property
    def is_area_scope(self) -> bool:
        return self.service is None

    def area_qualifier(self) -> str:
        """Prefix of the area constants seen from this package."""
        return "" if self.is_area_scope else f"{self.area_package}."


class ImportSet:
    """Ordered imports of one Go file, keyed by package name.

    The file's own package is never imported and each package appears once,
    at the position of its first request.
    """

    def __init__(self, own_package: str) -> None:
        self.own_package = own_package
        self._imports: dict[str, tuple[str, str | None]] = {}

    def __contains__(self, package: str) -> bool:
        return package in self._imports

    def add(self, package: str, path: str, alias: str | None = None) -> None:
        if package == self.own_package or package in self._imports:
            return
        self._imports[package] = (path, alias)

    def add_type(self, ref: TypeReference, packages: GoPackages) -> None:
        self.add(package_name(ref), packages.import_path_of(ref))

    def write(self, writer: GoFileWriter) -> None:
        writer.open_import_block()
        for path, alias in self._imports.values():
            writer.add_import(path, alias)
        writer.close_import_block()


def mal_imports(scope: GoScope, packages: GoPackages) -> ImportSet:
    """Imports every type file starts with: the MAL runtime, then the area for service types."""
    imports = ImportSet(scope.package)
    imports.add("mal", MAL_IMPORT)
    if not scope.is_area_scope:
        imports.add(scope.area_package, packages.import_path(scope.area.name))
    return imports
