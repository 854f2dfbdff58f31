# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Generator entry point: selects the back-end and walks the areas in order."""

from __future__ import annotations

from collections.abc import Sequence

from malstubgen.backends import GenerationReport, backend_for
from malstubgen.config import GeneratorOptions
from malstubgen.errors import GeneratorError, IOFailureError, UnsupportedOptionError
from malstubgen.logging_config import get_logger
from malstubgen.model import Area, Specification
from malstubgen.model.mal import MAL_AREA_NAME
from malstubgen.registry import TypeRegistry

logger = get_logger(__name__)

COM_AREA_NAME = "COM"

# ###############
# Public Interface
# ###############


def generate(
    specification: Specification,
    options: GeneratorOptions,
    language: str,
    references: Sequence[Area] = (),
) -> GenerationReport:
    """Generate the stubs of every area of a specification.

    Args:
        specification: Areas to generate, in order.
        options: Options of the run.
        language: Back-end name, ``c`` or ``go``.
        references: Areas known for type resolution only.

    Returns:
        The written files and the type basenames of every emitted area.

    Raises:
        GeneratorError: On the first fatal problem, with the path of the
            offending construct as context.
    """
    if not options.generate_structures:
        raise UnsupportedOptionError("structures generation cannot be disabled")
    backend_class = backend_for(language)

    areas = selected_areas(specification, options)
    registry = TypeRegistry(specification.areas, backend_class.attribute_map, references)
    report = GenerationReport(language=language, destination=options.destination)
    backend = backend_class(options, registry, report)

    logger.info(f"Generating {language} stubs for {len(areas)} area(s) in {options.destination}")
    backend.prepare(areas)
    for area in areas:
        try:
            backend.generate_area(area)
        except GeneratorError as exc:
            raise exc.with_context(area.name)
        except OSError as exc:
            raise IOFailureError(str(exc), (area.name,)) from exc
    logger.info(f"Generated {len(report.files)} file(s)")
    return report


def selected_areas(specification: Specification, options: GeneratorOptions) -> list[Area]:
    """Areas of the specification that get generated.

    The MAL area describes the runtime and is never generated; the COM area is
    generated only on request.
    """
    areas = []
    for area in specification.areas:
        if area.name == MAL_AREA_NAME:
            logger.debug(f"Skipping area {area.name}")
            continue
        if area.name == COM_AREA_NAME and not options.generate_com:
            logger.info(f"Skipping area {area.name}, COM generation is disabled")
            continue
        areas.append(area)
    return areas
