# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Loading of specification documents (YAML or JSON) into the pydantic model."""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from pydantic import ValidationError

from malstubgen.errors import SpecificationLoadError
from malstubgen.logging_config import get_logger
from malstubgen.model import Specification

logger = get_logger(__name__)

# ###############
# Public Interface
# ###############


def load_specification(path: Path) -> Specification:
    """Load one specification document.

    Args:
        path: A `.yaml`, `.yml` or `.json` file holding an ``areas`` list.

    Returns:
        The validated Specification.

    Raises:
        SpecificationLoadError: If the file cannot be read, parsed or validated.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise SpecificationLoadError("specification file not found", (str(path),)) from None
    except OSError as exc:
        raise SpecificationLoadError(f"cannot read specification file: {exc}", (str(path),)) from exc

    logger.debug(f"Loading specification {path}")
    return parse_specification(text, source_label=str(path), as_json=path.suffix.lower() == ".json")


def load_specifications(paths: list[Path]) -> Specification:
    """Load several documents and concatenate their areas in the given order."""
    areas = []
    for path in paths:
        areas.extend(load_specification(path).areas)
    return Specification(areas=areas)


def parse_specification(text: str, source_label: str = "<string>", as_json: bool = False) -> Specification:
    """Parse specification text into a Specification."""
    try:
        data = json.loads(text) if as_json else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise SpecificationLoadError(f"invalid document: {exc}", (source_label,)) from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SpecificationLoadError("specification must be a mapping with an 'areas' list", (source_label,))

    try:
        return Specification.model_validate(data)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise SpecificationLoadError(
            f"{location}: {first['msg']} ({exc.error_count()} error(s))", (source_label,)
        ) from exc
