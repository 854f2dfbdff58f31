# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Generator options and the YAML parser for the optional configuration file."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path, PurePath

import yaml

BASE_PACKAGE_DEFAULT = "github.com/CNES/ccsdsmo-malgo"
DEFAULT_PROJECT_NAME = "generated_areas"
CONFIG_FILE_NAME = ".malstubgen.yaml"

# ###############
# Public Interface
# ###############


class GeneratorConfigError(Exception):
    """Raised when a generator configuration file is invalid or cannot be loaded."""


@dataclass
class GeneratorOptions:
    """Options controlling a generator run.

    Attributes:
        destination: Root directory receiving the generated sources.
        generate_structures: Must be true, structures are always generated.
        generate_com: Whether the COM area is generated when present.
        transport_malbinary: Emit malbinary encoding cases.
        transport_malsplitbinary: Emit malsplitbinary encoding cases.
        project_name: Aggregate name exposed with the per-area basenames.
        go_base_package: Go import path prefix of the generated areas. Derived
            from the destination when not set.
    """

    destination: Path
    generate_structures: bool = True
    generate_com: bool = False
    transport_malbinary: bool = False
    transport_malsplitbinary: bool = False
    project_name: str = DEFAULT_PROJECT_NAME
    go_base_package: str | None = None

    def effective_transports(self) -> tuple[bool, bool]:
        """Return the (malbinary, malsplitbinary) pair, both enabled when none is selected."""
        if not self.transport_malbinary and not self.transport_malsplitbinary:
            return True, True
        return self.transport_malbinary, self.transport_malsplitbinary

    def go_import_prefix(self) -> str:
        """Return the Go import path prefix of the generated areas."""
        if self.go_base_package:
            return self.go_base_package.rstrip("/")
        parts = PurePath(self.destination).parts
        if "src" in parts:
            index = len(parts) - 1 - parts[::-1].index("src")
            tail = parts[index + 1 :]
            if tail:
                return "/".join(tail)
        return self.project_name


def load_generator_config(path: Path, destination: Path) -> GeneratorOptions:
    """Load a generator configuration file.

    Args:
        path: Path to the `.malstubgen.yaml` file.
        destination: Output directory, which the file cannot set.

    Returns:
        A GeneratorOptions instance populated from the file.

    Raises:
        GeneratorConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise GeneratorConfigError(f"Generator config file not found: {path}") from None
    except OSError as exc:
        raise GeneratorConfigError(f"Cannot read generator config file: {exc}") from exc

    return _parse_generator_config(text, destination, source_label=str(path))


def override_options(options: GeneratorOptions, **changes: object) -> GeneratorOptions:
    """Return a copy of the options with every non-None change applied."""
    applied = {key: value for key, value in changes.items() if value is not None}
    return replace(options, **applied)


# ################
# Implementation
# ################

_BOOL_KEYS = {
    "generate-structures": "generate_structures",
    "generate-com": "generate_com",
    "transport-malbinary": "transport_malbinary",
    "transport-malsplitbinary": "transport_malsplitbinary",
}

_STRING_KEYS = {
    "project-name": "project_name",
    "go-base-package": "go_base_package",
}


def _parse_generator_config(text: str, destination: Path, source_label: str = "<string>") -> GeneratorOptions:
    """Parse generator config YAML text into GeneratorOptions."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise GeneratorConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise GeneratorConfigError(f"{source_label}: generator config must be a YAML mapping")

    unknown = sorted(set(data) - set(_BOOL_KEYS) - set(_STRING_KEYS))
    if unknown:
        raise GeneratorConfigError(f"{source_label}: unknown field '{unknown[0]}'")

    values: dict[str, object] = {}
    for key, attribute in _BOOL_KEYS.items():
        if key in data:
            values[attribute] = _require_bool(data, key, source_label)
    for key, attribute in _STRING_KEYS.items():
        if key in data:
            values[attribute] = _require_string(data, key, source_label)

    return GeneratorOptions(destination=destination, **values)  # type: ignore[arg-type]


def _require_bool(mapping: dict[str, object], key: str, source_label: str) -> bool:
    """Extract a boolean field from a mapping, raising GeneratorConfigError on a wrong type."""
    value = mapping[key]
    if not isinstance(value, bool):
        raise GeneratorConfigError(f"{source_label}: '{key}' must be a boolean")
    return value


def _require_string(mapping: dict[str, object], key: str, source_label: str) -> str:
    """Extract a string field from a mapping, raising GeneratorConfigError on a wrong type."""
    value = mapping[key]
    if not isinstance(value, str):
        raise GeneratorConfigError(f"{source_label}: '{key}' must be a string")
    return value
