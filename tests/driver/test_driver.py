# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the generator driver."""

from pathlib import Path

import pytest

from malstubgen.backends import BACKENDS, backend_for
from malstubgen.config import GeneratorOptions
from malstubgen.driver import generate, selected_areas
from malstubgen.errors import IOFailureError, UnsupportedOptionError
from malstubgen.loader import load_specification, parse_specification
from malstubgen.model import Specification
from malstubgen.model.mal import build_mal_area

# ###############
# Helpers
# ###############

DEMO_SPEC = Path(__file__).parents[2] / "docs" / "examples" / "demo.yaml"

_SPEC = """\
areas:
  - name: COM
    number: 2
    version: 1
    data_types:
      - kind: enumeration
        name: ObjectState
        short_form_part: 1
        items:
          - {value: ACTIVE, nvalue: 1}
  - name: APP
    number: 200
    version: 3
    data_types:
      - kind: composite
        name: Status
        short_form_part: 1
        fields:
          - {name: state, type: COM::ObjectState}
"""


def _specification() -> Specification:
    return parse_specification(_SPEC)


def _snapshot(root: Path) -> dict[str, bytes]:
    return {str(path.relative_to(root)): path.read_bytes() for path in sorted(root.rglob("*")) if path.is_file()}


# ###############
# Normal Cases
# ###############


def test_backends_by_language() -> None:
    """Both back-ends are registered by language name."""
    assert set(BACKENDS) == {"c", "go"}
    assert backend_for("go").language == "go"


def test_com_is_skipped_by_default(tmp_path: Path) -> None:
    """The COM area is a reference only unless its generation is requested."""
    options = GeneratorOptions(destination=tmp_path)
    assert [area.name for area in selected_areas(_specification(), options)] == ["APP"]
    report = generate(_specification(), options, "c")
    assert list(report.areas) == ["APP"]
    assert report.areas["APP"] == ["app_status", "app_status_list"]
    assert not (tmp_path / "com").exists()
    assert '#include "com.h"' in (tmp_path / "app" / "include" / "app.h").read_text(encoding="utf-8")


def test_com_generated_on_request(tmp_path: Path) -> None:
    """With COM generation enabled, the COM area is generated first."""
    options = GeneratorOptions(destination=tmp_path, generate_com=True)
    report = generate(_specification(), options, "go")
    assert list(report.areas) == ["COM", "APP"]
    assert report.areas["COM"] == ["objectstate", "objectstate_list"]
    assert (tmp_path / "com" / "objectstate.go").is_file()
    assert report.language == "go"
    assert all(path.is_file() for path in report.files)


def test_mal_area_is_never_generated(tmp_path: Path) -> None:
    """A MAL area in the input describes the runtime and produces no files."""
    specification = Specification(areas=[build_mal_area()])
    report = generate(specification, GeneratorOptions(destination=tmp_path), "c")
    assert report.area_count == 0
    assert report.files == []


@pytest.mark.parametrize("language", ["c", "go"])
def test_generation_is_reproducible(tmp_path: Path, language: str) -> None:
    """Running twice over the same destination rewrites byte-identical files."""
    specification = load_specification(DEMO_SPEC)
    options = GeneratorOptions(destination=tmp_path, go_base_package="example.org/stubs")
    generate(specification, options, language)
    first = _snapshot(tmp_path)
    assert first

    generate(specification, options, language)
    assert _snapshot(tmp_path) == first

    removed = tmp_path / next(iter(first))
    removed.unlink()
    generate(specification, options, language)
    assert _snapshot(tmp_path) == first


# ###############
# Error Cases
# ###############


def test_unsupported_language(tmp_path: Path) -> None:
    """Only the C and Go back-ends exist."""
    with pytest.raises(UnsupportedOptionError, match="unsupported language"):
        generate(_specification(), GeneratorOptions(destination=tmp_path), "java")


def test_structures_cannot_be_disabled(tmp_path: Path) -> None:
    """Structure generation is mandatory."""
    options = GeneratorOptions(destination=tmp_path, generate_structures=False)
    with pytest.raises(UnsupportedOptionError, match="structures"):
        generate(_specification(), options, "go")


def test_unwritable_destination(tmp_path: Path) -> None:
    """A destination below a regular file is reported as an I/O failure."""
    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")
    with pytest.raises(IOFailureError) as exc_info:
        generate(_specification(), GeneratorOptions(destination=blocker), "c")
    assert exc_info.value.context[0] == "APP"
