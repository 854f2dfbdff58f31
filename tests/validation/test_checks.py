# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the type reference checks."""

from malstubgen.loader import parse_specification
from malstubgen.validation import check_references

# ###############
# Helpers
# ###############

_SPEC = """\
areas:
  - name: APP
    number: 200
    version: 1
    errors:
      - {name: BROKEN, number: 1, extra_info: "EXT::Detail"}
    data_types:
      - kind: composite
        name: Item
        short_form_part: 1
        extends: EXT::Base
        fields:
          - {name: id, type: MAL::Long}
          - {name: owner, type: "EXT::Owner[]"}
    services:
      - name: Store
        number: 1
        operations:
          - name: put
            number: 1
            pattern: SUBMIT
            arg_types:
              - {field_name: item, type: APP::Item}
              - {field_name: tag, type: EXT::Tag}
            errors:
              - {kind: definition, name: FULL, number: 2, extra_info: MAL::Element}
"""

_EXTERNAL = """\
areas:
  - name: EXT
    number: 300
    version: 1
    data_types:
      - {kind: composite, name: Base}
      - {kind: composite, name: Owner, short_form_part: 1}
      - {kind: composite, name: Detail, short_form_part: 2}
      - {kind: composite, name: Tag, short_form_part: 3}
"""


# ###############
# Normal Cases
# ###############


def test_unresolved_references_are_reported_in_order() -> None:
    """Every unknown type is reported with the path of the construct using it."""
    result = check_references(parse_specification(_SPEC))
    assert result.has_warnings
    assert result.checked == 7
    assert [warning.message for warning in result.warnings] == [
        "APP:Item: unknown type EXT::Base",
        "APP:Item:owner: unknown type EXT::Owner[]",
        "APP:BROKEN: unknown type EXT::Detail",
        "APP:Store:put:tag: unknown type EXT::Tag",
    ]


def test_reference_areas_resolve_types() -> None:
    """Types of reference areas count as known."""
    external = parse_specification(_EXTERNAL).areas
    result = check_references(parse_specification(_SPEC), external)
    assert not result.has_warnings
    assert result.checked == 7


def test_empty_specification() -> None:
    """A specification without areas checks nothing."""
    result = check_references(parse_specification(""))
    assert result.checked == 0
    assert not result.has_warnings
