# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the Go service files: helper, consumer and provider."""

from pathlib import Path

import pytest

from malstubgen.backends.go.operations import operation_stages
from malstubgen.config import GeneratorOptions
from malstubgen.driver import generate
from malstubgen.errors import UnexpectedConstructError
from malstubgen.loader import load_specification, parse_specification
from malstubgen.model import Operation

# ###############
# Helpers
# ###############

DEMO_SPEC = Path(__file__).parents[3] / "docs" / "examples" / "demo.yaml"


def _generate_demo(tmp_path: Path) -> Path:
    options = GeneratorOptions(destination=tmp_path, go_base_package="example.org/stubs")
    generate(load_specification(DEMO_SPEC), options, "go")
    return tmp_path / "demo" / "drawing"


def _lines(path: Path) -> list[str]:
    return [line.strip() for line in path.read_text(encoding="utf-8").splitlines()]


def _single_service(operation: str) -> str:
    return (
        "areas:\n"
        "  - name: BAD\n"
        "    number: 6\n"
        "    version: 1\n"
        "    data_types: [{kind: composite, name: Base}]\n"
        "    services:\n"
        "      - name: Svc\n"
        "        number: 1\n"
        f"        operations: [{operation}]\n"
    )


# ###############
# Normal Cases
# ###############


def test_stages_per_pattern() -> None:
    """Each pattern yields its stages, the initial stage first."""
    progress = Operation.model_validate({"name": "export", "number": 5, "pattern": "PROGRESS"})
    assert [stage.name for stage in operation_stages(progress)] == ["Progress", "Ack", "Update", "Reply"]
    assert [stage.consumer_call for stage in operation_stages(progress)[1:]] == ["Ack", "GetUpdate", "GetResponse"]
    send = Operation.model_validate({"name": "clear", "number": 1, "pattern": "SEND"})
    assert [stage.name for stage in operation_stages(send)] == ["Send"]


def test_service_helper(tmp_path: Path) -> None:
    """The service helper holds the service, operation and operation error numbers."""
    lines = _lines(_generate_demo(tmp_path) / "helper.go")
    assert "SERVICE_NUMBER mal.UShort = 1" in lines
    assert 'SERVICE_NAME = mal.Identifier("Drawing")' in lines
    assert "ADDPOINT_OPERATION_NUMBER mal.UShort = 2" in lines
    assert "MONITOR_OPERATION_NUMBER mal.UShort = 6" in lines
    assert "EXPORT_ERROR_UNSUPPORTED_FORMAT mal.UInteger = 101" in lines


def test_consumer(tmp_path: Path) -> None:
    """The consumer gets one structure per operation and one method per stage."""
    lines = _lines(_generate_demo(tmp_path) / "consumer.go")
    assert '"example.org/stubs/demo"' in lines
    assert "var Cctx *malapi.ClientContext" in lines
    assert "type AddPointOperation struct {" in lines
    assert "func (receiver *AddPointOperation) Submit(canvas *mal.Identifier, point *demo.Point) error {" in lines
    assert "func (receiver *GetCanvasOperation) Request(name *mal.Identifier) (*Canvas, error) {" in lines
    assert "func (receiver *ExportOperation) GetUpdate() (*mal.UOctet, error) {" in lines
    assert "err := body.EncodeLastParameter(shape, true)" in lines
    assert "case demo.ERROR_DUPLICATE:" in lines
    assert "case EXPORT_ERROR_UNSUPPORTED_FORMAT:" in lines
    assert "type MonitorSubscriberOperation struct {" in lines
    assert "type MonitorPublisherOperation struct {" in lines


def test_provider(tmp_path: Path) -> None:
    """The provider declares the implementation interface, the handlers and the helpers."""
    lines = _lines(_generate_demo(tmp_path) / "provider.go")
    assert "type ProviderInterface interface {" in lines
    assert "AddPoint(opHelper *AddPointHelper, canvas *mal.Identifier, point *demo.Point) error" in lines
    assert "Render(opHelper *RenderHelper, shape demo.Shape) error" in lines
    assert (
        "err = cctx.RegisterSubmitHandler(demo.AREA_NUMBER, demo.AREA_VERSION, SERVICE_NUMBER, "
        "ADDPOINT_OPERATION_NUMBER, AddPointHandler)"
    ) in lines
    assert "func (receiver *RenderHelper) Ack(accepted *mal.Boolean) error {" in lines
    assert "receiver.acked = true" in lines
    assert "func (receiver *ExportHelper) ReturnError(e error) error {" in lines
    assert "if malErr.Code == EXPORT_ERROR_UNSUPPORTED_FORMAT { errIsAbstract = true }" in lines
    assert "func MonitorDummy() error {" in lines
    assert "ClearHandler := func(msg *mal.Message, t malapi.Transaction) error {" in lines


# ###############
# Error Cases
# ###############


def test_pubsub_with_errors(tmp_path: Path) -> None:
    """PUBSUB operations cannot declare errors."""
    specification = parse_specification(
        _single_service(
            "{name: watch, number: 1, pattern: PUBSUB, errors: [{kind: definition, name: LOST, number: 7}]}"
        )
    )
    with pytest.raises(UnexpectedConstructError, match="not supported on PUBSUB") as exc_info:
        generate(specification, GeneratorOptions(destination=tmp_path), "go")
    assert exc_info.value.context == ("BAD", "Svc", "watch")


def test_abstract_parameter_not_last(tmp_path: Path) -> None:
    """An abstract parameter must close the message body."""
    specification = parse_specification(
        _single_service(
            "{name: draw, number: 1, pattern: SEND, "
            "arg_types: [{field_name: base, type: 'BAD::Base'}, {field_name: n, type: 'MAL::Integer'}]}"
        )
    )
    with pytest.raises(UnexpectedConstructError, match="not the last one"):
        generate(specification, GeneratorOptions(destination=tmp_path), "go")


def test_pubsub_list_update(tmp_path: Path) -> None:
    """PUBSUB updates are wrapped in lists and cannot be lists themselves."""
    specification = parse_specification(
        _single_service(
            "{name: watch, number: 1, pattern: PUBSUB, update_types: [{field_name: v, type: 'MAL::Integer[]'}]}"
        )
    )
    with pytest.raises(UnexpectedConstructError, match="already a list"):
        generate(specification, GeneratorOptions(destination=tmp_path), "go")
