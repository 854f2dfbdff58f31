# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""C operation emission: interaction stage functions and parameter codecs.

For every operation the area header content gets the operation number, one
function per interaction stage and, for every message body element, an
encoding length, an encoding and a decoding function. Abstract parameters get
one encoding function per concrete type that may be sent in their place plus
a generic decoding function relying on the area element functions.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from malstubgen.backends.c import codec
from malstubgen.backends.c.context import CAreaContext, CCategory, COperationScope, CType, resolve_c_type
from malstubgen.emit import CFileWriter
from malstubgen.emit.c_writer import Parameter
from malstubgen.errors import GeneratorError, UnexpectedConstructError
from malstubgen.logging_config import get_logger
from malstubgen.model import ErrorDefinition, InteractionPattern, Operation, Service, TypeInfo, TypeReference
from malstubgen.model.mal import ATTRIBUTE, mal_type
from malstubgen.registry import AbstractKind, TypeRegistry

logger = get_logger(__name__)

ERROR_STAGE = "error"
UPDATE_STAGE = "update"

# Stage name, whether the stage initiates the interaction, message body of the stage.
_STAGES: dict[InteractionPattern, tuple[tuple[str, bool, str], ...]] = {
    InteractionPattern.SEND: (("send", True, "arg_types"),),
    InteractionPattern.SUBMIT: (("submit", True, "arg_types"), ("submit_ack", False, "ack_types")),
    InteractionPattern.REQUEST: (("request", True, "arg_types"), ("request_response", False, "ret_types")),
    InteractionPattern.INVOKE: (
        ("invoke", True, "arg_types"),
        ("invoke_ack", False, "ack_types"),
        ("invoke_response", False, "ret_types"),
    ),
    InteractionPattern.PROGRESS: (
        ("progress", True, "arg_types"),
        ("progress_ack", False, "ack_types"),
        ("progress_update", False, "update_types"),
        ("progress_response", False, "ret_types"),
    ),
}

# Stage name, MAL stage constant suffix, whether the message opens a new transaction.
_PUBSUB_STAGES = (
    ("register", "REGISTER", True),
    ("publish_register", "PUBLISH_REGISTER", True),
    ("publish", "PUBLISH", False),
    ("deregister", "DEREGISTER", True),
    ("publish_deregister", "PUBLISH_DEREGISTER", True),
)

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class CParameter:
    """One encoded slot of a stage message, or one type an error may carry.

    Attributes:
        stage: Qualified stage prefix, ``<area>_<service>_<operation>_<stage>``.
        ctype: C mapping of the slot type.
        index: Position in the message body, None for error extra information.
        polymorph: Whether the slot is encoded in place of an abstract type,
            prefixed by its short form.
    """

    stage: str
    ctype: CType
    index: int | None
    polymorph: bool = False

    @property
    def is_abstract_attribute(self) -> bool:
        return self.ctype.category is CCategory.ABSTRACT_ATTRIBUTE

    @property
    def has_presence_flag(self) -> bool:
        return self.ctype.has_presence_flag

    def function_name(self, function: str) -> str:
        """Name of a codec function: ``<stage>_<function>[_<index>][_<type>]``."""
        name = f"{self.stage}_{function}"
        if self.index is not None:
            name += f"_{self.index}"
        if function != "decode" and (self.polymorph or self.index is None):
            name += f"_{self.ctype.type_suffix}"
        return name


class COperationEmitter:
    """Writes the functions of the operations of one area.

    Prototypes go to the buffered content section of the area header, bodies
    to the area source. Error numbers are defined directly in the area header.

    Args:
        registry: Type registry of the run.
        context: State of the area being generated.
        malbinary: Whether the malbinary encoding is generated.
        malsplitbinary: Whether the malsplitbinary encoding is generated.
    """

    def __init__(self, registry: TypeRegistry, context: CAreaContext, malbinary: bool, malsplitbinary: bool) -> None:
        self.registry = registry
        self.context = context
        self.malbinary = malbinary
        self.malsplitbinary = malsplitbinary
        self._written: set[str] = set()

    def emit_operation(self, service: Service, operation: Operation) -> None:
        """Write every stage of an operation, then its error functions.

        Raises:
            UnexpectedConstructError: If a parameter cannot be encoded.
            UnknownTypeError: If a parameter type cannot be mapped.
        """
        logger.info(f"Processing operation: {operation.name}")
        scope = COperationScope(self.context, service, operation.name, operation.number)
        content = self.context.content
        for writer in (content, self.context.source):
            writer.newline()
            writer.comment(f"generated code for operation {scope.qualified}")
        content.add_define(scope.operation_number_define, str(operation.number))

        if operation.pattern is InteractionPattern.PUBSUB:
            self._emit_pubsub(scope, operation)
        else:
            for stage, is_init, body in _STAGES[operation.pattern]:
                self._write_interaction(scope, operation.pattern, stage, is_init)
                self._write_parameters(scope, stage, getattr(operation, body))

        if operation.errors:
            self._emit_errors(scope, operation)

    # ################
    # Implementation
    # ################

    # ---- stages ----

    def _write_interaction(self, scope: COperationScope, pattern: InteractionPattern, stage: str, is_init: bool) -> None:
        params: list[Parameter] = [("mal_endpoint_t *", "endpoint"), ("mal_message_t *", "init_message")]
        if is_init:
            params.append(("mal_uri_t *", "provider_uri"))
        else:
            params += [("mal_message_t *", "result_message"), ("bool", "is_error_message")]
        source = self._declare("int", scope.stage(stage), params)
        source.statement("int rc = 0;")
        message = "init_message" if is_init else "result_message"
        source.statement(
            f"mal_message_init({message}, {self._identifiers(scope)}, "
            f"MAL_INTERACTIONTYPE_{pattern.value}, MAL_IP_STAGE_{stage.upper()});"
        )
        if is_init:
            source.statement("rc = mal_endpoint_init_operation(endpoint, init_message, provider_uri, true);")
        else:
            source.statement(
                "rc = mal_endpoint_return_operation(endpoint, init_message, result_message, is_error_message);"
            )
        source.statement("return rc;")
        source.close_function_body()

    def _emit_pubsub(self, scope: COperationScope, operation: Operation) -> None:
        updates: list[TypeInfo] = []
        for update in operation.update_types:
            if update.type.is_list:
                raise UnexpectedConstructError(f"illegal list type {update.type} for update {update.field_name}")
            updates.append(TypeInfo(field_name=update.field_name, type=update.type.as_list()))
        self._write_parameters(scope, UPDATE_STAGE, updates)
        for stage, stage_constant, is_new in _PUBSUB_STAGES:
            self._write_pubsub_function(scope, stage, stage_constant, is_new)

    def _write_pubsub_function(self, scope: COperationScope, stage: str, stage_constant: str, is_new: bool) -> None:
        params: list[Parameter] = [
            ("mal_endpoint_t *", "endpoint"),
            ("mal_message_t *", "message"),
            ("mal_uri_t *", "broker_uri"),
        ]
        if not is_new:
            params.append(("long", "initial_publish_register_tid"))
        source = self._declare("int", scope.stage(stage), params)
        source.statement("int rc = 0;")
        source.statement(
            f"mal_message_init(message, {self._identifiers(scope)}, "
            f"MAL_INTERACTIONTYPE_PUBSUB, MAL_IP_STAGE_PUBSUB_{stage_constant});"
        )
        if not is_new:
            source.statement("mal_message_set_transaction_id(message, initial_publish_register_tid);")
        source.statement(
            f"rc = mal_endpoint_init_operation(endpoint, message, broker_uri, {'true' if is_new else 'false'});"
        )
        source.statement("return rc;")
        source.close_function_body()

    def _identifiers(self, scope: COperationScope) -> str:
        area_u = self.context.name_u
        return (
            f"{area_u}_AREA_NUMBER, {area_u}_AREA_VERSION, "
            f"{scope.service_number_define}, {scope.operation_number_define}"
        )

    # ---- parameters ----

    def _write_parameters(self, scope: COperationScope, stage: str, body: Sequence[TypeInfo]) -> None:
        prefix = scope.stage(stage)
        last = len(body) - 1
        for index, info in enumerate(body):
            try:
                self._write_parameter(prefix, index, info.type, index == last)
            except GeneratorError as exc:
                raise exc.with_context(info.field_name)

    def _write_parameter(self, prefix: str, index: int, ref: TypeReference, is_last: bool) -> None:
        self.registry.check_known(ref, "an operation parameter")
        self.context.require(ref.area)
        if self.registry.is_abstract(ref) and not (self.registry.is_abstract_attribute(ref) and not ref.is_list):
            if not is_last:
                raise UnexpectedConstructError(f"non Attribute abstract type {ref} for a non terminal parameter")
            self._write_polymorph_encoders(prefix, index, ref)
            self._write_generic_length(prefix, index)
            self._write_generic_encode(prefix, index)
            self._write_generic_decode(f"{prefix}_decode_{index}")
            return
        param = CParameter(prefix, resolve_c_type(self.registry, ref), index)
        self._write_length(param)
        self._write_encode(param)
        self._write_decode(param)

    def _write_polymorph_encoders(self, prefix: str, index: int | None, ref: TypeReference) -> None:
        for concrete in self._polymorph_types(ref):
            self.context.require(concrete.area)
            param = CParameter(prefix, resolve_c_type(self.registry, concrete), index, polymorph=True)
            self._write_length(param)
            self._write_encode(param)

    def _polymorph_types(self, ref: TypeReference) -> list[TypeReference]:
        """Concrete types that may be sent in place of an abstract type, in registration order."""
        kind = self.registry.abstract_kind(ref)
        concrete = list(self.registry.all_concrete_types())
        if kind is AbstractKind.ATTRIBUTE_ROOT:
            found = [t.as_list() for t in concrete if self.registry.is_attribute(t)]
        elif kind is AbstractKind.COMPOSITE_ROOT:
            found = [_with_list(t, ref.is_list) for t in concrete if self.registry.is_composite(t)]
            if not ref.is_list:
                found += [t.as_list() for t in concrete]
        elif kind is AbstractKind.ELEMENT_ROOT:
            found = []
            for t in concrete:
                found.append(t.as_list())
                if not ref.is_list:
                    found.append(t)
        else:
            element = ref.element()
            found = [
                _with_list(t, ref.is_list)
                for t in concrete
                if self.registry.is_composite(t) and element in self.registry.parent_chain(t)
            ]
        if not found:
            raise UnexpectedConstructError(f"found no compatible type for {ref}")
        return found

    # ---- errors ----

    def _emit_errors(self, scope: COperationScope, operation: Operation) -> None:
        extra_types: list[TypeReference] = []
        for error in operation.errors:
            if isinstance(error, ErrorDefinition):
                self.context.header.add_define(
                    f"{scope.qualified.upper()}_{error.name.upper()}_ERROR_NUMBER", str(error.number)
                )
            if error.extra_info is not None and error.extra_info not in extra_types:
                extra_types.append(error.extra_info)

        prefix = scope.stage(ERROR_STAGE)
        for ref in extra_types:
            try:
                self._write_error_encoders(prefix, ref)
                if self.registry.abstract_kind(ref) is AbstractKind.ELEMENT_ROOT and not ref.is_list:
                    self._write_error_encoders(prefix, mal_type(ATTRIBUTE))
            except GeneratorError as exc:
                raise exc.with_context(f"error type {ref}")
        self._write_generic_decode(f"{prefix}_decode")

    def _write_error_encoders(self, prefix: str, ref: TypeReference) -> None:
        self.registry.check_known(ref, "an error extra information")
        self.context.require(ref.area)
        if self.registry.is_abstract(ref) and not (self.registry.is_abstract_attribute(ref) and not ref.is_list):
            self._write_polymorph_encoders(prefix, None, ref)
            self._write_generic_length(prefix, None)
            return
        param = CParameter(prefix, resolve_c_type(self.registry, ref), None)
        self._write_length(param)
        self._write_encode(param)

    # ---- codec functions ----

    def _write_length(self, param: CParameter) -> None:
        params: list[Parameter] = [("mal_encoder_t *", "encoder")]
        if param.is_abstract_attribute:
            params += [("bool", "presence_flag"), ("unsigned char", "attribute_tag"), ("union mal_attribute_t", "element")]
        elif param.has_presence_flag:
            params += [("bool", "presence_flag"), (param.ctype.c_type, "element")]
        else:
            params.append((param.ctype.c_type, "element"))
        params.append(("void *", "cursor"))
        source = self._declare_once(param.function_name("add_encoding_length"), params)
        if source is None:
            return
        present = "presence_flag" if param.has_presence_flag else "(element != NULL)"
        self._open_format_switch(source, "encoder")
        codec.add_presence_flag_length(source, present)
        source.statement(f"if ({present})")
        source.open_block()
        if param.polymorph:
            codec.add_short_form_length(source, param.ctype.short_form)
        codec.add_value_length(source, param.ctype, "element", _tag(param, "attribute_tag"))
        source.close_block()
        self._close_format_switch(source)

    def _write_encode(self, param: CParameter) -> None:
        params: list[Parameter] = [("void *", "cursor"), ("mal_encoder_t *", "encoder")]
        if param.is_abstract_attribute:
            params += [("bool", "presence_flag"), ("unsigned char", "attribute_tag"), ("union mal_attribute_t", "element")]
        elif param.has_presence_flag:
            params += [("bool", "presence_flag"), (param.ctype.c_type, "element")]
        else:
            params.append((param.ctype.c_type, "element"))
        source = self._declare_once(param.function_name("encode"), params)
        if source is None:
            return
        self._open_format_switch(source, "encoder")
        if not param.has_presence_flag:
            source.statement("bool presence_flag = (element != NULL);")
        codec.add_presence_flag_encode(source, "presence_flag")
        source.statement("if (presence_flag)")
        source.open_block()
        if param.polymorph:
            codec.add_short_form_encode(source, param.ctype.short_form)
        codec.add_value_encode(source, param.ctype, "element", _tag(param, "attribute_tag"))
        source.close_block()
        self._close_format_switch(source)

    def _write_decode(self, param: CParameter) -> None:
        ctype = param.ctype
        params: list[Parameter] = [("void *", "cursor"), ("mal_decoder_t *", "decoder")]
        if param.is_abstract_attribute:
            params += [
                ("bool *", "presence_flag_res"),
                ("unsigned char *", "attribute_tag_res"),
                ("union mal_attribute_t *", "element_res"),
            ]
        elif param.has_presence_flag:
            params += [("bool *", "presence_flag_res"), (f"{ctype.c_type} *", "element_res")]
        else:
            params.append((f"{ctype.c_type}*", "element_res"))
        source = self._declare_once(param.function_name("decode"), params)
        if source is None:
            return
        self._open_format_switch(source, "decoder")
        source.statement("bool presence_flag;")
        codec.add_presence_flag_decode(source, "presence_flag")
        source.statement("if (presence_flag)")
        source.open_block()
        if ctype.category is CCategory.ENUMERATION:
            source.statement("int enumerated_value;")
        codec.add_value_decode(source, ctype, "*element_res", _tag(param, "*attribute_tag_res"))
        source.close_block()
        if param.has_presence_flag:
            source.statement("(*presence_flag_res) = presence_flag;")
        else:
            source.statement("else")
            source.open_block()
            source.statement("*element_res = NULL;")
            source.close_block()
        self._close_format_switch(source)

    def _write_generic_length(self, prefix: str, index: int | None) -> None:
        name = f"{prefix}_add_encoding_length" + ("" if index is None else f"_{index}")
        params: list[Parameter] = [
            ("mal_encoder_t *", "encoder"),
            ("mal_element_holder_t *", "element"),
            ("void *", "cursor"),
        ]
        source = self._declare_once(name, params)
        if source is None:
            return
        present = "(element != NULL && element->presence_flag)"
        self._open_format_switch(source, "encoder")
        codec.add_presence_flag_length(source, present)
        source.statement(f"if ({present})")
        source.open_block()
        codec.add_element_length(source, self.context.name_l, "element")
        source.close_block()
        self._close_format_switch(source)

    def _write_generic_encode(self, prefix: str, index: int) -> None:
        params: list[Parameter] = [
            ("void *", "cursor"),
            ("mal_encoder_t *", "encoder"),
            ("mal_element_holder_t *", "element"),
        ]
        source = self._declare_once(f"{prefix}_encode_{index}", params)
        if source is None:
            return
        self._open_format_switch(source, "encoder")
        source.statement("bool presence_flag = (element != NULL && element->presence_flag);")
        codec.add_presence_flag_encode(source, "presence_flag")
        source.statement("if (presence_flag)")
        source.open_block()
        codec.add_element_encode(source, self.context.name_l, "element")
        source.close_block()
        self._close_format_switch(source)

    def _write_generic_decode(self, name: str) -> None:
        params: list[Parameter] = [
            ("void *", "cursor"),
            ("mal_decoder_t *", "decoder"),
            ("mal_element_holder_t *", "element_holder"),
        ]
        source = self._declare_once(name, params)
        if source is None:
            return
        self._open_format_switch(source, "decoder")
        source.statement("bool presence_flag;")
        codec.add_presence_flag_decode(source, "presence_flag")
        source.statement("if (presence_flag)")
        source.open_block()
        codec.add_element_decode(source, self.context.name_l, "element_holder")
        source.close_block()
        source.statement("mal_element_holder_set_presence_flag(element_holder, presence_flag);")
        self._close_format_switch(source)

    # ---- writers ----

    def _declare(self, return_type: str, name: str, params: Sequence[Parameter]) -> CFileWriter:
        """Declare a function in the header content and open its body in the area source."""
        source = self.context.source
        source.newline()
        self.context.content.add_function_prototype(return_type, name, params)
        source.open_function(return_type, name, params)
        source.open_function_body()
        return source

    def _declare_once(self, name: str, params: Sequence[Parameter]) -> CFileWriter | None:
        if name in self._written:
            logger.debug(f"Function {name} already written")
            return None
        self._written.add(name)
        return self._declare("int", name, params)

    def _open_format_switch(self, source: CFileWriter, coder: str) -> None:
        source.statement("int rc = 0;")
        source.statement(f"switch ({coder}->encoding_format_code)")
        source.open_block()
        if self.malbinary:
            source.statement(f"case {codec.format_code(codec.TRANSPORT_MALBINARY)}:")
        if self.malsplitbinary:
            source.statement(f"case {codec.format_code(codec.TRANSPORT_MALSPLITBINARY)}:")
        source.open_block()

    def _close_format_switch(self, source: CFileWriter) -> None:
        source.statement("break;")
        source.close_block()
        source.statement("default:")
        source.statement("rc = -1;")
        source.close_block()
        source.statement("return rc;")
        source.close_function_body()


def _with_list(ref: TypeReference, is_list: bool) -> TypeReference:
    return ref.as_list() if is_list else ref


def _tag(param: CParameter, tag: str) -> str | None:
    return tag if param.is_abstract_attribute else None
