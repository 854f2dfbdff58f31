# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Go service emission: the helper constants, the consumer and the provider.

Each operation is walked through the stages of its interaction pattern. The
initial stage yields a consumer call and, for non PUBSUB patterns, a provider
interface method plus the handler registered in ``NewProvider``. Every later
stage yields a consumer call (unless the stage is only seen by the provider)
and a provider helper method bound to the in-flight transaction.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from malstubgen.backends.go.context import MAL_IMPORT, MALAPI_ALIAS, MALAPI_IMPORT, GoPackages, GoScope, ImportSet
from malstubgen.emit import GoFileWriter
from malstubgen.errors import UnexpectedConstructError
from malstubgen.logging_config import get_logger
from malstubgen.model import ErrorDefinition, InteractionPattern, Operation, TypeInfo, TypeReference
from malstubgen.model.mal import (
    pubsub_deregister_types,
    pubsub_notify_types,
    pubsub_publish_register_types,
    pubsub_publish_types,
    pubsub_register_types,
)
from malstubgen.naming import (
    error_const,
    go_null_value,
    go_type_name,
    operation_error_const,
    operation_number_const,
    owner_package,
    upper_first,
)
from malstubgen.registry import TypeRegistry

logger = get_logger(__name__)

OpenFile = Callable[[Path, str], GoFileWriter]

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class GoParameter:
    """Go mapping of one operation parameter.

    Attributes:
        name: Parameter name as declared.
        ref: Declared type.
        target_type: Go type of the decoded value.
        nil_value: Typed nil of the declared type.
        is_abstract: Whether the value is encoded with its short form.
        explicit_cast: Whether a decoded null must be mapped to the typed nil.
        is_last: Whether it is the last parameter of the message body.
    """

    name: str
    ref: TypeReference
    target_type: str
    nil_value: str
    is_abstract: bool
    explicit_cast: bool
    is_last: bool


@dataclass(frozen=True)
class Stage:
    """One stage of an interaction pattern.

    Attributes:
        name: MAL stage name (``Submit``, ``Ack``, ``Reply``...).
        in_types: Body sent by the consumer.
        out_types: Body returned to the consumer.
        skip_consumer: Whether the stage has no consumer call of its own.
    """

    name: str
    in_types: Sequence[TypeInfo] = ()
    out_types: Sequence[TypeInfo] = ()
    skip_consumer: bool = False

    @property
    def consumer_call(self) -> str:
        return _CONSUMER_CALLS.get(self.name, self.name)

    @property
    def is_no_reply(self) -> bool:
        return self.name in ("Send", "Publish")

    @property
    def nil_body(self) -> str:
        return "" if self.name in _CONSUMER_CALLS else "nil"


def operation_stages(operation: Operation) -> list[Stage]:
    """Return the stages of a non PUBSUB operation, the initial stage first."""
    pattern = operation.pattern
    args = operation.arg_types
    if pattern is InteractionPattern.SEND:
        return [Stage("Send", args)]
    if pattern is InteractionPattern.SUBMIT:
        return [Stage("Submit", args, operation.ack_types), Stage("Ack", (), operation.ack_types, True)]
    if pattern is InteractionPattern.REQUEST:
        return [Stage("Request", args, operation.ret_types), Stage("Reply", (), operation.ret_types, True)]
    if pattern is InteractionPattern.INVOKE:
        return [
            Stage("Invoke", args, operation.ack_types),
            Stage("Ack", (), operation.ack_types, True),
            Stage("Reply", (), operation.ret_types),
        ]
    if pattern is InteractionPattern.PROGRESS:
        return [
            Stage("Progress", args, operation.ack_types),
            Stage("Ack", (), operation.ack_types, True),
            Stage("Update", (), operation.update_types),
            Stage("Reply", (), operation.ret_types),
        ]
    raise UnexpectedConstructError(f"unexpected interaction pattern {pattern.value}")


class GoServiceEmitter:
    """Accumulates the operations of a service and writes its three files on close.

    Args:
        registry: Type registry of the run.
        packages: Go package resolution.
        scope: The service scope.
        open_file: Factory opening a new Go source for a path and a package name.
    """

    def __init__(self, registry: TypeRegistry, packages: GoPackages, scope: GoScope, open_file: OpenFile) -> None:
        assert scope.service is not None
        self.registry = registry
        self.packages = packages
        self.scope = scope
        self._open_file = open_file
        package = scope.package
        self._helper_consts = GoFileWriter.buffered(package)
        self._helper_operations = GoFileWriter.buffered(package)
        self._consumer_content = GoFileWriter.buffered(package)
        self._provider_interface = GoFileWriter.buffered(package)
        self._provider_handlers = GoFileWriter.buffered(package)
        self._provider_helpers = GoFileWriter.buffered(package)
        self._consumer_imports = self._base_imports(consumer=True)
        self._provider_imports = self._base_imports(consumer=False)

        self._helper_consts.comment("standard service identifiers")
        self._helper_consts.add_variable_declare("mal.UShort", "SERVICE_NUMBER", str(scope.service.number))
        self._helper_consts.add_variable_declare(None, "SERVICE_NAME", f'mal.Identifier("{scope.service.name}")')
        for error in scope.service.errors:
            self._helper_consts.add_variable_declare("mal.UInteger", error_const(error.name), str(error.number))

    def emit_operation(self, operation: Operation) -> None:
        """Generate the consumer and provider code of an operation.

        Raises:
            UnexpectedConstructError: If the operation cannot be mapped to the Go runtime.
        """
        logger.info(f"Processing operation: {operation.name}")
        self._helper_operations.add_variable_declare(
            "mal.UShort", operation_number_const(operation.name), str(operation.number)
        )
        if operation.pattern is InteractionPattern.PUBSUB:
            self._emit_pubsub(operation)
            return

        context = _OperationContext.create(operation)
        self._add_helper_structure(context)
        self._add_consumer_structure(context)
        stages = operation_stages(operation)
        self._init_stage(context, stages[0])
        for stage in stages[1:]:
            self._next_stage(context, stage)
        if operation.pattern is not InteractionPattern.SEND:
            self._add_error_functions(context)

    def close(self) -> None:
        """Write ``helper.go``, ``consumer.go`` and ``provider.go``."""
        self._write_helper()
        self._write_consumer()
        self._write_provider()

    # ################
    # Implementation
    # ################

    def _base_imports(self, consumer: bool) -> ImportSet:
        assert self.scope.service is not None
        has_operations = bool(self.scope.service.operations)
        imports = ImportSet(self.scope.package)
        if consumer or has_operations:
            imports.add("errors", "errors")
        if has_operations or not consumer:
            imports.add("mal", MAL_IMPORT)
        imports.add(MALAPI_ALIAS, MALAPI_IMPORT, MALAPI_ALIAS)
        if has_operations:
            imports.add(self.scope.area_package, self.packages.import_path(self.scope.area.name))
        return imports

    def _emit_pubsub(self, operation: Operation) -> None:
        if operation.errors:
            raise UnexpectedConstructError("errors are not supported on PUBSUB operations")
        try:
            notify = pubsub_notify_types(operation.update_types)
            publish = pubsub_publish_types(operation.update_types)
        except ValueError as exc:
            raise UnexpectedConstructError(str(exc)) from exc

        subscriber = _OperationContext.create(operation, "Subscriber")
        self._add_consumer_structure(subscriber)
        self._init_stage(subscriber, Stage("Register", pubsub_register_types()))
        self._next_stage(subscriber, Stage("Notify", (), notify))
        self._next_stage(subscriber, Stage("Deregister", pubsub_deregister_types()))

        publisher = _OperationContext.create(operation, "Publisher")
        self._add_consumer_structure(publisher)
        self._init_stage(publisher, Stage("Register", pubsub_publish_register_types()))
        self._next_stage(publisher, Stage("Publish", publish))
        self._next_stage(publisher, Stage("Deregister"))

        writer = self._provider_helpers
        writer.newline()
        writer.open_function(f"{upper_first(operation.name)}Dummy")
        writer.open_function_body(["error"])
        writer.statement(f"return errors.New(string({self.scope.area_package}.AREA_NAME))")
        writer.close_function_body()

    def _init_stage(self, context: _OperationContext, stage: Stage) -> None:
        in_params = self._parameters(stage.in_types)
        out_params = self._parameters(stage.out_types)
        self._require(self._consumer_imports, in_params, out_params)
        self._add_consumer_function(context, stage, in_params, out_params)
        if not context.is_pubsub:
            self._require(self._provider_imports, in_params)
            self._add_provider_interface_function(context, in_params)
            self._add_provider_handler(context, stage, in_params)

    def _next_stage(self, context: _OperationContext, stage: Stage) -> None:
        in_params = self._parameters(stage.in_types)
        out_params = self._parameters(stage.out_types)
        if not stage.skip_consumer:
            self._require(self._consumer_imports, in_params, out_params)
            self._add_consumer_function(context, stage, in_params, out_params)
        if not context.is_pubsub:
            self._require(self._provider_imports, out_params)
            self._add_provider_helper_function(context, stage, out_params)

    def _require(self, imports: ImportSet, *param_lists: Sequence[GoParameter]) -> None:
        for params in param_lists:
            for param in params:
                imports.add_type(param.ref, self.packages)

    def _parameters(self, types: Sequence[TypeInfo]) -> list[GoParameter]:
        package = self.scope.package
        params: list[GoParameter] = []
        for index, info in enumerate(types):
            ref = info.type
            self.registry.check_known(ref, f"parameter ({info.field_name})")
            is_last = index == len(types) - 1
            is_abstract = self.registry.is_abstract(ref)
            if is_abstract and not is_last:
                raise UnexpectedConstructError(f"abstract parameter {info.field_name} is not the last one")
            target_type = go_type_name(ref, package) + ("List" if ref.is_list else "")
            if not is_abstract:
                target_type = "*" + target_type
            params.append(
                GoParameter(
                    name=info.field_name,
                    ref=ref,
                    target_type=target_type,
                    nil_value=go_null_value(ref, package),
                    is_abstract=is_abstract,
                    explicit_cast=is_abstract and not self.registry.is_abstract_attribute(ref),
                    is_last=is_last,
                )
            )
        return params

    def _add_helper_structure(self, context: _OperationContext) -> None:
        writer = self._provider_helpers
        transaction_type = f"malapi.{context.interaction}Transaction"
        writer.newline()
        writer.comment(f"generated code for operation {context.operation.name}")
        writer.open_struct(context.helper_struct)
        if context.has_ack_flag:
            writer.add_struct_field("bool", "acked")
        writer.add_struct_field(transaction_type, "transaction")
        writer.close_struct()
        writer.open_function(f"New{context.helper_struct}", params=[("transaction", "malapi.Transaction")])
        writer.open_function_body([f"*{context.helper_struct}", "error"])
        writer.statement(f"iptransaction, ok := transaction.({transaction_type})")
        writer.statement("if !ok {", 1)
        writer.statement('return nil, errors.New("Unexpected transaction type")')
        writer.close_block()
        init_values = "false, " if context.has_ack_flag else ""
        writer.statement(f"helper := &{context.helper_struct}{{{init_values}iptransaction}}")
        writer.statement("return helper, nil")
        writer.close_function_body()

    def _add_consumer_structure(self, context: _OperationContext) -> None:
        writer = self._consumer_content
        area = self.scope.area_package
        writer.newline()
        writer.comment(f"generated code for operation {context.operation.name}")
        writer.open_struct(context.consumer_struct)
        writer.add_struct_field(context.operation_type, "op")
        writer.close_struct()
        writer.open_function(f"New{context.consumer_struct}", params=[("providerURI", "*mal.URI")])
        writer.open_function_body([f"*{context.consumer_struct}", "error"])
        writer.statement(
            f"op := Cctx.New{context.interaction}Operation(providerURI, {area}.AREA_NUMBER, {area}.AREA_VERSION, "
            f"SERVICE_NUMBER, {context.number_const})"
        )
        writer.statement(f"consumer := &{context.consumer_struct}{{op}}")
        writer.statement("return consumer, nil")
        writer.close_function_body()

    def _add_consumer_function(
        self,
        context: _OperationContext,
        stage: Stage,
        in_params: Sequence[GoParameter],
        out_params: Sequence[GoParameter],
    ) -> None:
        writer = self._consumer_content
        failure = ", ".join(["nil"] * len(out_params) + ["err"])
        writer.newline()
        writer.open_function(
            stage.consumer_call, f"*{context.consumer_struct}", [(p.name, p.target_type) for p in in_params]
        )
        writer.open_function_body([p.target_type for p in out_params] + ["error"])

        body = stage.nil_body
        if in_params:
            writer.comment("create a body for the operation call")
            writer.statement("body := receiver.op.NewBody()")
            writer.comment("encode in parameters")
            for param in in_params:
                writer.statement(f"{writer.err_assign()} body.{_encode_call(param)}")
                writer.return_on_error(failure)
            body = "body"

        writer.newline()
        writer.comment("operation call")
        if stage.is_no_reply:
            writer.statement(f"{writer.err_assign()} receiver.op.{stage.consumer_call}({body})")
        else:
            writer.statement(f"resp, err := receiver.op.{stage.consumer_call}({body})")
            writer.is_err_defined = True
        writer.statement("if err != nil {", 1)
        if not stage.is_no_reply:
            writer.comment("Verify if an error occurs during the operation")
            writer.statement("if !resp.IsErrorMessage {", 1)
            writer.statement(f"return {failure}")
            writer.close_block()
            if not context.is_pubsub:
                writer.statement("err = receiver.decodeError(resp, err)")
        writer.statement(f"return {failure}")
        writer.close_block()
        if stage.name == "Update":
            writer.statement("if resp == nil {", 1)
            writer.statement(f"return {failure}")
            writer.close_block()
        writer.newline()

        if not stage.is_no_reply and out_params:
            writer.comment("decode out parameters")
            for param in out_params:
                writer.statement(f"outElem_{param.name}, err := resp.{_decode_call(param)}")
                writer.return_on_error(failure)
                self._write_type_check(writer, param, "outElem_", "outParam_", failure)
                writer.newline()
        results = [f"outParam_{p.name}" for p in out_params]
        writer.statement(f"return {', '.join(results + ['nil'])}")
        writer.close_function_body()

    def _add_provider_interface_function(self, context: _OperationContext, in_params: Sequence[GoParameter]) -> None:
        params = "".join(f", {p.name} {p.target_type}" for p in in_params)
        self._provider_interface.statement(f"{context.name}(opHelper *{context.helper_struct}{params}) error")

    def _add_provider_handler(self, context: _OperationContext, stage: Stage, in_params: Sequence[GoParameter]) -> None:
        writer = self._provider_handlers
        area = self.scope.area_package
        result = "err" if context.is_no_error else "opHelper.ReturnError(err)"
        writer.comment(f"define the handler for operation {context.name}")
        writer.statement(f"{context.name}Handler := func(msg *mal.Message, t malapi.Transaction) error {{", 1)
        writer.statement(f"opHelper, err := New{context.helper_struct}(t)")
        writer.return_on_error()
        writer.statement("if msg == nil {", 1)
        writer.statement('err = errors.New("missing Message")')
        writer.statement(f"return {result}")
        writer.close_block()
        if in_params:
            writer.comment("decode in parameters")
            for param in in_params:
                writer.statement(f"inElem_{param.name}, err := msg.{_decode_call(param)}")
                writer.return_on_error(result)
                self._write_type_check(writer, param, "inElem_", "inParam_", result)
        writer.comment("call the provider implementation")
        args = "".join(f", inParam_{p.name}" for p in in_params)
        writer.statement(f"err = providerImpl.{context.name}(opHelper{args})")
        writer.return_on_error(result)
        writer.statement("return nil")
        writer.close_block()
        writer.comment("register the handler")
        writer.statement(
            f"err = cctx.Register{stage.name}Handler({area}.AREA_NUMBER, {area}.AREA_VERSION, SERVICE_NUMBER, "
            f"{context.number_const}, {context.name}Handler)"
        )
        writer.return_on_error("nil, err")

    def _add_provider_helper_function(
        self, context: _OperationContext, stage: Stage, out_params: Sequence[GoParameter]
    ) -> None:
        writer = self._provider_helpers
        writer.newline()
        writer.open_function(stage.name, f"*{context.helper_struct}", [(p.name, p.target_type) for p in out_params])
        writer.open_function_body(["error"])
        writer.statement("transaction := receiver.transaction")
        body = "nil"
        if out_params:
            writer.comment("create a body for the interaction call")
            writer.statement("body := transaction.NewBody()")
            writer.comment("encode parameters")
            for param in out_params:
                writer.statement(f"{writer.err_assign()} body.{_encode_call(param)}")
                writer.return_on_error()
            body = "body"
        writer.newline()
        writer.comment("interaction call")
        writer.statement(f"{writer.err_assign()} transaction.{stage.name}({body}, false)")
        writer.return_on_error()
        if context.has_ack_flag and stage.name == "Ack":
            writer.statement("receiver.acked = true")
        writer.statement("return nil")
        writer.close_function_body()

    def _write_type_check(
        self, writer: GoFileWriter, param: GoParameter, elem_prefix: str, param_prefix: str, failure: str
    ) -> None:
        elem = f"{elem_prefix}{param.name}"
        value = f"{param_prefix}{param.name}"
        writer.statement(f"{value}, ok := {elem}.({param.target_type})")
        writer.statement("if !ok {", 1)
        if param.explicit_cast:
            writer.statement(f"if {elem} == mal.NullElement {{", 1)
            writer.statement(f"{value} = {param.nil_value}")
            writer.continue_block()
        writer.statement(f'err = errors.New("unexpected type for parameter {param.name}")')
        writer.statement(f"return {failure}")
        if param.explicit_cast:
            writer.close_block()
        writer.close_block()

    def _add_error_functions(self, context: _OperationContext) -> None:
        helper = self._provider_helpers
        consumer = self._consumer_content
        package = self.scope.package

        helper.newline()
        helper.open_function("ReturnError", f"*{context.helper_struct}", [("e", "error")])
        helper.open_function_body(["error"])
        helper.statement("transaction := receiver.transaction")
        helper.statement("body := transaction.NewBody()")
        helper.statement("var errCode *mal.UInteger")
        helper.statement("var errExtraInfo mal.Element")
        helper.statement("var errIsAbstract bool")
        helper.statement("malErr, ok := e.(*malapi.MalError)")
        helper.statement("if ok {", 1)
        helper.statement("errCode = &malErr.Code")
        helper.statement("errExtraInfo = malErr.ExtraInfo")
        helper.statement("errIsAbstract = false")

        consumer.newline()
        consumer.open_function("decodeError", f"*{context.consumer_struct}", [("resp", "*mal.Message"), ("e", "error")])
        consumer.open_function_body(["error"])
        consumer.comment("decode err parameters")
        consumer.statement("outElem_code, err := resp.DecodeParameter(mal.NullUInteger)")
        consumer.return_on_error()
        consumer.statement("outParam_code, ok := outElem_code.(*mal.UInteger)")
        consumer.statement("if !ok {", 1)
        consumer.statement('err = errors.New("unexpected type for parameter code")')
        consumer.statement("return err")
        consumer.close_block()
        consumer.statement("nullValue := mal.NullElement")
        consumer.statement("errIsAbstract := false")
        consumer.statement("switch *outParam_code {")

        for error in context.operation.errors:
            code_import: tuple[str, str] | None = None
            if isinstance(error, ErrorDefinition):
                code = operation_error_const(context.name, error.name)
                self._helper_consts.add_variable_declare("mal.UInteger", code, str(error.number))
            else:
                reference = error.error
                code_package = owner_package(reference.area, reference.service)
                code = error_const(reference.name)
                if code_package != package:
                    code = f"{code_package}.{code}"
                    code_import = (code_package, self.packages.import_path(reference.area, reference.service))
                    self._consumer_imports.add(*code_import)
            extra_info = error.extra_info
            consumer.statement(f"case {code}:", 1)
            if extra_info is None:
                consumer.statement("nullValue = mal.NullString", -1)
            elif self.registry.is_abstract(extra_info):
                if code_import is not None:
                    self._provider_imports.add(*code_import)
                helper.statement(f"if malErr.Code == {code} {{ errIsAbstract = true }}")
                consumer.statement("errIsAbstract = true", -1)
            else:
                self._consumer_imports.add_type(extra_info, self.packages)
                consumer.statement(f"nullValue = {go_null_value(extra_info, package)}", -1)
        consumer.statement("default:", 1)
        consumer.statement("nullValue = mal.NullString", -1)
        consumer.statement("}")
        consumer.statement("outElem_extraInfo, err := resp.DecodeLastParameter(nullValue, errIsAbstract)")
        consumer.return_on_error()
        consumer.statement("return malapi.NewMalError(*outParam_code, outElem_extraInfo)")
        consumer.close_function_body()

        helper.continue_block()
        helper.comment("return an UNKNOWN error with a String information")
        helper.statement("errCode = mal.NewUInteger(uint32(mal.ERROR_UNKNOWN))")
        helper.statement("errExtraInfo = mal.NewString(e.Error())")
        helper.statement("errIsAbstract = false")
        helper.close_block()
        helper.comment("encode parameters")
        helper.statement("if body.EncodeParameter(errCode) != nil {", 1)
        helper.statement('return errors.New("Fatal error in error handling code")')
        helper.continue_block("} else if body.EncodeLastParameter(errExtraInfo, errIsAbstract) != nil {")
        helper.statement('return errors.New("Fatal error in error handling code")')
        helper.close_block()
        helper.newline()
        helper.comment("interaction call")
        helper.statement("var err error")
        pattern = context.operation.pattern
        if pattern is InteractionPattern.SUBMIT:
            helper.statement("err = transaction.Ack(body, true)")
        elif pattern is InteractionPattern.REQUEST:
            helper.statement("err = transaction.Reply(body, true)")
        else:
            helper.statement("if !receiver.acked {", 1)
            helper.statement("err = transaction.Ack(body, true)")
            helper.continue_block()
            final = "Reply" if pattern is InteractionPattern.INVOKE else "Update"
            helper.statement(f"err = transaction.{final}(body, true)")
            helper.close_block()
        helper.return_on_error()
        helper.statement("return nil")
        helper.close_function_body()

    def _write_helper(self) -> None:
        writer = self._open("helper")
        writer.add_package()
        writer.newline()
        imports = ImportSet(self.scope.package)
        imports.add("mal", MAL_IMPORT)
        imports.write(writer)
        writer.newline()
        writer.open_const_block()
        writer.splice_statements(self._helper_consts)
        writer.newline()
        writer.comment("standard operation identifiers")
        writer.splice_statements(self._helper_operations)
        writer.close_const_block()
        writer.close()

    def _write_consumer(self) -> None:
        writer = self._open("consumer")
        writer.add_package()
        writer.newline()
        self._consumer_imports.write(writer)
        writer.newline()
        writer.statement("var Cctx *malapi.ClientContext")
        writer.newline()
        writer.open_function("Init", params=[("cctxin", "*malapi.ClientContext")])
        writer.open_function_body(["error"])
        writer.statement("if cctxin == nil {", 1)
        writer.statement('return errors.New("Illegal nil client context in Init")')
        writer.close_block()
        writer.statement("Cctx = cctxin")
        writer.statement("return nil")
        writer.close_function_body()
        writer.splice_statements(self._consumer_content)
        writer.close()

    def _write_provider(self) -> None:
        writer = self._open("provider")
        writer.add_package()
        writer.newline()
        self._provider_imports.write(writer)
        writer.newline()
        writer.comment("service provider internal interface")
        writer.statement("type ProviderInterface interface {", 1)
        writer.splice_statements(self._provider_interface)
        writer.statement("}", -1, True)
        writer.newline()
        writer.comment("service provider structure")
        writer.open_struct("Provider")
        writer.add_struct_field("*malapi.ClientContext", "Cctx")
        writer.add_struct_field("ProviderInterface", "provider")
        writer.close_struct()
        writer.newline()
        writer.comment("create a service provider")
        writer.open_function(
            "NewProvider",
            params=[("ctx", "*mal.Context"), ("uri", "string"), ("providerImpl", "ProviderInterface")],
        )
        writer.open_function_body(["*Provider", "error"])
        writer.statement("cctx, err := malapi.NewClientContext(ctx, uri)")
        writer.return_on_error("nil, err")
        writer.splice_statements(self._provider_handlers)
        writer.statement("provider := &Provider{cctx, providerImpl}")
        writer.statement("return provider, nil")
        writer.close_function_body()
        writer.newline()
        writer.open_function("Close", "*Provider")
        writer.open_function_body(["error"])
        writer.statement("if receiver.Cctx != nil {", 1)
        writer.statement("err := receiver.Cctx.Close()")
        writer.return_on_error()
        writer.close_block()
        writer.statement("return nil")
        writer.close_function_body()
        writer.splice_statements(self._provider_helpers)
        writer.close()

    def _open(self, basename: str) -> GoFileWriter:
        return self._open_file(self.scope.folder / f"{basename}.go", self.scope.package)


@dataclass(frozen=True)
class _OperationContext:
    operation: Operation
    name: str
    interaction: str
    consumer_struct: str
    helper_struct: str

    @staticmethod
    def create(operation: Operation, role: str | None = None) -> _OperationContext:
        name = upper_first(operation.name)
        interaction = role if role is not None else _INTERACTIONS[operation.pattern]
        suffix = f"{role}Operation" if role is not None else "Operation"
        return _OperationContext(operation, name, interaction, f"{name}{suffix}", f"{name}Helper")

    @property
    def operation_type(self) -> str:
        return f"malapi.{self.interaction}Operation"

    @property
    def number_const(self) -> str:
        return operation_number_const(self.operation.name)

    @property
    def is_pubsub(self) -> bool:
        return self.operation.pattern is InteractionPattern.PUBSUB

    @property
    def is_no_error(self) -> bool:
        return self.operation.pattern is InteractionPattern.SEND or not self.operation.errors

    @property
    def has_ack_flag(self) -> bool:
        return self.operation.pattern in (InteractionPattern.INVOKE, InteractionPattern.PROGRESS)


_INTERACTIONS = {
    InteractionPattern.SEND: "Send",
    InteractionPattern.SUBMIT: "Submit",
    InteractionPattern.REQUEST: "Request",
    InteractionPattern.INVOKE: "Invoke",
    InteractionPattern.PROGRESS: "Progress",
}

_CONSUMER_CALLS = {
    "Ack": "Ack",
    "Update": "GetUpdate",
    "Reply": "GetResponse",
    "Notify": "GetNotify",
}


def _encode_call(param: GoParameter) -> str:
    if param.is_last:
        return f"EncodeLastParameter({param.name}, {'true' if param.is_abstract else 'false'})"
    return f"EncodeParameter({param.name})"


def _decode_call(param: GoParameter) -> str:
    if param.is_abstract:
        return "DecodeLastParameter(nil, true)"
    if param.is_last:
        return f"DecodeLastParameter({param.nil_value}, false)"
    return f"DecodeParameter({param.nil_value})"
