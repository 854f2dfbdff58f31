# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""C back-end: one header and one source per area plus a file pair per type.

The area header is assembled once the whole area has been walked: the
runtime includes and element functions first, then the area identifiers, the
buffered type declarations, the includes of the required areas, the buffered
operation declarations and finally the includes of the per-type headers.
"""

from __future__ import annotations

from pathlib import Path

from malstubgen.backends.base import Backend
from malstubgen.backends.c import codec
from malstubgen.backends.c.context import CAreaContext, CCategory, CType, resolve_c_type
from malstubgen.backends.c.operations import COperationEmitter
from malstubgen.backends.c.types import CTypeEmitter
from malstubgen.emit import CFileWriter
from malstubgen.emit.c_writer import Parameter
from malstubgen.errors import GeneratorError, UnexpectedConstructError
from malstubgen.logging_config import get_logger
from malstubgen.model import Area, Composite, DataType, Enumeration, Service
from malstubgen.model.mal import ATTRIBUTE_NAMES

logger = get_logger(__name__)

_POINTER_ATTRIBUTES = ("Blob", "Identifier", "String", "URI")

C_ATTRIBUTE_MAP = {
    name: f"mal_{name.lower()}_t *" if name in _POINTER_ATTRIBUTES else f"mal_{name.lower()}_t"
    for name in ATTRIBUTE_NAMES
}

# ###############
# Public Interface
# ###############


class CBackend(Backend):
    """Emits C sources for the CNES MAL/C runtime."""

    language = "c"
    attribute_map = C_ATTRIBUTE_MAP

    def generate_area(self, area: Area) -> None:
        """Write the area header and source and the files of every area and service type.

        Raises:
            UnexpectedConstructError: If the area defines attribute types or
                holds a construct the C mapping cannot express.
            UnknownTypeError: If a referenced type cannot be mapped.
        """
        logger.info(f"Processing area: {area.name}")
        self.report.record_area(area.name)
        area_l = area.name.lower()
        folder = self.options.destination / area_l

        try:
            header = self._open_file(folder / "include" / f"{area_l}.h")
            header.open_define(_guard(area_l))
            header.open_c()
            source = self._open_file(folder / "src" / f"{area_l}.c")
            source.add_include(f"{area_l}.h")
            source.newline()

            context = CAreaContext(area, folder, header, source)
            types = CTypeEmitter(self.registry, context, self._open_file)
            operations = COperationEmitter(self.registry, context, self.malbinary, self.malsplitbinary)
            for data_type in area.data_types:
                self._emit_type(types, context, data_type)
            for service in area.services:
                try:
                    self._generate_service(types, operations, context, service)
                except GeneratorError as exc:
                    raise exc.with_context(service.name)

            self._assemble_area(context)
        finally:
            self.close_files()

    # ################
    # Implementation
    # ################

    def _generate_service(
        self,
        types: CTypeEmitter,
        operations: COperationEmitter,
        context: CAreaContext,
        service: Service,
    ) -> None:
        logger.info(f"Processing service: {service.name}")
        context.types.newline()
        context.types.comment("standard service identifiers")
        context.types.add_define(
            f"{context.name_u}_{service.name.upper()}_SERVICE_NUMBER", str(service.number)
        )
        for data_type in service.data_types:
            self._emit_type(types, context, data_type)
        for operation in service.operations:
            try:
                operations.emit_operation(service, operation)
            except GeneratorError as exc:
                raise exc.with_context(operation.name)

    def _emit_type(self, types: CTypeEmitter, context: CAreaContext, data_type: DataType) -> None:
        try:
            if isinstance(data_type, Enumeration):
                basenames = types.emit_enumeration(data_type)
            elif isinstance(data_type, Composite):
                basenames = types.emit_composite(data_type)
            else:
                raise UnexpectedConstructError("attribute types cannot be generated")
        except GeneratorError as exc:
            raise exc.with_context(data_type.name)
        for basename in basenames:
            self.report.record_type(context.area.name, basename)

    def _assemble_area(self, context: CAreaContext) -> None:
        header = context.header
        source = context.source
        area = context.area

        header.add_include("mal.h")
        if self.malbinary:
            header.add_include(f"{codec.TRANSPORT_MALBINARY}.h")
        if self.malsplitbinary:
            header.add_include(f"{codec.TRANSPORT_MALSPLITBINARY}.h")
        header.newline()

        if self.malbinary:
            self._write_element_functions(context)

        header.newline()
        header.comment("standard area identifiers")
        header.add_define(f"{context.name_u}_AREA_NUMBER", str(area.number))
        header.add_define(f"{context.name_u}_AREA_VERSION", str(area.version))
        header.splice_statements(context.types)

        header.newline()
        header.comment("include required areas definitions")
        for include in context.required_includes():
            header.add_include(include)
        header.splice_statements(context.content)

        for writer in (header, source):
            writer.newline()
            writer.comment("test function")
        params: list[Parameter] = [("bool", "verbose")]
        header.add_function_prototype("void", f"{context.name_l}_test", params)
        source.open_function("void", f"{context.name_l}_test", params)
        source.open_function_body()
        source.statement(f'printf(" * {context.name_l}: ");')
        source.statement("if (verbose)", 1)
        source.statement('printf("\\n");', -1)
        source.statement('printf("OK\\n");')
        source.close_function_body()

        header.newline()
        header.splice_statements(context.structure_includes)
        header.close_c()
        header.close_define(_guard(context.name_l))
        header.close()
        source.close()

    # ---- generic element codec ----

    def _write_element_functions(self, context: CAreaContext) -> None:
        """Write the functions coding any concrete type behind a ``mal_element_holder_t``."""
        concrete: list[CType] = []
        for ref in self.registry.all_concrete_types():
            context.require(ref.area)
            concrete.append(resolve_c_type(self.registry, ref))
            concrete.append(resolve_c_type(self.registry, ref.as_list()))
        for mode in ("length", "encode", "decode"):
            self._write_element_function(context, mode, concrete)

    def _write_element_function(self, context: CAreaContext, mode: str, concrete: list[CType]) -> None:
        area_l = context.name_l
        holder: Parameter = ("mal_element_holder_t *", "element_holder")
        cursor: Parameter = ("void *", "cursor")
        params: list[Parameter]
        if mode == "length":
            name = codec.element_length_function(area_l)
            params = [("mal_encoder_t *", "encoder"), holder, cursor]
        elif mode == "encode":
            name = codec.element_encode_function(area_l)
            params = [("mal_encoder_t *", "encoder"), cursor, holder]
        else:
            name = codec.element_decode_function(area_l)
            params = [("mal_decoder_t *", "decoder"), cursor, holder]

        context.header.add_function_prototype("int", name, params)
        source = context.source
        source.newline()
        source.open_function("int", name, params)
        source.open_function_body()
        if mode == "decode":
            source.statement("int enumerated_value = 0;")
            source.statement("int rc = 0;")
            source.return_on_error("mal_decoder_decode_short_form(decoder, cursor, &element_holder->short_form)")
        else:
            source.statement("int rc = 0;")
            source.comment("Encoding abstract mal_element require encoding short form")
            if mode == "length":
                codec.add_short_form_length(source, "element_holder->short_form")
            else:
                codec.add_short_form_encode(source, "element_holder->short_form")

        for position, ctype in enumerate(concrete):
            keyword = "if" if position == 0 else "else if"
            source.statement(f"{keyword} (element_holder->short_form == {ctype.short_form})")
            source.open_block()
            slot = f"element_holder->value.{_holder_slot(ctype)}"
            if mode == "length":
                codec.add_value_length(source, ctype, slot)
            elif mode == "encode":
                codec.add_value_encode(source, ctype, slot)
            else:
                codec.add_value_decode(source, ctype, slot, cast=True)
            source.close_block()
        source.statement("else", 1)
        source.statement("return -1;", -1)
        source.statement("return rc;")
        source.close_function_body()

    def _open_file(self, path: Path) -> CFileWriter:
        logger.debug(f"Creating file {path}")
        writer = CFileWriter.to_file(path)
        self.track(writer)
        self.report.record_file(path)
        return writer


def _guard(basename: str) -> str:
    return f"__{basename.upper()}_H_INCLUDED__"


def _holder_slot(ctype: CType) -> str:
    """Member of the ``mal_element_holder_t`` value union holding a concrete type."""
    if ctype.category is CCategory.ATTRIBUTE:
        return f"{ctype.attribute_codec}_value"
    if ctype.category is CCategory.ENUMERATION:
        return "enumerated_value"
    if ctype.category is CCategory.COMPOSITE:
        return "composite_value"
    return "list_value"
