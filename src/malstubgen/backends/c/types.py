# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""C data type emission: enumerations, composites and their list types.

Type declarations (typedefs, short form defines) go to the buffered types
section of the area header; every concrete composite gets its own
``<type>.h``/``<type>.c`` pair and every concrete type a
``<type>_list.h``/``<type>_list.c`` pair. The per-type headers are included
at the end of the area header.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from malstubgen.backends.c import codec
from malstubgen.backends.c.context import CAreaContext, CCategory, CType, resolve_c_type
from malstubgen.emit import CFileWriter
from malstubgen.emit.c_writer import Parameter
from malstubgen.errors import GeneratorError, UnexpectedConstructError
from malstubgen.logging_config import get_logger
from malstubgen.model import Composite, Enumeration, Field, TypeReference
from malstubgen.naming import c_field_name, c_struct_field, c_type_name, mal_name
from malstubgen.registry import MalbinaryEnumSize, TypeRegistry

logger = get_logger(__name__)

OpenFile = Callable[[Path], CFileWriter]

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class CField:
    """C mapping of one composite field.

    Attributes:
        name: Declared field name.
        ctype: C mapping of the field type.
        nullable: Whether the field may be null.
    """

    name: str
    ctype: CType
    nullable: bool

    @property
    def accessor(self) -> str:
        return c_field_name(self.name)

    @property
    def member(self) -> str:
        return c_struct_field(self.name)

    @property
    def is_abstract_attribute(self) -> bool:
        return self.ctype.category is CCategory.ABSTRACT_ATTRIBUTE

    @property
    def has_present_flag(self) -> bool:
        """Whether the structure carries a ``<member>_is_present`` boolean."""
        return self.nullable and self.ctype.has_presence_flag

    @property
    def is_destroyable(self) -> bool:
        return self.is_abstract_attribute or self.ctype.is_pointer


def format_short_form(value: int) -> str:
    """C literal of an absolute short form."""
    return f"0x{value:x}L"


class CTypeEmitter:
    """Writes the data types of one area and of its services.

    Args:
        registry: Type registry of the run.
        context: State of the area being generated.
        open_file: Factory opening a new C file.
    """

    def __init__(self, registry: TypeRegistry, context: CAreaContext, open_file: OpenFile) -> None:
        self.registry = registry
        self.context = context
        self._open_file = open_file

    def emit_enumeration(self, enumeration: Enumeration) -> list[str]:
        """Declare an enumeration and write its list type, returning the base names written.

        Raises:
            UnexpectedConstructError: If the enumeration has no item.
        """
        ref = enumeration.reference
        logger.info(f"Creating enumeration {_mal_name(ref)}")
        if not enumeration.items:
            raise UnexpectedConstructError("enumeration has no item")

        qualified = c_type_name(ref)
        upper = qualified.upper()
        size = self.registry.enum_wire_size(ref)
        last = len(enumeration.items) - 1

        types = self.context.types
        types.newline()
        types.comment(f"generated code for enumeration {qualified}")
        types.open_typedef_enum()
        for index, item in enumerate(enumeration.items):
            types.add_typedef_enum_element(f"{upper}_{item.value.upper()}", last=index == last)
        types.close_typedef_enum(f"{qualified}_t")

        source = self.context.source
        source.newline()
        source.statement(f"int {upper}_NUMERIC_VALUES[] =")
        source.statement("{", 1)
        for index, item in enumerate(enumeration.items):
            source.statement(str(item.nvalue) if index == last else f"{item.nvalue},")
        source.statement("};", -1, True)

        types.newline()
        types.comment(f"short form for enumeration type {qualified}")
        types.add_define(f"{upper}_SHORT_FORM", format_short_form(self.registry.absolute_short_form(ref)))

        basename = self._emit_enumeration_list(ref, qualified, size)

        types.newline()
        types.comment(f"short form for list of enumeration type {qualified}")
        types.add_define(f"{upper}_LIST_SHORT_FORM", format_short_form(self.registry.absolute_short_form(ref.as_list())))
        return [basename]

    def emit_composite(self, composite: Composite) -> list[str]:
        """Write the files of a concrete composite and of its list type.

        An abstract composite has no value in C: it only gets a documentation
        note in the area header.

        Returns:
            The base names of the written types.
        """
        ref = composite.reference
        name = _mal_name(ref)
        if composite.is_abstract:
            logger.info(f"Creating abstract composite {name}")
            types = self.context.types
            types.newline()
            types.comment(f"abstract composite {name} has no C structure, use its concrete types")
            return []

        logger.info(f"Creating composite {name}")
        qualified = c_type_name(ref)
        for buffer in (self.context.content, self.context.types):
            buffer.newline()
            buffer.comment(f"generated code for composite {name}")
        self.context.types.add_typedef_struct(f"_{qualified}_t", f"{qualified}_t")

        fields = [self._map_field(field) for field in self.registry.composite_fields(ref)]
        header, source = self._open_pair(qualified)
        self.context.structure_includes.add_include(f"{qualified}.h")
        _write_fields(header, source, qualified, fields)
        _write_composite_constructor(header, source, qualified)
        _write_composite_codec(header, source, qualified, fields)
        _write_composite_destructor(header, source, qualified, fields)

        types = self.context.types
        types.newline()
        types.comment(f"short form for composite type {name}")
        types.add_define(f"{qualified.upper()}_SHORT_FORM", format_short_form(self.registry.absolute_short_form(ref)))

        list_basename = self._emit_composite_list(ref, qualified)

        types.newline()
        types.comment(f"short form for list of composite type {name}")
        types.add_define(
            f"{qualified.upper()}_LIST_SHORT_FORM",
            format_short_form(self.registry.absolute_short_form(ref.as_list())),
        )

        label = ":".join(part for part in (ref.area, ref.service, ref.name) if part is not None)
        _write_test_function(header, source, qualified, label)
        _close_pair(header, source, qualified)
        return [qualified, list_basename]

    # ################
    # Implementation
    # ################

    def _map_field(self, field: Field) -> CField:
        ref = field.type
        try:
            self.registry.check_known(ref, "composite field")
            self.context.require(ref.area)
            ctype = resolve_c_type(self.registry, ref)
        except GeneratorError as exc:
            raise exc.with_context(field.name)
        return CField(field.name, ctype, field.can_be_null)

    def _open_pair(self, basename: str) -> tuple[CFileWriter, CFileWriter]:
        header = self._open_file(self.context.include_folder / f"{basename}.h")
        source = self._open_file(self.context.source_folder / f"{basename}.c")
        header.open_define(f"__{basename.upper()}_H_INCLUDED__")
        header.open_c()
        source.add_include(f"{self.context.name_l}.h")
        source.newline()
        return header, source

    def _emit_enumeration_list(self, ref: TypeReference, qualified: str, size: MalbinaryEnumSize) -> str:
        logger.info(f"Creating list type for enumeration {_mal_name(ref)}")
        list_name = f"{qualified}_list"
        self.context.types.add_typedef_struct(f"_{list_name}_t", f"{list_name}_t")
        header, source = self._open_pair(list_name)

        source.open_struct(f"_{list_name}_t")
        source.add_struct_field("unsigned int", "element_count")
        source.add_struct_field("bool *", "presence_flags")
        source.add_struct_field(f"{qualified}_t *", "content")
        source.close_struct()

        _section(header, source, "default constructor")
        _declare(header, source, f"{list_name}_t *", f"{list_name}_new", [("unsigned int", "element_count")])
        source.statement(f"{list_name}_t * self = ({list_name}_t *) calloc(1, sizeof({list_name}_t));")
        _return_if(source, "!self", "NULL")
        source.statement("self->element_count = element_count;")
        _return_if(source, "element_count == 0", "self")
        source.statement("self->presence_flags = (bool *) calloc(element_count, sizeof(bool));")
        source.statement("if (!self->presence_flags)")
        source.open_block()
        source.statement("free(self);")
        source.statement("return NULL;")
        source.close_block()
        source.statement(f"self->content = ({qualified}_t *) calloc(element_count, sizeof({qualified}_t));")
        source.statement("if (!self->content)")
        source.open_block()
        source.statement("free(self->presence_flags);")
        source.statement("free(self);")
        source.statement("return NULL;")
        source.close_block()
        source.statement("return self;")
        source.close_function_body()

        _section(header, source, "destructor, free the list and its content")
        _declare(header, source, "void", f"{list_name}_destroy", [(f"{list_name}_t **", "self_p")])
        source.statement("if ((*self_p)->element_count > 0)")
        source.open_block()
        source.statement("free((*self_p)->presence_flags);")
        source.statement("free((*self_p)->content);")
        source.close_block()
        source.statement("free (*self_p);")
        source.statement("(*self_p) = NULL;")
        source.close_function_body()

        _section(header, source, f"fields accessors for enumeration list {list_name}")
        self_param: list[Parameter] = [(f"{list_name}_t *", "self")]
        for return_type, member in (
            ("unsigned int", "element_count"),
            ("bool *", "presence_flags"),
            (f"{qualified}_t *", "content"),
        ):
            _declare(header, source, return_type, f"{list_name}_get_{member}", self_param)
            source.statement(f"return self->{member};")
            source.close_function_body()

        _write_enumeration_list_codec(header, source, qualified, size)
        _write_test_function(header, source, list_name, f"list of {qualified}")
        _close_pair(header, source, list_name)
        self.context.structure_includes.add_include(f"{list_name}.h")
        return list_name

    def _emit_composite_list(self, ref: TypeReference, qualified: str) -> str:
        logger.info(f"Creating list type for composite {_mal_name(ref)}")
        list_name = f"{qualified}_list"
        self.context.types.add_typedef_struct(f"_{list_name}_t", f"{list_name}_t")
        header, source = self._open_pair(list_name)

        source.open_struct(f"_{list_name}_t")
        source.add_struct_field("unsigned int", "element_count")
        source.add_struct_field(f"{qualified}_t **", "content")
        source.close_struct()

        _section(header, source, "default constructor")
        _declare(header, source, f"{list_name}_t *", f"{list_name}_new", [("unsigned int", "element_count")])
        source.statement(f"{list_name}_t * self = ({list_name}_t *) calloc(1, sizeof({list_name}_t));")
        _return_if(source, "!self", "NULL")
        source.statement("self->element_count = element_count;")
        source.statement(f"self->content = ({qualified}_t **) calloc(element_count, sizeof({qualified}_t *));")
        source.statement("if (!self->content && (element_count > 0))")
        source.open_block()
        source.statement("free(self);")
        source.statement("return NULL;")
        source.close_block()
        source.statement("return self;")
        source.close_function_body()

        _section(header, source, "destructor, free the list, its content and its elements")
        _declare(header, source, "void", f"{list_name}_destroy", [(f"{list_name}_t **", "self_p")])
        source.statement("if ((*self_p)->element_count > 0)")
        source.open_block()
        source.statement("for (int i = 0; i < (*self_p)->element_count; i++)")
        source.open_block()
        source.statement("if ((*self_p)->content[i] != NULL)", 1)
        source.statement(f"{qualified}_destroy(&(*self_p)->content[i]);", -1)
        source.close_block()
        source.close_block()
        source.statement("free((*self_p)->content);")
        source.statement("free (*self_p);")
        source.statement("(*self_p) = NULL;")
        source.close_function_body()

        _section(header, source, f"fields accessors for composite list {list_name}")
        self_param: list[Parameter] = [(f"{list_name}_t *", "self")]
        for return_type, member in (("unsigned int", "element_count"), (f"{qualified}_t **", "content")):
            _declare(header, source, return_type, f"{list_name}_get_{member}", self_param)
            source.statement(f"return self->{member};")
            source.close_function_body()

        _write_composite_list_codec(header, source, resolve_c_type(self.registry, ref))
        _write_test_function(header, source, list_name, f"list of {qualified}")
        _close_pair(header, source, list_name)
        self.context.structure_includes.add_include(f"{list_name}.h")
        return list_name


def _mal_name(ref: TypeReference) -> str:
    return mal_name(ref.area, ref.service, ref.name)


def _section(header: CFileWriter, source: CFileWriter, comment: str) -> None:
    for writer in (header, source):
        writer.newline()
        writer.comment(comment)


def _declare(
    header: CFileWriter, source: CFileWriter, return_type: str, name: str, params: Sequence[Parameter] = ()
) -> None:
    """Declare a function in the header and open its definition in the source."""
    header.add_function_prototype(return_type, name, params)
    source.open_function(return_type, name, params)
    source.open_function_body()


def _return_if(writer: CFileWriter, condition: str, value: str) -> None:
    writer.statement(f"if ({condition})", 1)
    writer.statement(f"return {value};", -1)


def _close_pair(header: CFileWriter, source: CFileWriter, basename: str) -> None:
    header.close_c()
    header.close_define(f"__{basename.upper()}_H_INCLUDED__")
    header.close()
    source.close()


def _write_test_function(header: CFileWriter, source: CFileWriter, prefix: str, label: str) -> None:
    _section(header, source, "test function")
    _declare(header, source, "void", f"{prefix}_test", [("bool", "verbose")])
    source.statement(f'printf(" * {label}: ");')
    source.statement("if (verbose)", 1)
    source.statement('printf("\\n");', -1)
    source.statement('printf("OK\\n");')
    source.close_function_body()


# ---- composites ----


def _write_fields(header: CFileWriter, source: CFileWriter, qualified: str, fields: list[CField]) -> None:
    self_type = f"{qualified}_t *"
    source.newline()
    source.comment(f"structure definition for composite {qualified}")
    source.open_struct(f"_{qualified}_t")
    for field in fields:
        if field.has_present_flag:
            source.add_struct_field("bool", f"{field.member}_is_present")
        if field.is_abstract_attribute:
            source.add_struct_field("unsigned char", f"{field.member}_attribute_tag")
        source.add_struct_field(field.ctype.c_type, field.member)
    source.close_struct()

    _section(header, source, f"fields accessors for composite {qualified}")
    for field in fields:
        prefix = f"{qualified}_{field.accessor}"
        if field.has_present_flag:
            _declare(header, source, "bool", f"{prefix}_is_present", [(self_type, "self")])
            source.statement(f"return self->{field.member}_is_present;")
            source.close_function_body()
            _declare(header, source, "void", f"{prefix}_set_present", [(self_type, "self"), ("bool", "is_present")])
            source.statement(f"self->{field.member}_is_present = is_present;")
            source.close_function_body()
        if field.is_abstract_attribute:
            _declare(header, source, "unsigned char", f"{prefix}_get_attribute_tag", [(self_type, "self")])
            source.statement(f"return self->{field.member}_attribute_tag;")
            source.close_function_body()
            _declare(
                header,
                source,
                "void",
                f"{prefix}_set_attribute_tag",
                [(self_type, "self"), ("unsigned char", "attribute_tag")],
            )
            source.statement(f"self->{field.member}_attribute_tag = attribute_tag;")
            source.close_function_body()
        c_type = field.ctype.c_type
        _declare(header, source, c_type, f"{qualified}_get_{field.accessor}", [(self_type, "self")])
        source.statement(f"return self->{field.member};")
        source.close_function_body()
        _declare(header, source, "void", f"{qualified}_set_{field.accessor}", [(self_type, "self"), (c_type, field.member)])
        source.statement(f"self->{field.member} = {field.member};")
        source.close_function_body()


def _write_composite_constructor(header: CFileWriter, source: CFileWriter, qualified: str) -> None:
    _section(header, source, "default constructor")
    _declare(header, source, f"{qualified}_t *", f"{qualified}_new")
    source.statement(f"{qualified}_t * self = ({qualified}_t *) calloc(1, sizeof({qualified}_t));")
    _return_if(source, "!self", "NULL")
    source.statement("return self;")
    source.close_function_body()


def _write_composite_destructor(header: CFileWriter, source: CFileWriter, qualified: str, fields: list[CField]) -> None:
    _section(header, source, "destructor")
    _declare(header, source, "void", f"{qualified}_destroy", [(f"{qualified}_t **", "self_p")])
    for field in fields:
        if not field.is_destroyable:
            continue
        member = f"(*self_p)->{field.member}"
        if field.is_abstract_attribute:
            if field.has_present_flag:
                source.statement(f"if ({member}_is_present)")
                source.open_block()
            source.statement(f"mal_attribute_destroy(&{member}, {member}_attribute_tag);")
            if field.has_present_flag:
                source.close_block()
        else:
            source.statement(f"if ({member} != NULL)")
            source.open_block()
            source.statement(f"{field.ctype.type_suffix}_destroy(& {member});")
            source.close_block()
    source.statement("free(*self_p);")
    source.statement("(*self_p) = NULL;")
    source.close_function_body()


def _write_composite_codec(header: CFileWriter, source: CFileWriter, qualified: str, fields: list[CField]) -> None:
    holds_optional = any(field.nullable for field in fields)
    holds_enum = any(field.ctype.category is CCategory.ENUMERATION for field in fields)

    _section(header, source, f"encoding functions related to transport {codec.TRANSPORT_MALBINARY}")
    _declare_codec(header, source, qualified, "add_encoding_length", "mal_encoder_t *", "encoder")
    source.statement("int rc = 0;")
    for field in fields:
        _write_field_length(source, field)
    source.statement("return rc;")
    source.close_function_body()

    _declare_codec(header, source, qualified, "encode", "mal_encoder_t *", "encoder")
    source.statement("int rc = 0;")
    if holds_optional:
        source.add_variable_declare("bool", "presence_flag")
    for field in fields:
        _write_field_encode(source, field)
    source.statement("return rc;")
    source.close_function_body()

    _declare_codec(header, source, qualified, "decode", "mal_decoder_t *", "decoder")
    source.statement("int rc = 0;")
    if holds_optional:
        source.add_variable_declare("bool", "presence_flag")
    if holds_enum:
        source.add_variable_declare("int", "enumerated_value")
    for field in fields:
        _write_field_decode(source, field)
    source.statement("return rc;")
    source.close_function_body()


def _declare_codec(
    header: CFileWriter,
    source: CFileWriter,
    type_suffix: str,
    function: str,
    coder_type: str,
    coder: str,
) -> None:
    params: list[Parameter] = [(f"{type_suffix}_t *", "self"), (coder_type, coder), ("void *", "cursor")]
    _declare(header, source, "int", f"{type_suffix}_{function}_{codec.TRANSPORT_MALBINARY}", params)


def _presence_expression(field: CField) -> str:
    if field.has_present_flag:
        return f"self->{field.member}_is_present"
    return f"(self->{field.member} != NULL)"


def _field_tag(field: CField) -> str | None:
    return f"self->{field.member}_attribute_tag" if field.is_abstract_attribute else None


def _write_field_length(writer: CFileWriter, field: CField) -> None:
    if field.nullable:
        present = _presence_expression(field)
        codec.add_presence_flag_length(writer, present)
        writer.statement(f"if ({present})")
        writer.open_block()
    codec.add_value_length(writer, field.ctype, f"self->{field.member}", _field_tag(field))
    if field.nullable:
        writer.close_block()


def _write_field_encode(writer: CFileWriter, field: CField) -> None:
    if field.nullable:
        writer.statement(f"presence_flag = {_presence_expression(field)};")
        codec.add_presence_flag_encode(writer, "presence_flag")
        writer.statement("if (presence_flag)")
        writer.open_block()
    codec.add_value_encode(writer, field.ctype, f"self->{field.member}", _field_tag(field))
    if field.nullable:
        writer.close_block()


def _write_field_decode(writer: CFileWriter, field: CField) -> None:
    if field.nullable:
        codec.add_presence_flag_decode(writer, "presence_flag")
        writer.statement("if (presence_flag)")
        writer.open_block()
    codec.add_value_decode(writer, field.ctype, f"self->{field.member}", _field_tag(field))
    if not field.nullable:
        return
    writer.close_block()
    if field.has_present_flag:
        writer.statement(f"self->{field.member}_is_present = presence_flag;")
    else:
        writer.statement("else")
        writer.open_block()
        writer.statement(f"self->{field.member} = NULL;")
        writer.close_block()


# ---- lists ----


def _write_list_size_prologue(writer: CFileWriter, encode: bool) -> None:
    writer.statement("int rc = 0;")
    writer.statement("unsigned int list_size = self->element_count;")
    if encode:
        writer.return_on_error("mal_encoder_encode_list_size(encoder, cursor, list_size)")
    else:
        writer.return_on_error("mal_encoder_add_list_size_encoding_length(encoder, list_size, cursor)")


def _write_list_size_decode(writer: CFileWriter) -> None:
    writer.statement("int rc = 0;")
    writer.statement("unsigned int list_size;")
    writer.return_on_error("mal_decoder_decode_list_size(decoder, cursor, &list_size)")


def _write_enumeration_list_codec(
    header: CFileWriter,
    source: CFileWriter,
    qualified: str,
    size: MalbinaryEnumSize,
) -> None:
    list_name = f"{qualified}_list"
    _section(header, source, f"encoding functions related to transport {codec.TRANSPORT_MALBINARY}")

    for encode in (False, True):
        function = "encode" if encode else "add_encoding_length"
        _declare_codec(header, source, list_name, function, "mal_encoder_t *", "encoder")
        _write_list_size_prologue(source, encode)
        source.statement("bool * presence_flags = self->presence_flags;")
        source.statement(f"{qualified}_t * content = self->content;")
        source.statement("for (int i = 0; i < list_size; i++)")
        source.open_block()
        source.statement("bool presence_flag = presence_flags[i];")
        if encode:
            codec.add_presence_flag_encode(source, "presence_flag")
        else:
            codec.add_presence_flag_length(source, "presence_flag")
        source.statement("if (presence_flag)")
        source.open_block()
        if encode:
            codec.add_enum_encode(source, size, "content[i]")
        else:
            codec.add_enum_length(source, size, "content[i]")
        source.close_block()
        source.close_block()
        source.statement("return rc;")
        source.close_function_body()

    _declare_codec(header, source, list_name, "decode", "mal_decoder_t *", "decoder")
    _write_list_size_decode(source)
    source.statement("if (list_size == 0)")
    source.open_block()
    source.statement("self->element_count = 0;")
    source.statement("self->presence_flags = NULL;")
    source.statement("self->content = NULL;")
    source.statement("return 0;")
    source.close_block()
    source.statement("self->presence_flags = (bool *) calloc(list_size, sizeof(bool));")
    _return_if(source, "self->presence_flags == NULL", "-1")
    source.statement(f"self->content = ({qualified}_t *) calloc(list_size, sizeof({qualified}_t));")
    source.statement("if (self->content == NULL)")
    source.open_block()
    source.statement("free(self->presence_flags);")
    source.statement("self->presence_flags = NULL;")
    source.statement("return -1;")
    source.close_block()
    source.statement("self->element_count = list_size;")
    source.statement("for (int i = 0; i < list_size; i++)")
    source.open_block()
    source.statement("bool presence_flag;")
    source.statement("int enumerated_value;")
    codec.add_presence_flag_decode(source, "presence_flag")
    source.statement("if (presence_flag)")
    source.open_block()
    codec.add_enum_decode(source, size, "self->content[i]", qualified)
    source.close_block()
    source.statement("self->presence_flags[i] = presence_flag;")
    source.close_block()
    source.statement("return rc;")
    source.close_function_body()


def _write_composite_list_codec(header: CFileWriter, source: CFileWriter, element: CType) -> None:
    qualified = element.qualified
    list_name = f"{qualified}_list"
    _section(header, source, f"encoding functions related to transport {codec.TRANSPORT_MALBINARY}")

    for encode in (False, True):
        function = "encode" if encode else "add_encoding_length"
        _declare_codec(header, source, list_name, function, "mal_encoder_t *", "encoder")
        _write_list_size_prologue(source, encode)
        source.statement(f"{qualified}_t ** content = self->content;")
        source.statement("for (int i = 0; i < list_size; i++)")
        source.open_block()
        source.statement(f"{qualified}_t * list_element = content[i];")
        source.statement("bool presence_flag = (list_element != NULL);")
        if encode:
            codec.add_presence_flag_encode(source, "presence_flag")
        else:
            codec.add_presence_flag_length(source, "presence_flag")
        source.statement("if (presence_flag)")
        source.open_block()
        if encode:
            codec.add_value_encode(source, element, "list_element")
        else:
            codec.add_value_length(source, element, "list_element")
        source.close_block()
        source.close_block()
        source.statement("return rc;")
        source.close_function_body()

    _declare_codec(header, source, list_name, "decode", "mal_decoder_t *", "decoder")
    _write_list_size_decode(source)
    source.statement("if (list_size == 0)")
    source.open_block()
    source.statement("self->element_count = 0;")
    source.statement("self->content = NULL;")
    source.statement("return 0;")
    source.close_block()
    source.statement(f"self->content = ({qualified}_t **) calloc(list_size, sizeof({qualified}_t *));")
    _return_if(source, "self->content == NULL", "-1")
    source.statement("self->element_count = list_size;")
    source.statement("for (int i = 0; i < list_size; i++)")
    source.open_block()
    source.statement("bool presence_flag;")
    codec.add_presence_flag_decode(source, "presence_flag")
    source.statement("if (presence_flag)")
    source.open_block()
    codec.add_value_decode(source, element, "self->content[i]")
    source.close_block()
    source.close_block()
    source.statement("return rc;")
    source.close_function_body()
