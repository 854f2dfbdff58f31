# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Malbinary codec statements shared by the C type and operation emitters.

Every snippet writes one runtime call assigning ``rc`` followed by the
early return on a negative result. The malsplitbinary encoding reuses the
malbinary functions, only the format code selecting them differs.
"""

from __future__ import annotations

from malstubgen.backends.c.context import CCategory, CType
from malstubgen.emit import CFileWriter
from malstubgen.registry import MalbinaryEnumSize

TRANSPORT_MALBINARY = "malbinary"
TRANSPORT_MALSPLITBINARY = "malsplitbinary"

# ###############
# Public Interface
# ###############


def format_code(transport: str) -> str:
    return f"{transport.upper()}_FORMAT_CODE"


# ---- presence flags and short forms ----


def add_presence_flag_length(writer: CFileWriter, value: str) -> None:
    writer.return_on_error(f"mal_encoder_add_presence_flag_encoding_length(encoder, {value}, cursor)")


def add_presence_flag_encode(writer: CFileWriter, value: str) -> None:
    writer.return_on_error(f"mal_encoder_encode_presence_flag(encoder, cursor, {value})")


def add_presence_flag_decode(writer: CFileWriter, target: str) -> None:
    writer.return_on_error(f"mal_decoder_decode_presence_flag(decoder, cursor, {address_of(target)})")


def add_short_form_length(writer: CFileWriter, short_form: str) -> None:
    writer.return_on_error(f"mal_encoder_add_short_form_encoding_length(encoder, {short_form}, cursor)")


def add_short_form_encode(writer: CFileWriter, short_form: str) -> None:
    writer.return_on_error(f"mal_encoder_encode_short_form(encoder, cursor, {short_form})")


# ---- values ----


def add_value_length(writer: CFileWriter, ctype: CType, value: str, tag: str | None = None) -> None:
    """Write the encoding length computation of a present value.

    Args:
        writer: Target writer.
        ctype: C mapping of the value type.
        value: Expression designating the value.
        tag: Expression designating the attribute tag of an abstract attribute.
    """
    category = ctype.category
    if category is CCategory.ABSTRACT_ATTRIBUTE:
        writer.return_on_error(f"mal_encoder_add_attribute_tag_encoding_length(encoder, {tag}, cursor)")
        writer.return_on_error(f"mal_encoder_add_attribute_encoding_length(encoder, {tag}, {value}, cursor)")
    elif category is CCategory.ATTRIBUTE:
        writer.return_on_error(f"mal_encoder_add_{ctype.attribute_codec}_encoding_length(encoder, {value}, cursor)")
    elif category is CCategory.ENUMERATION:
        add_enum_length(writer, _enum_size(ctype), value)
    else:
        writer.return_on_error(f"{ctype.type_suffix}_add_encoding_length_{TRANSPORT_MALBINARY}({value}, encoder, cursor)")


def add_value_encode(writer: CFileWriter, ctype: CType, value: str, tag: str | None = None) -> None:
    category = ctype.category
    if category is CCategory.ABSTRACT_ATTRIBUTE:
        writer.return_on_error(f"mal_encoder_encode_attribute_tag(encoder, cursor, {tag})")
        writer.return_on_error(f"mal_encoder_encode_attribute(encoder, cursor, {tag}, {value})")
    elif category is CCategory.ATTRIBUTE:
        writer.return_on_error(f"mal_encoder_encode_{ctype.attribute_codec}(encoder, cursor, {value})")
    elif category is CCategory.ENUMERATION:
        add_enum_encode(writer, _enum_size(ctype), value)
    else:
        writer.return_on_error(f"{ctype.type_suffix}_encode_{TRANSPORT_MALBINARY}({value}, encoder, cursor)")


def add_value_decode(
    writer: CFileWriter,
    ctype: CType,
    target: str,
    tag: str | None = None,
    cast: bool = False,
) -> None:
    """Write the decoding of a present value into a target lvalue.

    A target starting with ``*`` designates a pointer parameter whose
    address is passed as is. Composites and lists are allocated before being
    decoded; ``cast`` converts a generic holder slot to the expected pointer
    type.
    """
    category = ctype.category
    if category is CCategory.ABSTRACT_ATTRIBUTE:
        assert tag is not None
        writer.return_on_error(f"mal_decoder_decode_attribute_tag(decoder, cursor, {address_of(tag)})")
        writer.return_on_error(f"mal_decoder_decode_attribute(decoder, cursor, {tag}, {target})")
    elif category is CCategory.ATTRIBUTE:
        writer.return_on_error(f"mal_decoder_decode_{ctype.attribute_codec}(decoder, cursor, {address_of(target)})")
    elif category is CCategory.ENUMERATION:
        add_enum_decode(writer, _enum_size(ctype), target, ctype.qualified)
    else:
        suffix = ctype.type_suffix
        constructor = f"{suffix}_new(0)" if ctype.is_list else f"{suffix}_new()"
        writer.statement(f"{target} = {constructor};")
        writer.statement(f"if ({target} == NULL) return -1;")
        argument = f"({suffix}_t *){target}" if cast else target
        writer.return_on_error(f"{suffix}_decode_{TRANSPORT_MALBINARY}({argument}, decoder, cursor)")


# ---- enumerations ----


def add_enum_length(writer: CFileWriter, size: MalbinaryEnumSize, value: str) -> None:
    writer.return_on_error(f"mal_encoder_add_{size.c_prefix}_enum_encoding_length(encoder, {value}, cursor)")


def add_enum_encode(writer: CFileWriter, size: MalbinaryEnumSize, value: str) -> None:
    writer.return_on_error(f"mal_encoder_encode_{size.c_prefix}_enum(encoder, cursor, {value})")


def add_enum_decode(writer: CFileWriter, size: MalbinaryEnumSize, target: str, qualified: str) -> None:
    """Decode an ordinal into the ``enumerated_value`` local, then convert it to the enumeration type."""
    writer.return_on_error(f"mal_decoder_decode_{size.c_prefix}_enum(decoder, cursor, &enumerated_value)")
    writer.statement(f"{target} = ({qualified}_t) enumerated_value;")


# ---- generic elements ----


def element_length_function(area_l: str) -> str:
    return f"{area_l}_{TRANSPORT_MALBINARY}_add_mal_element_encoding_length"


def element_encode_function(area_l: str) -> str:
    return f"{area_l}_{TRANSPORT_MALBINARY}_encode_mal_element"


def element_decode_function(area_l: str) -> str:
    return f"{area_l}_{TRANSPORT_MALBINARY}_decode_mal_element"


def add_element_length(writer: CFileWriter, area_l: str, holder: str) -> None:
    writer.return_on_error(f"{element_length_function(area_l)}(encoder, {holder}, cursor)")


def add_element_encode(writer: CFileWriter, area_l: str, holder: str) -> None:
    writer.return_on_error(f"{element_encode_function(area_l)}(encoder, cursor, {holder})")


def add_element_decode(writer: CFileWriter, area_l: str, holder: str) -> None:
    writer.return_on_error(f"{element_decode_function(area_l)}(decoder, cursor, {holder})")


def address_of(target: str) -> str:
    """Address of an lvalue, or the pointer itself for a ``*pointer`` expression."""
    return target[1:] if target.startswith("*") else f"&{target}"


# ################
# Implementation
# ################


def _enum_size(ctype: CType) -> MalbinaryEnumSize:
    if ctype.enum_size is None:
        raise ValueError(f"no malbinary size for enumeration {ctype.qualified}")
    return ctype.enum_size
