# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Go data type emission: enumerations, composites, abstract markers and lists.

Every concrete type gets its own file defining the Go type, its MAL Element
methods (short forms, owner numbers, polymorphic creation) and its
Encode/Decode functions, plus a companion ``<type>_list.go`` file for the
list type. Abstract composites only get a pair of marker interfaces.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from malstubgen.backends.go.context import MAL_IMPORT, GoPackages, GoScope, ImportSet, mal_imports
from malstubgen.emit import GoFileWriter
from malstubgen.errors import UnexpectedConstructError, UnknownTypeError
from malstubgen.logging_config import get_logger
from malstubgen.model import Composite, Enumeration, Field, TypeReference
from malstubgen.naming import (
    file_basename,
    go_null_value,
    go_type_name,
    mal_name,
    short_form_const,
    type_short_form_const,
    upper_first,
)
from malstubgen.registry import MalbinaryEnumSize, TypeRegistry

logger = get_logger(__name__)

SEPARATOR = "=" * 80

OpenFile = Callable[[Path, str], GoFileWriter]

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class GoField:
    """Go mapping of one composite field.

    Attributes:
        name: Exported Go field name.
        ref: Declared MAL type.
        nullable: Whether the field may be null.
        field_type: Go type of the struct member.
        codec: Suffix of the encoder and decoder methods (``Attribute``, an
            attribute name, or ``Element``).
        by_pointer: Whether the codec works on the address of the member.
    """

    name: str
    ref: TypeReference
    nullable: bool
    field_type: str
    codec: str
    by_pointer: bool

    @property
    def is_element(self) -> bool:
        return self.codec == "Element"


class GoTypeEmitter:
    """Writes the files of the data types of one package.

    Args:
        registry: Type registry of the run.
        packages: Go package resolution.
        open_file: Factory opening a new Go source for a path and a package name.
    """

    def __init__(self, registry: TypeRegistry, packages: GoPackages, open_file: OpenFile) -> None:
        self.registry = registry
        self.packages = packages
        self._open_file = open_file

    def emit_enumeration(self, scope: GoScope, enumeration: Enumeration) -> list[str]:
        """Write ``<enum>.go`` and ``<enum>_list.go``, returning their base names.

        Raises:
            UnexpectedConstructError: If the enumeration has no item.
        """
        ref = enumeration.reference
        logger.info(f"Creating enumeration {_mal_name(ref)}")
        if not enumeration.items:
            raise UnexpectedConstructError("enumeration has no item")

        name = upper_first(enumeration.name)
        prefix = enumeration.name.upper()
        size = self.registry.enum_wire_size(ref)
        basename = file_basename(ref)
        writer = self._open(scope, basename)
        writer.add_package()
        writer.newline()
        mal_imports(scope, self.packages).write(writer)
        writer.newline()
        writer.comment(f"Defines {name} type")
        writer.newline()
        writer.statement(f"type {name} uint32")
        writer.newline()

        item_consts = [f"{prefix}_{item.value.upper()}" for item in enumeration.items]
        writer.open_const_block()
        for ordinal, (item, item_const) in enumerate(zip(enumeration.items, item_consts)):
            writer.add_variable_declare(None, f"{item_const}_OVAL", str(ordinal))
            writer.add_variable_declare(None, f"{item_const}_NVAL", str(item.nvalue))
        writer.close_const_block()
        writer.newline()
        writer.comment("Conversion table OVAL->NVAL")
        writer.statement(f"var {enumeration.name[:1].lower()}{enumeration.name[1:]}NvalTable = []uint32{{", 1)
        for item_const in item_consts:
            writer.statement(f"{item_const}_NVAL,")
        writer.statement("}", -1, True)
        writer.newline()
        writer.open_var_block()
        for item_const in item_consts:
            writer.add_variable_declare(None, item_const, f"{name}({item_const}_OVAL)")
        writer.close_var_block()
        writer.newline()
        writer.statement(f"var Null{name} *{name} = nil")
        writer.newline()
        writer.open_function(f"New{name}", params=[("i", "uint32")])
        writer.open_function_body([f"*{name}"])
        writer.statement(f"var val {name} = {name}(i)")
        writer.statement("return &val")
        writer.close_function_body()

        self._write_element_api(writer, scope, ref, f"New{name}(0)")
        self._write_enum_codec(writer, name, ref, size)
        writer.close()
        return [basename, self._emit_list(scope, ref)]

    def emit_composite(self, scope: GoScope, composite: Composite) -> list[str]:
        """Write the files of a composite, returning their base names.

        A concrete composite gets ``<comp>.go`` and ``<comp>_list.go``, an
        abstract one a single file holding its marker interfaces.
        """
        ref = composite.reference
        if composite.is_abstract:
            logger.info(f"Creating abstract composite {_mal_name(ref)}")
            return [self._emit_abstract_composite(scope, composite)]

        logger.info(f"Creating composite {_mal_name(ref)}")
        name = upper_first(composite.name)
        package = scope.package
        parents = self.registry.parent_chain(ref)
        fields = [self.field_details(field, package) for field in self.registry.composite_fields(ref)]

        imports = mal_imports(scope, self.packages)
        for field in fields:
            if not (self.registry.is_abstract_attribute(field.ref) and not field.ref.is_list):
                imports.add_type(field.ref, self.packages)
        for parent in parents:
            imports.add_type(parent, self.packages)

        basename = file_basename(ref)
        writer = self._open(scope, basename)
        writer.add_package()
        writer.newline()
        imports.write(writer)
        writer.newline()
        writer.comment(f"Defines {name} type")
        writer.newline()
        writer.open_struct(name)
        for field in fields:
            writer.add_struct_field(field.field_type, field.name)
        writer.close_struct()
        writer.newline()
        writer.open_var_block()
        writer.add_variable_declare(f"*{name}", f"Null{name}", "nil")
        writer.close_var_block()
        writer.newline()
        writer.open_function(f"New{name}")
        writer.open_function_body([f"*{name}"])
        writer.statement(f"return new({name})")
        writer.close_function_body()

        writer.newline()
        writer.comment(SEPARATOR)
        writer.comment(f"Defines {name} type as a MAL Composite")
        _write_method(writer, name, "Composite", ["mal.Composite"], ["return receiver"])

        self._write_element_api(writer, scope, ref, f"new({name})")
        for parent in parents:
            parent_name = go_type_name(parent, package)
            writer.newline()
            writer.comment(SEPARATOR)
            writer.comment(f"Defines {name} type as a {upper_first(parent.name)}")
            _write_method(writer, name, upper_first(parent.name), [parent_name], ["return receiver"])

        self._write_composite_encode(writer, name, fields)
        self._write_composite_decode(writer, name, fields, package)
        writer.close()
        return [basename, self._emit_list(scope, ref, parents)]

    def field_details(self, field: Field, package: str) -> GoField:
        """Map a composite field to its Go member type and codec.

        Raises:
            UnexpectedConstructError: If the field type is abstract and not the MAL Attribute root.
            UnknownTypeError: If the field type cannot be mapped.
        """
        ref = field.type
        self.registry.check_known(ref, f"field ({field.name})")
        name = upper_first(field.name)
        nullable = field.can_be_null
        if not ref.is_list and self.registry.is_abstract(ref):
            if not self.registry.is_known(ref):
                raise UnknownTypeError(f"cannot map type {ref}", (field.name,))
            if not self.registry.is_abstract_attribute(ref):
                raise UnexpectedConstructError(
                    f"abstract type {ref} is not allowed as a composite field", (field.name,)
                )
            return GoField(name, ref, nullable, "mal.Attribute", "Attribute", False)

        if ref.is_list:
            field_type = go_type_name(ref, package) + "List"
            codec = "Element"
        elif self.registry.is_attribute(ref):
            field_type = self.registry.attribute_details(ref).target_type
            codec = ref.name
        elif self.registry.is_enum(ref) or self.registry.is_composite(ref):
            field_type = go_type_name(ref, package)
            codec = "Element"
        else:
            raise UnknownTypeError(f"cannot map type {ref}", (field.name,))
        if nullable:
            field_type = "*" + field_type
        return GoField(name, ref, nullable, field_type, codec, not nullable)

    # ################
    # Implementation
    # ################

    def _open(self, scope: GoScope, basename: str) -> GoFileWriter:
        return self._open_file(scope.folder / f"{basename}.go", scope.package)

    def _emit_abstract_composite(self, scope: GoScope, composite: Composite) -> str:
        name = upper_first(composite.name)
        basename = file_basename(composite.reference)
        writer = self._open(scope, basename)
        writer.add_package()
        writer.newline()
        imports = ImportSet(scope.package)
        imports.add("mal", MAL_IMPORT)
        imports.write(writer)
        writer.newline()
        writer.comment("Defines the abstract composite interfaces.")
        for type_name, base in ((name, "mal.Composite"), (f"{name}List", "mal.ElementList")):
            writer.statement(f"type {type_name} interface {{", 1)
            writer.statement(base)
            writer.statement(f"{type_name}() {type_name}")
            writer.statement("}", -1, True)
            writer.statement(f"var Null{type_name} {type_name} = nil")
            writer.newline()
        writer.close()
        return basename

    def _emit_list(self, scope: GoScope, ref: TypeReference, parents: Sequence[TypeReference] = ()) -> str:
        name = upper_first(ref.name)
        list_name = f"{name}List"
        logger.debug(f"Creating list type for {_mal_name(ref)}")
        imports = mal_imports(scope, self.packages)
        for parent in parents:
            imports.add_type(parent, self.packages)

        basename = f"{file_basename(ref)}_list"
        writer = self._open(scope, basename)
        writer.add_package()
        writer.newline()
        imports.write(writer)
        writer.newline()
        writer.comment(f"Defines {list_name} type")
        writer.newline()
        writer.statement(f"type {list_name} []*{name}")
        writer.newline()
        writer.statement(f"var Null{list_name} *{list_name} = nil")
        writer.newline()
        writer.open_function(f"New{list_name}", params=[("size", "int")])
        writer.open_function_body([f"*{list_name}"])
        writer.statement(f"var list {list_name} = {list_name}(make([]*{name}, size))")
        writer.statement("return &list")
        writer.close_function_body()

        writer.newline()
        writer.comment(SEPARATOR)
        writer.comment(f"Defines {list_name} type as an ElementList")
        writer.newline()
        writer.open_function("Size", f"*{list_name}")
        writer.open_function_body(["int"])
        writer.statement("if receiver != nil {", 1)
        writer.statement("return len(*receiver)")
        writer.statement("}", -1, True)
        writer.statement("return -1")
        writer.close_function_body()
        writer.newline()
        writer.open_function("GetElementAt", f"*{list_name}", [("i", "int")])
        writer.open_function_body(["mal.Element"])
        writer.statement("if receiver == nil || i >= receiver.Size() {", 1)
        writer.statement("return nil")
        writer.statement("}", -1, True)
        writer.statement("return (*receiver)[i]")
        writer.close_function_body()
        writer.newline()
        writer.open_function("AppendElement", f"*{list_name}", [("element", "mal.Element")])
        writer.open_function_body()
        writer.statement("if receiver != nil {", 1)
        writer.statement(f"*receiver = append(*receiver, element.(*{name}))")
        writer.statement("}", -1, True)
        writer.close_function_body()

        writer.newline()
        writer.comment(SEPARATOR)
        writer.comment(f"Defines {list_name} type as a MAL Composite")
        _write_method(writer, list_name, "Composite", ["mal.Composite"], ["return receiver"])

        self._write_element_api(writer, scope, ref.as_list(), f"New{list_name}(0)")
        for parent in parents:
            parent_list = go_type_name(parent, scope.package) + "List"
            writer.newline()
            writer.comment(SEPARATOR)
            writer.comment(f"Defines {list_name} type as a {upper_first(parent.name)}List")
            _write_method(writer, list_name, f"{upper_first(parent.name)}List", [parent_list], ["return receiver"])

        short_form = short_form_const(f"{ref.name}_list")
        _open_encode(writer, list_name, short_form)
        size = f"mal.NewUInteger(uint32(len([]*{name}(*receiver))))"
        writer.statement(f"{writer.err_assign()} encoder.EncodeUInteger({size})")
        writer.return_on_error()
        writer.statement(f"for _, e := range []*{name}(*receiver) {{", 1)
        writer.statement(f"{writer.err_assign()} encoder.EncodeNullableElement(e)")
        writer.return_on_error()
        writer.statement("}", -1, True)
        writer.statement("return nil")
        writer.close_function_body()

        _open_decode(writer, list_name, short_form)
        writer.statement("size, err := decoder.DecodeUInteger()")
        writer.return_on_error("nil, err")
        writer.statement(f"list := {list_name}(make([]*{name}, int(*size)))")
        writer.statement("for i := 0; i < len(list); i++ {", 1)
        writer.statement(f"elem, err := decoder.DecodeNullableElement(Null{name})")
        writer.return_on_error("nil, err")
        writer.statement(f"list[i] = elem.(*{name})")
        writer.statement("}", -1, True)
        writer.statement("return &list, nil")
        writer.close_function_body()
        writer.close()
        return basename

    def _write_element_api(self, writer: GoFileWriter, scope: GoScope, ref: TypeReference, create: str) -> None:
        type_name = upper_first(ref.name) + ("List" if ref.is_list else "")
        const_name = ref.name + ("_list" if ref.is_list else "")
        relative = self.registry.relative_short_form(ref)
        absolute = self.registry.absolute_short_form(ref)
        type_short_form = type_short_form_const(const_name)
        short_form = short_form_const(const_name)
        qualifier = scope.area_qualifier()
        service_number = "mal.NULL_SERVICE_NUMBER" if scope.is_area_scope else "SERVICE_NUMBER"

        writer.newline()
        writer.comment(SEPARATOR)
        writer.comment(f"Defines {type_name} type as a MAL Element")
        writer.newline()
        writer.statement(f"const {type_short_form} mal.Integer = {relative}")
        writer.statement(f"const {short_form} mal.Long = 0x{absolute:x}")
        writer.newline()
        writer.comment(f"Registers {type_name} type for polymorphism handling")
        writer.open_function("init")
        writer.open_function_body()
        writer.statement(f"mal.RegisterMALElement({short_form}, Null{type_name})")
        writer.close_function_body()

        methods = (
            ("Returns the absolute short form of the element type.", "GetShortForm", "mal.Long", short_form),
            (
                "Returns the number of the area this element type belongs to.",
                "GetAreaNumber",
                "mal.UShort",
                f"{qualifier}AREA_NUMBER",
            ),
            (
                "Returns the version of the area this element type belongs to.",
                "GetAreaVersion",
                "mal.UOctet",
                f"{qualifier}AREA_VERSION",
            ),
            (
                "Returns the number of the service this element type belongs to.",
                "GetServiceNumber",
                "mal.UShort",
                service_number,
            ),
            ("Returns the relative short form of the element type.", "GetTypeShortForm", "mal.Integer", type_short_form),
            (
                "Allows the creation of an element in a generic way, i.e., using the MAL Element polymorphism.",
                "CreateElement",
                "mal.Element",
                create,
            ),
        )
        for comment, method, result, value in methods:
            writer.newline()
            writer.comment(comment)
            writer.open_function(method, f"*{type_name}")
            writer.open_function_body([result])
            writer.statement(f"return {value}")
            writer.close_function_body()
        _write_method(writer, type_name, "IsNull", ["bool"], ["return receiver == nil"])
        _write_method(writer, type_name, "Null", ["mal.Element"], [f"return Null{type_name}"])

    def _write_enum_codec(self, writer: GoFileWriter, name: str, ref: TypeReference, size: MalbinaryEnumSize) -> None:
        short_form = short_form_const(ref.name)
        wire = size.go_wire_type
        native = size.go_native_type
        _open_encode(writer, name, short_form)
        if size is MalbinaryEnumSize.LARGE:
            writer.statement(f"value := mal.New{wire}(uint32(*receiver))")
        else:
            writer.statement(f"value := mal.New{wire}({native}(uint32(*receiver)))")
        writer.statement(f"return encoder.Encode{wire}(value)")
        writer.close_function_body()

        _open_decode(writer, name, short_form)
        writer.statement(f"elem, err := decoder.Decode{wire}()")
        writer.return_on_error("receiver.Null(), err")
        if size is MalbinaryEnumSize.LARGE:
            writer.statement(f"value := {name}(uint32(*elem))")
        else:
            writer.statement(f"value := {name}(uint32({native}(*elem)))")
        writer.statement("return &value, nil")
        writer.close_function_body()

    def _write_composite_encode(self, writer: GoFileWriter, name: str, fields: Sequence[GoField]) -> None:
        _open_encode(writer, name, short_form_const(name))
        for field in fields:
            nullable = "Nullable" if field.nullable else ""
            address = "&" if field.by_pointer else ""
            writer.statement(
                f"{writer.err_assign()} encoder.Encode{nullable}{field.codec}({address}receiver.{field.name})"
            )
            writer.return_on_error()
        writer.newline()
        writer.statement("return nil")
        writer.close_function_body()

    def _write_composite_decode(self, writer: GoFileWriter, name: str, fields: Sequence[GoField], package: str) -> None:
        _open_decode(writer, name, short_form_const(name))
        for field in fields:
            nullable = "Nullable" if field.nullable else ""
            null_value = go_null_value(field.ref, package) if field.is_element else ""
            writer.statement(f"{field.name}, err := decoder.Decode{nullable}{field.codec}({null_value})")
            writer.return_on_error("nil, err")
        writer.newline()
        writer.statement(f"var composite = {name} {{", 1)
        for field in fields:
            pointer = "*" if field.by_pointer else ""
            cast = f".({pointer}{field.field_type})" if field.is_element else ""
            writer.statement(f"{field.name}: {pointer}{field.name}{cast},")
        writer.statement("}", -1, True)
        writer.statement("return &composite, nil")
        writer.close_function_body()


def _mal_name(ref: TypeReference) -> str:
    return mal_name(ref.area, ref.service, ref.name)


def _write_method(
    writer: GoFileWriter, type_name: str, method: str, returns: Sequence[str], body: Sequence[str]
) -> None:
    writer.newline()
    writer.open_function(method, f"*{type_name}")
    writer.open_function_body(returns)
    for line in body:
        writer.statement(line)
    writer.close_function_body()


def _open_encode(writer: GoFileWriter, type_name: str, short_form: str) -> None:
    writer.newline()
    writer.comment("Encodes this element using the supplied encoder.")
    writer.comment("@param encoder The encoder to use, must not be null.")
    writer.open_function("Encode", f"*{type_name}", [("encoder", "mal.Encoder")])
    writer.open_function_body(["error"])
    writer.statement(f"specific := encoder.LookupSpecific({short_form})")
    writer.statement("if specific != nil {", 1)
    writer.statement("return specific(receiver, encoder)")
    writer.statement("}", -1, True)
    writer.newline()


def _open_decode(writer: GoFileWriter, type_name: str, short_form: str) -> None:
    writer.newline()
    writer.comment("Decodes an instance of this element type using the supplied decoder.")
    writer.comment("@param decoder The decoder to use, must not be null.")
    writer.comment("@return the decoded instance, may be not the same instance as this Element.")
    writer.open_function("Decode", f"*{type_name}", [("decoder", "mal.Decoder")])
    writer.open_function_body(["mal.Element", "error"])
    writer.statement(f"specific := decoder.LookupSpecific({short_form})")
    writer.statement("if specific != nil {", 1)
    writer.statement("return specific(decoder)")
    writer.statement("}", -1, True)
    writer.newline()
