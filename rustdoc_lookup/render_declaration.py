"""Rendering of item declarations (functions, structs, enums, unions)."""

from __future__ import annotations

from typing import Any

from rustdoc_lookup.document import Document
from rustdoc_lookup.errors import BrokenInvariant, UnsupportedConstruct
from rustdoc_lookup.models import (
    AssociatedConst,
    AssociatedType,
    BorrowedRef,
    Enum,
    Function,
    Generics,
    Impl,
    Item,
    PlainStruct,
    Struct,
    StructKind,
    TupleStruct,
    TypeExpr,
    UnionItem,
    UnitStruct,
)
from rustdoc_lookup.operator_hints import operator_hint
from rustdoc_lookup.render_type import render_bound, render_path, render_type
from rustdoc_lookup.trim_docs import trim_docs

INDENT = "  "


def render_generics(generics: Generics) -> str:
    """Render declared generic parameter names, e.g. `<'a, T>`."""
    names = [p.name for p in generics.params if not p.synthetic]
    if not names:
        return ""
    return "<" + ", ".join(names) + ">"


def render_receiver(ty: TypeExpr) -> str:
    if isinstance(ty, BorrowedRef):
        return "&mut self" if ty.mutable else "&self"
    return "self"


def render_function(function: Function, name: str) -> str:
    """Render a function signature without a trailing `;`."""
    out = ""
    if function.header.is_async:
        out += "async "
    if function.header.is_const:
        out += "const "
    if function.header.is_unsafe:
        out += "unsafe "
    params = []
    for param_name, ty in function.inputs:
        if param_name == "self":
            params.append(render_receiver(ty))
        else:
            params.append(f"{param_name}: {render_type(ty)}")
    out += f"fn {name}{render_generics(function.generics)}({', '.join(params)})"
    if function.output is not None:
        out += " -> " + render_type(function.output)
    return out


class DeclarationRenderer:
    """Renders item declarations, resolving member ids through a document."""

    def __init__(self, document: Document, config: dict[str, Any]) -> None:
        """Initialize the renderer with the `render` config section."""
        self.document = document
        self.excerpt_chars: int = config.get("doc_excerpt_chars", 300)
        self.truncation_marker: str = config.get("truncation_marker", "…")
        self.max_inherent_items: int = config.get("max_inherent_items", 10)
        self.max_trait_impls: int = config.get("max_trait_impls", 10)
        self.denied_traits: set[str] = set(config.get("denied_traits", []))

    # -----------------------------
    # Entry text
    # -----------------------------

    def document_item(self, item: Item, signature: str) -> str:
        """Combine a rendered signature with the item's doc excerpt."""
        out = signature if signature.endswith("\n") else signature + "\n"
        return out + trim_docs(item.docs, self.excerpt_chars, self.truncation_marker)

    def render_item(self, item: Item) -> str:
        """Render the full index text of a struct, enum, union or function."""
        inner = item.inner
        name = item.name or ""
        if isinstance(inner, Function):
            signature = render_function(inner, name)
        elif isinstance(inner, Struct):
            signature = self.render_struct(inner, name)
        elif isinstance(inner, Enum):
            signature = self.render_enum(inner, name)
        elif isinstance(inner, UnionItem):
            signature = self.render_union(inner, name)
        else:
            raise UnsupportedConstruct(f"declaration `{item.kind_name}`", item.id)
        return self.document_item(item, signature)

    # -----------------------------
    # Type declarations
    # -----------------------------

    def render_struct(self, struct: Struct, name: str) -> str:
        out = f"struct {name}{render_generics(struct.generics)}"
        kind = struct.kind
        if isinstance(kind, PlainStruct):
            out += " {\n"
            out += self._render_fields(kind.fields, kind.fields_stripped, INDENT)
            out += "}\n"
        elif isinstance(kind, UnitStruct):
            out += ";\n"
        else:
            out += self._render_tuple_fields(kind) + ";\n"
        return out + self.render_impls(struct.impls, name)

    def render_enum(self, enum: Enum, name: str) -> str:
        out = f"enum {name}{render_generics(enum.generics)} {{\n"
        for variant_id in enum.variants:
            _, variant, variant_name = self.document.expect_variant(variant_id)
            out += INDENT + variant_name + self._render_variant_body(variant.kind)
            out += ",\n"
        if enum.variants_stripped:
            out += f"{INDENT}// some variants omitted\n"
        out += "}\n"
        return out + self.render_impls(enum.impls, name)

    def render_union(self, union: UnionItem, name: str) -> str:
        out = f"union {name}{render_generics(union.generics)} {{\n"
        out += self._render_fields(union.fields, union.fields_stripped, INDENT)
        out += "}\n"
        return out + self.render_impls(union.impls, name)

    def _render_variant_body(self, kind: StructKind) -> str:
        if isinstance(kind, UnitStruct):
            return ""
        if isinstance(kind, TupleStruct):
            return self._render_tuple_fields(kind)
        fields = self._render_fields(kind.fields, kind.fields_stripped, INDENT * 2)
        return " {\n" + fields + INDENT + "}"

    def _render_fields(self, field_ids: list[str], stripped: bool, indent: str) -> str:
        out = ""
        for field_id in field_ids:
            item, field = self.document.expect_struct_field(field_id)
            out += f"{indent}{item.name}: {render_type(field.type)},\n"
        if stripped:
            out += f"{indent}// private fields omitted\n"
        return out

    def _render_tuple_fields(self, kind: TupleStruct) -> str:
        parts = []
        for field_id in kind.fields:
            if field_id is None:
                parts.append("_")
            else:
                _, field = self.document.expect_struct_field(field_id)
                parts.append(render_type(field.type))
        return "(" + ", ".join(parts) + ")"

    # -----------------------------
    # Associated items
    # -----------------------------

    def render_impls(self, impl_ids: list[str], type_name: str) -> str:
        """Render inherent members and notable trait impls of a type."""
        impls = [self.document.expect_impl(i)[1] for i in impl_ids]

        members = [m for imp in impls if imp.trait is None for m in imp.items]
        out = ""
        if members:
            out += f"impl {type_name} {{\n"
            for member_id in members[: self.max_inherent_items]:
                out += INDENT + self._render_member(member_id) + "\n"
            hidden = len(members) - self.max_inherent_items
            if hidden > 0:
                out += f"{INDENT}// {hidden} more items\n"
            out += "}\n"

        trait_impls = [
            imp
            for imp in impls
            if imp.trait is not None and not is_denied_impl(imp, self.denied_traits)
        ]
        for imp in trait_impls[: self.max_trait_impls]:
            trait = imp.trait
            assert trait is not None
            out += f"impl {render_path(trait)} for {type_name} {{}}"
            hint = operator_hint(trait.name)
            if hint:
                out += f" // {hint}"
            out += "\n"
        return out

    def _render_member(self, member_id: str) -> str:
        item = self.document.get(member_id)
        if item is None:
            raise BrokenInvariant(
                "impl member is not in the index",
                source=self.document.source,
                item_id=member_id,
            )
        inner = item.inner
        if isinstance(inner, Function):
            return render_function(inner, item.name or "") + ";"
        if isinstance(inner, AssociatedConst):
            out = f"const {item.name}"
            if inner.type is not None:
                out += f": {render_type(inner.type)}"
            if inner.default is not None:
                out += f" = {inner.default}"
            return out + ";"
        if isinstance(inner, AssociatedType):
            out = f"type {item.name}"
            if inner.bounds:
                out += ": " + " + ".join(render_bound(b) for b in inner.bounds)
            if inner.default is not None:
                out += f" = {render_type(inner.default)}"
            return out + ";"
        raise UnsupportedConstruct(f"impl member `{item.kind_name}`", member_id)


def is_denied_impl(imp: Impl, denied_traits: set[str]) -> bool:
    """Check whether an impl is for a trait that is never shown or indexed."""
    return imp.trait is not None and imp.trait.name in denied_traits
