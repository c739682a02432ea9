"""Logic for loading rustdoc JSON documents into the item graph."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

from rustdoc_lookup.document import Document
from rustdoc_lookup.errors import MalformedDocument
from rustdoc_lookup.models import (
    AngleBracketed,
    Array,
    AssociatedConst,
    AssociatedType,
    BorrowedRef,
    ConstArg,
    Constant,
    DynTrait,
    Enum,
    ExternCrate,
    FnHeader,
    ForeignType,
    Function,
    FunctionPointer,
    Generic,
    GenericArg,
    GenericArgs,
    GenericBound,
    GenericParam,
    Generics,
    Impl,
    ImplTrait,
    Import,
    InferArg,
    Item,
    ItemKind,
    LifetimeArg,
    Macro,
    Module,
    OpaqueType,
    OutlivesBound,
    Parenthesized,
    PlainStruct,
    PolyTrait,
    Primitive,
    PrimitiveItem,
    ProcMacro,
    QualifiedPath,
    RawPointer,
    ResolvedPath,
    Slice,
    Static,
    Struct,
    StructField,
    StructKind,
    Trait,
    TraitAlias,
    TraitBound,
    Tuple,
    TupleStruct,
    TypeArg,
    TypeExpr,
    Typedef,
    UnionItem,
    UnitStruct,
    UnknownItem,
    UnknownType,
    Variant,
)

# Parser failures that mean "the JSON does not have the expected shape".
SCHEMA_ERRORS = (KeyError, TypeError, AttributeError, ValueError)


def load_document_file(path: Path) -> Document:
    """Read and parse a rustdoc JSON file."""
    data = path.read_bytes()
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedDocument(str(path), f"invalid UTF-8: {exc}") from exc
    return load_document(text, source=str(path))


def load_document(text: str, source: str = "<memory>") -> Document:
    """Parse rustdoc JSON text into a Document."""
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedDocument(source, f"invalid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise MalformedDocument(source, "top level value is not an object")

    try:
        root = _id(raw["root"])
        raw_index = raw["index"]
        if not isinstance(raw_index, dict):
            raise TypeError("'index' is not an object")
    except SCHEMA_ERRORS as exc:
        raise MalformedDocument(source, _describe(exc)) from exc

    index: dict[str, Item] = {}
    for key, raw_item in raw_index.items():
        try:
            item = decode_item(raw_item)
        except SCHEMA_ERRORS as exc:
            raise MalformedDocument(source, f"item {key}: {_describe(exc)}") from exc
        index[item.id] = item

    if root not in index:
        raise MalformedDocument(source, f"root module {root} is not in the index")

    return Document(
        root=root,
        index=index,
        source=source,
        format_version=raw.get("format_version"),
        crate_version=raw.get("crate_version"),
    )


def _describe(exc: Exception) -> str:
    if isinstance(exc, KeyError):
        return f"missing field {exc}"
    return f"{type(exc).__name__}: {exc}"


# -----------------------------
# Small helpers
# -----------------------------


def _id(value: Any) -> str:
    """Normalize an item id; older formats use strings, newer ones integers."""
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise TypeError(f"invalid item id {value!r}")
    return str(value)


def _ids(values: list[Any] | None) -> list[str]:
    return [_id(v) for v in values or []]


def _first(d: dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the value of the first key present (field renames across formats)."""
    for k in keys:
        if k in d:
            return d[k]
    return default


def _split_tag(value: Any) -> tuple[str, Any]:
    """Split an externally tagged enum value into (tag, payload)."""
    if isinstance(value, str):
        return value, None
    if isinstance(value, dict) and len(value) == 1:
        tag, payload = next(iter(value.items()))
        return str(tag), payload
    raise ValueError(f"expected a tagged value, got {value!r}")


# -----------------------------
# Types
# -----------------------------


def decode_path(raw: dict[str, Any]) -> ResolvedPath:
    """Decode a rustdoc `Path` (used by resolved paths and trait refs)."""
    name = _first(raw, "name", "path")
    if not isinstance(name, str):
        raise TypeError(f"path without a name: {raw!r}")
    # Fully qualified paths (`std::vec::Vec`) render by their last segment
    short = name.rsplit("::", 1)[-1]
    item_id = raw.get("id")
    args = raw.get("args")
    return ResolvedPath(
        name=short,
        id=_id(item_id) if item_id is not None else None,
        args=decode_generic_args(args) if args is not None else None,
    )


def decode_type(raw: Any) -> TypeExpr:
    """Decode a rustdoc `Type` value."""
    tag, payload = _split_tag(raw)
    decoder = _TYPE_DECODERS.get(tag)
    if decoder is None:
        return UnknownType(tag)
    return decoder(payload)


def _decode_borrowed_ref(p: dict[str, Any]) -> TypeExpr:
    return BorrowedRef(
        type=decode_type(p["type"]),
        lifetime=p.get("lifetime"),
        mutable=bool(_first(p, "mutable", "is_mutable", default=False)),
    )


def _decode_raw_pointer(p: dict[str, Any]) -> TypeExpr:
    return RawPointer(
        type=decode_type(p["type"]),
        mutable=bool(_first(p, "mutable", "is_mutable", default=False)),
    )


def _decode_dyn_trait(p: dict[str, Any]) -> TypeExpr:
    traits = tuple(PolyTrait(trait=decode_path(t["trait"])) for t in p.get("traits") or [])
    return DynTrait(traits=traits, lifetime=p.get("lifetime"))


def _decode_impl_trait(p: list[Any]) -> TypeExpr:
    return ImplTrait(bounds=decode_bounds(p))


def _decode_qualified_path(p: dict[str, Any]) -> TypeExpr:
    return QualifiedPath(name=str(p["name"]))


_TYPE_DECODERS: dict[str, Callable[[Any], TypeExpr]] = {
    "primitive": lambda p: Primitive(str(p)),
    "generic": lambda p: Generic(str(p)),
    "resolved_path": decode_path,
    "borrowed_ref": _decode_borrowed_ref,
    "raw_pointer": _decode_raw_pointer,
    "slice": lambda p: Slice(decode_type(p)),
    "array": lambda p: Array(type=decode_type(p["type"]), len=str(p["len"])),
    "tuple": lambda p: Tuple(tuple(decode_type(t) for t in p)),
    "dyn_trait": _decode_dyn_trait,
    "impl_trait": _decode_impl_trait,
    "function_pointer": lambda p: FunctionPointer(),
    "qualified_path": _decode_qualified_path,
}


def decode_generic_args(raw: Any) -> GenericArgs | None:
    """Decode angle-bracketed or parenthesized generic arguments."""
    tag, payload = _split_tag(raw)
    if tag == "angle_bracketed":
        return AngleBracketed(
            args=tuple(decode_generic_arg(a) for a in payload.get("args") or [])
        )
    if tag == "parenthesized":
        output = payload.get("output")
        return Parenthesized(
            inputs=tuple(decode_type(t) for t in payload.get("inputs") or []),
            output=decode_type(output) if output is not None else None,
        )
    # return type notation (`method(..)`) has no arguments to show
    return None


def decode_generic_arg(raw: Any) -> GenericArg:
    tag, payload = _split_tag(raw)
    if tag == "lifetime":
        return LifetimeArg(str(payload))
    if tag == "infer":
        return InferArg()
    if tag == "type":
        return TypeArg(decode_type(payload))
    if tag == "const":
        const_type = payload.get("type")
        return ConstArg(
            expr=str(payload.get("expr") or ""),
            type=decode_type(const_type) if const_type is not None else None,
        )
    raise ValueError(f"unknown generic argument {tag!r}")


def decode_bounds(raw: list[Any] | None) -> tuple[GenericBound, ...]:
    bounds: list[GenericBound] = []
    for b in raw or []:
        tag, payload = _split_tag(b)
        if tag == "trait_bound":
            bounds.append(TraitBound(trait=decode_path(payload["trait"])))
        elif tag == "outlives":
            bounds.append(OutlivesBound(str(payload)))
        # precise capturing `use<..>` bounds carry no trait and are not shown
    return tuple(bounds)


def decode_generics(raw: dict[str, Any] | None) -> Generics:
    params = []
    for p in (raw or {}).get("params") or []:
        tag, payload = _split_tag(p["kind"])
        synthetic = False
        if tag == "type" and isinstance(payload, dict):
            synthetic = bool(_first(payload, "synthetic", "is_synthetic", default=False))
        params.append(GenericParam(name=str(p["name"]), kind=tag, synthetic=synthetic))
    return Generics(params=tuple(params))


# -----------------------------
# Items
# -----------------------------


def decode_item(raw: dict[str, Any]) -> Item:
    """Decode one entry of the document index."""
    item_id = _id(raw["id"])
    if "kind" in raw and isinstance(raw["kind"], str):
        # Pre-v0.12 formats keep the tag beside an untagged payload
        tag, payload = raw["kind"], raw.get("inner")
    else:
        tag, payload = _split_tag(raw["inner"])

    decoder = _ITEM_DECODERS.get(tag)
    inner: ItemKind = UnknownItem(tag) if decoder is None else decoder(payload)

    name = raw.get("name")
    docs = raw.get("docs")
    return Item(
        id=item_id,
        name=str(name) if name is not None else None,
        docs=str(docs) if docs is not None else None,
        inner=inner,
    )


def _decode_fields_kind(tag: str, payload: Any) -> StructKind:
    if tag == "unit" or tag == "plain" and payload is None:
        return UnitStruct()
    if tag == "tuple":
        return TupleStruct(fields=[_id(f) if f is not None else None for f in payload])
    if tag in ("plain", "struct"):
        return PlainStruct(
            fields=_ids(payload["fields"]),
            fields_stripped=bool(
                _first(payload, "fields_stripped", "has_stripped_fields", default=False)
            ),
        )
    raise ValueError(f"unknown struct kind {tag!r}")


def _decode_module(p: dict[str, Any]) -> ItemKind:
    return Module(items=_ids(p["items"]))


def _decode_struct(p: dict[str, Any]) -> ItemKind:
    tag, payload = _split_tag(p["kind"])
    return Struct(
        kind=_decode_fields_kind(tag, payload),
        generics=decode_generics(p.get("generics")),
        impls=_ids(p.get("impls")),
    )


def _decode_enum(p: dict[str, Any]) -> ItemKind:
    return Enum(
        variants=_ids(p["variants"]),
        generics=decode_generics(p.get("generics")),
        variants_stripped=bool(
            _first(p, "variants_stripped", "has_stripped_variants", default=False)
        ),
        impls=_ids(p.get("impls")),
    )


def _decode_variant(p: Any) -> ItemKind:
    if isinstance(p, dict) and "kind" in p:
        tag, payload = _split_tag(p["kind"])
    else:
        # Older formats tag the variant payload directly
        tag, payload = _split_tag(p)
    return Variant(kind=_decode_fields_kind(tag, payload))


def _decode_union(p: dict[str, Any]) -> ItemKind:
    return UnionItem(
        fields=_ids(p["fields"]),
        generics=decode_generics(p.get("generics")),
        fields_stripped=bool(
            _first(p, "fields_stripped", "has_stripped_fields", default=False)
        ),
        impls=_ids(p.get("impls")),
    )


def _decode_function(p: dict[str, Any]) -> ItemKind:
    sig = _first(p, "decl", "sig")
    header = p.get("header") or {}
    output = sig.get("output")
    return Function(
        inputs=[(str(name), decode_type(ty)) for name, ty in sig["inputs"]],
        output=decode_type(output) if output is not None else None,
        generics=decode_generics(p.get("generics")),
        header=FnHeader(
            is_async=bool(_first(header, "async", "is_async", default=False)),
            is_const=bool(_first(header, "const", "is_const", default=False)),
            is_unsafe=bool(_first(header, "unsafe", "is_unsafe", default=False)),
        ),
    )


def _decode_trait(p: dict[str, Any]) -> ItemKind:
    return Trait(
        items=_ids(p.get("items")),
        generics=decode_generics(p.get("generics")),
    )


def _decode_impl(p: dict[str, Any]) -> ItemKind:
    trait = p.get("trait")
    return Impl(
        for_type=decode_type(p["for"]),
        trait=decode_path(trait) if trait is not None else None,
        items=_ids(p.get("items")),
        is_blanket=p.get("blanket_impl") is not None,
    )


def _decode_import(p: dict[str, Any]) -> ItemKind:
    target = p.get("id")
    return Import(
        source=str(p.get("source") or ""),
        name=str(p.get("name") or ""),
        target=_id(target) if target is not None else None,
        glob=bool(_first(p, "glob", "is_glob", default=False)),
    )


def _optional_type(value: Any) -> TypeExpr | None:
    return decode_type(value) if value is not None else None


def _decode_constant(p: dict[str, Any]) -> ItemKind:
    const = p.get("const")
    expr = const.get("expr") if isinstance(const, dict) else p.get("expr")
    return Constant(type=_optional_type(p.get("type")), expr=expr)


def _decode_assoc_type(p: dict[str, Any]) -> ItemKind:
    return AssociatedType(
        default=_optional_type(_first(p, "default", "type")),
        bounds=decode_bounds(p.get("bounds")),
    )


_ITEM_DECODERS: dict[str, Callable[[Any], ItemKind]] = {
    "module": _decode_module,
    "extern_crate": lambda p: ExternCrate(name=str(p["name"]), rename=p.get("rename")),
    "import": _decode_import,
    "use": _decode_import,
    "union": _decode_union,
    "struct": _decode_struct,
    "struct_field": lambda p: StructField(type=decode_type(p)),
    "enum": _decode_enum,
    "variant": _decode_variant,
    "function": _decode_function,
    "trait": _decode_trait,
    "trait_alias": lambda p: TraitAlias(generics=decode_generics(p.get("generics"))),
    "impl": _decode_impl,
    "typedef": lambda p: Typedef(
        type=decode_type(p["type"]), generics=decode_generics(p.get("generics"))
    ),
    "type_alias": lambda p: Typedef(
        type=decode_type(p["type"]), generics=decode_generics(p.get("generics"))
    ),
    "opaque_ty": lambda p: OpaqueType(),
    "constant": _decode_constant,
    "static": lambda p: Static(
        type=_optional_type(p.get("type")),
        mutable=bool(_first(p, "mutable", "is_mutable", default=False)),
        expr=p.get("expr"),
    ),
    "foreign_type": lambda p: ForeignType(),
    "extern_type": lambda p: ForeignType(),
    "macro": lambda p: Macro(source=str(p or "")),
    "proc_macro": lambda p: ProcMacro(kind=str(p.get("kind") or "")),
    "primitive": lambda p: PrimitiveItem(name=str(p["name"]), impls=_ids(p.get("impls"))),
    "assoc_const": lambda p: AssociatedConst(
        type=_optional_type(p.get("type")), default=_first(p, "default", "value")
    ),
    "assoc_type": _decode_assoc_type,
}
