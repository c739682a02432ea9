"""Data models for rustdoc JSON items and type expressions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

# -----------------------------
# Type expressions
# -----------------------------


@dataclass(frozen=True)
class Primitive:
    """A builtin type such as `u8` or `str`."""

    name: str


@dataclass(frozen=True)
class Generic:
    """A generic parameter used as a type, e.g. `T` or `Self`."""

    name: str


@dataclass(frozen=True)
class ResolvedPath:
    """A named type or trait with optional generic arguments."""

    name: str
    id: str | None = None
    args: GenericArgs | None = None


@dataclass(frozen=True)
class BorrowedRef:
    """`&'a mut T`."""

    type: TypeExpr
    lifetime: str | None = None
    mutable: bool = False


@dataclass(frozen=True)
class RawPointer:
    """`*const T` / `*mut T`."""

    type: TypeExpr
    mutable: bool = False


@dataclass(frozen=True)
class Slice:
    """`[T]`."""

    type: TypeExpr


@dataclass(frozen=True)
class Array:
    """`[T; N]`; the length is kept as source text."""

    type: TypeExpr
    len: str


@dataclass(frozen=True)
class Tuple:
    """`(A, B, ...)`; the empty tuple is unit."""

    types: tuple[TypeExpr, ...] = ()


@dataclass(frozen=True)
class PolyTrait:
    """One trait inside a `dyn` type."""

    trait: ResolvedPath


@dataclass(frozen=True)
class DynTrait:
    """`dyn A + B + 'a`."""

    traits: tuple[PolyTrait, ...] = ()
    lifetime: str | None = None


@dataclass(frozen=True)
class TraitBound:
    """A `Trait<...>` bound."""

    trait: ResolvedPath


@dataclass(frozen=True)
class OutlivesBound:
    """A `'a` bound."""

    lifetime: str


GenericBound = Union[TraitBound, OutlivesBound]


@dataclass(frozen=True)
class ImplTrait:
    """`impl A + B`."""

    bounds: tuple[GenericBound, ...] = ()


@dataclass(frozen=True)
class FunctionPointer:
    """A `fn(..) -> ..` pointer type; its signature is not modelled."""


@dataclass(frozen=True)
class QualifiedPath:
    """`<T as Trait>::Name`; only the final name is kept."""

    name: str


@dataclass(frozen=True)
class UnknownType:
    """A type variant this package does not model, kept by its tag."""

    tag: str


TypeExpr = Union[
    Primitive,
    Generic,
    ResolvedPath,
    BorrowedRef,
    RawPointer,
    Slice,
    Array,
    Tuple,
    DynTrait,
    ImplTrait,
    FunctionPointer,
    QualifiedPath,
    UnknownType,
]

# -----------------------------
# Generic arguments and parameters
# -----------------------------


@dataclass(frozen=True)
class LifetimeArg:
    name: str


@dataclass(frozen=True)
class InferArg:
    pass


@dataclass(frozen=True)
class TypeArg:
    type: TypeExpr


@dataclass(frozen=True)
class ConstArg:
    expr: str
    type: TypeExpr | None = None


GenericArg = Union[LifetimeArg, InferArg, TypeArg, ConstArg]


@dataclass(frozen=True)
class AngleBracketed:
    """`<'a, T, _, N>`."""

    args: tuple[GenericArg, ...] = ()


@dataclass(frozen=True)
class Parenthesized:
    """`(A, B) -> C`, as used by the `Fn*` traits."""

    inputs: tuple[TypeExpr, ...] = ()
    output: TypeExpr | None = None


GenericArgs = Union[AngleBracketed, Parenthesized]


@dataclass(frozen=True)
class GenericParam:
    """A declared generic parameter (`'a`, `T` or `const N: usize`)."""

    name: str
    kind: str  # lifetime/type/const
    synthetic: bool = False


@dataclass(frozen=True)
class Generics:
    params: tuple[GenericParam, ...] = ()


# -----------------------------
# Item payloads
# -----------------------------


@dataclass
class Module:
    items: list[str] = field(default_factory=list)


@dataclass
class PlainStruct:
    fields: list[str] = field(default_factory=list)
    fields_stripped: bool = False


@dataclass
class UnitStruct:
    pass


@dataclass
class TupleStruct:
    fields: list[str | None] = field(default_factory=list)  # None = stripped


StructKind = Union[PlainStruct, UnitStruct, TupleStruct]


@dataclass
class Struct:
    kind: StructKind
    generics: Generics = field(default_factory=Generics)
    impls: list[str] = field(default_factory=list)


@dataclass
class Enum:
    variants: list[str] = field(default_factory=list)
    generics: Generics = field(default_factory=Generics)
    variants_stripped: bool = False
    impls: list[str] = field(default_factory=list)


@dataclass
class Variant:
    # PlainStruct for record variants, TupleStruct for tuple variants,
    # UnitStruct for plain ones
    kind: StructKind = field(default_factory=UnitStruct)


@dataclass
class UnionItem:
    fields: list[str] = field(default_factory=list)
    generics: Generics = field(default_factory=Generics)
    fields_stripped: bool = False
    impls: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class FnHeader:
    is_async: bool = False
    is_const: bool = False
    is_unsafe: bool = False


@dataclass
class Function:
    inputs: list[tuple[str, TypeExpr]] = field(default_factory=list)
    output: TypeExpr | None = None
    generics: Generics = field(default_factory=Generics)
    header: FnHeader = field(default_factory=FnHeader)


@dataclass
class StructField:
    type: TypeExpr


@dataclass
class Trait:
    items: list[str] = field(default_factory=list)
    generics: Generics = field(default_factory=Generics)


@dataclass
class TraitAlias:
    generics: Generics = field(default_factory=Generics)


@dataclass
class Impl:
    for_type: TypeExpr
    trait: ResolvedPath | None = None
    items: list[str] = field(default_factory=list)
    is_blanket: bool = False


@dataclass
class Import:
    source: str
    name: str
    target: str | None = None
    glob: bool = False


@dataclass
class Typedef:
    type: TypeExpr | None = None
    generics: Generics = field(default_factory=Generics)


@dataclass
class OpaqueType:
    pass


@dataclass
class Constant:
    type: TypeExpr | None = None
    expr: str | None = None


@dataclass
class Static:
    type: TypeExpr | None = None
    mutable: bool = False
    expr: str | None = None


@dataclass
class ForeignType:
    pass


@dataclass
class Macro:
    source: str = ""


@dataclass
class ProcMacro:
    kind: str = ""


@dataclass
class PrimitiveItem:
    name: str = ""
    impls: list[str] = field(default_factory=list)


@dataclass
class AssociatedConst:
    type: TypeExpr | None = None
    default: str | None = None


@dataclass
class AssociatedType:
    default: TypeExpr | None = None
    bounds: tuple[GenericBound, ...] = ()


@dataclass
class ExternCrate:
    name: str = ""
    rename: str | None = None


@dataclass
class UnknownItem:
    """An item kind this package does not model, kept by its tag."""

    tag: str


ItemKind = Union[
    Module,
    Struct,
    Enum,
    Variant,
    UnionItem,
    Function,
    StructField,
    Trait,
    TraitAlias,
    Impl,
    Import,
    Typedef,
    OpaqueType,
    Constant,
    Static,
    ForeignType,
    Macro,
    ProcMacro,
    PrimitiveItem,
    AssociatedConst,
    AssociatedType,
    ExternCrate,
    UnknownItem,
]


@dataclass
class Item:
    """Represents one documented entity of a crate."""

    id: str
    name: str | None
    docs: str | None
    inner: ItemKind

    @property
    def kind_name(self) -> str:
        return type(self.inner).__name__
