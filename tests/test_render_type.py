"""Tests for rendering type expressions."""

import pytest

from rustdoc_lookup.errors import UnsupportedConstruct
from rustdoc_lookup.models import (
    AngleBracketed,
    Array,
    BorrowedRef,
    ConstArg,
    DynTrait,
    Generic,
    ImplTrait,
    InferArg,
    LifetimeArg,
    OutlivesBound,
    Parenthesized,
    PolyTrait,
    Primitive,
    RawPointer,
    ResolvedPath,
    Slice,
    TraitBound,
    Tuple,
    TypeArg,
    UnknownType,
)
from rustdoc_lookup.render_type import lifetime, render_type

U8 = Primitive("u8")
T = Generic("T")


def test_render_references() -> None:
    """Verify borrowed references with and without lifetimes."""
    assert render_type(BorrowedRef(U8)) == "&u8"
    assert render_type(BorrowedRef(U8, mutable=True)) == "&mut u8"
    assert render_type(BorrowedRef(T, lifetime="'a", mutable=True)) == "&'a mut T"
    assert render_type(BorrowedRef(T, lifetime="static")) == "&'static T"


def test_render_raw_pointers() -> None:
    """Verify raw pointer mutability prefixes."""
    assert render_type(RawPointer(U8)) == "*const u8"
    assert render_type(RawPointer(U8, mutable=True)) == "*mut u8"


def test_render_sequences() -> None:
    """Verify slices, arrays and tuples."""
    assert render_type(Slice(U8)) == "[u8]"
    assert render_type(Array(U8, "32")) == "[u8; 32]"
    assert render_type(Tuple((U8, T))) == "(u8, T)"
    assert render_type(Tuple(())) == "()"


def test_render_resolved_path_args() -> None:
    """Verify angle-bracketed arguments of every kind."""
    vec = ResolvedPath("Vec", args=AngleBracketed((TypeArg(U8),)))
    assert render_type(vec) == "Vec<u8>"

    cow = ResolvedPath(
        "Cow",
        args=AngleBracketed((LifetimeArg("a"), TypeArg(Slice(U8)))),
    )
    assert render_type(cow) == "Cow<'a, [u8]>"

    inferred = ResolvedPath("Vec", args=AngleBracketed((InferArg(),)))
    assert render_type(inferred) == "Vec<_>"

    buf = ResolvedPath(
        "Buf", args=AngleBracketed((ConstArg("N", Primitive("usize")),))
    )
    assert render_type(buf) == "Buf<const N: usize>"

    # empty argument lists are not shown
    assert render_type(ResolvedPath("String", args=AngleBracketed(()))) == "String"


def test_render_parenthesized_args() -> None:
    """Verify `Fn(A) -> B` style arguments."""
    fn = ResolvedPath("Fn", args=Parenthesized((U8,), output=T))
    assert render_type(fn) == "Fn(u8) -> T"
    assert render_type(ResolvedPath("FnOnce", args=Parenthesized(()))) == "FnOnce()"


def test_render_trait_objects() -> None:
    """Verify dyn and impl trait bounds including lifetimes."""
    dyn = DynTrait(
        traits=(PolyTrait(ResolvedPath("Error")), PolyTrait(ResolvedPath("Send"))),
        lifetime="'static",
    )
    assert render_type(dyn) == "dyn Error + Send + 'static"

    imp = ImplTrait((TraitBound(ResolvedPath("Iterator")), OutlivesBound("'a")))
    assert render_type(imp) == "impl Iterator + 'a"


def test_render_unknown_type_raises() -> None:
    """Verify that unmodelled type variants fail loudly with their tag."""
    with pytest.raises(UnsupportedConstruct, match="pat"):
        render_type(BorrowedRef(UnknownType("pat")))


def test_lifetime_quote() -> None:
    """Verify that lifetimes carry exactly one leading quote."""
    assert lifetime("a") == "'a"
    assert lifetime("'a") == "'a"
