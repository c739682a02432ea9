"""Tests for rendering item declarations and their impl sections."""

from typing import Any

import pytest
from crate_builder import CrateBuilder, generic, path, prim, ref, self_ref

from rustdoc_lookup.document import Document
from rustdoc_lookup.errors import BrokenInvariant, UnsupportedConstruct
from rustdoc_lookup.load_config import DEFAULT_CONFIG
from rustdoc_lookup.render_declaration import DeclarationRenderer

RENDER_CONFIG: dict[str, Any] = DEFAULT_CONFIG["render"]


def render(doc: Document, item_id: int) -> str:
    """Render one item with the default configuration."""
    return DeclarationRenderer(doc, RENDER_CONFIG).render_item(doc.index[str(item_id)])


def test_render_function_signature() -> None:
    """Verify modifiers, generics, receiver and return type."""
    crate = CrateBuilder()
    get = crate.function(
        "get",
        [self_ref(), ("idx", prim("usize"))],
        output=path("Option", None, ref(generic("T"))),
        generics=["T"],
        is_const=True,
    )
    fetch = crate.function(
        "fetch",
        [self_ref(mutable=True)],
        is_async=True,
        is_unsafe=True,
    )
    consume = crate.function("into_inner", [("self", generic("Self"))], output=generic("T"))
    doc = crate.document()

    assert render(doc, get) == "const fn get<T>(&self, idx: usize) -> Option<&T>\n"
    assert render(doc, fetch) == "async unsafe fn fetch(&mut self)\n"
    assert render(doc, consume) == "fn into_inner(self) -> T\n"


def test_render_function_with_docs() -> None:
    """Verify that the doc excerpt follows the signature on its own line."""
    crate = CrateBuilder()
    run = crate.function("run", docs="Runs the thing. # Details ...")
    doc = crate.document()
    assert render(doc, run) == "fn run()\nRuns the thing. …"


def test_render_plain_struct() -> None:
    """Verify record-style fields and the private fields marker."""
    crate = CrateBuilder()
    config = crate.struct(
        "Config",
        {"name": path("String"), "port": prim("u16")},
        stripped=True,
        generics=["T"],
    )
    doc = crate.document()
    assert render(doc, config) == (
        "struct Config<T> {\n"
        "  name: String,\n"
        "  port: u16,\n"
        "  // private fields omitted\n"
        "}\n"
    )


def test_render_unit_and_tuple_structs() -> None:
    """Verify unit and tuple struct bodies, with `_` for private tuple fields."""
    crate = CrateBuilder()
    marker = crate.unit_struct("Marker")
    pair = crate.tuple_struct("Pair", [prim("u8"), None])
    doc = crate.document()
    assert render(doc, marker) == "struct Marker;\n"
    assert render(doc, pair) == "struct Pair(u8, _);\n"


def test_render_enum() -> None:
    """Verify unit, tuple and struct variants plus the stripped marker."""
    crate = CrateBuilder()
    shape = crate.enum(
        "Shape",
        {
            "Empty": "plain",
            "Circle": [prim("f64")],
            "Rect": {"w": prim("f64"), "h": prim("f64")},
        },
        stripped=True,
    )
    doc = crate.document()
    assert render(doc, shape) == (
        "enum Shape {\n"
        "  Empty,\n"
        "  Circle(f64),\n"
        "  Rect {\n"
        "    w: f64,\n"
        "    h: f64,\n"
        "  },\n"
        "  // some variants omitted\n"
        "}\n"
    )


def test_render_union() -> None:
    """Verify union bodies render like record structs."""
    crate = CrateBuilder()
    fields = [crate.field("i", prim("u32")), crate.field("f", prim("f32"))]
    bits = crate.add(
        "Bits",
        {
            "union": {
                "generics": {"params": [], "where_predicates": []},
                "has_stripped_fields": False,
                "fields": fields,
                "impls": [],
            }
        },
    )
    doc = crate.document()
    assert render(doc, bits) == "union Bits {\n  i: u32,\n  f: f32,\n}\n"


def test_render_inherent_impl_is_capped() -> None:
    """Verify that at most ten inherent members are listed."""
    crate = CrateBuilder()
    widget = crate.unit_struct("Widget")
    methods = [crate.method(f"m{i}") for i in range(12)]
    crate.impl(widget, methods[:5])
    crate.impl(widget, methods[5:])
    doc = crate.document()

    expected = "struct Widget;\nimpl Widget {\n"
    expected += "".join(f"  fn m{i}();\n" for i in range(10))
    expected += "  // 2 more items\n}\n"
    assert render(doc, widget) == expected


def test_render_trait_impls() -> None:
    """Verify trait impl listing, operator hints and the deny-list."""
    crate = CrateBuilder()
    meters = crate.tuple_struct("Meters", [prim("f64")])
    crate.impl(meters, trait="Add")
    crate.impl(meters, trait="Clone")
    crate.impl(meters, trait="Send")
    crate.impl(meters, trait="Into", blanket=True)
    doc = crate.document()

    assert render(doc, meters) == (
        "struct Meters(f64);\n"
        "impl Add for Meters {} // the `+` operator\n"
        "impl Clone for Meters {}\n"
    )


def test_render_trait_impls_are_capped() -> None:
    """Verify that at most ten trait impls are listed."""
    crate = CrateBuilder()
    marker = crate.unit_struct("Marker")
    for i in range(12):
        crate.impl(marker, trait=f"Trait{i}")
    doc = crate.document()

    text = render(doc, marker)
    assert text.count("impl Trait") == 10
    assert "Trait10" not in text


def test_render_empty_inherent_impl_omitted() -> None:
    """Verify that an inherent impl without members adds no block."""
    crate = CrateBuilder()
    marker = crate.unit_struct("Marker")
    crate.impl(marker, [])
    doc = crate.document()
    assert render(doc, marker) == "struct Marker;\n"


def test_render_associated_const_member() -> None:
    """Verify associated constants inside the impl block."""
    crate = CrateBuilder()
    block = crate.unit_struct("Block")
    size = crate.add(
        "SIZE", {"assoc_const": {"type": prim("usize"), "value": "8"}}, attach=False
    )
    crate.impl(block, [size])
    doc = crate.document()
    assert render(doc, block) == "struct Block;\nimpl Block {\n  const SIZE: usize = 8;\n}\n"


def test_render_unsupported_member_raises() -> None:
    """Verify that impl members of unmodelled kinds fail the item."""
    crate = CrateBuilder()
    block = crate.unit_struct("Block")
    odd = crate.add(
        "ODD",
        {"static": {"type": prim("u8"), "is_mutable": False, "expr": "0"}},
        attach=False,
    )
    crate.impl(block, [odd])
    doc = crate.document()
    with pytest.raises(UnsupportedConstruct, match="impl member `Static`"):
        render(doc, block)


def test_render_missing_member_raises() -> None:
    """Verify that a dangling impl member id is a broken invariant."""
    crate = CrateBuilder()
    block = crate.unit_struct("Block")
    crate.impl(block, [404])
    doc = crate.document()
    with pytest.raises(BrokenInvariant, match="impl member"):
        render(doc, block)


def test_render_non_declaration_raises() -> None:
    """Verify that kinds without a declaration form are rejected."""
    crate = CrateBuilder()
    trait = crate.add(
        "Shape",
        {"trait": {"items": [], "generics": {"params": []}, "implementations": []}},
    )
    doc = crate.document()
    with pytest.raises(UnsupportedConstruct, match="declaration `Trait`"):
        render(doc, trait)
