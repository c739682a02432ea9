"""The item graph of one crate: an id -> item arena with typed accessors."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypeVar

from rustdoc_lookup.errors import BrokenInvariant
from rustdoc_lookup.models import (
    Enum,
    Function,
    Impl,
    Import,
    Item,
    Module,
    ResolvedPath,
    Struct,
    StructField,
    UnionItem,
    Variant,
)

K = TypeVar("K")


@dataclass
class Document:
    """One parsed rustdoc JSON document.

    Items reference each other only by id; traversal always goes through
    the index, so the graph never holds owned cycles.
    """

    root: str
    index: dict[str, Item]
    source: str = "<memory>"
    format_version: Any = None
    crate_version: str | None = None
    _parents: dict[str, str] | None = field(default=None, init=False, repr=False)

    @property
    def name(self) -> str:
        root = self.index.get(self.root)
        return (root.name if root else None) or self.source

    def get(self, item_id: str) -> Item | None:
        """Look up an item whose existence is not guaranteed."""
        return self.index.get(item_id)

    def expect(self, item_id: str, kind: type[K]) -> tuple[Item, K]:
        """Look up an item that must exist and be of the given kind."""
        item = self.index.get(item_id)
        if item is None:
            raise BrokenInvariant(
                f"expected {kind.__name__}, id is not in the index",
                source=self.source,
                item_id=item_id,
            )
        if not isinstance(item.inner, kind):
            raise BrokenInvariant(
                f"expected {kind.__name__}, got {item.kind_name}",
                source=self.source,
                item_id=item_id,
            )
        return item, item.inner

    def expect_named(self, item_id: str, kind: type[K]) -> tuple[Item, K, str]:
        """Like `expect`, for kinds that always carry a name."""
        item, inner = self.expect(item_id, kind)
        if item.name is None:
            raise BrokenInvariant(
                f"expected a named {kind.__name__}",
                source=self.source,
                item_id=item_id,
            )
        return item, inner, item.name

    def expect_module(self, item_id: str) -> tuple[Item, Module]:
        return self.expect(item_id, Module)

    def expect_struct(self, item_id: str) -> tuple[Item, Struct, str]:
        return self.expect_named(item_id, Struct)

    def expect_enum(self, item_id: str) -> tuple[Item, Enum, str]:
        return self.expect_named(item_id, Enum)

    def expect_union(self, item_id: str) -> tuple[Item, UnionItem, str]:
        return self.expect_named(item_id, UnionItem)

    def expect_function(self, item_id: str) -> tuple[Item, Function, str]:
        return self.expect_named(item_id, Function)

    def expect_struct_field(self, item_id: str) -> tuple[Item, StructField]:
        return self.expect(item_id, StructField)

    def expect_variant(self, item_id: str) -> tuple[Item, Variant, str]:
        return self.expect_named(item_id, Variant)

    def expect_impl(self, item_id: str) -> tuple[Item, Impl]:
        return self.expect(item_id, Impl)

    def expect_import(self, item_id: str) -> tuple[Item, Import]:
        return self.expect(item_id, Import)

    # -----------------------------
    # Parent lookup
    # -----------------------------

    def parent_of(self, item_id: str) -> Item | None:
        """Return the Impl or Module listing this item as a member."""
        if self._parents is None:
            self._parents = self._build_parent_map()
        parent_id = self._parents.get(item_id)
        return self.index.get(parent_id) if parent_id is not None else None

    def parent_name(self, item_id: str) -> str | None:
        """Resolve the name a qualifier is matched against.

        The implemented type for an impl member, the module name for a
        module member; anything else has no usable parent.
        """
        parent = self.parent_of(item_id)
        if parent is None:
            return None
        if isinstance(parent.inner, Impl):
            target = parent.inner.for_type
            return target.name if isinstance(target, ResolvedPath) else None
        if isinstance(parent.inner, Module):
            return parent.name
        return None

    def _build_parent_map(self) -> dict[str, str]:
        parents: dict[str, str] = {}
        for parent_id, item in self.index.items():
            if isinstance(item.inner, (Impl, Module)):
                for child in item.inner.items:
                    # first declaring parent wins, as a linear scan would find
                    parents.setdefault(child, parent_id)
        return parents
