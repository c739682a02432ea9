"""Depth-first walk over a document's module tree producing index entries."""

import logging
from collections.abc import Callable
from typing import Any

from rustdoc_lookup.accumulator import Accumulator, SkippedItem
from rustdoc_lookup.document import Document
from rustdoc_lookup.errors import BrokenInvariant, UnsupportedConstruct
from rustdoc_lookup.models import (
    Enum,
    Function,
    Impl,
    Import,
    Item,
    Module,
    PrimitiveItem,
    Struct,
    UnionItem,
    UnknownItem,
)
from rustdoc_lookup.render_declaration import DeclarationRenderer, is_denied_impl

logger = logging.getLogger(__name__)


class ItemGraphVisitor:
    """Walks one document and fills an Accumulator with rendered items."""

    def __init__(self, document: Document, config: dict[str, Any] | None = None) -> None:
        """Initialize the visitor with the `render` config section."""
        self.document = document
        self.renderer = DeclarationRenderer(document, config or {})
        self._active: set[str] = set()
        self._handlers: dict[type, Callable[[str, Accumulator], None]] = {
            Module: self.visit_module,
            Import: self.visit_import,
            Struct: self.visit_struct,
            Enum: self.visit_enum,
            UnionItem: self.visit_union,
            Function: self.visit_function,
            Impl: self.visit_impl,
            PrimitiveItem: self.visit_primitive,
            UnknownItem: self.visit_unknown,
        }

    def run(self, out: Accumulator | None = None) -> Accumulator:
        """Visit the whole document starting at its root module."""
        out = out if out is not None else Accumulator()
        self.visit_module(self.document.root, out)
        return out

    def visit_item(self, item_id: str, out: Accumulator) -> None:
        item = self.document.get(item_id)
        if item is None:
            raise BrokenInvariant(
                "referenced item is not in the index",
                source=self.document.source,
                item_id=item_id,
            )
        if item_id in self._active:
            logger.debug("Skipping cyclic reference to %s", item_id)
            return
        # Traits, constants, statics, macros, typedefs and the other
        # remaining kinds never produce an entry of their own.
        handler = self._handlers.get(type(item.inner))
        if handler is None:
            return
        self._active.add(item_id)
        try:
            handler(item_id, out)
        finally:
            self._active.discard(item_id)

    def visit_module(self, item_id: str, out: Accumulator) -> None:
        item, module = self.document.expect_module(item_id)
        out.segment_stack.append(item.name or "")
        try:
            for child in module.items:
                self.visit_item(child, out)
        finally:
            out.segment_stack.pop()

    def visit_import(self, item_id: str, out: Accumulator) -> None:
        _, imp = self.document.expect_import(item_id)
        # External or unresolved re-exports are expected; skip them quietly.
        if imp.target is None or self.document.get(imp.target) is None:
            logger.debug("Unresolved import %s (%s)", item_id, imp.source)
            return
        self.visit_item(imp.target, out)

    def visit_struct(self, item_id: str, out: Accumulator) -> None:
        item, struct, name = self.document.expect_struct(item_id)
        self._index_item(item, name, out)
        self._visit_owned_impls(struct.impls, name, out)

    def visit_enum(self, item_id: str, out: Accumulator) -> None:
        item, enum, name = self.document.expect_enum(item_id)
        self._index_item(item, name, out)
        self._visit_owned_impls(enum.impls, name, out)

    def visit_union(self, item_id: str, out: Accumulator) -> None:
        item, union, name = self.document.expect_union(item_id)
        self._index_item(item, name, out)
        self._visit_owned_impls(union.impls, name, out)

    def visit_function(self, item_id: str, out: Accumulator) -> None:
        item, _, name = self.document.expect_function(item_id)
        self._index_item(item, name, out)

    def visit_primitive(self, item_id: str, out: Accumulator) -> None:
        item, primitive = self.document.expect(item_id, PrimitiveItem)
        self._visit_owned_impls(primitive.impls, item.name or primitive.name, out)

    def visit_impl(self, item_id: str, out: Accumulator) -> None:
        _, imp = self.document.expect_impl(item_id)
        if imp.is_blanket or is_denied_impl(imp, self.renderer.denied_traits):
            return
        for member in imp.items:
            self.visit_item(member, out)

    def visit_unknown(self, item_id: str, out: Accumulator) -> None:
        item, unknown = self.document.expect(item_id, UnknownItem)
        exc = UnsupportedConstruct(f"item kind `{unknown.tag}`", item_id)
        self._skip(item, out.path_with(item.name or item_id), exc, out)

    def _visit_owned_impls(self, impl_ids: list[str], name: str, out: Accumulator) -> None:
        out.segment_stack.append(name)
        try:
            for impl_id in impl_ids:
                self.visit_item(impl_id, out)
        finally:
            out.segment_stack.pop()

    def _index_item(self, item: Item, name: str, out: Accumulator) -> None:
        path = out.path_with(name)
        try:
            text = self.renderer.render_item(item)
        except UnsupportedConstruct as exc:
            self._skip(item, path, exc, out)
            return
        out.add(path, text)

    def _skip(
        self, item: Item, path: str, exc: UnsupportedConstruct, out: Accumulator
    ) -> None:
        logger.warning(
            "Skipping %s (item %s in %s): %s",
            path,
            item.id,
            self.document.source,
            exc,
        )
        out.skipped.append(SkippedItem(item_id=item.id, path=path, reason=str(exc)))


def run_visitor(document: Document, config: dict[str, Any] | None = None) -> Accumulator:
    """Walk `document` and return its accumulated index entries."""
    return ItemGraphVisitor(document, config).run()
