"""Fuzzy lookup directly over loaded documents, without a persisted index."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, NamedTuple

from rustdoc_lookup.doc_index import RankedResults, saturating_add, split_query
from rustdoc_lookup.document import Document
from rustdoc_lookup.fuzzy_match import EXACT_MATCH_SCORE, fuzzy_match
from rustdoc_lookup.models import Item


class ItemMatch(NamedTuple):
    score: int
    document: Document
    item: Item

    @property
    def display_path(self) -> str:
        parent = self.document.parent_name(self.item.id)
        name = self.item.name or self.item.id
        return f"{parent}::{name}" if parent else name


class DocumentSearch:
    """Scores every named item of every document against a query.

    Qualifiers are matched against the item's parent: the implemented type
    for impl members, the module name for module members.
    """

    def __init__(
        self, documents: Sequence[Document], config: dict[str, Any] | None = None
    ) -> None:
        """Initialize the search with the `query` config section."""
        config = config or {}
        self.documents = list(documents)
        self.separator: str = config.get("separator", "::")
        self.exact_match_score: int = config.get("exact_match_score", EXACT_MATCH_SCORE)
        self.qualifier_threshold: int = config.get("qualifier_threshold", 100)

    def find(self, query: str) -> RankedResults[ItemMatch]:
        segments = split_query(query, self.separator)

        def score_all() -> list[ItemMatch]:
            results = []
            if not segments:
                return results
            for doc in self.documents:
                for item in doc.index.values():
                    score = self._score(doc, item, segments)
                    if score is not None:
                        results.append(ItemMatch(score, doc, item))
            return results

        return RankedResults(score_all)

    def _score(self, doc: Document, item: Item, segments: list[str]) -> int | None:
        if item.name is None:
            return None
        leaf = fuzzy_match(segments[-1], item.name, self.exact_match_score)
        if leaf is None:
            return None
        if len(segments) == 1:
            return leaf.score
        if leaf.score < self.qualifier_threshold:
            return None
        parent_name = doc.parent_name(item.id)
        if parent_name is None:
            return None
        parent = fuzzy_match(segments[-2], parent_name, self.exact_match_score)
        if parent is None:
            return None
        return saturating_add(parent.score, leaf.score)
