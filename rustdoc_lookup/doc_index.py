"""Fuzzy lookup over a loaded (paths, texts) index."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator, Sequence
from functools import cached_property
from pathlib import Path
from typing import Any, Generic, NamedTuple, TypeVar

from rustdoc_lookup.errors import BrokenInvariant
from rustdoc_lookup.fuzzy_match import EXACT_MATCH_SCORE, fuzzy_match
from rustdoc_lookup.index_codec import read_index

MAX_SCORE = 2**63 - 1

R = TypeVar("R", bound=tuple)


class QueryResult(NamedTuple):
    score: int
    path: str
    text: str


def saturating_add(a: int, b: int) -> int:
    return min(a + b, MAX_SCORE)


def split_query(query: str, separator: str = "::") -> list[str]:
    """Split `Type::method` style queries into their non-empty segments."""
    return [s.strip() for s in query.split(separator) if s.strip()]


class RankedResults(Generic[R]):
    """Query results ordered by descending score.

    Scoring happens on first access; the results can be iterated any number
    of times. Equal scores keep index order.
    """

    def __init__(self, score_all: Callable[[], list[R]]) -> None:
        """Defer scoring until the results are first used."""
        self._score_all = score_all

    @cached_property
    def _ranked(self) -> list[R]:
        return sorted(self._score_all(), key=lambda r: -r[0])

    def __iter__(self) -> Iterator[R]:
        return iter(self._ranked)

    def __len__(self) -> int:
        return len(self._ranked)

    def __bool__(self) -> bool:
        return bool(self._ranked)

    def first(self) -> R | None:
        """Return the best match, if any."""
        return self._ranked[0] if self._ranked else None

    def top(self, n: int) -> list[R]:
        return self._ranked[:n]


class DocIndex:
    """An immutable snapshot of the persisted index."""

    def __init__(
        self,
        paths: Sequence[str],
        texts: Sequence[str],
        config: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the snapshot with the `query` config section."""
        if len(paths) != len(texts):
            raise BrokenInvariant(
                f"index sequences differ in length: {len(paths)} paths, "
                f"{len(texts)} texts"
            )
        config = config or {}
        self.separator: str = config.get("separator", "::")
        self.exact_match_score: int = config.get("exact_match_score", EXACT_MATCH_SCORE)
        self.qualifier_threshold: int = config.get("qualifier_threshold", 100)
        self.verbatim_leaf_bonus: int = config.get("verbatim_leaf_bonus", 1000)

        self.paths = tuple(paths)
        self.texts = tuple(texts)
        segments = [p.split(self.separator) for p in self.paths]
        self._leaves = tuple(s[-1] for s in segments)
        self._parents = tuple(s[-2] if len(s) > 1 else None for s in segments)

    @classmethod
    def load(cls, path: Path, config: dict[str, Any] | None = None) -> DocIndex:
        paths, texts = read_index(path)
        return cls(paths, texts, config)

    def __len__(self) -> int:
        return len(self.paths)

    def find(self, query: str) -> RankedResults[QueryResult]:
        """Rank every entry against `query`; entries that do not match are left out."""
        segments = split_query(query, self.separator)

        def score_all() -> list[QueryResult]:
            if not segments:
                return []
            results = []
            for i in range(len(self.paths)):
                score = self.score_entry(segments, i)
                if score is not None:
                    results.append(QueryResult(score, self.paths[i], self.texts[i]))
            return results

        return RankedResults(score_all)

    def score_entry(self, segments: list[str], i: int) -> int | None:
        leaf_query = segments[-1]
        leaf = self._leaves[i]
        leaf_match = fuzzy_match(leaf_query, leaf, self.exact_match_score)
        if leaf_match is None:
            return None
        score = leaf_match.score

        if len(segments) > 1:
            if score < self.qualifier_threshold:
                return None
            parent = self._parents[i]
            if parent is None:
                return None
            parent_match = fuzzy_match(segments[-2], parent, self.exact_match_score)
            if parent_match is None:
                return None
            score = saturating_add(parent_match.score, score)

        if leaf == leaf_query:
            score = saturating_add(score, self.verbatim_leaf_bonus)
        return score


class IndexHandle:
    """Shares the current DocIndex snapshot and swaps it on reload.

    Queries read the snapshot reference without locking; the lock only
    serializes swaps.
    """

    def __init__(self, path: Path, config: dict[str, Any] | None = None) -> None:
        """Load the initial snapshot from `path`."""
        self.path = path
        self.config = config
        self._lock = threading.Lock()
        self._snapshot = DocIndex.load(path, config)

    @property
    def snapshot(self) -> DocIndex:
        return self._snapshot

    def reload(self) -> DocIndex:
        """Load the index file again and publish it as the new snapshot."""
        fresh = DocIndex.load(self.path, self.config)
        with self._lock:
            self._snapshot = fresh
        return fresh

    def find(self, query: str) -> RankedResults[QueryResult]:
        return self._snapshot.find(query)
