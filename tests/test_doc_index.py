"""Tests for ranking queries against a loaded index."""

import threading
from pathlib import Path

import pytest

from rustdoc_lookup.doc_index import (
    MAX_SCORE,
    DocIndex,
    IndexHandle,
    QueryResult,
    saturating_add,
    split_query,
)
from rustdoc_lookup.errors import BrokenInvariant
from rustdoc_lookup.index_codec import write_index
from rustdoc_lookup.load_config import DEFAULT_CONFIG

QUERY_CONFIG = DEFAULT_CONFIG["query"]


def make_index(*paths: str) -> DocIndex:
    return DocIndex(list(paths), [f"text of {p}" for p in paths], QUERY_CONFIG)


def test_split_query() -> None:
    """Verify that queries split on the separator and drop empty segments."""
    assert split_query("Vec::push") == ["Vec", "push"]
    assert split_query("std::vec::Vec::push") == ["std", "vec", "Vec", "push"]
    assert split_query(" push ") == ["push"]
    assert split_query("::push::") == ["push"]
    assert split_query("") == []


def test_saturating_add() -> None:
    """Verify that addition clamps instead of overflowing."""
    assert saturating_add(1, 2) == 3
    assert saturating_add(MAX_SCORE, 1) == MAX_SCORE


def test_exact_match_dominates() -> None:
    """Verify that the exact name ranks strictly above longer matches."""
    index = make_index("foobar", "foo", "food")
    results = list(index.find("foo"))

    assert results[0].path == "foo"
    assert results[0].score > results[1].score
    assert results[0].score == 10000 + 1000


def test_leaf_matches_last_path_segment() -> None:
    """Verify that single-segment queries match the entry's leaf name."""
    index = make_index("mycrate::net::connect", "mycrate::Config")
    best = index.find("connect").first()
    assert best == QueryResult(11000, "mycrate::net::connect", "text of mycrate::net::connect")


def test_verbatim_leaf_bonus_breaks_ties() -> None:
    """Verify that a verbatim leaf outranks a case-insensitive near miss."""
    index = make_index("a::Config", "b::config")
    results = index.find("config").top(2)
    assert [r.path for r in results] == ["b::config", "a::Config"]


def test_qualifier_gating() -> None:
    """Verify that weak leaf matches never reach qualifier scoring."""
    index = make_index("Widget::renew", "Gadget::new")
    # unqualified, "new" does reach "renew"
    assert "Widget::renew" in [r.path for r in index.find("new")]
    # qualified, its leaf score stays below the threshold despite the parent
    assert list(index.find("Widget::new")) == []


def test_qualified_query_scores_parent() -> None:
    """Verify that the parent qualifier adds its own score."""
    index = make_index("Widget::new", "Gadget::new", "new")
    results = list(index.find("Widget::new"))

    assert results[0].path == "Widget::new"
    assert results[0].score == 10000 + 10000 + 1000
    # entries without a parent segment cannot satisfy a qualifier
    assert "new" not in [r.path for r in results]


def test_qualified_query_requires_parent_match() -> None:
    """Verify that an unmatched qualifier excludes the entry."""
    index = make_index("Gadget::new")
    assert not index.find("Xyz::new")


def test_no_match_is_empty() -> None:
    """Verify that queries without matches give an empty result, not an error."""
    index = make_index("run", "Config")
    results = index.find("zzz")
    assert len(results) == 0
    assert results.first() is None
    assert not index.find("")


def test_results_are_restartable() -> None:
    """Verify that a result sequence can be iterated more than once."""
    results = make_index("run", "rerun", "runner").find("run")
    assert list(results) == list(results)
    assert len(results) == 3


def test_equal_scores_keep_index_order() -> None:
    """Verify deterministic ordering among equal scores."""
    index = make_index("a::run", "b::run", "c::run")
    assert [r.path for r in index.find("run")] == ["a::run", "b::run", "c::run"]


def test_misaligned_index_rejected() -> None:
    """Verify that paths and texts must line up."""
    with pytest.raises(BrokenInvariant):
        DocIndex(["a"], [], QUERY_CONFIG)


def test_index_handle_reload(tmp_path: Path) -> None:
    """Verify that reloading swaps the snapshot without touching older results."""
    index_file = tmp_path / "doc.bin"
    write_index(index_file, ["run"], ["fn run()\n"])
    handle = IndexHandle(index_file, QUERY_CONFIG)
    old = handle.snapshot
    before = handle.find("stop")

    write_index(index_file, ["run", "stop"], ["fn run()\n", "fn stop()\n"])
    fresh = handle.reload()

    assert handle.snapshot is fresh
    assert len(old) == 1
    assert not before
    assert handle.find("stop").first().path == "stop"


def test_concurrent_queries_share_snapshot() -> None:
    """Verify that parallel queries on one snapshot give identical results."""
    index = make_index("Vec::push", "Vec::pop", "String::push_str")
    expected = list(index.find("push"))
    outputs: list[list[QueryResult]] = []

    def worker() -> None:
        outputs.append(list(index.find("push")))

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert outputs == [expected] * 4
