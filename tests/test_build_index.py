"""Tests for building the merged index from several documents."""

from pathlib import Path

import pytest
from crate_builder import CrateBuilder, path

from rustdoc_lookup.accumulator import Accumulator
from rustdoc_lookup.build_index import build_index, merge, process_document
from rustdoc_lookup.load_config import load_config


def write_crate(tmp_path: Path, crate: CrateBuilder, filename: str) -> Path:
    out = tmp_path / filename
    out.write_text(crate.to_json(), encoding="utf-8")
    return out


@pytest.fixture
def json_files(tmp_path: Path) -> list[Path]:
    """Two small crates on disk."""
    alpha = CrateBuilder("alpha")
    alpha.function("run", docs="Runs the thing.")
    alpha.function("stop")
    beta = CrateBuilder("beta")
    beta.struct("Config", {"name": path("String")})
    return [write_crate(tmp_path, alpha, "alpha.json"), write_crate(tmp_path, beta, "beta.json")]


def test_merge_keeps_document_order() -> None:
    """Verify that merging concatenates while keeping each document's order."""
    first = Accumulator()
    first.add("a::x", "x")
    first.add("a::y", "y")
    second = Accumulator()
    second.add("b::z", "z")

    assert merge([first, second]) == (["a::x", "a::y", "b::z"], ["x", "y", "z"])


def test_process_document(json_files: list[Path]) -> None:
    """Verify that one document is loaded and visited."""
    out = process_document(str(json_files[0]), load_config()["render"])
    assert out.paths == ["alpha::run", "alpha::stop"]


@pytest.mark.parametrize("workers", [1, 2])
def test_build_index(json_files: list[Path], workers: int) -> None:
    """Verify inline and process-pool builds produce the same aligned entries."""
    result = build_index(json_files, load_config(), workers=workers)

    assert result.ok
    assert result.skipped == 0
    assert len(result.paths) == len(result.texts)
    entries = dict(zip(result.paths, result.texts))
    assert entries == {
        "alpha::run": "fn run()\nRuns the thing.",
        "alpha::stop": "fn stop()\n",
        "beta::Config": "struct Config {\n  name: String,\n}\n",
    }
    # within one document the declaration order is kept
    assert result.paths.index("alpha::run") < result.paths.index("alpha::stop")


@pytest.mark.parametrize("workers", [1, 2])
def test_build_index_isolates_failures(
    tmp_path: Path, json_files: list[Path], workers: int
) -> None:
    """Verify that a malformed document does not stop the others."""
    broken = tmp_path / "broken.json"
    broken.write_text("{ this is not json", encoding="utf-8")
    missing = tmp_path / "missing.json"
    latin1 = tmp_path / "latin1.json"
    latin1.write_bytes(b'{"root": "\xff\xfe"}')

    result = build_index(
        [broken, *json_files, missing, latin1], load_config(), workers=workers
    )

    assert not result.ok
    errors = {f.source: f.error for f in result.failures}
    assert sorted(errors) == sorted([str(broken), str(missing), str(latin1)])
    assert "invalid JSON" in errors[str(broken)]
    assert "invalid UTF-8" in errors[str(latin1)]
    assert sorted(result.paths) == ["alpha::run", "alpha::stop", "beta::Config"]


def test_build_index_counts_skipped_items(tmp_path: Path) -> None:
    """Verify that per-item skips are summed across documents."""
    crate = CrateBuilder("odd")
    crate.add("mystery", {"brand_new_kind": {}})
    crate.function("fine")
    result = build_index([write_crate(tmp_path, crate, "odd.json")], load_config(), workers=1)

    assert result.ok
    assert result.skipped == 1
    assert result.paths == ["odd::fine"]
