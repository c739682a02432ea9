"""Logic for building the merged index from several rustdoc JSON files."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from rustdoc_lookup.accumulator import Accumulator
from rustdoc_lookup.errors import DocIndexError
from rustdoc_lookup.load_document import load_document_file
from rustdoc_lookup.visitor import run_visitor

logger = logging.getLogger(__name__)


@dataclass
class DocumentFailure:
    """A document whose build task was aborted."""

    source: str
    error: str


@dataclass
class BuildResult:
    """Merged index plus per-document diagnostics."""

    paths: list[str] = field(default_factory=list)
    texts: list[str] = field(default_factory=list)
    skipped: int = 0
    failures: list[DocumentFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def process_document(path: str, render_config: dict[str, Any]) -> Accumulator:
    """Load and visit one document; runs inside a worker process."""
    document = load_document_file(Path(path))
    logger.info("Processing crate %s from %s", document.name, path)
    out = run_visitor(document, render_config)
    logger.info(
        "Finished crate %s: %d items, %d skipped",
        document.name,
        len(out),
        len(out.skipped),
    )
    return out


def merge(accumulators: Iterable[Accumulator]) -> tuple[list[str], list[str]]:
    """Concatenate accumulators, keeping each document's own order."""
    paths: list[str] = []
    texts: list[str] = []
    for acc in accumulators:
        paths.extend(acc.paths)
        texts.extend(acc.texts)
    return paths, texts


def build_index(
    json_files: list[Path],
    config: dict[str, Any],
    workers: int | None = None,
) -> BuildResult:
    """Visit every document in parallel and merge the outputs.

    A document that fails to parse or violates an item graph invariant is
    reported in `BuildResult.failures`; the other documents still build.
    """
    start = time.time()
    render_config = config.get("render", {})
    results: list[Accumulator] = []
    failures: list[DocumentFailure] = []

    if workers == 1:
        for f in json_files:
            try:
                results.append(process_document(str(f), render_config))
            except (DocIndexError, OSError) as exc:
                logger.error("Failed to index %s: %s", f, exc)
                failures.append(DocumentFailure(source=str(f), error=str(exc)))
    else:
        with ProcessPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(process_document, str(f), render_config): f
                for f in json_files
            }
            for future in as_completed(futures):
                f = futures[future]
                try:
                    results.append(future.result())
                except (DocIndexError, OSError) as exc:
                    logger.error("Failed to index %s: %s", f, exc)
                    failures.append(DocumentFailure(source=str(f), error=str(exc)))

    paths, texts = merge(results)
    skipped = sum(len(acc.skipped) for acc in results)
    logger.info(
        "Documented %d items from %d/%d documents in %.2fs (%d skipped)",
        len(paths),
        len(results),
        len(json_files),
        time.time() - start,
        skipped,
    )
    return BuildResult(paths=paths, texts=texts, skipped=skipped, failures=failures)
