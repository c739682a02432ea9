"""Command line front end: build `doc.bin` and query it.

Usage:
    python -m rustdoc_lookup.cli build target/doc/*.json -o doc.bin
    python -m rustdoc_lookup.cli find "Vec::push"
    python -m rustdoc_lookup.cli docs "HashMap::entry"
    python -m rustdoc_lookup.cli fuzzy cofnig Config
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any

from rustdoc_lookup.build_index import build_index
from rustdoc_lookup.doc_index import DocIndex
from rustdoc_lookup.document_search import DocumentSearch
from rustdoc_lookup.errors import DocIndexError
from rustdoc_lookup.fuzzy_match import fuzzy_match
from rustdoc_lookup.index_codec import write_index
from rustdoc_lookup.load_config import load_config
from rustdoc_lookup.load_document import load_document_file
from rustdoc_lookup.md_codeblock import md_entry

logger = logging.getLogger(__name__)


def cmd_build(args: argparse.Namespace, config: dict[str, Any]) -> int:
    """Index rustdoc JSON files into a single binary index."""
    json_files: list[Path] = args.json_files
    missing = [f for f in json_files if not f.exists()]
    if missing:
        msg = f"No such file: {', '.join(str(f) for f in missing)}"
        raise SystemExit(msg)

    workers = args.workers if args.workers is not None else config["build"]["workers"]
    output = Path(args.output or config["build"]["output"])
    result = build_index(json_files, config, workers=workers)
    size = write_index(output, result.paths, result.texts)
    print(f"Wrote {len(result.paths)} entries ({size} bytes) to {output}")
    for failure in result.failures:
        print(f"FAILED {failure.source}: {failure.error}")
    return 0 if result.ok else 1


def cmd_find(args: argparse.Namespace, config: dict[str, Any]) -> int:
    """Print the top matches as `score: path` lines."""
    limit = args.limit or config["query"]["top_n"]
    if args.from_json:
        documents = [load_document_file(f) for f in args.from_json]
        search = DocumentSearch(documents, config["query"])
        for match in search.find(args.query).top(limit):
            print(f"{match.score}: {match.display_path}")
        return 0

    index = DocIndex.load(args.index, config["query"])
    for score, path, _ in index.find(args.query).top(limit):
        print(f"{score}: {path}")
    return 0


def cmd_docs(args: argparse.Namespace, config: dict[str, Any]) -> int:
    """Print the rendered signature and docs of the best match."""
    index = DocIndex.load(args.index, config["query"])
    best = index.find(args.query).first()
    if best is None:
        print("Nothing found!")
        return 1
    print(f"// {best.path}")
    print(md_entry(best.text))
    return 0


def cmd_fuzzy(args: argparse.Namespace, config: dict[str, Any]) -> int:
    """Show how a query aligns with one candidate string."""
    result = fuzzy_match(args.query, args.candidate, config["query"]["exact_match_score"])
    if result is None:
        print("No match!")
        return 1
    print(f"Score: {result.score}")
    print(f"Matched indices: {', '.join(str(i) for i in result.indices)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="Index rustdoc JSON output and look items up by fuzzy name.",
    )
    ap.add_argument("--config", help="Path to a YAML configuration file")
    ap.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    sub = ap.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", help="Build doc.bin from rustdoc JSON files")
    build.add_argument("json_files", type=Path, nargs="+", help="rustdoc JSON files")
    build.add_argument("-o", "--output", help="Output file (default: doc.bin)")
    build.add_argument(
        "--workers",
        type=int,
        help="Worker processes (default: one per CPU; 1 runs inline)",
    )
    build.set_defaults(func=cmd_build)

    find = sub.add_parser("find", help="List the best matches for a query")
    find.add_argument("query", help="Item name, optionally qualified (Type::name)")
    find.add_argument("--index", type=Path, default=Path("doc.bin"))
    find.add_argument("-n", "--limit", type=int, help="Number of results (default: 10)")
    find.add_argument(
        "--from-json",
        type=Path,
        nargs="+",
        help="Search rustdoc JSON files directly instead of the index",
    )
    find.set_defaults(func=cmd_find)

    docs = sub.add_parser("docs", help="Show the documentation of the best match")
    docs.add_argument("query")
    docs.add_argument("--index", type=Path, default=Path("doc.bin"))
    docs.set_defaults(func=cmd_docs)

    fuzzy = sub.add_parser("fuzzy", help="Score a query against one candidate")
    fuzzy.add_argument("query")
    fuzzy.add_argument("candidate")
    fuzzy.set_defaults(func=cmd_fuzzy)
    return ap


def main(argv: list[str] | None = None) -> int:
    """Run the command line interface."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = load_config(args.config)
    try:
        return args.func(args, config)
    except DocIndexError as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
