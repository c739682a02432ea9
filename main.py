"""Main orchestration script for generating rustdoc JSON and building doc.bin."""

import argparse
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path


def run_command(cmd_list: Sequence[str | Path], cwd: Path | str | None = None) -> None:
    """Run a command and exit if it fails."""
    cmd_str = " ".join(str(x) for x in cmd_list)
    print(f"Running: {cmd_str}")
    try:
        subprocess.run(cmd_list, check=True, cwd=cwd)
    except subprocess.CalledProcessError as e:
        print(f"Error executing command: {cmd_str}")
        sys.exit(e.returncode)


def main() -> None:
    """Run the full index generation pipeline."""
    parser = argparse.ArgumentParser(
        description="Generate rustdoc JSON for a crate and index it into doc.bin."
    )
    parser.add_argument(
        "--crate-dir",
        default=".",
        help="Directory of the Cargo project to document (default: current directory)",
    )
    parser.add_argument(
        "--skip-rustdoc",
        action="store_true",
        help="Reuse the JSON already in target/doc instead of running rustdoc",
    )
    parser.add_argument("-o", "--output", default="doc.bin", help="Index file to write")
    parser.add_argument("--workers", type=int, help="Worker processes for the build")
    parser.add_argument(
        "--config",
        help="Path to configuration file",
    )
    args = parser.parse_args()

    crate_dir = Path(args.crate_dir).resolve()

    if not args.skip_rustdoc:
        # 1. Emit JSON documentation; the output format is nightly-only
        print("--- Step 1: Generating rustdoc JSON ---")
        run_command(
            [
                "cargo",
                "+nightly",
                "rustdoc",
                "--",
                "-Z",
                "unstable-options",
                "--output-format",
                "json",
            ],
            cwd=crate_dir,
        )

    # 2. Index the JSON files
    print("\n--- Step 2: Building the lookup index ---")
    json_files = sorted((crate_dir / "target" / "doc").glob("*.json"))
    if not json_files:
        print(f"No rustdoc JSON found in {crate_dir / 'target' / 'doc'}")
        sys.exit(1)

    cmd = [
        sys.executable,
        "-m",
        "rustdoc_lookup.cli",
    ]
    if args.config:
        cmd.extend(["--config", args.config])
    cmd.extend(["build", *[str(f) for f in json_files], "--output", args.output])
    if args.workers is not None:
        cmd.extend(["--workers", str(args.workers)])

    run_command(cmd)

    print(f"\nSUCCESS: Index written to {args.output}")


if __name__ == "__main__":
    main()
