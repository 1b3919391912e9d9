"""CLI for normalizing plainyaml documents."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Iterable, Optional, Sequence

from plainyaml.emitter import Emitter
from plainyaml.parser import parse

YAML_SUFFIXES = ("*.yaml", "*.yml")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Parse plainyaml files and write them back in normalized form, keeping comments."
    )
    parser.add_argument(
        "input",
        nargs="?",
        default=".",
        help="Path to a YAML file or a directory of .yaml/.yml files (defaults to the current directory).",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        default=None,
        help="Directory where normalized files should be written (defaults to stdout).",
    )
    parser.add_argument(
        "--indent-size",
        type=int,
        default=2,
        help="Number of spaces per nesting level (default: 2).",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Write nothing and exit with status 1 if any file is not already normalized.",
    )
    return parser.parse_args(argv)


def collect_inputs(path: Path) -> list[Path]:
    if path.is_dir():
        files = sorted(p for pattern in YAML_SUFFIXES for p in path.glob(pattern) if p.is_file())
        if not files:
            raise FileNotFoundError(f"No .yaml or .yml files found in directory: {path}")
        return files
    if path.is_file():
        return [path]
    raise FileNotFoundError(f"Input path does not exist: {path}")


def format_document(text: str, emitter: Emitter) -> str:
    document = parse(text)
    normalized = emitter.emit(document)
    return normalized + "\n" if normalized else normalized


def normalize(source: Path, emitter: Emitter) -> tuple[str, str]:
    text = source.read_text(encoding="utf-8")
    try:
        return text, format_document(text, emitter)
    except Exception as exc:
        raise RuntimeError(f"Failed to parse {source}") from exc


def generate(files: Iterable[Path], output_dir: Optional[Path], indent_size: int) -> None:
    emitter = Emitter(config={"indent_size": indent_size})
    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)
    for source in files:
        _, normalized = normalize(source, emitter)
        if output_dir is None:
            sys.stdout.write(normalized)
            continue
        destination = output_dir / source.name
        destination.write_text(normalized, encoding="utf-8")
        try:
            display_path = destination.relative_to(Path.cwd())
        except ValueError:
            display_path = destination
        print(f"Wrote {display_path}")


def check(files: Iterable[Path], indent_size: int) -> int:
    emitter = Emitter(config={"indent_size": indent_size})
    changed = 0
    for source in files:
        text, normalized = normalize(source, emitter)
        if text != normalized:
            print(f"Would reformat {source}")
            changed += 1
    return 1 if changed else 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    files = collect_inputs(Path(args.input))
    if args.check:
        return check(files, indent_size=args.indent_size)
    output_dir = Path(args.output_dir) if args.output_dir else None
    generate(files, output_dir, indent_size=args.indent_size)
    return 0


if __name__ == "__main__":
    sys.exit(main())
