"""
Command-line interface for compiling and querying synonym dictionaries.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .dictionary import SynonymDictionary
from .exceptions import SynonymGraphError
from .matcher import SynonymFilter, SynonymGraphFilter, with_positions
from .models import WORD_SEPARATOR
from .synonym_map import SynonymMap
from .tokenizer import WhitespaceTokenizer
from .validator import validate_dictionary


def main(argv: Optional[list] = None) -> int:
    """Main entry point for the synonym-graph CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return args.func(args)
    except FileNotFoundError as e:
        print(f"\n  [ERROR] {e}")
        return 1
    except SynonymGraphError as e:
        print(f"\n  [ERROR] {e}")
        return 1


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="synonym-graph",
        description="Synonym dictionary compiler and token-graph matcher",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s (synonym-graph)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log loading details to stderr",
    )

    subparsers = parser.add_subparsers(title="commands", dest="command")

    # compile command
    compile_parser = subparsers.add_parser(
        "compile",
        help="Build a binary synonym map from dictionary files",
    )
    compile_parser.add_argument(
        "dicts",
        type=Path,
        nargs="+",
        help="Dictionary files, loaded in order",
    )
    compile_parser.add_argument(
        "--output", "-o",
        type=Path,
        required=True,
        help="Where to write the binary map",
    )
    compile_parser.add_argument(
        "--restrict-mode",
        action="store_true",
        help="Ignore directed (>>, =>, <<, <=) rules",
    )
    compile_parser.set_defaults(func=cmd_compile)

    # lookup command
    lookup_parser = subparsers.add_parser(
        "lookup",
        help="Print the synonyms of a word",
    )
    lookup_parser.add_argument("word", help="Word or space-separated phrase")
    _add_source_arguments(lookup_parser)
    lookup_parser.add_argument(
        "--tag",
        type=str,
        help="Semantic tag to disambiguate with, e.g. '(finance)'",
    )
    lookup_parser.set_defaults(func=cmd_lookup)

    # analyze command
    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Run the matcher over whitespace-tokenized text",
    )
    analyze_parser.add_argument("text", help="Text to analyze")
    _add_source_arguments(analyze_parser)
    analyze_parser.add_argument(
        "--flat",
        action="store_true",
        help="Emit a linear stream instead of a token graph",
    )
    analyze_parser.add_argument(
        "--ignore-case",
        action="store_true",
        help="Match case-insensitively",
    )
    analyze_parser.set_defaults(func=cmd_analyze)

    # validate command
    validate_parser = subparsers.add_parser(
        "validate",
        help="Report dictionary lines that would be skipped or ignored",
    )
    validate_parser.add_argument(
        "file",
        type=Path,
        help="Dictionary file",
    )
    validate_parser.add_argument(
        "--restrict-mode",
        action="store_true",
        help="Report directed rules as ignored",
    )
    validate_parser.set_defaults(func=cmd_validate)

    return parser


def _add_source_arguments(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--dict",
        type=Path,
        nargs="+",
        dest="dicts",
        help="Dictionary files to load",
    )
    source.add_argument(
        "--bin",
        type=Path,
        help="Binary map written by 'compile'",
    )


def _load_map(args: argparse.Namespace) -> SynonymMap:
    if args.bin:
        return SynonymMap.read(args.bin)
    dictionary = SynonymDictionary()
    for path in args.dicts:
        dictionary.load_dictionary(path)
    return SynonymMap.Builder().build(dictionary)


def _display(word: str) -> str:
    return word.replace(WORD_SEPARATOR, " ")


def cmd_compile(args: argparse.Namespace) -> int:
    """Handle compile command."""
    dictionary = SynonymDictionary(restrict_mode=args.restrict_mode)
    for path in args.dicts:
        applied = dictionary.load_dictionary(path)
        print(f"  Loaded {path} ({applied} lines)")

    synonyms = SynonymMap.Builder().build(dictionary)
    synonyms.dump(args.output)

    keys = len(synonyms.transducer) if synonyms.transducer is not None else 0
    print(f"\nWrote {args.output}")
    print(f"  Entries: {len(dictionary)}")
    print(f"  Keys with synonyms: {keys}")
    print(f"  Max horizontal context: {synonyms.max_horizontal_context}")
    return 0


def cmd_lookup(args: argparse.Namespace) -> int:
    """Handle lookup command."""
    synonyms = _load_map(args)
    words = synonyms.dictionary.get(args.word, semantic_tag=args.tag)
    if not words:
        print(f"No synonyms for {args.word!r}.")
        return 1
    for word in words:
        print(_display(word))
    return 0


def cmd_analyze(args: argparse.Namespace) -> int:
    """Handle analyze command."""
    synonyms = _load_map(args)
    tokens = WhitespaceTokenizer().token_stream(args.text)
    if synonyms.transducer is not None:
        filter_cls = SynonymFilter if args.flat else SynonymGraphFilter
        tokens = filter_cls(tokens, synonyms, ignore_case=args.ignore_case)

    print(f"{'term':<16} {'type':<8} {'pos':>4} {'start':>6} {'end':>6} {'posLen':>6}")
    print("-" * 52)
    for token, position in with_positions(tokens):
        print(
            f"{token.term:<16} {token.type:<8} {position:>4} "
            f"{token.start_offset:>6} {token.end_offset:>6} {token.position_length:>6}"
        )
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Handle validate command."""
    print(f"\nValidating {args.file}...")
    if not args.file.exists():
        print(f"\n  [ERROR] File not found: {args.file}")
        return 1

    with open(args.file, "r", encoding="utf-8-sig") as f:
        results = validate_dictionary(
            (line.rstrip("\r\n") for line in f), restrict_mode=args.restrict_mode
        )

    errors = [r for r in results if r.severity == "ERROR"]
    warnings = [r for r in results if r.severity == "WARNING"]
    for r in errors:
        print(f"  [ERROR] {r.rule_id} line {r.entity_id}: {r.message}")
    for r in warnings:
        print(f"  [WARN]  {r.rule_id} line {r.entity_id}: {r.message}")

    if errors:
        print(f"\nFound {len(errors)} error(s), {len(warnings)} warning(s)")
        return 1
    print(f"\nValidation passed ({len(warnings)} warning(s))")
    return 0


if __name__ == "__main__":
    sys.exit(main())
