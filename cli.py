# Tandem v1.0.0
#!/usr/bin/env python3
"""
Tandem CLI

Command-line interface for comparing text, configuration and JSON files.
Exit status follows diff(1): 0 when the inputs match, 1 when they differ,
2 when a file cannot be read or parsed.
"""
import argparse
import json
import logging
import re
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from config import settings
from diffcore import ComparisonOptions, ComparisonSession, FormatType
from diffcore.json_tree import try_parse_json
from diffcore.models import LineType
from services import generate_diff_summary, navigate_to_path, search_in_diff

EXIT_SAME = 0
EXIT_DIFFERENT = 1
EXIT_ERROR = 2

_MARKERS = {
    LineType.ADDED: "+",
    LineType.REMOVED: "-",
    LineType.MODIFIED: "~",
}


def read_file(path: str) -> Optional[str]:
    """Read a UTF-8 file, reporting failures on stderr."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Error: could not read {path}: {e}", file=sys.stderr)
        return None


def build_options(args) -> ComparisonOptions:
    return ComparisonOptions(
        ignore_whitespace=args.ignore_whitespace,
        ignore_case=args.ignore_case,
        semantic_comparison=args.semantic,
        ignore_keys=args.ignore_key or [],
        ignore_paths=args.ignore_path or [],
        detect_array_moves=bool(args.array_key),
        array_key_field=args.array_key,
        format_type=FormatType(args.format) if args.format else None,
    )


def print_rows(result):
    """Print changed rows only, with line numbers from their own side."""
    for left, right in zip(result.left, result.right):
        if left.type == LineType.UNCHANGED:
            continue
        if left.type in _MARKERS:
            print(f"  {_MARKERS[left.type]} {left.line_number:>5} | {left.content}")
        if right.type in _MARKERS:
            print(f"  {_MARKERS[right.type]} {right.line_number:>5} | {right.content}")


def compare_files(args) -> int:
    """Compare two files and print the differences."""
    left_text = read_file(args.left)
    right_text = read_file(args.right)
    if left_text is None or right_text is None:
        return EXIT_ERROR

    session = ComparisonSession()
    result = session.enhanced_diff(
        left_text, right_text, build_options(args), left_name=args.left, right_name=args.right
    )

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False, default=str))
        return EXIT_DIFFERENT if result.has_differences else EXIT_SAME

    print(f"\nComparing: {args.left} vs {args.right} ({result.format_type})")
    print("=" * 60)

    if not result.has_differences:
        print("Files are identical")
    else:
        print(f"{result.additions} addition(s), {result.removals} removal(s):\n")
        print_rows(result)

        if result.structural_changes:
            print("\nStructural changes:")
            for change in result.structural_changes:
                detail = f"{change.from_} -> {change.to}" if change.from_ is not None else ""
                print(f"  {change.type.value:<13} {change.path}  {detail}".rstrip())

    print()
    print(generate_diff_summary(result))
    return EXIT_DIFFERENT if result.has_differences else EXIT_SAME


def search_files(args) -> int:
    """Diff two files, then search the displayed lines."""
    left_text = read_file(args.left)
    right_text = read_file(args.right)
    if left_text is None or right_text is None:
        return EXIT_ERROR

    result = ComparisonSession().enhanced_diff(left_text, right_text, left_name=args.left, right_name=args.right)

    if args.path:
        target = navigate_to_path(result, args.query)
        if target is None:
            print(f"Path not found: {args.query}")
            return EXIT_DIFFERENT
        row, side = target
        line = result.left[row] if side == "left" else result.right[row]
        print(f"{side}:{line.line_number}: {line.content}")
        return EXIT_SAME

    try:
        matches = search_in_diff(result, args.query, case_sensitive=args.case_sensitive, regex=args.regex)
    except re.error as e:
        print(f"Error: invalid pattern {args.query!r}: {e}", file=sys.stderr)
        return EXIT_ERROR

    for match in matches:
        line = result.left[match.line] if match.side == "left" else result.right[match.line]
        print(f"{match.side}:{line.line_number}:{match.column + 1}: {line.content}")

    print(f"\n{len(matches)} match(es)")
    return EXIT_SAME if matches else EXIT_DIFFERENT


def equal_files(args) -> int:
    """Check two JSON files for semantic equality."""
    documents = []
    for path in (args.left, args.right):
        text = read_file(path)
        if text is None:
            return EXIT_ERROR
        ok, value = try_parse_json(text)
        if not ok:
            print(f"Error: {path} is not valid JSON", file=sys.stderr)
            return EXIT_ERROR
        documents.append(value)

    equal = ComparisonSession().deep_equal(documents[0], documents[1], build_options(args))
    print("equal" if equal else "different")
    return EXIT_SAME if equal else EXIT_DIFFERENT


def add_option_arguments(parser):
    parser.add_argument("--format", choices=[f.value for f in FormatType], help="Force the input format")
    parser.add_argument("--ignore-whitespace", action="store_true", help="Collapse runs of whitespace")
    parser.add_argument("--ignore-case", action="store_true", help="Compare case-insensitively")
    parser.add_argument("--semantic", action="store_true", help='Treat "5" and 5, "true" and true as equal')
    parser.add_argument("--ignore-key", action="append", metavar="KEY", help="Ignore a JSON key (repeatable)")
    parser.add_argument("--ignore-path", action="append", metavar="PATH", help="Ignore a JSON path such as $.meta.* (repeatable)")
    parser.add_argument("--array-key", metavar="FIELD", help="Match array items by this field")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Tandem comparison CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # compare
    compare_parser = subparsers.add_parser("compare", help="Compare two files")
    compare_parser.add_argument("left", help="Left/original file")
    compare_parser.add_argument("right", help="Right/changed file")
    add_option_arguments(compare_parser)
    compare_parser.add_argument("--json", action="store_true", help="Print the result as JSON")

    # search
    search_parser = subparsers.add_parser("search", help="Search the diff of two files")
    search_parser.add_argument("left", help="Left/original file")
    search_parser.add_argument("right", help="Right/changed file")
    search_parser.add_argument("query", help="Text, pattern or JSON path to look for")
    search_parser.add_argument("--regex", action="store_true", help="Treat the query as a regular expression")
    search_parser.add_argument("--case-sensitive", action="store_true", help="Match case exactly")
    search_parser.add_argument("--path", action="store_true", help="Treat the query as a JSON path and jump to it")
    search_parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    # equal
    equal_parser = subparsers.add_parser("equal", help="Check two JSON files for semantic equality")
    equal_parser.add_argument("left", help="Left JSON file")
    equal_parser.add_argument("right", help="Right JSON file")
    add_option_arguments(equal_parser)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else settings.LOG_LEVEL,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if not args.command:
        parser.print_help()
        return EXIT_SAME

    try:
        if args.command == "compare":
            return compare_files(args)
        elif args.command == "search":
            return search_files(args)
        elif args.command == "equal":
            return equal_files(args)
    except ValidationError as e:
        print(f"Error: invalid options: {e}", file=sys.stderr)
        return EXIT_ERROR

    return EXIT_SAME


if __name__ == "__main__":
    sys.exit(main())
