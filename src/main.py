"""
1) Read family tree records from a GEDCOM (.ged) or JSON file.
2) Optionally narrow them to the neighbourhood of one person.
3) Validate the data for cycles, impossible ages, and date ordering.
4) Compute the generational layout.
5) Write the layout as JSON.
"""

import argparse
import json
import logging
from pathlib import Path
import sys

from graph import build_graph, neighborhood
from layout import generate_layout, resolve_options
from models import LayoutOptions
from parsing import load_records
from validation import find_overlaps, validate_graph

MAX_SHOWN = 10


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="famlayout", description="Compute a generational family tree layout."
    )
    parser.add_argument("input", type=Path, help="GEDCOM (.ged) or JSON file")
    parser.add_argument(
        "-o", "--output", type=Path, help="where to write the layout JSON (default: stdout)"
    )
    parser.add_argument("--center", help="only lay out people near this person id")
    parser.add_argument("--radius", type=int, default=2, help="neighbourhood radius (default 2)")

    defaults = LayoutOptions()
    parser.add_argument("--h-gap", type=float, default=defaults.h_gap)
    parser.add_argument("--v-gap", type=float, default=defaults.v_gap)
    parser.add_argument("--card-width", type=float, default=defaults.card_width)
    parser.add_argument("--card-height", type=float, default=defaults.card_height)
    parser.add_argument("--spouse-gap", type=float, default=defaults.spouse_gap)
    parser.add_argument(
        "--max-parents", type=int, default=None, help="count only the first N parents per child"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log diagnostics")
    return parser


def options_from_args(args: argparse.Namespace) -> LayoutOptions:
    return LayoutOptions(
        h_gap=args.h_gap,
        v_gap=args.v_gap,
        card_width=args.card_width,
        card_height=args.card_height,
        spouse_gap=args.spouse_gap,
        max_parents=args.max_parents,
    )


def print_warnings(title: str, warnings: list[str]):
    if not warnings:
        print(f"  No {title} found", file=sys.stderr)
        return
    print(f"  Found {len(warnings)} {title}:", file=sys.stderr)
    for w in warnings[:MAX_SHOWN]:
        print(f"    - {w}", file=sys.stderr)
    if len(warnings) > MAX_SHOWN:
        print(f"    ... and {len(warnings) - MAX_SHOWN} more", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.ERROR,
        format="%(levelname)s %(name)s: %(message)s",
    )

    print(f"Reading records: {args.input}", file=sys.stderr)
    try:
        people, relationships = load_records(args.input)
    except (OSError, ValueError) as exc:
        print(f"Could not read {args.input}: {exc}", file=sys.stderr)
        return 1
    print(f"  Found {len(people)} persons and {len(relationships)} relationships", file=sys.stderr)

    if args.center is not None:
        try:
            people, relationships = neighborhood(people, relationships, args.center, args.radius)
        except ValueError as exc:
            print(str(exc), file=sys.stderr)
            return 1
        print(f"  Kept {len(people)} persons within {args.radius} of {args.center}", file=sys.stderr)

    print("Validating records...", file=sys.stderr)
    print_warnings("validation warnings", validate_graph(build_graph(people, relationships)))

    try:
        options = resolve_options(options_from_args(args))
    except (TypeError, ValueError) as exc:
        print(f"Invalid layout options: {exc}", file=sys.stderr)
        return 2

    print("Computing layout...", file=sys.stderr)
    layout = generate_layout(people, relationships, options)
    print_warnings("layout diagnostics", [d.message for d in layout.diagnostics])

    overlaps = find_overlaps(layout, options.card_width)
    if overlaps:
        print(f"  {len(overlaps)} overlapping card pairs", file=sys.stderr)

    payload = json.dumps(layout.to_dict(), indent=2)
    if args.output:
        args.output.write_text(payload + "\n", encoding="utf-8")
        print(f"Layout saved to {args.output}", file=sys.stderr)
    else:
        print(payload)

    print(
        f"Done! {len(layout.nodes)} nodes in {layout.generations} generations, "
        f"{layout.bounds.width:g} x {layout.bounds.height:g}",
        file=sys.stderr,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
