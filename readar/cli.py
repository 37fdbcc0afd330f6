"""Command line interface for the ReadAR reading core."""

from __future__ import annotations

import argparse
import json
import logging
import os
from pathlib import Path
from typing import List, Optional

from . import __version__
from .reader import ReadingOptions, ReadingPlan, ReadingPlanner
from .text.layout import DEFAULT_LINE_WIDTH
from .text.normalize import LEVELS


def default_wpm() -> float:
    return float(os.getenv("READAR_WPM", "120"))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="readar",
        description=(
            "Segment a document into paragraphs and time a line-by-line reading "
            "highlight at a target reading speed."
        ),
    )
    parser.add_argument("--in", dest="input_path", type=Path, required=True, help="Input PDF/EPUB/text file or folder of .txt pages")
    parser.add_argument("--wpm", type=float, default=None, help="Reading speed in words per minute (default: $READAR_WPM or 120)")
    parser.add_argument("--width", type=int, default=DEFAULT_LINE_WIDTH, help="Line width in characters used for wrapping")
    parser.add_argument("--normalize", choices=LEVELS, default="standard", help="Text clean-up strength")
    parser.add_argument("--layout", choices=["text", "geometry"], default="text", help="PDF extraction mode")
    parser.add_argument("--pages", type=parse_pages, help="Zero-based pages to plan, e.g. 0,2-4")
    parser.add_argument("--paragraphs", dest="paragraph_file", type=Path, help="JSON file with hand-made paragraph splits per page")
    parser.add_argument("--at", type=float, metavar="SECONDS", help="Report the highlight position after this many seconds")
    parser.add_argument("--json", action="store_true", help="Print the plan as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only print warnings and errors")
    parser.add_argument("--version", action="version", version=f"readar {__version__}")
    return parser


def parse_pages(value: str) -> List[int]:
    pages: List[int] = []
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            if "-" in part:
                first, last = (int(bound) for bound in part.split("-", 1))
                if last < first:
                    raise ValueError
                pages.extend(range(first, last + 1))
            else:
                pages.append(int(part))
        except ValueError:
            raise argparse.ArgumentTypeError(f"Invalid page selection: {part}") from None
    return pages


def configure_logging(verbose: bool, quiet: bool) -> None:
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def create_options(namespace: argparse.Namespace) -> ReadingOptions:
    return ReadingOptions(
        input_path=namespace.input_path,
        words_per_minute=namespace.wpm if namespace.wpm is not None else default_wpm(),
        line_width=namespace.width,
        normalize=namespace.normalize,
        layout=namespace.layout,
        pages=namespace.pages,
        paragraph_file=namespace.paragraph_file,
    )


def render_plan(plan: ReadingPlan) -> str:
    out: List[str] = []
    for page in plan.pages:
        heading = f"Page {page.index + 1}"
        if page.title:
            heading += f": {page.title}"
        out.append(heading)
        for item in page.paragraphs:
            out.append(
                f"  Paragraph {item.paragraph.index + 1} "
                f"(grade {item.readability.flesch_kincaid_grade:.1f}, "
                f"{item.readability.total_words} words)"
            )
            for timing in item.lines:
                out.append(f"    {timing.start:7.2f}s +{timing.duration:4.2f}s  {timing.text}")
    paragraph_count = len(plan.paragraphs)
    out.append(
        f"{paragraph_count} paragraphs, {len(plan.schedule.timings)} lines, "
        f"{plan.total_seconds:.1f}s at {plan.words_per_minute:g} WPM"
    )
    return "\n".join(out)


def render_position(plan: ReadingPlan, elapsed: float) -> str:
    position = plan.schedule.locate(elapsed)
    if position is None:
        return "Nothing to read"
    state = "finished" if position.finished else f"{position.progress:.0%}"
    # Schedule indices run across the whole plan; the report numbers per page.
    paragraph = plan.paragraphs[position.paragraph_index].paragraph
    return (
        f"At {elapsed:.2f}s: page {paragraph.page_index + 1}, "
        f"paragraph {paragraph.index + 1}, "
        f"line {position.line_index + 1} ({state})"
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose, args.quiet)
    try:
        options = create_options(args)
        plan = ReadingPlanner().plan(options)
    except Exception as exc:  # pragma: no cover - CLI safety net
        logging.getLogger(__name__).error(str(exc))
        return 1

    if args.json:
        print(json.dumps(plan.to_dict(), indent=2))
    else:
        print(render_plan(plan))
    if args.at is not None:
        print(render_position(plan, args.at))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
