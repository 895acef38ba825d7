"""CLI entry point for the OneNote notebook statistics tool."""

import argparse
import logging
import os
import sys
import traceback
from pathlib import Path

from onenote_stats.converter.tabular import TabularExporter
from onenote_stats.errors import OneNoteStatsError
from onenote_stats.parser.hierarchy_xml import XmlHierarchyProvider
from onenote_stats.parser.notebook_dir import NotebookDirectoryProvider
from onenote_stats.stats.analyzer import HierarchyAnalyzer, HierarchyProvider
from onenote_stats.stats.location import DEFAULT_SEPARATOR
from onenote_stats.utils import default_output_path, validate_output_path

SOURCE_ENV_VAR = "ONENOTE_STATS_SOURCE"
EXIT_FAILURE = -1


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the onenote-stats CLI."""
    parser = argparse.ArgumentParser(
        prog="onenote-stats",
        description=(
            "Count the section groups, sections and pages of a OneNote "
            "notebook and dump its page list as UTF-16 TSV"
        ),
    )
    parser.add_argument("notebook", metavar="NotebookNickName", help="Notebook nickname")
    parser.add_argument(
        "output",
        metavar="OutputFilePath",
        nargs="?",
        help="Page list file to create (default: <NotebookNickName>.tsv)",
    )
    parser.add_argument(
        "-s",
        "--source",
        default=os.environ.get(SOURCE_ENV_VAR),
        help=(
            "OneNote hierarchy XML file, or a directory of local notebook "
            f"folders (default: ${SOURCE_ENV_VAR})"
        ),
    )
    parser.add_argument(
        "--separator",
        default="\t",
        help="Field separator for the page list (default: tab)",
    )
    parser.add_argument(
        "--path-separator",
        default=DEFAULT_SEPARATOR,
        help="Separator used in the Location column (default: backslash)",
    )
    parser.add_argument(
        "--24-hour",
        dest="clock24",
        action="store_true",
        help="Write timestamps with a 24-hour clock instead of the legacy 12-hour one",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging (very verbose)",
    )

    args = parser.parse_args(argv)

    # Configure logging
    if args.debug:
        log_level = logging.DEBUG
    elif args.verbose:
        log_level = logging.INFO
    else:
        log_level = logging.WARNING

    logging.basicConfig(
        level=log_level,
        format="%(levelname)s: %(message)s",
    )

    if not args.source:
        print(
            f"Error: no hierarchy source given (use --source or ${SOURCE_ENV_VAR})",
            file=sys.stderr,
        )
        return EXIT_FAILURE

    try:
        return _run(args)
    except OneNoteStatsError as e:
        print(f"Error: {e}", file=sys.stderr)
        logging.debug("Full traceback:", exc_info=True)
        return EXIT_FAILURE
    except Exception as e:
        _dump_exception_chain(e)
        return EXIT_FAILURE


def _run(args: argparse.Namespace) -> int:
    output = args.output or default_output_path(args.notebook)
    # Reject unusable output targets before touching the hierarchy
    output_path = validate_output_path(output)

    provider = open_provider(Path(args.source))
    analyzer = HierarchyAnalyzer.from_provider(
        provider, args.notebook, resolver_separator=args.path_separator
    )
    summary = analyzer.summary()

    print(f"Notebook    : {args.notebook}")
    print(f"SectionGroup: {summary.section_group_count}")
    print(f"Section     : {summary.section_count}")
    print(f"Page        : {summary.page_count}")

    records = analyzer.extract_pages()
    exporter = TabularExporter(
        separator=args.separator, clock=24 if args.clock24 else 12
    )
    exporter.write(records, output_path)
    print(f"DumpListFile: {output_path}")
    return 0


def open_provider(source: Path) -> HierarchyProvider:
    """Pick a provider for ``source``: a folder of notebooks or an XML file."""
    if source.is_dir():
        return NotebookDirectoryProvider(source)
    return XmlHierarchyProvider.from_file(source)


def _dump_exception_chain(exc: BaseException) -> None:
    """Print message, type and stack trace for ``exc`` and every cause."""
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        exc_type = type(current)
        print(file=sys.stderr)
        print("**** EXCEPTION ****", file=sys.stderr)
        print(current, file=sys.stderr)
        print(
            f"Exception: {exc_type.__module__}.{exc_type.__qualname__}",
            file=sys.stderr,
        )
        print("**** STACK TRACE ****", file=sys.stderr)
        print("".join(traceback.format_tb(current.__traceback__)), file=sys.stderr)
        current = current.__cause__ or current.__context__


if __name__ == "__main__":
    sys.exit(main())
