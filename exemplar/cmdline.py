from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

from w3lib.encoding import html_to_unicode

import exemplar
from exemplar.exceptions import ExemplarError, NotConfigured, UsageError
from exemplar.extractor import Extractor
from exemplar.render import TextRenderer
from exemplar.settings import Settings
from exemplar.utils.conf import arglist_to_dict
from exemplar.utils.log import configure_logging, log_exemplar_info

if TYPE_CHECKING:
    from collections.abc import Callable

    from exemplar.settings import BaseSettings

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("text", "jsonlines")


def _build_parser(settings: BaseSettings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="exemplar",
        usage="exemplar [options] <file>",
        description=(
            "Extract the records of a document that match the record annotated "
            "between (((BEGIN))) and (((END)))"
        ),
    )
    parser.add_argument(
        "file", metavar="FILE", help="marked-up document (use - for stdin)"
    )
    parser.add_argument(
        "-o",
        "--output",
        metavar="FILE",
        default="-",
        help="write extracted records to FILE (default: stdout)",
    )
    parser.add_argument(
        "-t",
        "--output-format",
        metavar="FORMAT",
        choices=OUTPUT_FORMATS,
        default="text",
        help=f"output format, one of {', '.join(OUTPUT_FORMATS)} (default: text)",
    )
    parser.add_argument(
        "--encoding",
        metavar="ENCODING",
        default=None,
        help="document encoding, detected from the document if omitted",
    )
    parser.add_argument(
        "--version", action="version", version=f"Exemplar {exemplar.__version__}"
    )

    group = parser.add_argument_group(title="Extraction Options")
    group.add_argument(
        "--no-exact-tables",
        dest="exact_tables",
        action="store_false",
        default=None,
        help="compare table tags by tag name only",
    )
    group.add_argument(
        "--start-tags",
        metavar="N",
        type=int,
        help=f"width of the record start anchor (default: {settings['START_TAGS']})",
    )
    group.add_argument(
        "--end-tags",
        metavar="N",
        type=int,
        help=f"width of the record end anchor (default: {settings['END_TAGS']})",
    )
    group.add_argument(
        "--best-effort",
        action="store_true",
        help="skip records that cannot be aligned instead of stopping",
    )

    group = parser.add_argument_group(title="Global Options")
    group.add_argument(
        "--logfile", metavar="FILE", help="log file. if omitted stderr will be used"
    )
    group.add_argument(
        "-L",
        "--loglevel",
        metavar="LEVEL",
        default=None,
        help=f"log level (default: {settings['LOG_LEVEL']})",
    )
    group.add_argument(
        "--nolog", action="store_true", help="disable logging completely"
    )
    group.add_argument(
        "-s",
        "--set",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="set/override setting (may be repeated)",
    )
    return parser


def process_options(settings: BaseSettings, opts: argparse.Namespace) -> None:
    try:
        settings.setdict(arglist_to_dict(opts.set), priority="cmdline")
    except ValueError:
        raise UsageError("Invalid -s value, use -s NAME=VALUE", print_help=False)

    if opts.logfile:
        settings.set("LOG_ENABLED", True, priority="cmdline")
        settings.set("LOG_FILE", opts.logfile, priority="cmdline")

    if opts.loglevel:
        settings.set("LOG_ENABLED", True, priority="cmdline")
        settings.set("LOG_LEVEL", opts.loglevel, priority="cmdline")

    if opts.nolog:
        settings.set("LOG_ENABLED", False, priority="cmdline")

    if opts.exact_tables is not None:
        settings.set("EXACT_TABLES", opts.exact_tables, priority="cmdline")
    if opts.start_tags is not None:
        settings.set("START_TAGS", opts.start_tags, priority="cmdline")
    if opts.end_tags is not None:
        settings.set("END_TAGS", opts.end_tags, priority="cmdline")
    if opts.best_effort:
        settings.set("BEST_EFFORT", True, priority="cmdline")


def read_document(path: str, encoding: str | None = None) -> str:
    """Read and decode a document, ``-`` being stdin.

    Without an explicit ``encoding`` the byte order mark or the ``<meta>``
    charset declaration of the document decides, falling back to utf-8.
    """
    try:
        body = sys.stdin.buffer.read() if path == "-" else Path(path).read_bytes()
    except OSError as e:
        raise UsageError(f"Cannot read {path}: {e.strerror}", print_help=False)
    content_type = f"charset={encoding}" if encoding else None
    return html_to_unicode(content_type, body)[1]


def _write_records(
    extractor: Extractor, output: TextIO, output_format: str
) -> None:
    renderer = TextRenderer(extractor.settings)
    for record in extractor.records():
        if output_format == "jsonlines":
            output.write(json.dumps(renderer.fields(record), ensure_ascii=False) + "\n")
        else:
            output.write(renderer.render(record) + "\n\n")


def run(settings: BaseSettings, opts: argparse.Namespace) -> None:
    log_exemplar_info(settings)
    document = read_document(opts.file, opts.encoding)
    extractor = Extractor(document, settings)
    if opts.output == "-":
        _write_records(extractor, sys.stdout, opts.output_format)
    else:
        with Path(opts.output).open("w", encoding="utf-8") as output:
            _write_records(extractor, output, opts.output_format)


def _run_print_help(
    parser: argparse.ArgumentParser, func: Callable[..., None], *a, **kw
) -> None:
    try:
        func(*a, **kw)
    except UsageError as e:
        if str(e):
            parser.error(str(e))
        if e.print_help:
            parser.print_help()
        sys.exit(2)


def execute(argv: list[str] | None = None, settings: BaseSettings | None = None) -> None:
    if argv is None:
        argv = sys.argv
    if settings is None:
        settings = Settings()

    parser = _build_parser(settings)
    opts = parser.parse_args(args=argv[1:])
    _run_print_help(parser, process_options, settings, opts)
    configure_logging(settings)

    exitcode = 0
    try:
        _run_print_help(parser, run, settings, opts)
    except (ExemplarError, NotConfigured) as e:
        logger.debug("Extraction failed", exc_info=True)
        sys.stderr.write(f"exemplar: error: {e}\n")
        exitcode = 1
    sys.exit(exitcode)


if __name__ == "__main__":
    execute()
