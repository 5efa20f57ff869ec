"""Command-line interface for langref."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Callable, Sequence

from langref.anchors import find_broken_links, validate_anchors
from langref.config import LANGREF_LOG_LEVEL, LANGREF_TOC_DEPTH
from langref.exceptions import LangrefError
from langref.ingestion import IndexOptions, apply_filters
from langref.loader import load_document
from langref.output_formatter import format_document, render
from langref.parser import parse
from langref.schemas import Document
from langref.sections import search
from langref.utils.logging_config import configure_logging

logger = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging("DEBUG" if args.verbose else LANGREF_LOG_LEVEL)

    try:
        return args.handler(args)
    except LangrefError as exc:
        logger.error("Command failed", extra={"command": args.command, "error": str(exc)})
        print(f"error: {exc}", file=sys.stderr)
        return 1


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--sections", default="", help="Comma-separated section titles or anchors to filter")
    common.add_argument("--filter-mode", choices=("include", "exclude"), default="exclude")
    common.add_argument("--languages", default="", help="Comma-separated snippet languages to keep")
    common.add_argument("--toc-depth", type=int, default=LANGREF_TOC_DEPTH)
    common.add_argument("--no-cache", action="store_true", help="Always refetch remote documents")
    common.add_argument("-o", "--output", help="Write output to a file instead of stdout")
    common.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    parser = argparse.ArgumentParser(prog="langref", description="Index and render multi-language reference documents.")
    commands = parser.add_subparsers(dest="command", required=True)

    _add_command(commands, "toc", common, _cmd_toc, "Print the table of contents")
    render_cmd = _add_command(commands, "render", common, _cmd_render, "Print the document as anchored markdown")
    render_cmd.add_argument("--no-toc", action="store_true", help="Leave the table of contents out")
    _add_command(commands, "tree", common, _cmd_tree, "Print a summary and the section tree")
    _add_command(commands, "json", common, _cmd_json, "Print the parsed document as JSON")
    search_cmd = _add_command(
        commands, "search", common, _cmd_search, "Find a keyword in titles, prose, and snippets", leading=("keyword",)
    )
    search_cmd.add_argument("--case-sensitive", action="store_true")
    _add_command(commands, "check", common, _cmd_check, "Validate anchors and in-document links")
    return parser


def _add_command(
    commands: argparse._SubParsersAction,
    name: str,
    common: argparse.ArgumentParser,
    handler: Callable[[argparse.Namespace], int],
    help_text: str,
    leading: Sequence[str] = (),
) -> argparse.ArgumentParser:
    command = commands.add_parser(name, parents=[common], help=help_text, description=help_text)
    # Positionals given before the document source, e.g. `search KEYWORD SOURCE`.
    for positional in leading:
        command.add_argument(positional)
    command.add_argument("source", help="Path or http(s) URL of the markdown document")
    command.set_defaults(handler=handler)
    return command


def _options(args: argparse.Namespace) -> IndexOptions:
    return IndexOptions(
        include_toc=not getattr(args, "no_toc", False),
        toc_depth=args.toc_depth,
        section_filter_mode=args.filter_mode,
        sections=_split(args.sections),
        languages=_split(args.languages),
        use_cache=not args.no_cache,
    )


def _split(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _load(args: argparse.Namespace) -> Document:
    text = asyncio.run(load_document(args.source, use_cache=not args.no_cache))
    return parse(text)


def _emit(text: str, output: str | None) -> None:
    if not text.endswith("\n"):
        text += "\n"
    if output:
        Path(output).write_text(text, encoding="utf-8")
        logger.info("Wrote output", extra={"path": output})
    else:
        sys.stdout.write(text)


def _cmd_toc(args: argparse.Namespace) -> int:
    document = apply_filters(_load(args), _options(args))
    _emit(render(document, "toc", toc_depth=args.toc_depth), args.output)
    return 0


def _cmd_render(args: argparse.Namespace) -> int:
    options = _options(args)
    document = apply_filters(_load(args), options)
    _emit(render(document, "markdown", include_toc=options.include_toc, toc_depth=options.toc_depth), args.output)
    return 0


def _cmd_tree(args: argparse.Namespace) -> int:
    options = _options(args)
    document = apply_filters(_load(args), options)
    result = format_document(document, source=args.source, include_toc=False, toc_depth=options.toc_depth)
    _emit(result.summary + "\n\n" + result.sections_tree, args.output)
    return 0


def _cmd_json(args: argparse.Namespace) -> int:
    document = apply_filters(_load(args), _options(args))
    _emit(render(document, "json"), args.output)
    return 0


def _cmd_search(args: argparse.Namespace) -> int:
    document = apply_filters(_load(args), _options(args))
    hits = search(document, args.keyword, case_sensitive=args.case_sensitive)
    lines = []
    for hit in hits:
        # Preamble matches have no section anchor.
        where = f"#{hit.anchor}" if hit.anchor else "-"
        lines.append(f"{hit.line}\t{where}\t{hit.location}\t{hit.excerpt}")
    _emit("\n".join(lines), args.output)
    return 0 if hits else 1


def _cmd_check(args: argparse.Namespace) -> int:
    document = _load(args)
    validate_anchors(document)
    broken = find_broken_links(document)
    if broken:
        lines = [
            f"line {link.line}: broken link #{link.target}"
            + (f" (in #{link.section_anchor})" if link.section_anchor else "")
            for link in broken
        ]
        _emit("\n".join(lines), args.output)
        return 1
    _emit(f"ok: {len(document.anchors)} anchors, {document.snippet_count} snippets", args.output)
    return 0
