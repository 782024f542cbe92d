"""CLI entry point: python -m webclip (--url URL | --file PATH | -) [options]"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.panel import Panel

from webclip import settings
from webclip.items import WebClip
from webclip.query import FetchError, extract, fetch

logger = logging.getLogger(__name__)

_FORMATS = ("markdown", "json", "html", "text")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="webclip",
        description=(
            "Clip the readable article out of a web page.\n"
            "Reads a URL, a local HTML file, or HTML on stdin."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--url", metavar="URL",
                        help="Fetch and clip this URL")
    source.add_argument("--file", metavar="PATH",
                        help="Clip a local HTML file")
    source.add_argument("stdin", nargs="?", choices=["-"], default=None,
                        help="Read HTML from standard input")
    parser.add_argument("--format", choices=_FORMATS, default="markdown",
                        help="Output format (default: markdown)")
    parser.add_argument("--char-threshold", type=int,
                        default=settings.WRAPPER_CHAR_THRESHOLD, metavar="N",
                        help=(
                            "Minimum article length before the engine retries "
                            f"(default: {settings.WRAPPER_CHAR_THRESHOLD})"
                        ))
    parser.add_argument("--preserve-class", action="append", default=None,
                        metavar="CLS", dest="preserve_classes",
                        help="Class name to keep on extracted elements (repeatable)")
    parser.add_argument("--template", default=None, metavar="PATH",
                        help="Clip template file for markdown output")
    parser.add_argument("--out", default=None, metavar="FILE",
                        help="Write output to FILE instead of stdout")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        metavar="{DEBUG,INFO,WARNING,ERROR}",
                        help="Logging level (default: WARNING)")
    return parser


def _render(clip: WebClip, fmt: str, template: str | None) -> str:
    if fmt == "json":
        return json.dumps(clip.model_dump(), indent=2, ensure_ascii=False)
    if fmt == "html":
        return clip.content_html
    if fmt == "text":
        return clip.text_content
    return clip.to_markdown_document(template)


def _print_summary(clip: WebClip, console: Console) -> None:
    console.print(
        Panel.fit(
            f"[bold cyan]{clip.title or 'Untitled'}[/bold cyan]\n"
            f"URL:        [green]{clip.url or '-'}[/green]\n"
            f"Byline:     {clip.byline or '-'}\n"
            f"Site:       {clip.site_name or '-'}\n"
            f"Published:  {clip.published_at or '-'}\n"
            f"Method:     [yellow]{clip.extraction_method}[/yellow]\n"
            f"Words:      {clip.word_count:,}\n"
            f"Read time:  {clip.reading_time_minutes} min",
            border_style="cyan",
            title="[bold]Clip[/bold]",
        ),
    )


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    console = Console(stderr=True)

    if args.char_threshold < 0:
        console.print(f"[red]ERROR:[/red] --char-threshold must be >= 0, got {args.char_threshold}")
        return 1

    classes = (
        tuple(args.preserve_classes)
        if args.preserve_classes
        else settings.CLASSES_TO_PRESERVE
    )

    template: str | None = None
    try:
        if args.template:
            template = Path(args.template).read_text(encoding="utf-8")

        if args.url:
            clip = fetch(
                args.url,
                char_threshold=args.char_threshold,
                classes_to_preserve=classes,
            )
        else:
            if args.file:
                html = Path(args.file).read_text(encoding="utf-8", errors="replace")
            else:
                html = sys.stdin.read()
            clip = extract(html, char_threshold=args.char_threshold, classes_to_preserve=classes)
    except FetchError as exc:
        console.print(f"[red]ERROR:[/red] {exc}")
        return 1
    except OSError as exc:
        console.print(f"[red]ERROR:[/red] {exc}")
        return 1

    try:
        output = _render(clip, args.format, template)
    except ValueError as exc:
        console.print(f"[red]ERROR:[/red] {exc}")
        return 1

    _print_summary(clip, console)

    if args.out:
        try:
            Path(args.out).write_text(output + "\n", encoding="utf-8")
        except OSError as exc:
            console.print(f"[red]ERROR:[/red] Could not write {args.out}: {exc}")
            return 1
        logger.info("Wrote %s output to %s", args.format, args.out)
    else:
        sys.stdout.write(output + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
