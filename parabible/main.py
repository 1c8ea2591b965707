#!/usr/bin/env python3
"""
CLI interface for the parallel Bible reader.
"""

import argparse
import os
import shutil
import sys
import textwrap
from dataclasses import replace
from datetime import datetime
from itertools import zip_longest
from pathlib import Path
from typing import List

from dotenv import load_dotenv

from .config import load_settings
from .errors import ReaderError
from .reader import FetchingView, IdleView, ReadyView, create_reader
from .references import make_reference
from .utils.types import Column


def _column_lines(column: Column, width: int) -> List[str]:
    lines = [column.translation.name[:width], "-" * width]
    for entry in column.entries:
        text = entry.label + entry.content
        wrapped = textwrap.wrap(text, width=width) or [entry.label.strip()]
        lines.extend(wrapped)
    return lines


def paint_columns(columns, total_width: int) -> str:
    """
    Lay columns out side by side as plain text.

    Each column gets its width_percent share of total_width; right-to-left
    columns are right-aligned.
    """
    if not columns:
        return "(no translations selected)"

    widths = [max(8, total_width * c.width_percent // 100) for c in columns]
    blocks = [_column_lines(c, w) for c, w in zip(columns, widths)]
    rows = []
    for parts in zip_longest(*blocks, fillvalue=""):
        cells = [
            part.rjust(w) if c.rtl else part.ljust(w)
            for part, c, w in zip(parts, columns, widths)
        ]
        rows.append(" ".join(cells).rstrip())
    return "\n".join(rows)


def print_view(view) -> None:
    """Print whatever the current state has to show."""
    if isinstance(view, ReadyView):
        print(view.reference_label)
        print()
        print(paint_columns(view.columns, shutil.get_terminal_size((120, 40)).columns))
    elif isinstance(view, FetchingView):
        print(f"Loading {view.reference_label} ({view.selection_label})...")
    elif isinstance(view, IdleView):
        print(f"{view.reference_label} ({view.selection_label or 'no translations'})")
        if view.error_text:
            print(f"Error: {view.error_text}")


def print_help() -> None:
    print("Commands:")
    print("  /book <name>        - change book")
    print("  /chapter <n>        - change chapter")
    print("  /translations <a,b> - choose translations")
    print("  /list               - list translations and books")
    print("  /fetch              - load the current chapter")
    print("  /quit               - exit")


def interactive_mode(reader):
    """Run the interactive reading loop."""
    print("=" * 60)
    print("Parallel Bible Reader")
    print("=" * 60)
    print()
    print_help()
    print()
    print_view(reader.view())

    while True:
        try:
            user_input = input("reader> ").strip()
        except (KeyboardInterrupt, EOFError):
            print("\nGoodbye!")
            break

        if not user_input:
            continue

        cmd, _, arg = user_input.partition(" ")
        cmd = cmd.lower()
        arg = arg.strip()

        try:
            if cmd in ["/quit", "/exit", "/q"]:
                print("Goodbye!")
                break

            elif cmd == "/help":
                print_help()

            elif cmd == "/book":
                reader.set_book(arg)
                print_view(reader.view())

            elif cmd == "/chapter":
                reader.set_chapter(int(arg))
                print_view(reader.view())

            elif cmd == "/translations":
                reader.set_translations(arg.split(","))
                print_view(reader.view())

            elif cmd == "/list":
                print("\nTranslations:")
                for t in reader.list_translations():
                    print(f"  {t['short_name']:<6} {t['name']} ({t['direction']})")
                print("\nBooks:")
                print(textwrap.fill(", ".join(reader.list_books()), width=78, initial_indent="  ", subsequent_indent="  "))
                print()

            elif cmd in ["/fetch", "/f"]:
                print()
                print_view(reader.fetch())
                print()

            else:
                print(f"Unknown command: {user_input}")

        except ValueError as e:
            print(f"Error: {e}")


def single_fetch_mode(reader):
    """Fetch the configured chapter once, print it and exit."""
    view = reader.fetch()
    print_view(view)
    if isinstance(view, IdleView) and view.error_text:
        sys.exit(1)


def apply_args(settings, args):
    """Override settings with the flags that were actually given."""
    if args.book is not None or args.chapter is not None:
        settings = replace(settings, reference=make_reference(
            args.book if args.book is not None else settings.reference.book,
            args.chapter if args.chapter is not None else settings.reference.chapter,
        ))
    if args.translations:
        settings = replace(settings, translations=tuple(args.translations.split(",")))
    if args.api_url:
        settings = replace(settings, api_url=args.api_url)
    return settings


def main():
    """Main entry point."""
    # Load environment variables
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Read a chapter side by side in several translations",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("-b", "--book", type=str, help="Book name (default: Genesis)")
    parser.add_argument("-c", "--chapter", type=int, help="Chapter number (default: 1)")
    parser.add_argument(
        "-t", "--translations",
        type=str,
        help="Comma separated translation short names, e.g. UST,NET"
    )
    parser.add_argument("--api-url", type=str, help="Text API endpoint")
    parser.add_argument(
        "--once",
        action="store_true",
        help="Fetch and print the chapter, then exit (non-interactive mode)"
    )

    args = parser.parse_args()

    try:
        settings = apply_args(load_settings(), args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    # Create log directory per run unless one is configured
    if not settings.log_dir:
        logs_root = Path(os.getenv("PARABIBLE_LOGS_ROOT", "logs"))
        run_id = datetime.now().strftime("%Y%m%d-%H%M%S")
        settings = replace(settings, log_dir=str(logs_root / run_id))

    try:
        reader = create_reader(settings)
        if args.translations:
            reader.set_translations(settings.translations)
    except (ValueError, ReaderError, OSError) as e:
        print(f"Error creating reader: {e}", file=sys.stderr)
        sys.exit(1)

    # Run in appropriate mode
    if args.once:
        single_fetch_mode(reader)
    else:
        interactive_mode(reader)


if __name__ == "__main__":
    main()
