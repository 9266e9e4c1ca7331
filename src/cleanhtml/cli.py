"""CLI entry point for cleanhtml."""

import logging
import sys
from dataclasses import dataclass, field
from typing import Optional

from .autop import autop
from .config import load_options
from .errors import CleanHTMLError
from .normalizer import change_quotes
from .options import CleanOptions
from .pipeline import CleanHTML


@dataclass
class CleanFlags:
    """Parsed cleanhtml flags."""
    enable: set[str] = field(default_factory=set)
    config: Optional[str] = None
    autop: bool = False
    no_br: bool = False
    plain_quotes: bool = False
    verbose: bool = False
    help: bool = False


OPTION_FLAGS = {f"--{name}": name for name in CleanOptions.names()}


def extract_flags(args: list[str]) -> tuple[CleanFlags, list[str]]:
    """Extract cleanhtml flags from args, return (flags, remaining_args)."""
    flags = CleanFlags()
    remaining = []

    i = 0
    while i < len(args):
        arg = args[i]
        if arg in OPTION_FLAGS:
            flags.enable.add(OPTION_FLAGS[arg])
            i += 1
        elif arg == "--config":
            if i + 1 < len(args):
                flags.config = args[i + 1]
                i += 2
            else:
                remaining.append(arg)
                i += 1
        elif arg == "--autop":
            flags.autop = True
            i += 1
        elif arg == "--no-br":
            flags.no_br = True
            i += 1
        elif arg == "--plain-quotes":
            flags.plain_quotes = True
            i += 1
        elif arg in ("--verbose", "-v"):
            flags.verbose = True
            i += 1
        elif arg in ("--help", "-h"):
            flags.help = True
            i += 1
        else:
            remaining.append(arg)
            i += 1

    return flags, remaining


def print_help() -> None:
    """Print cleanhtml help."""
    print("cleanhtml - Normalize pasted HTML into minimal semantic markup")
    print()
    print("Usage: cleanhtml [options] [FILE]")
    print()
    print("Reads FILE (or stdin when FILE is missing or '-') and writes the result to stdout.")
    print()
    print("Allowed tags (added to the default headings, paragraphs, bold, lists, hr, pre, code):")
    print("  --images               Allow <img src alt>")
    print("  --links                Allow <a href target>")
    print("  --italics              Allow <em> and <i>")
    print("  --table                Allow <table>, <tr>, <td>")
    print("  --strip                Remove every tag (overrides the options above)")
    print()
    print("Other options:")
    print("  --config <path>        Read options from a YAML file")
    print("                         (default: ./.cleanhtml.yaml, then ~/.config/cleanhtml/options.yaml)")
    print("  --autop                Only wrap blank-line separated text in paragraphs")
    print("  --no-br                With --autop, keep single newlines as they are")
    print("  --plain-quotes         Replace typographic quotes with ASCII quotes first")
    print("  --verbose, -v          Log pipeline details to stderr")
    print("  --help, -h             Show this help")
    print()
    print("Examples:")
    print("  cleanhtml pasted.html")
    print("  pbpaste | cleanhtml --links --images")
    print("  cleanhtml --autop --no-br notes.txt")


def read_input(path: Optional[str]) -> str:
    if path is None or path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8") as f:
        return f.read()


def run(args: Optional[list[str]] = None) -> int:
    """Run cleanhtml with the given arguments. Returns exit code."""
    if args is None:
        args = sys.argv[1:]

    flags, rest = extract_flags(args)

    if flags.help:
        print_help()
        return 0

    if len(rest) > 1:
        print(f"cleanhtml: unexpected arguments: {' '.join(rest[1:])}", file=sys.stderr)
        print("Try 'cleanhtml --help' for more information.", file=sys.stderr)
        return 1

    if flags.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(name)s: %(message)s",
            stream=sys.stderr,
        )

    try:
        text = read_input(rest[0] if rest else None)
        if flags.plain_quotes:
            text = change_quotes(text)

        if flags.autop:
            output = autop(text, insert_line_breaks=not flags.no_br)
        else:
            cleaner = CleanHTML(load_options(flags.config))
            cleaner.set_options({name: True for name in flags.enable})
            output = cleaner.clean(text)
    except (CleanHTMLError, OSError) as e:
        print(f"cleanhtml: {e}", file=sys.stderr)
        return 1

    sys.stdout.write(output)
    if output and not output.endswith("\n"):
        sys.stdout.write("\n")

    return 0


def main() -> None:
    """Main entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
