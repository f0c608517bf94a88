"""Help text rendering and the help-request trigger."""
from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import NoReturn

from .flags import FlagSpec


class TextColors:
    Reset = "\x1b[0m"
    Bright = "\x1b[1m"
    Dim = "\x1b[2m"
    Underscore = "\x1b[4m"
    FgRed = "\x1b[31m"
    FgYellow = "\x1b[33m"


def wants_help(tokens: Sequence[str]) -> bool:
    """True when "help" occurs anywhere in the space-joined tokens.

    Deliberately loose: a value such as ``helpdesk`` also matches.
    """
    return "help" in " ".join(tokens)


def gen_help_message(description: str, usage: str, options: str, examples: str) -> str:
    c = TextColors
    return (
        f"{description}\n"
        f"\n"
        f"{c.Underscore}Usage:{c.Reset}\n"
        f"{usage.rstrip()}\n"
        f"\n"
        f"{c.Underscore}Options:{c.Reset}\n"
        f"    {c.Bright}--help{c.Reset}\t\t\tPrint this help message.\n"
        f"{options.rstrip()}\n"
        f"\n"
        f"{c.Underscore}Examples:{c.Reset}\n"
        f"{examples.rstrip()}\n"
    )


def options_block(specs: Sequence[FlagSpec], width: int = 24) -> str:
    """Render one aligned option line per flag spec."""
    lines = []
    for spec in specs:
        names = f"{spec.short}, {spec.name}" if spec.short else spec.name
        text = spec.help
        if spec.kind != "boolean" and spec.default is not None and "default" not in text:
            text = f"{text} (default: {spec.default})"
        lines.append(f"    {names:<{width}}{text}")
    return "\n".join(lines) + "\n"


def exit_with_help(help_message: str, code: int = 0, error: str | None = None) -> NoReturn:
    """Print ``error`` to stderr (if any) and help to stdout, then exit."""
    if error:
        print(error, file=sys.stderr)
    print(help_message)
    sys.exit(code)
