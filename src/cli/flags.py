"""
Flag lookup and value coercion shared by every script's argument resolver.

Public API
----------
find_flag_index(argv, name, short=None)
    Highest index at which either name occurs, or -1.
get_option(argv, flag_index, kind="number")
    Coerce the token after ``argv[flag_index]`` to the declared kind.
resolve_flags(argv, specs)
    Walk a FlagSpec table in order and return ``{dest: value}``.
"""
from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Literal, Optional, Union

__all__ = [
    "FlagSpec",
    "ResolutionError",
    "MissingOptionValue",
    "InvalidOptionValue",
    "MissingPositionalArgument",
    "find_flag_index",
    "has_flag",
    "get_option",
    "parse_number",
    "resolve_flags",
]

logger = logging.getLogger(__name__)

FlagKind = Literal["number", "string", "boolean"]
Number = Union[int, float]


class ResolutionError(Exception):
    """Base class for argument resolution failures."""


class MissingOptionValue(ResolutionError):
    def __init__(self, flag: str):
        super().__init__(f"option '{flag}' was not specified")
        self.flag = flag


class InvalidOptionValue(ResolutionError):
    def __init__(self, flag: str, token: str, expected: str = "a number"):
        super().__init__(f"option '{flag}' expects {expected}, got '{token}'")
        self.flag = flag
        self.token = token


class MissingPositionalArgument(ResolutionError):
    def __init__(self, message: str):
        super().__init__(message)


@dataclass(frozen=True)
class FlagSpec:
    """A declared flag: long name, optional short alias, kind and default.

    ``negate`` only applies to boolean flags and stores ``not True`` into
    ``dest``, which lets two flags drive one field from opposite sides.
    """

    dest: str
    name: str
    short: Optional[str] = None
    kind: FlagKind = "number"
    default: Any = None
    negate: bool = False
    help: str = ""

    @property
    def names(self) -> tuple[str, ...]:
        return (self.name,) if self.short is None else (self.short, self.name)


def has_flag(argv: Sequence[str], name: str, short: Optional[str] = None) -> bool:
    return name in argv or (short is not None and short in argv)


def _last_index(argv: Sequence[str], token: str) -> int:
    for idx in range(len(argv) - 1, -1, -1):
        if argv[idx] == token:
            return idx
    return -1


def find_flag_index(argv: Sequence[str], name: str, short: Optional[str] = None) -> int:
    """Return the highest index of ``name`` or ``short`` in ``argv``, -1 if absent.

    When both spellings are present the later-occurring one wins, so
    ``["-p", "1", "--num-pairs", "2"]`` locates ``--num-pairs`` at index 2.
    """
    found = _last_index(argv, name)
    if short is not None:
        found = max(found, _last_index(argv, short))
    return found


def parse_number(token: str, flag: str = "") -> Number:
    """Parse a numeric token; whole values come back as ``int``.

    ``"5"`` and ``"5.0"`` give ``5``, ``"5.1"`` gives ``5.1``.
    """
    try:
        value = float(token)
    except ValueError:
        raise InvalidOptionValue(flag, token) from None
    if math.isnan(value):
        raise InvalidOptionValue(flag, token)
    if math.isinf(value) or value % 1 != 0:
        return value
    return int(value)


def get_option(argv: Sequence[str], flag_index: int, kind: FlagKind = "number") -> Any:
    """Return the coerced value for the flag at ``flag_index``.

    Boolean flags are presence switches and never consume the next token.
    """
    if kind == "boolean":
        return True
    if flag_index < 0 or len(argv) <= flag_index + 1:
        flag = argv[flag_index] if 0 <= flag_index < len(argv) else "?"
        raise MissingOptionValue(flag)
    token = argv[flag_index + 1]
    if kind == "string":
        return token
    return parse_number(token, argv[flag_index])


def resolve_flags(argv: Sequence[str], specs: Sequence[FlagSpec]) -> dict[str, Any]:
    """Resolve every spec in ``specs`` against ``argv``.

    Specs are evaluated in table order; when two specs share a ``dest`` the
    later one overwrites the earlier one if its flag is present.
    """
    values: dict[str, Any] = {}
    for spec in specs:
        values.setdefault(spec.dest, spec.default)
        if not has_flag(argv, spec.name, spec.short):
            continue
        index = find_flag_index(argv, spec.name, spec.short)
        value = get_option(argv, index, spec.kind)
        if spec.negate:
            value = not value
        logger.debug("flag %s -> %s=%r", argv[index], spec.dest, value)
        values[spec.dest] = value
    return values
