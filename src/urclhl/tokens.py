"""Token scopes, source positions, and the Token value type."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Scope(Enum):
    """Closed set of highlight categories. Values are the external labels."""

    COMMENT = "comment"
    NUMBER = "number"
    META = "meta"  # directives: @BITS, minreg, ...
    BUILT_IN = "built_in"  # registers and pointers: r1, $2, #3, m0, pc, sp
    SYMBOL = "symbol"  # labels: .loop
    LITERAL = "literal"  # relative refs and ports: %TEXT
    STRING = "string"
    KEYWORD = "keyword"  # opcode mnemonics
    NAME = "name"  # catch-all identifier


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position (end exclusive)."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A scanned span of source text.

    ``scope`` is None for fallback tokens: single characters no rule matched,
    such as whitespace and punctuation.
    """

    scope: Scope | None
    text: str
    span: Span
    children: tuple[Token, ...] = ()
