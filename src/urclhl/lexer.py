"""URCL scanner: converts source text into a flat stream of scoped tokens."""

from __future__ import annotations

import re

from urclhl.rules import URCL_RULES, Rule, RuleTable
from urclhl.tokens import Position, Span, Token

# (rule, start offset, end offset, nested matches); rule is None for fallback
_Match = tuple[Rule | None, int, int, list["_Match"]]
# Recorded body walk outcome: None if illegal, else (end, nested, nested matches to skip)
_Body = tuple[int, list["_Match"], int] | None


class Scanner:
    """Tokenize URCL source text by trying table rules in order at each position.

    Scanning never fails. Characters no rule matches become single-character
    tokens with no scope, so the token texts always concatenate back to the
    source.
    """

    def __init__(self, source: str, table: RuleTable = URCL_RULES) -> None:
        self._source = source
        self._table = table
        self._pos = 0
        self._line = 1
        self._line_start = 0
        self._tokens: list[Token] = []
        self._bodies: dict[int, dict[int, _Body]] = {}  # id(rule) -> position -> outcome

    def scan(self) -> list[Token]:
        """Scan the full source and return the token list."""
        while self._pos < len(self._source):
            found = self._match_first(self._table, self._pos)
            if found is None:
                found = (None, self._pos, self._pos + 1, [])
            self._emit(found)
        return self._tokens

    # ------------------------------------------------------------------
    # Matching
    # ------------------------------------------------------------------

    def _match_first(self, rules: RuleTable, pos: int) -> _Match | None:
        for rule in rules:
            found = self._match(rule, pos)
            if found is not None:
                return found
        return None

    def _match(self, rule: Rule, start: int) -> _Match | None:
        """Try ``rule`` anchored at ``start``; return its extent or None."""
        m = rule.begin.match(self._source, start)
        if m is None or m.end() == start:
            return None
        if rule.end is None:
            return (rule, start, m.end(), [])

        body = self._scan_body(rule, rule.end, m.end())
        if body is None:
            return None
        end, nested = body
        return (rule, start, end, nested)

    def _scan_body(
        self, rule: Rule, end_rx: re.Pattern[str], pos: int
    ) -> tuple[int, list[_Match]] | None:
        """Walk a delimited body from ``pos`` to its end offset, or None if illegal.

        The walk from any position is fixed, so every position it passes is
        recorded with the outcome. A later walk reaching one of them stops there.
        """
        seen = self._bodies.setdefault(id(rule), {})
        visited: list[tuple[int, int]] = []  # (position, nested matches before it)
        nested: list[_Match] = []
        end: int | None
        while True:
            if pos in seen:
                cached = seen[pos]
                if cached is None:
                    end = None
                else:
                    end, cached_nested, skip = cached
                    nested.extend(cached_nested[skip:])
                break
            if pos >= len(self._source):
                # Unterminated span runs to end of input
                end = len(self._source)
                break
            visited.append((pos, len(nested)))
            inner = self._match_first(rule.contains, pos)
            if inner is not None:
                nested.append(inner)
                pos = inner[2]
                continue
            e = end_rx.match(self._source, pos)
            if e is not None:
                end = e.start() if rule.exclude_end else e.end()
                break
            if rule.illegal is not None and rule.illegal.match(self._source, pos):
                end = None
                break
            pos += 1

        for p, skip in visited:
            seen[p] = None if end is None else (end, nested, skip)
        if end is None:
            return None
        return end, nested

    # ------------------------------------------------------------------
    # Token construction
    # ------------------------------------------------------------------

    def _position_at(self, offset: int) -> Position:
        """Position of ``offset``, which must not precede the cursor."""
        newlines = self._source.count("\n", self._pos, offset)
        if newlines:
            line_start = self._source.rfind("\n", self._pos, offset) + 1
        else:
            line_start = self._line_start
        return Position(self._line + newlines, offset - line_start + 1, offset)

    def _build(self, found: _Match) -> Token:
        rule, start, end, nested = found
        children = tuple(
            self._build(n) for n in nested if n[0] is not None and n[0].scope is not None
        )
        span = Span(self._position_at(start), self._position_at(end))
        scope = rule.scope if rule is not None else None
        return Token(scope, self._source[start:end], span, children)

    def _emit(self, found: _Match) -> Token:
        tok = self._build(found)
        self._tokens.append(tok)
        end = tok.span.end
        self._pos = end.offset
        self._line = end.line
        self._line_start = end.offset - end.column + 1
        return tok


def scan(source: str, table: RuleTable = URCL_RULES) -> list[Token]:
    """Scan ``source`` with ``table`` and return the token list."""
    return Scanner(source, table).scan()


def tokenize(source: str) -> list[Token]:
    """Convenience function: scan URCL source text and return token list."""
    return scan(source)
