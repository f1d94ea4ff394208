"""--debug token dump."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import TextIO

from urclhl.tokens import Token


def dump_tokens(tokens: Iterable[Token], *, file: TextIO | None = None) -> None:
    """Print one line per token to *file* (default stderr), children indented."""
    f = file if file is not None else sys.stderr
    for tok in tokens:
        _dump_token(tok, 0, f)


def _dump_token(tok: Token, depth: int, f: TextIO) -> None:
    start = tok.span.start
    scope = tok.scope.value if tok.scope is not None else "text"
    f.write(f"{'  ' * depth}{start.line}:{start.column} {scope} {tok.text!r}\n")
    for child in tok.children:
        _dump_token(child, depth + 1, f)
