"""Pygments lexer for URCL, backed by the rule-table scanner."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from pygments.lexer import Lexer
from pygments.token import (
    Comment,
    Keyword,
    Name,
    Number,
    String,
    Text,
    _TokenType,
)

from urclhl.lexer import scan
from urclhl.tokens import Scope

SCOPE_TOKENS: dict[Scope, _TokenType] = {
    Scope.COMMENT: Comment,
    Scope.NUMBER: Number,
    Scope.META: Comment.Preproc,
    Scope.BUILT_IN: Name.Builtin,
    Scope.SYMBOL: Name.Label,
    Scope.LITERAL: Name.Constant,
    Scope.STRING: String,
    Scope.KEYWORD: Keyword,
    Scope.NAME: Name,
}


class UrclLexer(Lexer):
    """Pygments lexer for the URCL assembly language."""

    name = "URCL"
    aliases = ["urcl"]
    filenames = ["*.urcl"]
    mimetypes = ["text/x-urcl"]

    def __init__(self, **options: Any) -> None:
        # Leading and trailing blank lines are source text, keep them
        options.setdefault("stripnl", False)
        super().__init__(**options)

    def get_tokens_unprocessed(self, text: str) -> Iterator[tuple[int, _TokenType, str]]:
        for tok in scan(text):
            token_type = SCOPE_TOKENS[tok.scope] if tok.scope is not None else Text
            yield tok.span.start.offset, token_type, tok.text
