"""Minimal LSP server for URCL: semantic tokens only."""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL,
    SemanticTokens,
    SemanticTokensLegend,
    SemanticTokensParams,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from urclhl import __version__
from urclhl.lexer import scan
from urclhl.tokens import Scope, Token

# Scopes mapped onto standard LSP semantic token types, in legend order
TOKEN_TYPES: dict[Scope, str] = {
    Scope.COMMENT: "comment",
    Scope.NUMBER: "number",
    Scope.META: "macro",
    Scope.BUILT_IN: "variable",
    Scope.SYMBOL: "label",
    Scope.LITERAL: "enumMember",
    Scope.STRING: "string",
    Scope.KEYWORD: "keyword",
    Scope.NAME: "parameter",
}

LEGEND = SemanticTokensLegend(token_types=list(TOKEN_TYPES.values()), token_modifiers=[])

_TYPE_INDEX = {scope: i for i, scope in enumerate(TOKEN_TYPES)}

server = LanguageServer(
    "urclhl-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def _utf16_len(text: str) -> int:
    return len(text.encode("utf-16-le")) // 2


def encode_semantic_tokens(source: str, tokens: list[Token]) -> list[int]:
    """Encode scoped tokens as LSP relative semantic-token data.

    Each entry is (delta line, delta start, length, type index, modifiers).
    Tokens spanning several lines are split into one entry per line.
    """
    data: list[int] = []
    prev_line = 0
    prev_char = 0
    for tok in tokens:
        if tok.scope is None:
            continue
        type_index = _TYPE_INDEX[tok.scope]
        line = tok.span.start.line - 1
        line_start = tok.span.start.offset - tok.span.start.column + 1
        char = _utf16_len(source[line_start : tok.span.start.offset])
        for i, part in enumerate(tok.text.split("\n")):
            if i > 0:
                line += 1
                char = 0
            part = part.rstrip("\r")
            if not part:
                continue
            delta_line = line - prev_line
            delta_char = char - prev_char if delta_line == 0 else char
            data.extend((delta_line, delta_char, _utf16_len(part), type_index, 0))
            prev_line = line
            prev_char = char
    return data


def _semantic_tokens(ls: LanguageServer, uri: str) -> SemanticTokens:
    """Scan the current document text and encode it for the client."""
    source = ls.workspace.get_text_document(uri).source
    return SemanticTokens(data=encode_semantic_tokens(source, scan(source)))


@server.feature(TEXT_DOCUMENT_SEMANTIC_TOKENS_FULL, LEGEND)
def semantic_tokens_full(ls: LanguageServer, params: SemanticTokensParams) -> SemanticTokens:
    return _semantic_tokens(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
