"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from urclhl.lexer import scan
from urclhl.tokens import Scope, Token


@pytest.fixture
def lex():
    """Return a helper that scans source and returns the token list."""

    def _lex(source: str) -> list[Token]:
        return scan(source)

    return _lex


def assert_scopes(tokens: list[Token], expected: list[Scope | None]) -> None:
    """Assert that the token scopes match the expected list."""
    actual = [t.scope for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_texts(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token texts match the expected list."""
    actual = [t.text for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def scoped(tokens: list[Token]) -> list[Token]:
    """Return only tokens that carry a scope (drop whitespace/punctuation)."""
    return [t for t in tokens if t.scope is not None]
