"""URCL language definition: the ordered lexical rule table."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import cache

from urclhl.tokens import Scope

# Opcode mnemonics recognized by the keyword rule (matched case-insensitively)
KEYWORDS: tuple[str, ...] = (
    # Core and basic instructions
    "add", "rsh", "lod", "str", "bge", "nor", "sub", "jmp", "mov", "nop", "imm", "lsh", "inc",
    "dec", "neg", "and", "or", "not", "xnor", "xor", "nand", "brl", "brg", "bre", "bne", "bod",
    "bev", "ble", "brz", "bnz", "brn", "brp", "psh", "pop", "cal", "ret", "hlt", "cpy", "brc",
    "bnc", "mlt", "div", "mod", "bsr", "bsl", "srs", "bss", "out", "in", "dw",
    # Complex instructions
    "sete", "setne", "setg", "setl", "setge", "setle", "setc", "setnc", "llod", "lstr", "sdiv",
    "sbrl", "sbrg", "sble", "ssetl", "ssetg", "ssetle",
)  # fmt: skip


@dataclass(frozen=True, slots=True)
class Rule:
    """One lexical category.

    A rule without ``end`` is atomic: its token is exactly the ``begin`` match.
    A rule with ``end`` is delimited: scanning continues from the ``begin``
    match until ``end`` matches, trying ``contains`` first at each position.
    If ``illegal`` matches before ``end``, the rule does not apply at all.
    """

    scope: Scope | None
    begin: re.Pattern[str]
    end: re.Pattern[str] | None = None
    illegal: re.Pattern[str] | None = None
    contains: tuple[Rule, ...] = ()
    exclude_end: bool = False


RuleTable = tuple[Rule, ...]


def _rx(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


BACKSLASH_ESCAPE = Rule(None, _rx(r"\\[\s\S]"))

LINE_COMMENT = Rule(Scope.COMMENT, _rx(r"//"), end=_rx(r"(?=\r?\n)|\Z"))
BLOCK_COMMENT = Rule(Scope.COMMENT, _rx(r"/\*"), end=_rx(r"\*/"))


def _string(quote: str) -> Rule:
    return Rule(
        Scope.STRING,
        _rx(re.escape(quote)),
        end=_rx(re.escape(quote)),
        illegal=_rx(r"\n"),
        contains=(BACKSLASH_ESCAPE,),
    )


@cache
def build_rule_table() -> RuleTable:
    """Return the URCL rule table in precedence order.

    Earlier rules shadow later ones at the same position, so every specific
    form (numbers, registers, labels, opcodes) precedes the name catch-all.
    """
    keywords = "|".join(KEYWORDS)
    return (
        LINE_COMMENT,
        BLOCK_COMMENT,
        Rule(Scope.NUMBER, _rx(r"[+-]?(?:0x[0-9a-f]+|0b[01]+|0o[0-7]+|[0-9]+)")),
        Rule(Scope.META, _rx(r"@\S+"), end=_rx(r"\s"), exclude_end=True),
        Rule(Scope.META, _rx(r"minreg|minheap|bits")),
        Rule(Scope.BUILT_IN, _rx(r"[$#rm][0-9]+|pc|sp")),
        Rule(Scope.SYMBOL, _rx(r"\.\S+")),
        Rule(Scope.LITERAL, _rx(r"%\S+")),
        _string('"'),
        _string("'"),
        # Trailing whitespace is part of the match; no check on the left side
        Rule(Scope.KEYWORD, _rx(rf"(?:{keywords})(?:\s|\Z)")),
        Rule(Scope.NAME, _rx(r"[A-Za-z0-9_]+")),
    )


URCL_RULES: RuleTable = build_rule_table()
