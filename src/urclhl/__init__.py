"""URCL syntax highlighter."""

from __future__ import annotations

__version__ = "0.1.0"


def highlight(source: str, class_prefix: str = "hljs-") -> str:
    """Scan URCL source and render it as an HTML fragment."""
    from urclhl.lexer import scan
    from urclhl.render import render_fragment

    return render_fragment(scan(source), class_prefix)
