"""HTML renderer: converts a token stream into highlighted markup."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from urclhl.tokens import Token

DEFAULT_CLASS_PREFIX = "hljs-"


def render_fragment(tokens: Iterable[Token], class_prefix: str = DEFAULT_CLASS_PREFIX) -> str:
    """Render tokens as inline HTML, one ``<span>`` per scoped token."""
    return "".join(_render_token(tok, class_prefix) for tok in tokens)


def render_document(
    tokens: Iterable[Token],
    *,
    title: str | None = None,
    css_files: Sequence[str] = (),
    class_prefix: str = DEFAULT_CLASS_PREFIX,
) -> str:
    """Render tokens as a complete HTML document."""
    parts: list[str] = ["<!DOCTYPE html>\n", "<html>\n", "<head>\n"]
    parts.append('<meta charset="utf-8">\n')
    if title:
        parts.append(f"<title>{_escape(title)}</title>\n")
    for path in css_files:
        parts.append(f'<link rel="stylesheet" href="{_escape_attr(path)}">\n')
    parts.append("</head>\n")
    parts.append("<body>\n")
    parts.append('<pre><code class="hljs language-urcl">')
    parts.append(render_fragment(tokens, class_prefix))
    parts.append("</code></pre>\n")
    parts.append("</body>\n")
    parts.append("</html>\n")
    return "".join(parts)


def _render_token(tok: Token, class_prefix: str) -> str:
    if tok.scope is None:
        return _escape(tok.text)
    if tok.children:
        inner = _render_nested(tok, class_prefix)
    else:
        inner = _escape(tok.text)
    return f'<span class="{_escape_attr(class_prefix + tok.scope.value)}">{inner}</span>'


def _render_nested(tok: Token, class_prefix: str) -> str:
    """Render a token's text with its children wrapped in their own spans."""
    parts: list[str] = []
    base = tok.span.start.offset
    cursor = 0
    for child in tok.children:
        rel = child.span.start.offset - base
        parts.append(_escape(tok.text[cursor:rel]))
        parts.append(_render_token(child, class_prefix))
        cursor = rel + len(child.text)
    parts.append(_escape(tok.text[cursor:]))
    return "".join(parts)


# ---------------------------------------------------------------------------
# HTML escaping
# ---------------------------------------------------------------------------


_ENTITIES = {"&": "&amp;", "<": "&lt;", ">": "&gt;"}
_ATTR_ENTITIES = {**_ENTITIES, '"': "&quot;"}


def _escape(text: str, entities: dict[str, str] = _ENTITIES) -> str:
    """Replace markup characters, and anything outside ASCII with a hex reference."""
    return "".join(
        entities.get(ch) or (f"&#x{ord(ch):X};" if ord(ch) > 0x7F else ch) for ch in text
    )


def _escape_attr(text: str) -> str:
    return _escape(text, _ATTR_ENTITIES)
