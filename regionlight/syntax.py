"""Terminal rendering of code and result views.

Views are colorized in-process with Pygments, picking a lexer from the
view's syntax hint. Terminal control bytes in view text are neutralized
so printing a result cannot move the cursor or ring the bell.
"""

from __future__ import annotations

import re
from functools import lru_cache

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import TextLexer, get_lexer_by_name, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")

FALLBACK_STYLE = "monokai"


def read_text(data: bytes) -> str:
    """Decode bytes using tolerant encoding fallback order.

    Attempts UTF-8, UTF-8 with BOM, then latin-1, which accepts any byte.
    """
    for encoding in ("utf-8", "utf-8-sig"):
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    return data.decode("latin-1")


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


@lru_cache(maxsize=None)
def _normalize_style(style: str) -> str:
    try:
        get_style_by_name(style)
    except ClassNotFound:
        return FALLBACK_STYLE
    return style


@lru_cache(maxsize=None)
def _formatter_for_style(style: str) -> Terminal256Formatter:
    return Terminal256Formatter(style=_normalize_style(style))


def lexer_for_hint(syntax_hint: str | None):
    """Pick a lexer from an alias (``python``) or an extension (``html``, ``tex``)."""
    if not syntax_hint:
        return TextLexer()
    try:
        return get_lexer_by_name(syntax_hint)
    except ClassNotFound:
        pass
    try:
        return get_lexer_for_filename(f"view.{syntax_hint}")
    except ClassNotFound:
        return TextLexer()


def colorize_view(content: str, syntax_hint: str | None, style: str = FALLBACK_STYLE) -> str:
    """Return ANSI-colored ``content``; falls back to the sanitized plain text."""
    safe = sanitize_terminal_text(content)
    try:
        return highlight(safe, lexer_for_hint(syntax_hint), _formatter_for_style(style))
    except Exception:
        return safe
