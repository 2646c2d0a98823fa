"""Synthesize the script that highlights a selection.

The generated text is shown to the user before it runs, so its layout is fixed:
entry-point import, lexer import, formatter import, the selection literal,
then one ``print(highlight(...))`` call. Image formatters get a leading
``import sys`` and write raw bytes to ``sys.stdout.buffer`` instead.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .session import Session

DEFAULT_TAB_WIDTH = 8
CODE_VARIABLE = "code"

# Runs of three or more quotes would close the literal early, and so would
# quotes right before the closing delimiter.
_QUOTE_RUN_RE = re.compile(r'"{3,}|"+$')


def escape_literal(text: str) -> str:
    """Escape ``text`` for use inside a ``\"\"\"``-delimited string literal."""
    escaped = text.replace("\\", "\\\\").replace("\r", "\\r").replace("\x00", "\\x00")
    return _QUOTE_RUN_RE.sub(lambda match: '\\"' * len(match.group()), escaped)


def generate(session: Session, tab_width: int = DEFAULT_TAB_WIDTH, binary_output: bool = False) -> str:
    """Return the highlighting script for a fully resolved session.

    With ``binary_output`` the formatter's bytes go straight to
    ``sys.stdout.buffer`` so image formats are written unmangled.
    """
    lexer_ref = session.lexer_ref
    formatter_ref = session.formatter_ref
    if lexer_ref is None or formatter_ref is None:
        raise ValueError("session lexer and formatter must be resolved before generating code")

    text = session.selected_text.expandtabs(max(1, tab_width))
    call = f"highlight({CODE_VARIABLE}, {lexer_ref.class_name}(), {formatter_ref.class_name}())"
    lines = ["import sys"] if binary_output else []
    lines += [
        "from pygments import highlight",
        lexer_ref.import_line(),
        formatter_ref.import_line(),
        "",
        f'{CODE_VARIABLE} = """{escape_literal(text)}"""',
        "",
        f"sys.stdout.buffer.write({call})" if binary_output else f"print({call})",
    ]
    return "\n".join(lines) + "\n"
