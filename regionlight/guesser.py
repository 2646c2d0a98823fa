"""Best-effort lexer alias guessing for a text sample.

Strategies run in order and the first non-empty answer wins:
content sniffing, the host's language-mode label, then the file name.
When every strategy comes up empty the plain ``text`` lexer is used.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable

from .oracle import Oracle, literal

logger = logging.getLogger(__name__)

DEFAULT_LEXER = "text"

_MODE_SUFFIX_RE = re.compile(r"[-\s]*mode$")

GuessStrategy = Callable[[str, str, str | None], str]


def normalize_mode_label(label: str) -> str:
    """Turn a host mode label such as ``"Emacs-Lisp mode"`` into a lexer alias."""
    label = _MODE_SUFFIX_RE.sub("", label.strip().lower())
    return "-".join(label.split())


class NameGuesser:
    """Ordered chain of fallible guessing strategies backed by the oracle."""

    def __init__(self, oracle: Oracle) -> None:
        self.oracle = oracle
        self.strategies: tuple[tuple[str, GuessStrategy], ...] = (
            ("content", self._from_content),
            ("mode", self._from_mode_label),
            ("filename", self._from_file_name),
        )

    def _first_alias(self, script: str) -> str:
        tokens = self.oracle.tokens(script)
        return tokens[0] if tokens else ""

    def _from_content(self, sample: str, mode_label: str, file_name: str | None) -> str:
        if not sample.strip():
            return ""
        alias = self._first_alias(
            "from pygments.lexers import guess_lexer\n"
            f"print(guess_lexer({literal(sample)}).aliases[0])\n"
        )
        # guess_lexer answers TextLexer when nothing scores; let later strategies try.
        return "" if alias == DEFAULT_LEXER else alias

    def _from_mode_label(self, sample: str, mode_label: str, file_name: str | None) -> str:
        name = normalize_mode_label(mode_label)
        if not name:
            return ""
        return self._first_alias(
            "from pygments.lexers import get_lexer_by_name\n"
            f"print(get_lexer_by_name({literal(name)}).aliases[0])\n"
        )

    def _from_file_name(self, sample: str, mode_label: str, file_name: str | None) -> str:
        if not file_name:
            return ""
        return self._first_alias(
            "from pygments.lexers import get_lexer_for_filename\n"
            f"print(get_lexer_for_filename({literal(file_name)}).aliases[0])\n"
        )

    def guess_lexer(self, sample: str, mode_label: str = "", file_name: str | None = None) -> str:
        """Return a usable lexer alias; never raises."""
        for name, strategy in self.strategies:
            try:
                alias = strategy(sample, mode_label, file_name)
            except Exception:
                logger.debug("lexer guess strategy %s raised", name, exc_info=True)
                continue
            if alias:
                logger.debug("lexer guess strategy %s answered %s", name, alias)
                return alias
            logger.debug("lexer guess strategy %s had no answer", name)
        return DEFAULT_LEXER
