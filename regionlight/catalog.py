"""Lexer and formatter alias lists, fetched once and cached.

The lists feed the constrained prompts of a highlight request.
A catalog object is meant to live as long as the workflow that owns it.
"""

from __future__ import annotations

import logging

from .errors import CatalogUnavailable
from .oracle import Oracle

logger = logging.getLogger(__name__)

LIST_LEXERS_SCRIPT = """\
from pygments.lexers import get_all_lexers
print(' '.join(alias for _name, aliases, _files, _mimes in get_all_lexers() for alias in aliases))
"""

LIST_FORMATTERS_SCRIPT = """\
from pygments.formatters import get_all_formatters
print(' '.join(alias for formatter in get_all_formatters() for alias in formatter.aliases))
"""


class ComponentCatalog:
    """Memoized alias sets for every lexer and formatter the library knows."""

    def __init__(self, oracle: Oracle) -> None:
        self.oracle = oracle
        self._lexers: frozenset[str] | None = None
        self._formatters: frozenset[str] | None = None

    def _fetch(self, kind: str, script: str) -> frozenset[str]:
        aliases = frozenset(self.oracle.tokens(script))
        if not aliases:
            logger.warning("highlighting library returned no %s", kind)
            raise CatalogUnavailable(kind)
        logger.debug("catalog loaded %d %s", len(aliases), kind)
        return aliases

    def list_lexers(self) -> frozenset[str]:
        if self._lexers is None:
            self._lexers = self._fetch("lexers", LIST_LEXERS_SCRIPT)
        return self._lexers

    def list_formatters(self) -> frozenset[str]:
        if self._formatters is None:
            self._formatters = self._fetch("formatters", LIST_FORMATTERS_SCRIPT)
        return self._formatters
