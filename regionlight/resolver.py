"""Map lexer/formatter aliases to importable module and class names."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .errors import UnknownComponent
from .oracle import Oracle, literal

logger = logging.getLogger(__name__)

LEXER = "lexer"
FORMATTER = "formatter"

_LOOKUPS = {
    LEXER: ("pygments.lexers", "get_lexer_by_name"),
    FORMATTER: ("pygments.formatters", "get_formatter_by_name"),
}


@dataclass(frozen=True)
class ComponentRef:
    """Importable implementation of a lexer or formatter."""

    module: str
    class_name: str

    def import_line(self) -> str:
        return f"from {self.module} import {self.class_name}"


class ComponentResolver:
    """Resolve aliases through the oracle's get-by-name lookups."""

    def __init__(self, oracle: Oracle) -> None:
        self.oracle = oracle
        self._extensions: dict[str, str | None] = {}

    def resolve(self, alias: str, kind: str) -> ComponentRef:
        """Return the implementing class of ``alias``.

        Raises ``UnknownComponent`` when the library cannot look the alias up.
        """
        if kind not in _LOOKUPS:
            raise ValueError(f"unknown component kind: {kind!r}")
        module, lookup = _LOOKUPS[kind]
        tokens = self.oracle.tokens(
            f"from {module} import {lookup}\n"
            f"obj = {lookup}({literal(alias)})\n"
            "print(type(obj).__module__, type(obj).__name__)\n"
        )
        if len(tokens) != 2:
            logger.debug("could not resolve %s %r: %r", kind, alias, tokens)
            raise UnknownComponent(kind, alias)
        return ComponentRef(module=tokens[0], class_name=tokens[1])

    def file_extension(self, formatter_alias: str) -> str | None:
        """Return the extension of the formatter's first filename pattern, if any."""
        if formatter_alias in self._extensions:
            return self._extensions[formatter_alias]
        pattern = self.oracle.query(
            "from pygments.formatters import get_formatter_by_name\n"
            f"formatter = get_formatter_by_name({literal(formatter_alias)})\n"
            "print(formatter.filenames[0] if formatter.filenames else '')\n"
        )
        # Patterns look like "*.png".
        extension = pattern[2:] if len(pattern) > 2 else None
        self._extensions[formatter_alias] = extension
        return extension
