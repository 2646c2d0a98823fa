from __future__ import annotations

import unittest

from regionlight.errors import UnknownComponent
from regionlight.oracle import Oracle
from regionlight.resolver import FORMATTER, LEXER, ComponentRef, ComponentResolver


class _FixedOracle(Oracle):
    def __init__(self, answer: str) -> None:
        super().__init__(["unused"])
        self.answer = answer
        self.scripts: list[str] = []

    def query(self, script: str) -> str:
        self.scripts.append(script)
        return self.answer


class ComponentResolverTests(unittest.TestCase):
    def test_resolve_lexer_returns_module_and_class(self) -> None:
        oracle = _FixedOracle("pygments.lexers.python PythonLexer")
        ref = ComponentResolver(oracle).resolve("python3", LEXER)

        self.assertEqual(ref, ComponentRef(module="pygments.lexers.python", class_name="PythonLexer"))
        self.assertEqual(ref.import_line(), "from pygments.lexers.python import PythonLexer")
        self.assertIn("get_lexer_by_name('python3')", oracle.scripts[0])

    def test_resolve_formatter_uses_formatter_lookup(self) -> None:
        oracle = _FixedOracle("pygments.formatters.html HtmlFormatter")
        ref = ComponentResolver(oracle).resolve("html", FORMATTER)

        self.assertEqual(ref.class_name, "HtmlFormatter")
        self.assertIn("get_formatter_by_name('html')", oracle.scripts[0])

    def test_resolve_failure_raises_unknown_component(self) -> None:
        resolver = ComponentResolver(_FixedOracle(""))

        with self.assertRaises(UnknownComponent) as ctx:
            resolver.resolve("nope", LEXER)
        self.assertEqual((ctx.exception.kind, ctx.exception.alias), ("lexer", "nope"))

    def test_resolve_rejects_malformed_answers(self) -> None:
        resolver = ComponentResolver(_FixedOracle("only-one-token"))

        with self.assertRaises(UnknownComponent):
            resolver.resolve("html", FORMATTER)

    def test_resolve_rejects_unknown_kind(self) -> None:
        with self.assertRaises(ValueError):
            ComponentResolver(_FixedOracle("a b")).resolve("html", "style")

    def test_file_extension_strips_pattern_prefix_and_memoizes(self) -> None:
        oracle = _FixedOracle("*.png")
        resolver = ComponentResolver(oracle)

        self.assertEqual(resolver.file_extension("png"), "png")
        self.assertEqual(resolver.file_extension("png"), "png")
        self.assertEqual(len(oracle.scripts), 1)

    def test_file_extension_is_none_without_patterns(self) -> None:
        self.assertIsNone(ComponentResolver(_FixedOracle("")).file_extension("raw"))


if __name__ == "__main__":
    unittest.main()
