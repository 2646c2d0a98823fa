"""Execution adapter tests against real interpreter subprocesses.

Most stub interpreters are tiny ``python -c`` programs. The binary-script
test imports Pygments in the child to check image bytes reach the file intact.
"""

from __future__ import annotations

import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from regionlight.codegen import generate
from regionlight.errors import ExecutionFailed
from regionlight.execution import ExecutionAdapter, ImageFileResult, TextResult
from regionlight.oracle import Oracle
from regionlight.resolver import ComponentRef, ComponentResolver
from regionlight.session import Session

ECHO_INTERPRETER = [sys.executable, "-c", "import sys; sys.stdout.write(sys.stdin.read())"]
FAILING_INTERPRETER = [sys.executable, "-c", "import sys; sys.stderr.write('boom\\n'); sys.exit(3)"]


class _ExtensionResolver(ComponentResolver):
    def __init__(self, extension: str | None) -> None:
        super().__init__(Oracle(["unused"]))
        self.extension = extension

    def file_extension(self, formatter_alias: str) -> str | None:
        return self.extension


class _TempFileSpy:
    def __init__(self) -> None:
        self.names: list[str] = []
        self._real = tempfile.NamedTemporaryFile

    def __call__(self, *args, **kwargs):
        handle = self._real(*args, **kwargs)
        self.names.append(handle.name)
        return handle


class ExecutionAdapterTests(unittest.TestCase):
    def test_text_formatter_returns_captured_stdout(self) -> None:
        adapter = ExecutionAdapter(_ExtensionResolver("html"), command=ECHO_INTERPRETER)
        code = "print('hello')\n"

        result = adapter.run(code, "html")

        self.assertEqual(result, TextResult(code))

    def test_image_formatter_writes_file_named_after_source(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            out_dir = Path(tmp)
            adapter = ExecutionAdapter(_ExtensionResolver("png"), command=ECHO_INTERPRETER, output_dir=out_dir)

            result = adapter.run("payload", "png", source_name="demo.py")

            self.assertIsInstance(result, ImageFileResult)
            self.assertTrue(str(result.path).endswith(".png"))
            self.assertEqual(result.path, out_dir / "demo.py.png")
            self.assertEqual(result.path.read_bytes(), b"payload")

    def test_image_without_source_name_uses_default_stem(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            adapter = ExecutionAdapter(_ExtensionResolver("gif"), command=ECHO_INTERPRETER, output_dir=Path(tmp))

            result = adapter.run("x", "gif")

            self.assertEqual(result.path.name, "region.gif")

    def test_temporary_script_is_removed_after_success(self) -> None:
        spy = _TempFileSpy()
        adapter = ExecutionAdapter(_ExtensionResolver(None), command=ECHO_INTERPRETER)

        with mock.patch("regionlight.execution.tempfile.NamedTemporaryFile", side_effect=spy):
            adapter.run("x = 1\n", "raw")

        self.assertEqual(len(spy.names), 1)
        self.assertTrue(spy.names[0].endswith(".py"))
        self.assertFalse(Path(spy.names[0]).exists())

    def test_failure_raises_and_still_removes_temporary_script(self) -> None:
        spy = _TempFileSpy()
        adapter = ExecutionAdapter(_ExtensionResolver("html"), command=FAILING_INTERPRETER)

        with mock.patch("regionlight.execution.tempfile.NamedTemporaryFile", side_effect=spy):
            with self.assertRaises(ExecutionFailed) as ctx:
                adapter.run("raise SystemExit(3)\n", "html")

        self.assertEqual(ctx.exception.returncode, 3)
        self.assertIn("boom", ctx.exception.stderr)
        self.assertFalse(Path(spy.names[0]).exists())

    def test_failed_image_run_leaves_no_partial_image(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            adapter = ExecutionAdapter(_ExtensionResolver("png"), command=FAILING_INTERPRETER, output_dir=Path(tmp))

            with self.assertRaises(ExecutionFailed):
                adapter.run("x", "png", source_name="demo.py")

            self.assertEqual(list(Path(tmp).iterdir()), [])

    def test_writes_image_follows_formatter_extension(self) -> None:
        self.assertTrue(ExecutionAdapter(_ExtensionResolver("png")).writes_image("png"))
        self.assertFalse(ExecutionAdapter(_ExtensionResolver("html")).writes_image("html"))
        self.assertFalse(ExecutionAdapter(_ExtensionResolver(None)).writes_image("raw"))


BYTES_FORMATTER_MODULE = '''
from pygments.formatter import Formatter


class MagicImageFormatter(Formatter):
    def __init__(self, **options):
        super().__init__(**options)
        self.encoding = "latin1"

    def format(self, tokensource, outfile):
        for _token in tokensource:
            pass
        outfile.write(b"\\x89PNG\\r\\n\\x1a\\nfake-image-bytes")
'''


class BinaryScriptTests(unittest.TestCase):
    def test_generated_image_script_writes_raw_bytes(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            Path(tmp, "magic_image.py").write_text(BYTES_FORMATTER_MODULE, encoding="utf-8")
            interpreter = [sys.executable, "-c", f"import sys; sys.path.insert(0, {tmp!r}); exec(sys.stdin.read())"]
            session = Session(
                source_identity="buf",
                selected_text="print('x')\n",
                lexer_ref=ComponentRef("pygments.lexers.python", "PythonLexer"),
                formatter_ref=ComponentRef("magic_image", "MagicImageFormatter"),
            )
            out_dir = Path(tmp, "out")
            out_dir.mkdir()
            adapter = ExecutionAdapter(_ExtensionResolver("png"), command=interpreter, output_dir=out_dir)

            result = adapter.run(generate(session, binary_output=True), "png", source_name="demo.py")

            data = result.path.read_bytes()
            self.assertTrue(data.startswith(b"\x89PNG"))
            self.assertEqual(data, b"\x89PNG\r\n\x1a\nfake-image-bytes")


if __name__ == "__main__":
    unittest.main()
