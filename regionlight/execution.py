"""Run generated highlighting scripts in an external interpreter.

The script goes through a temporary file that is always removed afterwards.
Raster-image formatters write their output next to the source instead of
into the result view.
"""

from __future__ import annotations

import logging
import subprocess
import tempfile
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from .errors import ExecutionFailed
from .oracle import default_interpreter_command
from .resolver import ComponentResolver

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = frozenset({"png", "gif", "jpg", "jpeg", "bmp"})
DEFAULT_IMAGE_STEM = "region"


@dataclass(frozen=True)
class TextResult:
    content: str

    def clipboard_text(self) -> str:
        return self.content


@dataclass(frozen=True)
class ImageFileResult:
    path: Path

    def clipboard_text(self) -> str:
        return str(self.path)


ExecutionResult = TextResult | ImageFileResult


class ExecutionAdapter:
    """Hand generated code to the interpreter and classify its output."""

    def __init__(
        self,
        resolver: ComponentResolver,
        command: Sequence[str] | None = None,
        output_dir: Path | None = None,
    ) -> None:
        self.resolver = resolver
        self.command = list(command) if command else default_interpreter_command()
        self.output_dir = output_dir

    def writes_image(self, formatter_alias: str) -> bool:
        """Whether ``formatter_alias`` produces raster-image bytes."""
        return self.resolver.file_extension(formatter_alias) in IMAGE_EXTENSIONS

    def image_path(self, source_name: str | None, extension: str) -> Path:
        stem = Path(source_name).name if source_name else DEFAULT_IMAGE_STEM
        output_dir = self.output_dir if self.output_dir is not None else Path.cwd()
        return output_dir / f"{stem}.{extension}"

    def _interpret(self, script_path: Path, stdout) -> subprocess.CompletedProcess[bytes]:
        with script_path.open("rb") as stdin:
            proc = subprocess.run(
                self.command,
                stdin=stdin,
                stdout=stdout,
                stderr=subprocess.PIPE,
                check=False,
            )
        if proc.returncode != 0:
            stderr = proc.stderr.decode("utf-8", errors="replace")
            logger.debug("interpreter exited %d: %s", proc.returncode, stderr.strip())
            raise ExecutionFailed(proc.returncode, stderr)
        return proc

    def run(self, code: str, formatter_alias: str, source_name: str | None = None) -> ExecutionResult:
        """Execute ``code`` and return its text output or the written image file."""
        extension = self.resolver.file_extension(formatter_alias)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            prefix="regionlight-",
            suffix=".py",
            delete=False,
        ) as handle:
            handle.write(code)
            script_path = Path(handle.name)

        try:
            if extension in IMAGE_EXTENSIONS:
                target = self.image_path(source_name, extension)
                try:
                    with target.open("wb") as image_file:
                        self._interpret(script_path, image_file)
                except ExecutionFailed:
                    target.unlink(missing_ok=True)
                    raise
                logger.debug("wrote %s output to %s", formatter_alias, target)
                return ImageFileResult(target)

            proc = self._interpret(script_path, subprocess.PIPE)
            return TextResult(proc.stdout.decode("utf-8", errors="replace"))
        finally:
            script_path.unlink(missing_ok=True)
