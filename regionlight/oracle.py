"""Query the highlighting library through short scripts run in a subprocess.

Every question is a tiny Python program piped to the configured interpreter.
The answer is whatever it prints: space-joined tokens or an empty line.
Spawn errors and non-zero exits are both reported as an empty answer.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from collections.abc import Sequence

logger = logging.getLogger(__name__)


def default_interpreter_command() -> list[str]:
    """Interpreter argv that reads a program from stdin."""
    return [sys.executable, "-"]


def literal(value: str) -> str:
    """Embed ``value`` as a Python string literal inside an oracle script."""
    return repr(value)


class Oracle:
    """Black-box highlighting library reached through an interpreter process."""

    def __init__(self, command: Sequence[str] | None = None) -> None:
        self.command = list(command) if command else default_interpreter_command()

    def query(self, script: str) -> str:
        """Run ``script`` and return its stripped stdout, or ``""`` on any failure."""
        try:
            proc = subprocess.run(
                self.command,
                input=script,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except Exception as exc:
            logger.debug("oracle spawn failed for %r: %s", self.command, exc)
            return ""
        if proc.returncode != 0:
            logger.debug("oracle exited %d: %s", proc.returncode, proc.stderr.strip())
            return ""
        return proc.stdout.strip()

    def tokens(self, script: str) -> list[str]:
        return self.query(script).split()
