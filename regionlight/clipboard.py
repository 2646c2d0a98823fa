"""Best-effort clipboard writes through platform copy tools.

Result views and image paths are copied by piping them to the first copy
tool found on ``PATH``. A missing or failing tool is never an error.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys

logger = logging.getLogger(__name__)

LINUX_COPY_TOOLS: tuple[tuple[str, ...], ...] = (
    ("wl-copy",),
    ("xclip", "-selection", "clipboard"),
    ("xsel", "--clipboard", "--input"),
)


def clipboard_commands(platform: str = sys.platform, os_name: str = os.name) -> list[list[str]]:
    """Copy-tool argvs to try, in order, for the given platform."""
    if platform == "darwin":
        return [["pbcopy"]]
    if os_name == "nt":
        return [["clip"]]
    return [list(tool) for tool in LINUX_COPY_TOOLS]


def copy_text_to_clipboard(text: str) -> bool:
    """Copy ``text`` with the first available tool; ``False`` when none worked."""
    if not text:
        return False

    for command in clipboard_commands():
        if shutil.which(command[0]) is None:
            continue
        try:
            proc = subprocess.run(command, input=text, text=True, capture_output=True, check=False)
        except OSError as exc:
            logger.debug("clipboard tool %s failed to start: %s", command[0], exc)
            continue
        if proc.returncode == 0:
            return True
        logger.debug("clipboard tool %s exited %d", command[0], proc.returncode)
    return False
