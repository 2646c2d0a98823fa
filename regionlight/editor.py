"""External ``$EDITOR`` round trip for reworking generated code.

Returns an error message string instead of raising for UI-friendly handling.
"""

from __future__ import annotations

import os
import shlex
import subprocess
import tempfile
from pathlib import Path


def edit_text(text: str, suffix: str = ".py") -> tuple[str, str | None]:
    """Open ``text`` in ``$EDITOR`` and return ``(edited_text, error)``.

    On any failure the original text comes back together with a message.
    """
    editor_env = os.environ.get("EDITOR", "").strip()
    if not editor_env:
        return text, "Cannot edit: $EDITOR is not set."
    cmd = shlex.split(editor_env)
    if not cmd:
        return text, "Cannot edit: $EDITOR is empty."

    with tempfile.NamedTemporaryFile(
        "w", encoding="utf-8", prefix="regionlight-edit-", suffix=suffix, delete=False
    ) as handle:
        handle.write(text)
        target = Path(handle.name)
    try:
        proc = subprocess.run([*cmd, str(target)], check=False)
        if proc.returncode != 0:
            return text, f"Editor exited with status {proc.returncode}; code left unchanged."
        return target.read_text(encoding="utf-8"), None
    except Exception as exc:
        return text, f"Failed to launch editor: {exc}"
    finally:
        target.unlink(missing_ok=True)
