"""Editor collaborator surface consumed by the highlight workflow.

The workflow never touches buffers, windows or the clipboard directly.
Everything it needs from the editing environment goes through ``Host``.
"""

from __future__ import annotations

from collections.abc import Collection
from pathlib import Path
from typing import Protocol

CODE_VIEW = "*regionlight-code*"
RESULT_VIEW = "*regionlight-result*"


class Host(Protocol):
    def selection(self) -> str:
        """Currently selected text, ``""`` when nothing is selected."""
        ...

    def file_name(self) -> str | None:
        ...

    def mode_label(self) -> str:
        """Current language-mode label, e.g. ``"Python"``."""
        ...

    def source_handle(self) -> object:
        """Opaque identity of the buffer the selection came from."""
        ...

    def is_alive(self, handle: object) -> bool:
        ...

    def focus(self, handle: object) -> None:
        ...

    def prompt_choice(self, prompt: str, choices: Collection[str], default: str | None) -> str:
        """Ask the user to pick one of ``choices``, pre-filled with ``default``."""
        ...

    def open_view(self, name: str, content: str, syntax_hint: str | None) -> None:
        """Open or replace view ``name`` and show it."""
        ...

    def view_exists(self, name: str) -> bool:
        ...

    def view_text(self, name: str) -> str:
        ...

    def show_view(self, name: str) -> None:
        ...

    def close_view(self, name: str) -> None:
        ...

    def edit_view(self, name: str) -> str | None:
        """Let the user edit a view in place; returns an error message on failure."""
        ...

    def write_clipboard(self, text: str) -> bool:
        ...

    def ask_save_path(self, suggested: str) -> Path | None:
        """Ask where to save a result; ``None`` cancels."""
        ...

    def message(self, text: str) -> None:
        ...
