"""Terminal implementation of the editor collaborator.

The "buffer" is a file (or stdin) loaded by the CLI, views are printed
to stdout, prompts read from the keyboard when interactive.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Collection
from pathlib import Path
from typing import TextIO

from .clipboard import copy_text_to_clipboard
from .editor import edit_text
from .syntax import colorize_view, sanitize_terminal_text

STDIN_HANDLE = "<stdin>"
MAX_LISTED_CHOICES = 40


class TerminalHost:
    """``Host`` backed by a loaded text, stdout views, and line prompts."""

    def __init__(
        self,
        text: str,
        path: Path | None = None,
        mode_label: str = "",
        style: str = "monokai",
        no_color: bool = False,
        interactive: bool = False,
        echo_views: bool = True,
        out: TextIO | None = None,
        err: TextIO | None = None,
        input_func: Callable[[str], str] = input,
    ) -> None:
        self.text = text
        self.path = path
        self.label = mode_label
        self.style = style
        self.no_color = no_color
        self.interactive = interactive
        self.echo_views = echo_views
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self.input_func = input_func
        self.views: dict[str, tuple[str, str | None]] = {}

    def selection(self) -> str:
        return self.text

    def file_name(self) -> str | None:
        return self.path.name if self.path is not None else None

    def mode_label(self) -> str:
        return self.label

    def source_handle(self) -> object:
        return self.path if self.path is not None else STDIN_HANDLE

    def is_alive(self, handle: object) -> bool:
        if isinstance(handle, Path):
            return handle.exists()
        return handle == STDIN_HANDLE

    def focus(self, handle: object) -> None:
        pass

    def _list_choices(self, choices: Collection[str], prefix: str) -> None:
        matches = sorted(choice for choice in choices if choice.startswith(prefix))
        shown = matches[:MAX_LISTED_CHOICES]
        more = len(matches) - len(shown)
        suffix = f" (+{more} more)" if more > 0 else ""
        self.err.write(" ".join(shown) + suffix + "\n")

    def prompt_choice(self, prompt: str, choices: Collection[str], default: str | None) -> str:
        """Read a choice; ``?`` or ``prefix?`` lists matching choices.

        Non-interactive hosts answer with the default.
        """
        if not self.interactive:
            return default or ""
        while True:
            try:
                answer = self.input_func(prompt).strip()
            except EOFError:
                return default or ""
            if not answer:
                return default or ""
            if answer.endswith("?"):
                self._list_choices(choices, answer[:-1])
                continue
            if answer in choices:
                return answer
            self.err.write(f"No match for {answer!r}; type '?' to list choices.\n")

    def _render(self, name: str) -> None:
        if not self.echo_views:
            return
        content, hint = self.views[name]
        self.out.write(f"--- {name} ---\n")
        if self.no_color:
            body = sanitize_terminal_text(content)
        else:
            body = colorize_view(content, hint, self.style)
        self.out.write(body)
        if body and not body.endswith("\n"):
            self.out.write("\n")
        self.out.flush()

    def open_view(self, name: str, content: str, syntax_hint: str | None) -> None:
        self.views[name] = (content, syntax_hint)
        self._render(name)

    def view_exists(self, name: str) -> bool:
        return name in self.views

    def view_text(self, name: str) -> str:
        return self.views[name][0]

    def show_view(self, name: str) -> None:
        self._render(name)

    def close_view(self, name: str) -> None:
        self.views.pop(name, None)

    def edit_view(self, name: str) -> str | None:
        content, hint = self.views[name]
        edited, error = edit_text(content)
        if error is None:
            self.views[name] = (edited, hint)
            self._render(name)
        return error

    def write_clipboard(self, text: str) -> bool:
        return copy_text_to_clipboard(text)

    def ask_save_path(self, suggested: str) -> Path | None:
        if not self.interactive:
            return Path(suggested)
        try:
            answer = self.input_func(f"Save result to (default {suggested}, '-' cancels): ").strip()
        except EOFError:
            return None
        if answer == "-":
            return None
        return Path(answer or suggested)

    def message(self, text: str) -> None:
        self.err.write(text + "\n")
        self.err.flush()
