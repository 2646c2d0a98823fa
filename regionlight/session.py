"""Highlight session lifecycle: guess, select, generate, execute, present.

``HighlightWorkflow`` owns the single live ``Session`` and moves it through
``IDLE -> EDITING -> RESULT -> IDLE``. Transitions called from the wrong
state raise ``WrongContext`` and leave everything untouched.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Collection, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .catalog import ComponentCatalog
from .codegen import DEFAULT_TAB_WIDTH, generate
from .errors import EmptySelection, UnknownComponent, WrongContext
from .execution import ExecutionAdapter, ExecutionResult, ImageFileResult, TextResult
from .guesser import NameGuesser
from .host import CODE_VIEW, RESULT_VIEW, Host
from .oracle import Oracle
from .resolver import FORMATTER, LEXER, ComponentRef, ComponentResolver

logger = logging.getLogger(__name__)

DEFAULT_FORMATTER = "html"
CODE_SYNTAX_HINT = "python"


class SessionState(Enum):
    IDLE = "idle"
    EDITING = "editing"
    RESULT = "showing a result"


@dataclass(frozen=True)
class Session:
    """One highlight request; later fields are filled in as the workflow advances."""

    source_identity: object
    selected_text: str
    source_name: str | None = None
    lexer_alias: str | None = None
    formatter_alias: str | None = None
    lexer_ref: ComponentRef | None = None
    formatter_ref: ComponentRef | None = None
    generated_code: str | None = None

    def fill(self, **changes: object) -> Session:
        """Return a copy with unset fields filled; set fields are immutable."""
        for name in changes:
            if getattr(self, name) is not None:
                raise ValueError(f"session field {name!r} is already set")
        return dataclasses.replace(self, **changes)


class HighlightWorkflow:
    """State machine behind a single highlighting request."""

    def __init__(
        self,
        host: Host,
        catalog: ComponentCatalog,
        guesser: NameGuesser,
        resolver: ComponentResolver,
        adapter: ExecutionAdapter,
        default_formatter: str = DEFAULT_FORMATTER,
        tab_width: int = DEFAULT_TAB_WIDTH,
    ) -> None:
        self.host = host
        self.catalog = catalog
        self.guesser = guesser
        self.resolver = resolver
        self.adapter = adapter
        self.default_formatter = default_formatter
        self.tab_width = tab_width
        self.state = SessionState.IDLE
        self.session: Session | None = None
        self.result: ExecutionResult | None = None
        # Seeds the formatter prompt of the next request; never reset.
        self.last_formatter: str | None = None

    def _require(self, operation: str, state: SessionState) -> Session:
        if self.state is not state or self.session is None:
            raise WrongContext(operation, self.state)
        return self.session

    def _choose(self, kind: str, choices: Collection[str], default: str) -> str:
        answer = self.host.prompt_choice(f"{kind.capitalize()} (default {default}): ", choices, default)
        alias = (answer or "").strip() or default
        if alias not in choices:
            raise UnknownComponent(kind, alias)
        return alias

    def start_request(self, lexer: str | None = None, formatter: str | None = None) -> Session:
        """Begin a request for the host's current selection and open the code view."""
        selected = self.host.selection()
        if not selected:
            raise EmptySelection()

        if self.session is not None:
            logger.debug("discarding previous %s session", self.state.value)
        self.session = None
        self.result = None
        self.state = SessionState.IDLE

        source_name = self.host.file_name()
        session = Session(
            source_identity=self.host.source_handle(),
            selected_text=selected,
            source_name=source_name,
        )
        lexers = self.catalog.list_lexers()
        formatters = self.catalog.list_formatters()

        default_lexer = lexer or self.guesser.guess_lexer(selected, self.host.mode_label(), source_name)
        default_formatter = formatter or self.last_formatter or self.default_formatter
        session = session.fill(
            lexer_alias=self._choose(LEXER, lexers, default_lexer),
            formatter_alias=self._choose(FORMATTER, formatters, default_formatter),
        )
        session = session.fill(
            lexer_ref=self.resolver.resolve(session.lexer_alias, LEXER),
            formatter_ref=self.resolver.resolve(session.formatter_alias, FORMATTER),
        )
        self.last_formatter = session.formatter_alias
        binary_output = self.adapter.writes_image(session.formatter_alias)
        session = session.fill(generated_code=generate(session, self.tab_width, binary_output=binary_output))

        self.session = session
        self.host.open_view(CODE_VIEW, session.generated_code, CODE_SYNTAX_HINT)
        self.state = SessionState.EDITING
        return session

    def edit_code(self) -> str | None:
        """Let the user rework the code view before running it."""
        self._require("edit code", SessionState.EDITING)
        return self.host.edit_view(CODE_VIEW)

    def _result_syntax_hint(self, formatter_alias: str) -> str:
        return self.resolver.file_extension(formatter_alias) or formatter_alias

    def execute(self) -> ExecutionResult:
        """Run the code view and show its output in the result view."""
        session = self._require("execute", SessionState.EDITING)
        if self.host.view_exists(CODE_VIEW):
            code = self.host.view_text(CODE_VIEW)
        else:
            code = session.generated_code or ""

        result = self.adapter.run(code, session.formatter_alias or "", session.source_name)
        if isinstance(result, ImageFileResult):
            self.host.open_view(RESULT_VIEW, f"{result.path}\n", None)
            self.host.message(f"Image written to {result.path}")
        else:
            self.host.open_view(RESULT_VIEW, result.content, self._result_syntax_hint(session.formatter_alias or ""))
        self.result = result
        self.state = SessionState.RESULT
        return result

    def undo(self) -> None:
        """Return from the result view to the still-open code view."""
        self._require("undo", SessionState.RESULT)
        if not self.host.view_exists(CODE_VIEW):
            self.quit()
            return
        if self.host.view_exists(RESULT_VIEW):
            self.host.close_view(RESULT_VIEW)
        self.host.show_view(CODE_VIEW)
        self.result = None
        self.state = SessionState.EDITING

    def suggested_result_name(self) -> str:
        session = self.session
        stem = Path(session.source_name).name if session and session.source_name else "region"
        extension = self.resolver.file_extension(session.formatter_alias) if session and session.formatter_alias else None
        return f"{stem}.{extension or 'txt'}"

    def save_result(self, path: Path | None = None) -> Path | None:
        """Persist the result and end the session; ``None`` when the user cancels."""
        self._require("save a result", SessionState.RESULT)
        result = self.result
        if isinstance(result, ImageFileResult):
            self.host.message(f"Image already saved to {result.path}")
            saved: Path | None = result.path
        else:
            target = path if path is not None else self.host.ask_save_path(self.suggested_result_name())
            if target is None:
                return None
            content = result.content if isinstance(result, TextResult) else ""
            target.write_text(content, encoding="utf-8")
            self.host.message(f"Saved result to {target}")
            saved = target
        self.quit()
        return saved

    def copy_result_to_clipboard(self) -> bool:
        """Copy the result and end the session; an empty result is left alone."""
        self._require("copy a result", SessionState.RESULT)
        text = self.result.clipboard_text() if self.result is not None else ""
        if not text:
            return False
        if not self.host.write_clipboard(text):
            self.host.message("Clipboard is not available.")
            return False
        self.quit()
        return True

    def quit(self) -> None:
        """Close both views, refocus the source and forget the session."""
        for name in (RESULT_VIEW, CODE_VIEW):
            if self.host.view_exists(name):
                self.host.close_view(name)
        session = self.session
        if session is not None and self.host.is_alive(session.source_identity):
            self.host.focus(session.source_identity)
        self.session = None
        self.result = None
        self.state = SessionState.IDLE


def build_workflow(
    host: Host,
    interpreter: Sequence[str] | None = None,
    default_formatter: str = DEFAULT_FORMATTER,
    tab_width: int = DEFAULT_TAB_WIDTH,
    output_dir: Path | None = None,
) -> HighlightWorkflow:
    """Wire a workflow whose oracle and scripts run under ``interpreter``."""
    oracle = Oracle(interpreter)
    resolver = ComponentResolver(oracle)
    return HighlightWorkflow(
        host=host,
        catalog=ComponentCatalog(oracle),
        guesser=NameGuesser(oracle),
        resolver=resolver,
        adapter=ExecutionAdapter(resolver, command=oracle.command, output_dir=output_dir),
        default_formatter=default_formatter,
        tab_width=tab_width,
    )
