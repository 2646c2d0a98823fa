"""Command-line front door for regionlight.

Loads a file (or stdin), selects a line range, and drives the highlight
workflow either in one batch step or through an interactive command loop.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import (
    load_default_formatter,
    load_interpreter,
    load_style,
    load_tab_width,
    parse_interpreter,
    save_default_formatter,
)
from .errors import ExecutionFailed, RegionlightError, UnknownComponent, WrongContext
from .execution import ImageFileResult
from .session import HighlightWorkflow, SessionState, build_workflow
from .syntax import read_text
from .terminal_host import TerminalHost

COMMANDS: tuple[tuple[str, str], ...] = (
    ("e", "Edit generated code in $EDITOR"),
    ("x", "Execute generated code"),
    ("u", "Undo: back to generated code"),
    ("s", "Save result to a file"),
    ("c", "Copy result to clipboard"),
    ("r", "Restart with a new lexer/formatter"),
    ("q", "Quit"),
    ("?", "Show commands"),
)


def _line_range(value: str) -> tuple[int | None, int | None]:
    """argparse type for 1-based inclusive ``START:END`` line ranges."""
    start_text, sep, end_text = value.partition(":")
    if not sep:
        end_text = start_text
    try:
        start = int(start_text) if start_text.strip() else None
        end = int(end_text) if end_text.strip() else None
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid line range: {value!r}") from exc
    if (start is not None and start < 1) or (end is not None and end < 1):
        raise argparse.ArgumentTypeError("line numbers must be >= 1")
    if start is not None and end is not None and end < start:
        raise argparse.ArgumentTypeError("range end must not precede its start")
    return start, end


def select_lines(text: str, line_range: tuple[int | None, int | None] | None) -> str:
    """Return the selected lines of ``text`` (all of it without a range)."""
    if line_range is None:
        return text
    start, end = line_range
    lines = text.splitlines(keepends=True)
    first = (start or 1) - 1
    last = end if end is not None else len(lines)
    return "".join(lines[first:last])


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="regionlight",
        description="Generate, review and run a Pygments script for a block of text.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Source file. Reads stdin when omitted.")
    parser.add_argument("--lines", type=_line_range, default=None, metavar="START:END", help="Select a line range.")
    parser.add_argument("--mode", default="", help="Language-mode label used as a lexer hint (e.g. Python).")
    parser.add_argument("--lexer", default=None, help="Lexer alias; skips guessing.")
    parser.add_argument("--formatter", default=None, help="Formatter alias (default: config, then html).")
    parser.add_argument(
        "--remember-formatter",
        action="store_true",
        help="Save the chosen formatter as the default for later runs.",
    )
    parser.add_argument("--interpreter", default=None, help="Interpreter command reading a program from stdin.")
    parser.add_argument("--print-code", action="store_true", help="Print the generated script and exit.")
    parser.add_argument("--run", action="store_true", help="Run the generated script and print its output.")
    parser.add_argument("--output", metavar="PATH", default=None, help="Run and save the result to PATH.")
    parser.add_argument("--copy", action="store_true", help="Run and copy the result to the clipboard.")
    parser.add_argument("--style", default=None, help="Pygments style for terminal views.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log oracle queries and guesses.")
    return parser


def _load_source(path_arg: str | None) -> tuple[Path | None, str]:
    if path_arg is None:
        return None, read_text(sys.stdin.buffer.read())
    path = Path(path_arg)
    if not path.is_file():
        raise SystemExit(f"File not found: {path}")
    return path.resolve(), read_text(path.read_bytes())


def _remember_formatter(workflow: HighlightWorkflow, args: argparse.Namespace) -> None:
    if getattr(args, "remember_formatter", False) and workflow.last_formatter:
        save_default_formatter(workflow.last_formatter)


def run_batch(workflow: HighlightWorkflow, args: argparse.Namespace) -> None:
    """Generate (and unless ``--print-code``, execute) in one pass."""
    try:
        session = workflow.start_request(args.lexer, args.formatter)
        _remember_formatter(workflow, args)
        if args.print_code:
            sys.stdout.write(session.generated_code or "")
            workflow.quit()
            return

        result = workflow.execute()
        if args.output is not None:
            workflow.save_result(Path(args.output))
        elif args.copy:
            if not workflow.copy_result_to_clipboard():
                workflow.quit()
                raise SystemExit("Nothing copied: result is empty or no clipboard tool is available.")
        else:
            if isinstance(result, ImageFileResult):
                sys.stdout.write(f"{result.path}\n")
            else:
                sys.stdout.write(result.content)
            workflow.quit()
    except RegionlightError as exc:
        raise SystemExit(str(exc)) from exc


def _start_interactive(workflow: HighlightWorkflow, args: argparse.Namespace) -> None:
    lexer, formatter = args.lexer, args.formatter
    while True:
        try:
            workflow.start_request(lexer, formatter)
            _remember_formatter(workflow, args)
            return
        except UnknownComponent as exc:
            workflow.host.message(str(exc))
            if lexer is None and formatter is None and not getattr(workflow.host, "interactive", False):
                raise
            # Ask again with guessed defaults.
            lexer = formatter = None


def _dispatch(workflow: HighlightWorkflow, command: str, args: argparse.Namespace) -> bool:
    """Run one loop command; returns whether the loop should continue."""
    host = workflow.host
    if command == "e":
        error = workflow.edit_code()
        if error:
            host.message(error)
    elif command == "x":
        workflow.execute()
    elif command == "u":
        workflow.undo()
    elif command == "s":
        if workflow.save_result() is None:
            host.message("Save cancelled.")
    elif command == "c":
        if not workflow.copy_result_to_clipboard():
            host.message("Nothing copied.")
    elif command == "r":
        workflow.quit()
        _start_interactive(workflow, argparse.Namespace(lexer=None, formatter=None))
    elif command == "q":
        workflow.quit()
    elif command == "?":
        host.message("\n".join(f"  {key}  {label}" for key, label in COMMANDS))
    else:
        host.message(f"Unknown command {command!r}; type ? for help.")
    return workflow.state is not SessionState.IDLE


def run_interactive(workflow: HighlightWorkflow, args: argparse.Namespace, input_func=input) -> None:
    """Prompt for commands until the session ends."""
    try:
        _start_interactive(workflow, args)
    except RegionlightError as exc:
        raise SystemExit(str(exc)) from exc

    running = True
    while running:
        try:
            command = input_func(f"[{workflow.state.value}] command (? for help): ").strip().lower()
        except EOFError:
            workflow.quit()
            return
        if not command:
            continue
        try:
            running = _dispatch(workflow, command[0], args)
        except (WrongContext, ExecutionFailed, UnknownComponent) as exc:
            workflow.host.message(str(exc))
        except RegionlightError as exc:
            workflow.quit()
            raise SystemExit(str(exc)) from exc


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and highlight the selected text."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    path, text = _load_source(args.path)
    selection = select_lines(text, args.lines)
    batch = args.print_code or args.run or args.output is not None or args.copy
    interactive = not batch and sys.stdin.isatty() and path is not None

    interpreter = parse_interpreter(args.interpreter) if args.interpreter else load_interpreter()
    if interpreter is None:
        raise SystemExit(f"Invalid interpreter command: {args.interpreter!r}")

    host = TerminalHost(
        selection,
        path,
        mode_label=args.mode,
        style=args.style or load_style(),
        no_color=args.no_color or not sys.stdout.isatty(),
        interactive=interactive,
        echo_views=interactive,
    )
    workflow = build_workflow(
        host,
        interpreter,
        default_formatter=load_default_formatter(),
        tab_width=load_tab_width(),
        output_dir=path.parent if path is not None else None,
    )

    if interactive:
        run_interactive(workflow, args)
    else:
        run_batch(workflow, args)


if __name__ == "__main__":
    main()
