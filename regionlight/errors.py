"""Error taxonomy for the highlight workflow.

Every failure a caller may need to show the user derives from
``RegionlightError`` so front ends can catch one base class.
"""

from __future__ import annotations


class RegionlightError(Exception):
    """Base class for user-visible workflow failures."""


class EmptySelection(RegionlightError):
    def __init__(self) -> None:
        super().__init__("Nothing selected: select some text to highlight first.")


class CatalogUnavailable(RegionlightError):
    """The highlighting library is missing or produced no component list."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"Cannot list {kind}: is Pygments installed for the configured interpreter?")


class UnknownComponent(RegionlightError):
    """An alias the highlighting library cannot resolve."""

    def __init__(self, kind: str, alias: str) -> None:
        self.kind = kind
        self.alias = alias
        super().__init__(f"Unknown {kind}: {alias!r}")


class WrongContext(RegionlightError):
    """A transition was invoked from a state that does not allow it."""

    def __init__(self, operation: str, state: object) -> None:
        self.operation = operation
        self.state = state
        state_name = getattr(state, "value", state)
        super().__init__(f"Cannot {operation} while {state_name}.")


class ExecutionFailed(RegionlightError):
    """The interpreter exited with a non-zero status while running generated code."""

    def __init__(self, returncode: int, stderr: str) -> None:
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip().splitlines()[-1] if stderr.strip() else "no error output"
        super().__init__(f"Generated code failed (exit {returncode}): {detail}")
