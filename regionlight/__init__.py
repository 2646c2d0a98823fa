"""Public package surface for regionlight.

Exports ``main`` for programmatic CLI invocation and ``build_workflow`` for
embedding the highlight workflow behind another editor host.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


def build_workflow(*args, **kwargs):
    """Lazily import workflow wiring."""
    from .session import build_workflow as _build_workflow

    return _build_workflow(*args, **kwargs)


__all__ = ["build_workflow", "main"]
