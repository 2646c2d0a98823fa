"""Module entrypoint for ``python -m regionlight``.

All argument parsing and workflow setup happen in ``regionlight.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
