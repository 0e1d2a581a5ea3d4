"""Allow ``python -m journal_toolkit``."""

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
