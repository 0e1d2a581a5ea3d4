"""Top-level package for the journal toolkit.

Provides subpackages:
- journal_toolkit.core – template and manuscript models, defaults, validation
- journal_toolkit.layout – block building, pagination and page assembly
- journal_toolkit.measurement – height oracles used before pagination
- journal_toolkit.output – PDF rendering and PNG previews
"""

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def _get_version() -> str:
    """Version of the source checkout if run from one, else the installed distribution."""
    if _PYPROJECT.is_file():
        for line in _PYPROJECT.read_text(encoding="utf-8").splitlines():
            key, _, value = line.partition("=")
            if key.strip() == "version":
                return value.strip().strip("\"'")
    try:
        return version("journal-toolkit")
    except PackageNotFoundError:
        return "0.0.0"


__version__ = _get_version()
__all__: list[str] = ["__version__"]
