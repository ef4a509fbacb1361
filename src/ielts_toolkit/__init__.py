"""Top-level package for the IELTS authoring toolkit.

Provides subpackages:
- ielts_toolkit.core – field, table, question and part models plus serialization
- ielts_toolkit.editor – spatial field editor and tabular structure editor
- ielts_toolkit.sync – group/question synchronizer and submission checks
- ielts_toolkit.preview – scaling and overlay rendering
- ielts_toolkit.gui – PySide6 authoring widgets
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        for line in pyproject.read_text().splitlines():
            if line.strip().startswith("version"):
                # Parse: version = "0.3.0"
                return line.split("=")[1].strip().strip('"').strip("'")

    from importlib.metadata import PackageNotFoundError, version as pkg_version
    try:
        return pkg_version("ielts_toolkit")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
