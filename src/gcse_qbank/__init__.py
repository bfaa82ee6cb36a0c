"""Top-level package for the GCSE question bank extractor.

Provides subpackages:
- gcse_qbank.core – immutable record models, collection serialization and schema checks
- gcse_qbank.extractor – line segmentation, mark extraction, validation and unit indexing
- gcse_qbank.sources – PDF / text ingestion adapters
- gcse_qbank.llm – retry contract and prompt examples for language-model consumers
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            content = pyproject.read_text()
            for line in content.splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.3.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    # Fallback to importlib.metadata for installed package
    try:
        from importlib.metadata import version as pkg_version
        return pkg_version("gcse-qbank")
    except Exception:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
