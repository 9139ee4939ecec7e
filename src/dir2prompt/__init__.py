"""Selective directory to prompt export utilities.

This package lets a user pick files from a lazily loaded directory tree with
tri-state checkboxes, filter them with named exclusion rules and concatenate
the selected files into a single text artifact suitable for Large Language
Model (LLM) prompts.
"""

from importlib.metadata import PackageNotFoundError, version

# Expose the version for both programmatic use and CLI
try:
    __version__ = version("dir2prompt")
except PackageNotFoundError:
    __version__ = "unknown"
