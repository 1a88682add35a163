"""Bundled demo components (HTML string renderers) and their definitions."""

from pathlib import Path

DEFINITIONS_PATH = Path(__file__).parent / "definitions.json"
