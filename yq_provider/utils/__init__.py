"""Utility helpers for the provider."""

from .discovery import iter_yaml_files, YAML_EXTENSIONS
from .fileio import read_document, read_yaml_file

__all__ = [
    "iter_yaml_files",
    "read_document",
    "read_yaml_file",
    "YAML_EXTENSIONS",
]
