"""Readers for uploaded dataset files."""

from .base import BaseReader
from .csv_reader import CSVReader

__all__ = [
    "BaseReader",
    "CSVReader",
]
