"""Base reader interface."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, List, Optional

import polars as pl


class BaseReader(ABC):
    """Base interface for tabular readers."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}

    @abstractmethod
    def read(self, path: str, **kwargs) -> pl.DataFrame:
        """Read the whole file into one DataFrame."""

    @abstractmethod
    def read_batches(self, path: str, batch_size: int, **kwargs) -> Iterator[pl.DataFrame]:
        """Yield the file as consecutive DataFrames of roughly batch_size rows."""

    @abstractmethod
    def read_headers(self, path: str) -> List[str]:
        """Return the header row without reading the data."""

    def validate_path(self, path: str) -> bool:
        return True
