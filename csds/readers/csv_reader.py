"""CSV file reader."""

import csv
import logging
from typing import Iterator, List

import polars as pl

from .base import BaseReader

logger = logging.getLogger(__name__)


class CSVReader(BaseReader):
    """Reader for CSV files using polars.

    Every column is read as text (platform exports mix ids, numbers and free
    text in the same column) and invalid UTF-8 is replaced rather than
    aborting the file. Empty cells come back as None.
    """

    def _options(self, **kwargs) -> dict:
        return {
            "infer_schema_length": 0,
            "encoding": "utf8-lossy",
            "truncate_ragged_lines": True,
            **self.config.get("read_options", {}),
            **kwargs,
        }

    def read(self, path: str, **kwargs) -> pl.DataFrame:
        return pl.read_csv(path, **self._options(**kwargs))

    def read_batches(self, path: str, batch_size: int, **kwargs) -> Iterator[pl.DataFrame]:
        lf = pl.scan_csv(path, **self._options(**kwargs))
        offset = 0
        while True:
            # Slice pushdown stops the scan after offset + batch_size rows.
            batch = lf.slice(offset, batch_size).collect()
            if batch.height == 0:
                break
            yield batch
            offset += batch.height

    def read_headers(self, path: str) -> List[str]:
        with open(path, "r", encoding="utf-8-sig", errors="replace", newline="") as f:
            try:
                return next(csv.reader(f))
            except StopIteration:
                logger.warning(f"CSV file has no header row: {path}")
                return []

    def validate_path(self, path: str) -> bool:
        return path.lower().endswith((".csv", ".txt"))
