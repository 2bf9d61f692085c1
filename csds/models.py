"""Record and summary types shared across the pipeline."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import polars as pl

from .config import CANONICAL_FIELDS

RawRow = Dict[str, Optional[str]]

CANONICAL_SCHEMA = {
    "account_id": pl.Utf8,
    "content_id": pl.Utf8,
    "object_id": pl.Utf8,
    "timestamp_share": pl.Int64,
}


@dataclass(frozen=True)
class SourceOption:
    """A selectable raw-column source for account_id or object_id."""

    value: str
    label: str


@dataclass(frozen=True)
class CanonicalRecord:
    account_id: str
    content_id: str
    object_id: str
    timestamp_share: Optional[int]

    def to_dict(self) -> Dict[str, object]:
        return {name: getattr(self, name) for name in CANONICAL_FIELDS}


@dataclass(frozen=True)
class ColumnMapping:
    """Manual assignment of one raw column to one canonical field."""

    column_index: int
    field: str


@dataclass
class ProcessingSummary:
    rows_seen: int = 0
    rows_kept: int = 0
    rows_skipped: int = 0
    rows_errored: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {
            "rows_seen": self.rows_seen,
            "rows_kept": self.rows_kept,
            "rows_skipped": self.rows_skipped,
            "rows_errored": self.rows_errored,
        }


def records_to_frame(records: List[CanonicalRecord]) -> pl.DataFrame:
    """Build the canonical DataFrame, preserving record order.

    Empty text becomes null so it is written as a bare empty field.
    """
    columns = {
        name: [getattr(r, name) or None for r in records] if dtype == pl.Utf8 else [getattr(r, name) for r in records]
        for name, dtype in CANONICAL_SCHEMA.items()
    }
    return pl.DataFrame(columns, schema=CANONICAL_SCHEMA)


def serialize_records(records: List[CanonicalRecord]) -> str:
    """Serialize records as canonical CSV text with a header row."""
    return records_to_frame(records).write_csv()


@dataclass
class ProcessingResult:
    records: List[CanonicalRecord]
    summary: ProcessingSummary
    csv_text: str = ""
    size_bytes: int = 0
    size_limit_exceeded: bool = False
    chunked: bool = False
    warnings: List[str] = field(default_factory=list)

    @property
    def csv_bytes(self) -> bytes:
        return self.csv_text.encode("utf-8")
