"""Manual column mapping for exports no platform signature recognizes."""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .config import CANONICAL_FIELDS
from .exceptions import MappingError
from .models import CanonicalRecord, ColumnMapping, ProcessingResult
from .pipeline import CsvPipeline
from .transforms.utils import clean_text, parse_timestamp

logger = logging.getLogger(__name__)


def parse_mappings(items: Iterable[Any]) -> List[ColumnMapping]:
    """Build ColumnMapping objects from plain dicts or "field=index" strings.

    Dicts may use {"column_index", "field"} or the wizard's
    {"index", "newName"} shape.
    """
    mappings: List[ColumnMapping] = []
    for item in items:
        if isinstance(item, ColumnMapping):
            mappings.append(item)
            continue
        if isinstance(item, str):
            field, sep, raw_index = item.partition("=")
            if not sep:
                raise MappingError(f"Expected FIELD=INDEX, got {item!r}")
        elif isinstance(item, dict):
            field = item.get("field", item.get("newName"))
            raw_index = item.get("column_index", item.get("index"))
        else:
            raise MappingError(f"Unsupported mapping entry: {item!r}")
        try:
            column_index = int(str(raw_index).strip())
        except (TypeError, ValueError):
            raise MappingError(f"Column index must be an integer, got {raw_index!r}") from None
        mappings.append(ColumnMapping(column_index=column_index, field=str(field or "").strip()))
    return mappings


def validate_mappings(headers: Sequence[str], mappings: Sequence[ColumnMapping]) -> Dict[str, int]:
    """Resolve mappings into {canonical field: column index}.

    Raises MappingError for unknown fields, out-of-range indexes, or one raw
    column assigned to two fields. When a field is targeted twice the last
    mapping wins.
    """
    resolved: Dict[str, int] = {}
    for mapping in mappings:
        if mapping.field not in CANONICAL_FIELDS:
            raise MappingError(f"Unknown field {mapping.field!r}; expected one of {list(CANONICAL_FIELDS)}")
        if not 0 <= mapping.column_index < len(headers):
            raise MappingError(
                f"Column index {mapping.column_index} out of range for {len(headers)} columns"
            )
        if mapping.field in resolved and resolved[mapping.field] != mapping.column_index:
            logger.warning(
                f"[mapping] field {mapping.field} mapped more than once; "
                f"using column {mapping.column_index} ({headers[mapping.column_index]!r})"
            )
        resolved[mapping.field] = mapping.column_index

    by_column: Dict[int, str] = {}
    for field, index in resolved.items():
        if index in by_column:
            raise MappingError(
                f"Column {headers[index]!r} is assigned to both {by_column[index]} and {field}"
            )
        by_column[index] = field
    return resolved


def missing_required_fields(mappings: Sequence[ColumnMapping]) -> List[str]:
    mapped = {m.field for m in mappings}
    return [f for f in CANONICAL_FIELDS if f not in mapped]


def map_row(row: Sequence[Any], resolved: Dict[str, int]) -> Optional[CanonicalRecord]:
    """Build a record from a positional row.

    Unmapped fields stay empty. Only account_id and content_id are required;
    a timestamp that is present but cannot be parsed drops the row.
    """
    values = {}
    for field in CANONICAL_FIELDS:
        index = resolved.get(field)
        values[field] = row[index] if index is not None and index < len(row) else None

    account_id = clean_text(values["account_id"])
    content_id = clean_text(values["content_id"])
    if not account_id or not content_id:
        return None

    timestamp = None
    raw_timestamp = clean_text(values["timestamp_share"])
    if raw_timestamp:
        timestamp = parse_timestamp(raw_timestamp)
        if timestamp is None:
            return None

    return CanonicalRecord(
        account_id=account_id,
        content_id=content_id,
        object_id=clean_text(values["object_id"]),
        timestamp_share=timestamp,
    )


def run_mapping_pipeline(
    path: str,
    headers: Sequence[str],
    mappings: Sequence[ColumnMapping],
    *,
    pipeline: Optional[CsvPipeline] = None,
    require_all: bool = False,
    force_chunked: Optional[bool] = None,
) -> ProcessingResult:
    """Apply a manual mapping to a whole file with the pipeline's chunking,
    summary and size reporting."""
    pipeline = pipeline or CsvPipeline()
    if require_all:
        missing = missing_required_fields(mappings)
        if missing:
            raise MappingError(f"Please map the required fields: {', '.join(missing)}")
    resolved = validate_mappings(headers, mappings)
    logger.info(
        "[mapping] applying "
        + ", ".join(f"{field}<-{headers[index]!r}" for field, index in resolved.items())
    )

    chunked = pipeline.use_chunking(path, force_chunked)
    records, summary = pipeline.scan(
        path,
        lambda row: map_row(row, resolved),
        named=False,
        chunked=chunked,
    )
    return pipeline.finalize(records, summary, chunked=chunked)


def apply_mapping(
    path: str,
    headers: Sequence[str],
    mappings: Sequence[ColumnMapping],
    pipeline: Optional[CsvPipeline] = None,
) -> List[CanonicalRecord]:
    """Return the records a manual mapping yields, without the empty-result check."""
    pipeline = pipeline or CsvPipeline()
    resolved = validate_mappings(headers, mappings)
    records, _ = pipeline.scan(
        path,
        lambda row: map_row(row, resolved),
        named=False,
        chunked=pipeline.use_chunking(path),
    )
    return records
