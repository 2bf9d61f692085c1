"""Chunked CSV normalization pipeline."""

import asyncio
import functools
import logging
import os
from typing import Any, Callable, Iterator, List, Optional, Sequence, Tuple

import polars as pl

from .config import PlatformTag, Settings, load_settings
from .detection import identify_platform
from .exceptions import CsvParseError, NoValidRowsError
from .models import CanonicalRecord, ProcessingResult, ProcessingSummary, serialize_records
from .readers import CSVReader
from .transforms import BaseRowTransformer, default_sources
from .transforms.utils import build_rename_map

logger = logging.getLogger(__name__)

RowConverter = Callable[[Any], Optional[CanonicalRecord]]


class CsvPipeline:
    """Stream a CSV through a row converter and collect canonical records.

    Files larger than the chunk threshold are read in batches of
    `chunk_size` rows; smaller files in a single pass. Both paths produce the
    same records in the same order. Each call keeps its own results and
    counters, so one instance can serve concurrent requests.
    """

    def __init__(self, settings: Optional[Settings] = None, reader: Optional[CSVReader] = None):
        self.settings = settings or load_settings()
        self.reader = reader or CSVReader()

    def detect(self, path: str) -> Tuple[List[str], PlatformTag]:
        headers = self.reader.read_headers(path)
        tag = identify_platform(headers)
        logger.info(f"[pipeline] detected platform={tag.value} from {len(headers)} headers")
        return headers, tag

    def use_chunking(self, path: str, force_chunked: Optional[bool] = None) -> bool:
        if force_chunked is not None:
            return force_chunked
        return os.path.getsize(path) > self.settings.chunk_threshold_bytes

    def run(
        self,
        path: str,
        transformer: BaseRowTransformer,
        account_source: Optional[str] = None,
        object_id_source: Optional[str] = None,
        force_chunked: Optional[bool] = None,
    ) -> ProcessingResult:
        """Transform every row of `path` with `transformer`.

        Missing source selections fall back to the platform's automatic
        choice. Raises SourceSelectionError for an option the platform does
        not offer, CsvParseError when the file cannot be parsed, and
        NoValidRowsError when no row survives.
        """
        default_account, default_object = default_sources(transformer.platform)
        account_source = account_source or default_account
        object_id_source = object_id_source or default_object
        transformer.validate_sources(account_source, object_id_source)

        def convert(row: dict) -> Optional[CanonicalRecord]:
            return transformer.transform_row(row, account_source, object_id_source)

        chunked = self.use_chunking(path, force_chunked)
        logger.info(
            f"[pipeline] processing {os.path.basename(path)} as {transformer.platform.value} "
            f"(account_source={account_source}, object_id_source={object_id_source}, chunked={chunked})"
        )
        records, summary = self.scan(path, convert, named=True, fields=transformer.fields, chunked=chunked)
        return self.finalize(records, summary, chunked=chunked)

    def _frames(self, path: str, chunked: bool) -> Iterator[pl.DataFrame]:
        if chunked:
            yield from self.reader.read_batches(path, batch_size=self.settings.chunk_size)
        else:
            yield self.reader.read(path)

    def scan(
        self,
        path: str,
        convert: RowConverter,
        named: bool,
        fields: Sequence[str] = (),
        chunked: bool = False,
    ) -> Tuple[List[CanonicalRecord], ProcessingSummary]:
        """Apply `convert` to each row, isolating per-row failures.

        Rows are dicts keyed by header when `named`, otherwise positional
        tuples. A row that raises is logged, counted as errored and skipped.
        """
        records: List[CanonicalRecord] = []
        summary = ProcessingSummary()
        rename_map = None

        try:
            for frame in self._frames(path, chunked):
                if rename_map is None:
                    rename_map = build_rename_map(frame.columns, fields) if named else {}
                    if rename_map:
                        logger.info(f"[pipeline] normalized header casing: {rename_map}")
                if rename_map:
                    frame = frame.rename(rename_map)

                for row in frame.iter_rows(named=named):
                    # Blank lines come back with every cell null
                    if all(v is None for v in (row.values() if named else row)):
                        continue
                    summary.rows_seen += 1
                    try:
                        record = convert(row)
                    except Exception as e:
                        logger.warning(f"[pipeline] error processing row {summary.rows_seen}: {e!r}")
                        summary.rows_errored += 1
                        summary.rows_skipped += 1
                        continue
                    if record is None:
                        summary.rows_skipped += 1
                    else:
                        records.append(record)
                        summary.rows_kept += 1
        except (pl.exceptions.PolarsError, OSError) as e:
            logger.error(f"[pipeline] CSV parsing error for {path}: {e}")
            raise CsvParseError(f"Error processing CSV: {e}") from e

        logger.info(
            f"[pipeline] CSV processing complete. rows_seen={summary.rows_seen}, kept={summary.rows_kept}, "
            f"skipped={summary.rows_skipped}, errors={summary.rows_errored}"
        )
        return records, summary

    def finalize(
        self, records: List[CanonicalRecord], summary: ProcessingSummary, chunked: bool = False
    ) -> ProcessingResult:
        """Serialize records and apply the empty-result and size checks."""
        if not records:
            raise NoValidRowsError(summary)

        csv_text = serialize_records(records)
        size_bytes = len(csv_text.encode("utf-8"))
        result = ProcessingResult(
            records=records,
            summary=summary,
            csv_text=csv_text,
            size_bytes=size_bytes,
            chunked=chunked,
        )
        if size_bytes > self.settings.output_limit_bytes:
            size_mb = size_bytes / (1024 * 1024)
            limit_mb = self.settings.output_limit_bytes / (1024 * 1024)
            message = (
                f"Warning: The transformed file size ({size_mb:.1f}MB) exceeds the {limit_mb:.0f}MB limit "
                "of the Coordinated Sharing Detection Service."
            )
            logger.warning(f"[pipeline] {message}")
            result.size_limit_exceeded = True
            result.warnings.append(message)
        return result


async def process_csv(
    path: str,
    transformer: BaseRowTransformer,
    account_source: Optional[str] = None,
    object_id_source: Optional[str] = None,
    *,
    pipeline: Optional[CsvPipeline] = None,
    force_chunked: Optional[bool] = None,
) -> ProcessingResult:
    """Run the pipeline off the event loop; file reads are the only waits."""
    pipeline = pipeline or CsvPipeline()
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(
        None,
        functools.partial(
            pipeline.run,
            path,
            transformer,
            account_source,
            object_id_source,
            force_chunked,
        ),
    )
