"""Exceptions raised by the preprocessing pipeline."""

from typing import Optional

from .models import ProcessingSummary


class CsdsError(Exception):
    """Base class for all pipeline errors."""


class CsvParseError(CsdsError):
    """The CSV engine could not parse the file."""


class NoValidRowsError(CsdsError):
    """The file parsed, but no row produced a usable record."""

    def __init__(self, summary: ProcessingSummary):
        self.summary = summary
        super().__init__(
            "No valid data rows could be processed. Please check your CSV format and selections. "
            f"(rows_seen={summary.rows_seen}, skipped={summary.rows_skipped}, errors={summary.rows_errored})"
        )


class SourceSelectionError(CsdsError):
    """An account or object ID source the platform does not offer."""


class MappingError(CsdsError):
    """A manual column mapping that cannot be applied."""


class AnalysisServiceError(CsdsError):
    """The analysis service rejected the request or could not be reached."""

    def __init__(self, message: str, stage: Optional[str] = None, status_code: Optional[int] = None):
        self.stage = stage
        self.status_code = status_code
        super().__init__(message)
