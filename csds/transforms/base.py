"""Base row transformer that enforces the canonical record contract."""

from abc import ABC, abstractmethod
from typing import ClassVar, List, Optional, Tuple

from ..config import PlatformTag
from ..exceptions import SourceSelectionError
from ..models import CanonicalRecord, RawRow, SourceOption
from .utils import clean_text, parse_timestamp

# account_id, content_id, object_id, raw timestamp
Extracted = Tuple[object, object, object, object]


class BaseRowTransformer(ABC):
    """
    Abstract base class for per-platform row transformers.

    `transform_row` is a template method: subclasses only pick the raw values
    for the four canonical fields in `_extract`, and the base class trims them,
    normalizes the timestamp and applies the validity rule. A row with any
    empty field, or an unparsable timestamp, yields None.

    Subclasses must define:
    - platform: the PlatformTag the transformer handles.
    - fields: every raw column the transformer may read (used to repair
      header casing before rows reach `_extract`).
    - account_source_options / object_id_source_options.
    - _extract(): the platform-specific field mapping.
    """

    platform: ClassVar[PlatformTag]
    fields: ClassVar[Tuple[str, ...]] = ()
    account_source_options: ClassVar[Tuple[SourceOption, ...]] = ()
    object_id_source_options: ClassVar[Tuple[SourceOption, ...]] = ()
    # Whether an empty object_id is acceptable for the given source
    allow_empty_object_id: ClassVar[bool] = False

    def get_account_source_options(self) -> List[SourceOption]:
        return list(self.account_source_options)

    def get_object_id_source_options(self) -> List[SourceOption]:
        return list(self.object_id_source_options)

    def validate_sources(self, account_source: Optional[str], object_id_source: Optional[str]) -> None:
        """Raise SourceSelectionError for an option this platform does not offer."""
        self._check_option("account source", account_source, self.account_source_options)
        self._check_option("object ID source", object_id_source, self.object_id_source_options)

    def _check_option(self, kind: str, chosen: Optional[str], options: Tuple[SourceOption, ...]) -> None:
        if not options:
            return
        allowed = [o.value for o in options]
        if chosen not in allowed:
            raise SourceSelectionError(
                f"Invalid {kind} {chosen!r} for {self.platform.value}; expected one of {allowed}"
            )

    @abstractmethod
    def _extract(
        self, row: RawRow, account_source: Optional[str], object_id_source: Optional[str]
    ) -> Optional[Extracted]:
        """Pick raw values for the canonical fields, or None to reject the row."""

    def _object_id_optional(self, object_id_source: Optional[str]) -> bool:
        return self.allow_empty_object_id

    def transform_row(
        self,
        row: RawRow,
        account_source: Optional[str] = None,
        object_id_source: Optional[str] = None,
    ) -> Optional[CanonicalRecord]:
        extracted = self._extract(row, account_source, object_id_source)
        if extracted is None:
            return None

        account_raw, content_raw, object_raw, timestamp_raw = extracted
        account_id = clean_text(account_raw)
        content_id = clean_text(content_raw)
        object_id = clean_text(object_raw)
        timestamp = parse_timestamp(timestamp_raw)

        if not account_id or not content_id or timestamp is None:
            return None
        if not object_id and not self._object_id_optional(object_id_source):
            return None

        return CanonicalRecord(
            account_id=account_id,
            content_id=content_id,
            object_id=object_id,
            timestamp_share=timestamp,
        )


def present(row: RawRow, *columns: str) -> bool:
    """True when every column has a non-blank value in the row."""
    return all(clean_text(row.get(c)) for c in columns)
