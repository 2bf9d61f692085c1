"""Pass-through transform for files already in canonical form."""

from typing import Optional

from ..config import PlatformTag
from ..models import RawRow
from .base import BaseRowTransformer, Extracted


class PreprocessedTransform(BaseRowTransformer):
    """Validate and trim rows that already carry the canonical columns."""

    platform = PlatformTag.PREPROCESSED
    fields = ("account_id", "content_id", "object_id", "timestamp_share")

    def _extract(
        self, row: RawRow, account_source: Optional[str], object_id_source: Optional[str]
    ) -> Optional[Extracted]:
        return (
            row.get("account_id"),
            row.get("content_id"),
            row.get("object_id"),
            row.get("timestamp_share"),
        )
