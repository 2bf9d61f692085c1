"""Placeholder transform for unrecognized exports."""

from typing import Optional

from ..config import PlatformTag
from ..models import RawRow
from .base import BaseRowTransformer, Extracted


class OtherTransform(BaseRowTransformer):
    """Rejects every row; unrecognized files go through manual column mapping."""

    platform = PlatformTag.OTHER

    def _extract(
        self, row: RawRow, account_source: Optional[str], object_id_source: Optional[str]
    ) -> Optional[Extracted]:
        return None
