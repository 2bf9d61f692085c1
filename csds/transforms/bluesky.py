"""BlueSky export transform."""

from typing import Optional

from ..config import PlatformTag
from ..config.platforms import BLUESKY_TEXT, BLUESKY_USERNAME
from ..models import RawRow, SourceOption
from .base import BaseRowTransformer, Extracted


class BlueSkyTransform(BaseRowTransformer):
    platform = PlatformTag.BLUESKY
    fields = ("username", "id", "date", "text")
    account_source_options = (
        SourceOption(
            BLUESKY_USERNAME,
            "For BlueSky, 'username' is automatically selected as the account source.",
        ),
    )
    object_id_source_options = (
        SourceOption(
            BLUESKY_TEXT,
            "For BlueSky, 'text' (post content) is automatically selected as the Object ID.",
        ),
    )

    def _extract(
        self, row: RawRow, account_source: Optional[str], object_id_source: Optional[str]
    ) -> Optional[Extracted]:
        return row.get("username"), row.get("id"), row.get("text"), row.get("date")
