"""Instagram (Meta Content Library) export transform."""

from typing import Optional

from ..config import PlatformTag
from ..config.platforms import INSTAGRAM_POST_OWNER, INSTAGRAM_TEXT
from ..models import RawRow, SourceOption
from .base import BaseRowTransformer, Extracted, present


class InstagramTransform(BaseRowTransformer):
    """Account is the post owner id; the owner name must be present too."""

    platform = PlatformTag.INSTAGRAM
    fields = ("post_owner.id", "post_owner.name", "id", "text", "creation_time")
    account_source_options = (
        SourceOption(INSTAGRAM_POST_OWNER, "Post Owner (post_owner.id, post_owner.name)"),
    )
    object_id_source_options = (SourceOption(INSTAGRAM_TEXT, "Text content (text)"),)

    def _extract(
        self, row: RawRow, account_source: Optional[str], object_id_source: Optional[str]
    ) -> Optional[Extracted]:
        if not present(row, "post_owner.name"):
            return None
        return row.get("post_owner.id"), row.get("id"), row.get("text"), row.get("creation_time")
