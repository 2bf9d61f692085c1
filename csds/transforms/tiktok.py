"""TikTok Research API export transform."""

from typing import Optional

from ..config import PlatformTag
from ..config.platforms import (
    TIKTOK_AUTHOR,
    TIKTOK_DESCRIPTION,
    TIKTOK_EFFECT_IDS,
    TIKTOK_HASHTAG_NAMES,
    TIKTOK_MUSIC_ID,
    TIKTOK_OBJECT_MAP,
    TIKTOK_REQUIRED_OBJECT_SOURCES,
    TIKTOK_URL,
    TIKTOK_VOICE_TO_TEXT,
    UNKNOWN_REGION,
)
from ..models import RawRow, SourceOption
from .base import BaseRowTransformer, Extracted, present
from .utils import clean_text


class TikTokTransform(BaseRowTransformer):
    """Account is "{author_name} ({region_code})".

    Description, voice-to-text, URL and hashtag sources need a value. Effect
    IDs and music ID are often blank in exports, so for those the column only
    has to exist and an empty object_id is kept.
    """

    platform = PlatformTag.TIKTOK
    fields = ("author_name", "region_code", "video_id", "create_time") + tuple(TIKTOK_OBJECT_MAP.values())
    account_source_options = (
        SourceOption(
            TIKTOK_AUTHOR,
            "For TikTok, 'author' (Name + Region) is automatically selected as the account source.",
        ),
    )
    object_id_source_options = (
        SourceOption(TIKTOK_DESCRIPTION, "Video Description"),
        SourceOption(TIKTOK_VOICE_TO_TEXT, "Voice To Text"),
        SourceOption(TIKTOK_URL, "Video URL"),
        SourceOption(TIKTOK_EFFECT_IDS, "Effect IDs"),
        SourceOption(TIKTOK_MUSIC_ID, "Music Id"),
        SourceOption(TIKTOK_HASHTAG_NAMES, "Hashtag Names"),
    )

    def _object_id_optional(self, object_id_source: Optional[str]) -> bool:
        return object_id_source not in TIKTOK_REQUIRED_OBJECT_SOURCES

    def _extract(
        self, row: RawRow, account_source: Optional[str], object_id_source: Optional[str]
    ) -> Optional[Extracted]:
        object_column = TIKTOK_OBJECT_MAP.get(object_id_source or "")
        if object_column is None or object_column not in row:
            return None
        if not present(row, "author_name"):
            return None

        region = clean_text(row.get("region_code")) or UNKNOWN_REGION
        account = f"{clean_text(row['author_name'])} ({region})"
        return account, row.get("video_id"), row.get(object_column), row.get("create_time")
