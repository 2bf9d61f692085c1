"""YouTube Data API export transform."""

from typing import Optional

from ..config import PlatformTag
from ..config.platforms import (
    YOUTUBE_CHANNEL,
    YOUTUBE_DESCRIPTION,
    YOUTUBE_OBJECT_MAP,
    YOUTUBE_TAGS,
    YOUTUBE_TITLE,
)
from ..models import RawRow, SourceOption
from .base import BaseRowTransformer, Extracted, present


class YouTubeTransform(BaseRowTransformer):
    """Account is "{channelTitle} ({channelId})"; content is the video id."""

    platform = PlatformTag.YOUTUBE
    fields = ("channelTitle", "channelId", "videoId", "publishedAt", "title", "description", "tags")
    account_source_options = (
        SourceOption(
            YOUTUBE_CHANNEL,
            "For YouTube, 'channel' (Title + ID) is automatically selected as the account source.",
        ),
    )
    object_id_source_options = (
        SourceOption(YOUTUBE_TITLE, "Video Title"),
        SourceOption(YOUTUBE_DESCRIPTION, "Video Description"),
        SourceOption(YOUTUBE_TAGS, "Tags"),
    )

    def _extract(
        self, row: RawRow, account_source: Optional[str], object_id_source: Optional[str]
    ) -> Optional[Extracted]:
        object_column = YOUTUBE_OBJECT_MAP.get(object_id_source or "")
        if object_column is None or not present(row, "channelTitle", "channelId"):
            return None
        account = f"{str(row['channelTitle']).strip()} ({str(row['channelId']).strip()})"
        return account, row.get("videoId"), row.get(object_column), row.get("publishedAt")
