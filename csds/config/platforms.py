"""Platform tags, header signatures and source option identifiers.

Option identifiers are the stable values exchanged with clients; labels are
the human-readable text shown next to them.
"""

from enum import Enum


class PlatformTag(str, Enum):
    """Source platform assigned to a CSV from its header row."""

    PREPROCESSED = "Preprocessed"
    YOUTUBE = "YouTube"
    TIKTOK = "TikTok"
    FACEBOOK = "Facebook"
    INSTAGRAM = "Instagram"
    TELEGRAM = "Telegram"
    BLUESKY = "BlueSky"
    OTHER = "Other"


CANONICAL_FIELDS = ("account_id", "content_id", "object_id", "timestamp_share")

# Header signatures (lowercase)
YOUTUBE_SIGNATURE = "videoid"
TIKTOK_SIGNATURE = ("video_id", "author_name")
FACEBOOK_SIGNATURE = ("surface.id", "surface.name")
INSTAGRAM_SIGNATURE = ("post_owner.id", "post_owner.name")
TELEGRAM_SIGNATURE = ("channel_id", "channel_name")
BLUESKY_SIGNATURE = ("username", "id")
BLUESKY_MAX_HEADERS = 4

# Account sources
FACEBOOK_POST_OWNER = "post_owner_facebook_account_source"
FACEBOOK_SURFACE = "surface_account_source"
INSTAGRAM_POST_OWNER = "post_owner_instagram_account_source"
YOUTUBE_CHANNEL = "channel_title_id_youtube_account_source"
TIKTOK_AUTHOR = "name_region_tiktok_account_source"
BLUESKY_USERNAME = "username_bluesky_account_source"
TELEGRAM_CHANNEL = "channel_telegram_account_source"
TELEGRAM_AUTHOR = "author_telegram_account_source"

# Object ID sources
FACEBOOK_TEXT = "text_facebook"
FACEBOOK_LINK = "link_attachment.link_facebook"
INSTAGRAM_TEXT = "text_instagram"
YOUTUBE_TITLE = "video_title_youtube"
YOUTUBE_DESCRIPTION = "video_description_youtube"
YOUTUBE_TAGS = "video_tags_youtube"
TIKTOK_DESCRIPTION = "video_description_tiktok"
TIKTOK_VOICE_TO_TEXT = "video_to_text_tiktok"
TIKTOK_URL = "video_url_tiktok"
TIKTOK_EFFECT_IDS = "video_effect_ids_tiktok"
TIKTOK_MUSIC_ID = "video_music_id_tiktok"
TIKTOK_HASHTAG_NAMES = "video_hashtag_names_tiktok"
BLUESKY_TEXT = "text_bluesky"
TELEGRAM_MESSAGE_TEXT = "message_text_telegram"

# Raw column read for each object ID source
YOUTUBE_OBJECT_MAP = {
    YOUTUBE_TITLE: "title",
    YOUTUBE_DESCRIPTION: "description",
    YOUTUBE_TAGS: "tags",
}

TIKTOK_OBJECT_MAP = {
    TIKTOK_DESCRIPTION: "video_description",
    TIKTOK_VOICE_TO_TEXT: "voice_to_text",
    TIKTOK_URL: "video_url",
    TIKTOK_EFFECT_IDS: "effect_ids",
    TIKTOK_MUSIC_ID: "music_id",
    TIKTOK_HASHTAG_NAMES: "hashtag_names",
}

# Only these TikTok sources need a non-empty value; the rest need the column.
TIKTOK_REQUIRED_OBJECT_SOURCES = {
    TIKTOK_DESCRIPTION,
    TIKTOK_VOICE_TO_TEXT,
    TIKTOK_URL,
    TIKTOK_HASHTAG_NAMES,
}

UNKNOWN_REGION = "unknown"

# Sources the wizard selects automatically for single-option platforms
DEFAULT_ACCOUNT_SOURCES = {
    PlatformTag.YOUTUBE: YOUTUBE_CHANNEL,
    PlatformTag.TIKTOK: TIKTOK_AUTHOR,
    PlatformTag.BLUESKY: BLUESKY_USERNAME,
    PlatformTag.INSTAGRAM: INSTAGRAM_POST_OWNER,
}

DEFAULT_OBJECT_ID_SOURCES = {
    PlatformTag.BLUESKY: BLUESKY_TEXT,
    PlatformTag.TELEGRAM: TELEGRAM_MESSAGE_TEXT,
    PlatformTag.INSTAGRAM: INSTAGRAM_TEXT,
}
