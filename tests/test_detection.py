import pytest

from csds.config import PlatformTag
from csds.detection import detection_message, identify_platform


@pytest.mark.parametrize(
    "headers, expected",
    [
        (["account_id", "content_id", "object_id", "timestamp_share"], PlatformTag.PREPROCESSED),
        (["extra_col", "timestamp_share", "object_id", "content_id", "account_id"], PlatformTag.PREPROCESSED),
        (["videoId", "channelTitle", "channelId", "publishedAt"], PlatformTag.YOUTUBE),
        (["video_id", "author_name", "region_code", "create_time"], PlatformTag.TIKTOK),
        (["id", "surface.id", "text"], PlatformTag.FACEBOOK),
        (["id", "surface.name", "text"], PlatformTag.FACEBOOK),
        (["id", "post_owner.id", "post_owner.name", "text"], PlatformTag.INSTAGRAM),
        (["channel_id", "message_id", "message_text"], PlatformTag.TELEGRAM),
        (["channel_name", "message_id"], PlatformTag.TELEGRAM),
        (["username", "id", "date", "text"], PlatformTag.BLUESKY),
        (["name", "value"], PlatformTag.OTHER),
    ],
)
def test_identify_platform(headers, expected):
    assert identify_platform(headers) == expected


# --- Priority rules ---

def test_facebook_surface_beats_instagram_post_owner():
    headers = ["post_owner.id", "post_owner.name", "surface.id", "id", "text", "creation_time"]
    assert identify_platform(headers) == PlatformTag.FACEBOOK


def test_preprocessed_checked_before_platform_signatures():
    headers = ["account_id", "content_id", "object_id", "timestamp_share", "videoId"]
    assert identify_platform(headers) == PlatformTag.PREPROCESSED


def test_youtube_checked_before_tiktok():
    assert identify_platform(["videoid", "video_id", "author_name"]) == PlatformTag.YOUTUBE


def test_tiktok_needs_both_columns():
    assert identify_platform(["video_id", "title"]) == PlatformTag.OTHER


def test_bluesky_header_count_bound():
    assert identify_platform(["username", "id", "date", "text"]) == PlatformTag.BLUESKY
    assert identify_platform(["username", "id", "date", "text", "likes"]) == PlatformTag.OTHER


# --- Header normalization ---

def test_headers_are_case_and_whitespace_insensitive():
    assert identify_platform([" VideoID ", "Title"]) == PlatformTag.YOUTUBE
    assert identify_platform(["Account_ID", "CONTENT_ID", "object_id ", "Timestamp_Share"]) == PlatformTag.PREPROCESSED


def test_leading_bom_is_ignored():
    assert identify_platform(["\ufeffaccount_id", "content_id", "object_id", "timestamp_share"]) == PlatformTag.PREPROCESSED


@pytest.mark.parametrize("headers", [[], None])
def test_empty_headers_are_other(headers):
    assert identify_platform(headers) == PlatformTag.OTHER


def test_identify_platform_is_deterministic():
    headers = ["post_owner.id", "post_owner.name", "id", "text", "creation_time"]
    results = {identify_platform(list(headers)) for _ in range(5)}
    assert results == {PlatformTag.INSTAGRAM}


def test_detection_message():
    assert "preprocessed" in detection_message(PlatformTag.PREPROCESSED)
    assert "TikTok" in detection_message(PlatformTag.TIKTOK)
    assert "manually" in detection_message(PlatformTag.OTHER)
