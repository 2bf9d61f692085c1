"""Identify the source platform of a CSV export from its header row."""

from typing import Iterable, Optional

from .config import CANONICAL_FIELDS, PlatformTag
from .config.platforms import (
    BLUESKY_MAX_HEADERS,
    BLUESKY_SIGNATURE,
    FACEBOOK_SIGNATURE,
    INSTAGRAM_SIGNATURE,
    TELEGRAM_SIGNATURE,
    TIKTOK_SIGNATURE,
    YOUTUBE_SIGNATURE,
)


def normalize_header(header: object) -> str:
    """Lowercase a header and drop surrounding whitespace and a UTF-8 BOM."""
    return str(header if header is not None else "").lstrip("\ufeff").strip().lower()


def identify_platform(headers: Optional[Iterable[object]]) -> PlatformTag:
    """Classify a header row into a PlatformTag.

    Rules are checked in a fixed order and the first match wins. Some
    signatures are subsets of others: Facebook surface exports also carry the
    post_owner columns that identify Instagram, so Facebook is tested first and
    Instagram additionally excludes the surface columns.
    """
    lowered = [normalize_header(h) for h in headers or ()]
    if not lowered:
        return PlatformTag.OTHER
    present = set(lowered)

    if all(name in present for name in CANONICAL_FIELDS):
        return PlatformTag.PREPROCESSED

    if YOUTUBE_SIGNATURE in present:
        return PlatformTag.YOUTUBE

    if all(name in present for name in TIKTOK_SIGNATURE):
        return PlatformTag.TIKTOK

    has_surface = any(name in present for name in FACEBOOK_SIGNATURE)
    if has_surface:
        return PlatformTag.FACEBOOK

    if all(name in present for name in INSTAGRAM_SIGNATURE) and not has_surface:
        return PlatformTag.INSTAGRAM

    if any(name in present for name in TELEGRAM_SIGNATURE):
        return PlatformTag.TELEGRAM

    # Wider exports that happen to carry username and id stay Other.
    if all(name in present for name in BLUESKY_SIGNATURE) and len(lowered) <= BLUESKY_MAX_HEADERS:
        return PlatformTag.BLUESKY

    return PlatformTag.OTHER


def detection_message(tag: PlatformTag) -> str:
    if tag == PlatformTag.PREPROCESSED:
        return "Great, your DataSet is preprocessed correctly and ready to use."
    if tag == PlatformTag.OTHER:
        return "We couldn't identify your data format automatically. Please map your columns manually."
    return f"We detected that your data is imported from {tag.value}."
