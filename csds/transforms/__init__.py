"""Row transformers for each supported source platform."""

from typing import Dict, Optional, Tuple, Type

from ..config import DEFAULT_ACCOUNT_SOURCES, DEFAULT_OBJECT_ID_SOURCES, PlatformTag
from .base import BaseRowTransformer
from .bluesky import BlueSkyTransform
from .facebook import FacebookTransform
from .instagram import InstagramTransform
from .other import OtherTransform
from .preprocessed import PreprocessedTransform
from .telegram import TelegramTransform
from .tiktok import TikTokTransform
from .youtube import YouTubeTransform

__all__ = [
    "BaseRowTransformer",
    "BlueSkyTransform",
    "FacebookTransform",
    "InstagramTransform",
    "OtherTransform",
    "PreprocessedTransform",
    "TelegramTransform",
    "TikTokTransform",
    "YouTubeTransform",
    "TRANSFORM_MAP",
    "get_transformer",
    "default_sources",
]

TRANSFORM_MAP: Dict[PlatformTag, Type[BaseRowTransformer]] = {
    cls.platform: cls
    for cls in (
        PreprocessedTransform,
        YouTubeTransform,
        TikTokTransform,
        FacebookTransform,
        InstagramTransform,
        TelegramTransform,
        BlueSkyTransform,
        OtherTransform,
    )
}

_unhandled = set(PlatformTag) - set(TRANSFORM_MAP)
if _unhandled:
    raise RuntimeError(f"No row transformer registered for: {sorted(t.value for t in _unhandled)}")


def get_transformer(platform) -> BaseRowTransformer:
    """Return a transformer for a PlatformTag (or its string value)."""
    try:
        tag = PlatformTag(platform)
    except ValueError:
        raise ValueError(f"Unknown platform: {platform!r}") from None
    return TRANSFORM_MAP[tag]()


def default_sources(platform: PlatformTag) -> Tuple[Optional[str], Optional[str]]:
    """Auto-selected (account_source, object_id_source) for single-option platforms."""
    return DEFAULT_ACCOUNT_SOURCES.get(platform), DEFAULT_OBJECT_ID_SOURCES.get(platform)
