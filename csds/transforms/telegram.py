"""Telegram channel export transform."""

from typing import Optional

from ..config import PlatformTag
from ..config.platforms import TELEGRAM_AUTHOR, TELEGRAM_CHANNEL, TELEGRAM_MESSAGE_TEXT
from ..models import RawRow, SourceOption
from .base import BaseRowTransformer, Extracted
from .utils import clean_text

# account source -> (name column, id column)
ACCOUNT_COLUMNS = {
    TELEGRAM_CHANNEL: ("channel_name", "channel_id"),
    TELEGRAM_AUTHOR: ("post_author", "sender_id"),
}


class TelegramTransform(BaseRowTransformer):
    """Account is "{name} {id}" of either the channel or the post author."""

    platform = PlatformTag.TELEGRAM
    fields = (
        "channel_name",
        "channel_id",
        "post_author",
        "sender_id",
        "message_id",
        "message_text",
        "date",
    )
    account_source_options = (
        SourceOption(TELEGRAM_CHANNEL, "Channel (channel_name, channel_id)"),
        SourceOption(TELEGRAM_AUTHOR, "Author (post_author, sender_id)"),
    )
    object_id_source_options = (
        SourceOption(
            TELEGRAM_MESSAGE_TEXT,
            "For Telegram, 'message_text' is automatically selected as the Object ID source.",
        ),
    )

    def _extract(
        self, row: RawRow, account_source: Optional[str], object_id_source: Optional[str]
    ) -> Optional[Extracted]:
        columns = ACCOUNT_COLUMNS.get(account_source or "")
        if columns is None:
            return None
        name_column, id_column = columns
        # Either part may be blank; the joined value is trimmed and must not be empty.
        account = f"{clean_text(row.get(name_column))} {clean_text(row.get(id_column))}"
        return account, row.get("message_id"), row.get("message_text"), row.get("date")
