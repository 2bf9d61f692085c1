"""Facebook (Meta Content Library) export transform."""

from typing import Optional

from ..config import PlatformTag
from ..config.platforms import (
    FACEBOOK_LINK,
    FACEBOOK_POST_OWNER,
    FACEBOOK_SURFACE,
    FACEBOOK_TEXT,
)
from ..models import RawRow, SourceOption
from .base import BaseRowTransformer, Extracted, present

# account source -> (id column, name column)
ACCOUNT_COLUMNS = {
    FACEBOOK_POST_OWNER: ("post_owner.id", "post_owner.name"),
    FACEBOOK_SURFACE: ("surface.id", "surface.name"),
}

OBJECT_COLUMNS = {
    FACEBOOK_TEXT: "text",
    FACEBOOK_LINK: "link_attachment.link",
}


class FacebookTransform(BaseRowTransformer):
    """Account is "{name} ({id})" of either the post owner or the surface."""

    platform = PlatformTag.FACEBOOK
    fields = (
        "post_owner.id",
        "post_owner.name",
        "surface.id",
        "surface.name",
        "id",
        "text",
        "link_attachment.link",
        "creation_time",
    )
    account_source_options = (
        SourceOption(FACEBOOK_POST_OWNER, "Post Owner (post_owner.id, post_owner.name)"),
        SourceOption(FACEBOOK_SURFACE, "Surface (surface.id, surface.name)"),
    )
    object_id_source_options = (
        SourceOption(FACEBOOK_TEXT, "Text content (text)"),
        SourceOption(FACEBOOK_LINK, "Link attachment (link_attachment.link)"),
    )

    def _extract(
        self, row: RawRow, account_source: Optional[str], object_id_source: Optional[str]
    ) -> Optional[Extracted]:
        columns = ACCOUNT_COLUMNS.get(account_source or "")
        object_column = OBJECT_COLUMNS.get(object_id_source or "")
        if columns is None or object_column is None:
            return None

        id_column, name_column = columns
        if not present(row, id_column, name_column):
            return None
        account = f"{str(row[name_column]).strip()} ({str(row[id_column]).strip()})"

        return account, row.get("id"), row.get(object_column), row.get("creation_time")
