"""Page record model: one exported row per OneNote page."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class PageRecord:
    """A page flattened out of the hierarchy, with its location."""

    page_id: str
    name: str
    creation_time: datetime
    last_modified_time: datetime
    level: int
    location: str
    is_currently_viewed: str | None = None
