"""Tabular (TSV) converter for page records.

Renders a header plus one line per page, every field wrapped in double
quotes, and writes the result as UTF-16 text for spreadsheet tools.
"""

import logging
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from onenote_stats.errors import OutputPathError
from onenote_stats.model.page import PageRecord

logger = logging.getLogger(__name__)

HEADER = (
    "PageName",
    "LastModifiedTime",
    "DateTime",
    "PageLevel",
    "IsCurrentlyViewed",
    "Location",
    "Id",
)

# 12-hour clock without an AM/PM marker, kept for compatibility with
# existing exports.  Use clock=24 for unambiguous times.
_TIMESTAMP_FORMATS = {
    12: "%Y/%m/%d %I:%M:%S",
    24: "%Y/%m/%d %H:%M:%S",
}

OUTPUT_ENCODING = "utf-16"
LINE_TERMINATOR = "\r\n"


def format_timestamp(value: datetime, clock: int = 12) -> str:
    """Format ``value`` as ``yyyy/MM/dd hh:mm:ss``."""
    return value.strftime(_TIMESTAMP_FORMATS[clock])


def _wrap_dq(text: str | None) -> str:
    # No escaping of embedded quotes or separators.
    return f'"{text or ""}"'


class TabularExporter:
    """Renders page records as separator-joined, quoted lines."""

    def __init__(self, separator: str = "\t", clock: int = 12) -> None:
        if clock not in _TIMESTAMP_FORMATS:
            raise ValueError(f"clock must be 12 or 24, not {clock!r}")
        self.separator = separator
        self.clock = clock

    def render(
        self, records: Sequence[PageRecord], separator: str | None = None
    ) -> list[str]:
        """Return the header line followed by one line per record."""
        sep = self.separator if separator is None else separator
        lines = [sep.join(_wrap_dq(h) for h in HEADER)]
        for record in records:
            fields = (
                record.name,
                format_timestamp(record.last_modified_time, self.clock),
                format_timestamp(record.creation_time, self.clock),
                str(record.level),
                record.is_currently_viewed,
                record.location,
                record.page_id,
            )
            lines.append(sep.join(_wrap_dq(f) for f in fields))
        return lines

    def write(self, records: Sequence[PageRecord], path: str | Path) -> Path:
        """Render ``records`` and write them to a new file at ``path``.

        Everything is rendered before the file is opened.  The file is
        created exclusively, so an existing target is never truncated.
        """
        path = Path(path)
        lines = self.render(records)
        try:
            with open(path, "x", encoding=OUTPUT_ENCODING, newline="") as f:
                for line in lines:
                    f.write(line + LINE_TERMINATOR)
        except FileExistsError as e:
            raise OutputPathError(f"Output file already exists: {path}", path) from e
        except FileNotFoundError as e:
            raise OutputPathError(
                f"Could not find the parent folder of: {path}", path
            ) from e
        logger.info("Wrote %d record(s) to %s", len(records), path)
        return path
