"""Tests for onenote_stats.converter.tabular module."""

from datetime import datetime

import pytest

from onenote_stats.converter.tabular import (
    HEADER,
    TabularExporter,
    format_timestamp,
)
from onenote_stats.errors import OutputPathError
from onenote_stats.model.page import PageRecord

HEADER_LINE = '"PageName"\t"LastModifiedTime"\t"DateTime"\t"PageLevel"\t"IsCurrentlyViewed"\t"Location"\t"Id"'


def _record(**kwargs) -> PageRecord:
    fields = dict(
        page_id="p-1",
        name="Today",
        creation_time=datetime(2024, 1, 1, 9, 0, 0),
        last_modified_time=datetime(2024, 1, 2, 10, 30, 0),
        level=0,
        location="\\Work\\Tasks",
    )
    fields.update(kwargs)
    return PageRecord(**fields)


class TestFormatTimestamp:
    """Tests for format_timestamp."""

    def test_morning(self):
        assert format_timestamp(datetime(2024, 1, 2, 10, 30)) == "2024/01/02 10:30:00"

    def test_afternoon_uses_twelve_hour_clock(self):
        assert format_timestamp(datetime(2024, 1, 2, 15, 5, 9)) == "2024/01/02 03:05:09"

    def test_midnight(self):
        assert format_timestamp(datetime(2024, 1, 2, 0, 0)) == "2024/01/02 12:00:00"

    def test_twenty_four_hour_clock(self):
        assert format_timestamp(datetime(2024, 1, 2, 15, 5, 9), clock=24) == "2024/01/02 15:05:09"


class TestRender:
    """Tests for TabularExporter.render."""

    def test_empty_list_is_header_only(self):
        assert TabularExporter().render([]) == [HEADER_LINE]

    def test_header_fields(self):
        assert len(HEADER) == 7

    def test_line_per_record(self):
        records = [_record(page_id=f"p-{i}") for i in range(5)]
        assert len(TabularExporter().render(records)) == 6

    def test_record_line(self):
        lines = TabularExporter().render([_record()])
        assert lines[1] == (
            '"Today"\t"2024/01/02 10:30:00"\t"2024/01/01 09:00:00"\t"0"\t""'
            '\t"\\Work\\Tasks"\t"p-1"'
        )

    def test_currently_viewed_rendered(self):
        lines = TabularExporter().render([_record(is_currently_viewed="true")])
        assert lines[1].split("\t")[4] == '"true"'

    def test_empty_marker_matches_missing_marker(self):
        exporter = TabularExporter()
        missing = exporter.render([_record()])[1]
        empty = exporter.render([_record(is_currently_viewed="")])[1]
        assert missing == empty

    def test_order_preserved(self):
        records = [_record(name=n) for n in ("b", "a", "c")]
        lines = TabularExporter().render(records)
        assert [line.split("\t")[0] for line in lines[1:]] == ['"b"', '"a"', '"c"']

    def test_separator_override(self):
        lines = TabularExporter().render([_record()], separator=",")
        assert lines[0].startswith('"PageName","LastModifiedTime"')
        assert lines[1].count(",") == 6

    def test_no_quote_escaping(self):
        lines = TabularExporter().render([_record(name='Say "hi"')])
        assert lines[1].startswith('"Say "hi""\t')

    def test_invalid_clock(self):
        with pytest.raises(ValueError):
            TabularExporter(clock=13)


class TestWrite:
    """Tests for TabularExporter.write."""

    def test_writes_utf16_lines(self, tmp_path):
        path = tmp_path / "Work.tsv"
        TabularExporter().write([_record(name="Über")], path)
        raw = path.read_bytes()
        assert raw[:2] in (b"\xff\xfe", b"\xfe\xff")
        text = raw.decode("utf-16")
        assert text.endswith("\r\n")
        lines = text.splitlines()
        assert lines[0] == HEADER_LINE
        assert lines[1].startswith('"Über"')

    def test_refuses_existing_file(self, tmp_path):
        path = tmp_path / "Work.tsv"
        path.write_text("keep me")
        with pytest.raises(OutputPathError):
            TabularExporter().write([_record()], path)
        assert path.read_text() == "keep me"

    def test_missing_parent(self, tmp_path):
        with pytest.raises(OutputPathError):
            TabularExporter().write([], tmp_path / "nope" / "out.tsv")
