"""Page metadata reader for MS-ONESTORE (.one) section files.

pyOneNote does the binary parsing; this module groups its objects into
pages and keeps only what an inventory needs: identity, title, level
and timestamps.
"""

import ast
import logging
import re
import struct
from dataclasses import dataclass, field
from pathlib import Path

from pyOneNote.FileNode import PropertyID, PropertySet
from pyOneNote.Header import Header
from pyOneNote.OneDocument import OneDocment

logger = logging.getLogger(__name__)

# Byte widths of the fixed-size property types (MS-ONESTORE 2.6.6)
_FIXED_WIDTH_TYPES = {0x3: "c", 0x4: "2s", 0x5: "4s", 0x6: "8s"}


def _patch_pyonenote() -> None:
    """Fix two pyOneNote defects that break section parsing.

    ``ObjectSpaceObjectStreamOfIDs.read()`` never advances its cursor, so
    every OSID in a property set resolves to the first one.  And
    ``PropertySet`` rejects type 0x10 (prtArrayOfPropertyValues), which
    real notebooks use: a uint32 count, then a PropertyID when the count
    is non-zero, then that many nested property sets.
    """
    from pyOneNote.FileNode import (
        ObjectSpaceObjectStreamOfIDs,
        PrtFourBytesOfLengthFollowedByData,
    )

    def _read_next(self):
        if self.head >= len(self.body):
            return None
        value = self.body[self.head]
        self.head += 1
        return value

    def _counted_ids(file, table, ptype, array_type):
        count = struct.unpack("<I", file.read(4))[0] if ptype == array_type else 1
        return PropertySet.get_compact_ids(table, count)

    def _init(self, file, OIDs=None, OSIDs=None, ContextIDs=None, document=None):
        self.current = file.tell()
        (self.cProperties,) = struct.unpack("<H", file.read(2))
        self.indent = ""
        self.document = document
        self.current_revision = document.cur_revision if document else None
        self._formated_properties = None
        self.rgPrids = [PropertyID(file) for _ in range(self.cProperties)]

        self.rgData = []
        for i, prid in enumerate(self.rgPrids):
            ptype = prid.type
            if ptype == 0x1:
                value = None
            elif ptype == 0x2:
                value = prid.boolValue
            elif ptype in _FIXED_WIDTH_TYPES:
                fmt = _FIXED_WIDTH_TYPES[ptype]
                value = struct.unpack(fmt, file.read(struct.calcsize(fmt)))[0]
            elif ptype == 0x7:
                value = PrtFourBytesOfLengthFollowedByData(file, self)
            elif ptype in (0x8, 0x9):
                value = _counted_ids(file, OIDs, ptype, 0x9)
            elif ptype in (0xA, 0xB):
                value = _counted_ids(file, OSIDs, ptype, 0xB)
            elif ptype in (0xC, 0xD):
                value = _counted_ids(file, ContextIDs, ptype, 0xD)
            elif ptype == 0x10:
                (count,) = struct.unpack("<I", file.read(4))
                value = []
                if count:
                    PropertyID(file)  # element prid, always type 0x11
                    value = [
                        PropertySet(file, OIDs, OSIDs, ContextIDs, document)
                        for _ in range(count)
                    ]
            elif ptype == 0x11:
                value = PropertySet(file, OIDs, OSIDs, ContextIDs, document)
            else:
                raise ValueError(f"rgPrids[{i}].type 0x{ptype:x} is not valid")
            self.rgData.append(value)

    ObjectSpaceObjectStreamOfIDs.read = _read_next
    PropertySet.__init__ = _init


_patch_pyonenote()

_PAGE_META = "jcidPageMetaData"
_PAGE_NODE = "jcidPageNode"
_SECTION_META = "jcidSectionMetaData"


@dataclass
class ExtractedObject:
    """A parsed object from the OneNote file."""
    obj_type: str
    identity: str
    properties: dict[str, object] = field(default_factory=dict)


@dataclass
class ExtractedPage:
    """Inventory metadata of one page."""
    guid: str = ""
    title: str = ""
    level: int = 0
    creation_time: str = ""
    last_modified: str = ""


@dataclass
class ExtractedSection:
    """All pages found in a single .one file."""
    display_name: str = ""
    pages: list[ExtractedPage] = field(default_factory=list)


class OneStoreParser:
    """Parses a MS-ONESTORE (.one) file using pyOneNote."""

    def __init__(self, file_path: str | Path) -> None:
        self.file_path = Path(file_path)

    def parse(self) -> ExtractedSection:
        """Parse the .one file and return its page metadata."""
        with open(self.file_path, "rb") as f:
            doc = OneDocment(f)

        if doc.header.guidFileType != Header.ONE_UUID:
            raise ValueError(f"{self.file_path} is not a .one file")

        objects = [
            ExtractedObject(
                obj_type=raw["type"],
                identity=raw["identity"],
                properties=dict(raw["val"]),
            )
            for raw in doc.get_properties()
        ]
        section = ExtractedSection(
            display_name=_extract_section_name(objects),
            pages=_build_pages(objects),
        )
        logger.debug("%s: %d page(s)", self.file_path.name, len(section.pages))
        return section


def _extract_section_name(objects: list[ExtractedObject]) -> str:
    for obj in objects:
        if obj.obj_type == _SECTION_META:
            name = obj.properties.get("SectionDisplayName", "")
            if name:
                return _clean_text(str(name))
    return ""


def _build_pages(objects: list[ExtractedObject]) -> list[ExtractedPage]:
    """Build one page per GUID that owns a page node, in file order.

    OneNote keeps several revisions per page.  Metadata normally shares
    the page node's GUID; metadata left over from older revisions has
    its own GUID and is only used when a page node has none.
    """
    meta_by_guid: dict[str, ExtractedObject] = {}
    node_by_guid: dict[str, ExtractedObject] = {}

    for obj in objects:
        guid = _extract_guid(obj.identity)
        if obj.obj_type == _PAGE_META:
            # Later revisions overwrite earlier ones
            meta_by_guid[guid] = obj
        elif obj.obj_type == _PAGE_NODE:
            node_by_guid.setdefault(guid, obj)

    orphan_metas = [m for g, m in meta_by_guid.items() if g not in node_by_guid]

    pages: list[ExtractedPage] = []
    for guid, page_node in node_by_guid.items():
        meta = meta_by_guid.get(guid)
        if meta is None and orphan_metas:
            meta = orphan_metas.pop(0)

        page = ExtractedPage(
            guid=guid,
            last_modified=_clean_text(str(page_node.properties.get("LastModifiedTime", ""))),
        )
        if meta is not None:
            props = meta.properties
            page.title = _clean_text(str(props.get("CachedTitleString", "")))
            page.level = _parse_int(props.get("PageLevel", 0))
            page.creation_time = _clean_text(
                str(props.get("TopologyCreationTimeStamp", ""))
            )
        pages.append(page)

    return pages


def _extract_guid(identity_str: str) -> str:
    """Extract the GUID from an ExtendedGUID identity string.

    Input format: '<ExtendedGUID> (guid-string, n)'
    """
    match = re.search(r"\(([^,]+),", identity_str)
    if match:
        return match.group(1).strip()
    return ""


def _clean_text(text: str) -> str:
    return text.replace("\x00", "").strip()


def _parse_int(value: object) -> int:
    """Parse an integer from the forms pyOneNote returns.

    Four-byte properties arrive either as ``bytes`` or as their ``repr()``
    string (e.g. ``"b'\\x0a\\x00\\x00\\x00'"``); both are little-endian
    signed integers.
    """
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.startswith(("b'", 'b"')):
        try:
            value = ast.literal_eval(value)
        except (ValueError, SyntaxError):
            return 0
    if isinstance(value, bytes):
        return int.from_bytes(value[:4], "little", signed=True)
    if isinstance(value, str):
        match = re.search(r"-?\d+", value)
        if match:
            return int(match.group())
    return 0
