"""Utility functions for the onenote-stats tool."""

import logging
import re
from pathlib import Path

from onenote_stats.errors import OutputPathError

logger = logging.getLogger(__name__)

_BACKUP_SUFFIX = re.compile(r"\s*\(On\s+(\d+)-(\d+)-(\d+)(?:\s*-\s*\d+)?\)")


def section_name_from_filename(filename: str) -> str:
    """Extract a clean section name from a .one filename.

    Examples:
        'ADI (On 2-25-26).one' -> 'ADI'
        'ADP.one (On 8-24-25).one' -> 'ADP'
    """
    name = Path(filename).stem
    name = _BACKUP_SUFFIX.sub("", name)
    # 'Name.one (On date).one' leaves a trailing '.one'
    name = re.sub(r"\.one$", "", name, flags=re.IGNORECASE)
    return name.strip() or "Untitled"


def _backup_date(filename: str) -> tuple[int, int, int]:
    """Return the (year, month, day) of a backup copy, or zeros if undated."""
    match = _BACKUP_SUFFIX.search(filename)
    if not match:
        return (0, 0, 0)
    month, day, year = (int(g) for g in match.groups())
    if year < 100:
        year += 2000 if year < 50 else 1900
    return (year, month, day)


def deduplicate_sections(files: list[Path]) -> list[Path]:
    """Keep only the newest copy of each section, sorted by section name.

    OneNote backups sit next to each other as 'ADI (On 10-3-22).one' and
    'ADI (On 2-25-26).one'; dated copies win over undated ones.
    """
    versions: dict[str, list[Path]] = {}
    for f in files:
        versions.setdefault(section_name_from_filename(f.name), []).append(f)

    result: list[Path] = []
    for section_name, copies in sorted(versions.items()):
        copies.sort(key=lambda p: _backup_date(p.name), reverse=True)
        result.append(copies[0])
        if len(copies) > 1:
            logger.info(
                "Section '%s': using %s, skipping older: %s",
                section_name,
                copies[0].name,
                ", ".join(p.name for p in copies[1:]),
            )
    return result


def default_output_path(notebook_nickname: str) -> Path:
    """Return '<nickname>.tsv' in the current directory."""
    return Path(f"{notebook_nickname}.tsv")


def validate_output_path(path: str | Path) -> Path:
    """Check that ``path`` can be created as a new file.

    Returns the absolute path.  Raises ``OutputPathError`` if the parent
    directory is missing or the path already exists.
    """
    path = Path(path).resolve()
    if not path.parent.is_dir():
        raise OutputPathError(
            f'Could not find the parent folder path "{path.parent}".', path
        )
    if path.is_dir():
        raise OutputPathError(f'The output path "{path}" is a directory.', path)
    if path.exists():
        raise OutputPathError(f'The output file "{path}" already exists.', path)
    return path
