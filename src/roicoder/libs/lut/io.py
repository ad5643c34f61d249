"""Readers for custom LUT files.

Two layouts are recognised:

* ImageJ binary LUTs: 768 raw bytes (256 reds, then greens, then blues) or an
  NIH Image file with a 32-byte ``ICOL`` header followed by the three channel
  planes.
* Text tables: one color per line, either ``r g b`` or ``index r g b``,
  separated by whitespace, commas or tabs. Blank lines, ``#`` comments and a
  single non-numeric header row are ignored.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Optional

from .table import InvalidLUTError, LookupTable, RGB

logger = logging.getLogger(__name__)

_RAW_LUT_SIZE = 768
_NIH_HEADER_SIZE = 32
_NIH_MAGIC = b"ICOL"
_SEPARATORS = re.compile(r"[\s,;]+")
_TEXT_BYTES = frozenset(b"0123456789+-.eE,;# \t\r\n")


def _looks_textual(data: bytes) -> bool:
    return all(byte in _TEXT_BYTES for byte in data)


def _from_planes(name: str, payload: bytes) -> LookupTable:
    if not payload or len(payload) % 3:
        raise InvalidLUTError(
            f"Binary LUT '{name}' has {len(payload)} color bytes; expected three equal planes"
        )
    count = len(payload) // 3
    reds = payload[:count]
    greens = payload[count : 2 * count]
    blues = payload[2 * count :]
    return LookupTable.from_colors(name, zip(reds, greens, blues))


def _parse_text(name: str, text: str) -> LookupTable:
    colors: List[RGB] = []
    header_skipped = False
    for line_no, raw_line in enumerate(text.splitlines(), start=1):
        line = raw_line.split("#", 1)[0].strip()
        if not line:
            continue
        fields = [field for field in _SEPARATORS.split(line) if field]
        try:
            values = [int(round(float(field))) for field in fields]
        except ValueError:
            if not colors and not header_skipped:
                header_skipped = True
                continue
            raise InvalidLUTError(
                f"LUT '{name}' line {line_no} is not numeric: {raw_line!r}"
            ) from None
        if len(values) == 4:
            values = values[1:]
        if len(values) != 3:
            raise InvalidLUTError(
                f"LUT '{name}' line {line_no} has {len(values)} columns; expected 3 or 4"
            )
        colors.append((values[0], values[1], values[2]))
    return LookupTable.from_colors(name, colors)


def load_lut(path: Path, *, name: Optional[str] = None) -> LookupTable:
    """Load a custom LUT from *path*."""

    path = Path(path).expanduser()
    lut_name = name or path.stem
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise InvalidLUTError(f"Unable to read LUT file {path}: {exc}") from exc

    if not data:
        raise InvalidLUTError(f"LUT file {path} is empty")

    if len(data) == _RAW_LUT_SIZE and not _looks_textual(data):
        lut = _from_planes(lut_name, data)
        layout = "raw"
    elif data[:4] == _NIH_MAGIC and len(data) > _NIH_HEADER_SIZE:
        lut = _from_planes(lut_name, data[_NIH_HEADER_SIZE:])
        layout = "nih"
    else:
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidLUTError(
                f"LUT file {path} is neither a binary nor a text table"
            ) from exc
        lut = _parse_text(lut_name, text)
        layout = "text"

    logger.debug("Loaded %s LUT '%s' with %d entries from %s", layout, lut.name, len(lut), path)
    return lut
