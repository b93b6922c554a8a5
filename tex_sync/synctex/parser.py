"""
Parser for the SyncTeX text format.

Only the records needed to rebuild the box tree and the per-line index are
interpreted; everything else (byte counts, postamble, ...) is skipped.
"""

import logging
import re

from tex_sync.core.exceptions import SyncTexParseError
from tex_sync.synctex.model import Block, BlockType, Offset, SyncTexDocument, index_blocks

logger = logging.getLogger(__name__)

# scaled points per big point
SP_PER_BP = 65781.76

_VERSION_PREFIX = "SyncTeX Version:"

_INPUT_PATTERN = re.compile(r"Input:(\d+):(.*)$")
_OFFSET_PATTERN = re.compile(r"([XY]) Offset:(-?\d+)")
_MAGNIFICATION_PATTERN = re.compile(r"Magnification:(\d+(?:\.\d+)?)")
_UNIT_PATTERN = re.compile(r"Unit:(\d+(?:\.\d+)?)")
_OPEN_PAGE_PATTERN = re.compile(r"\{(\d+)$")
_CLOSE_PAGE_PATTERN = re.compile(r"\}(\d+)$")
_OPEN_BOX_PATTERN = re.compile(r"([\[(])(\d+),(\d+):(-?\d+),(-?\d+):(-?\d+),(-?\d+),(-?\d+)")
_ELEMENT_PATTERN = re.compile(r"(.)(\d+),(\d+):(-?\d+),(-?\d+)(?::(-?\d+))?")

_ELEMENT_TYPES = {
    "k": BlockType.KERN,
    "r": BlockType.RULE,
    "g": BlockType.GLUE,
    "h": BlockType.HBOX,
    "v": BlockType.VBOX,
}


class _Cursor:
    """Mutable state while walking the records of one page."""

    def __init__(self):
        self.page: int | None = None
        self.top_level: list[Block] = []
        self.stack: list[Block] = []

    @property
    def container(self) -> Block | None:
        return self.stack[-1] if self.stack else None

    def attach(self, block: Block) -> None:
        parent = self.container
        if parent is None:
            self.top_level.append(block)
        else:
            parent.elements.append(block)


def parse(text: str) -> SyncTexDocument:
    """Build a :class:`SyncTexDocument` from decoded synctex text."""
    lines = text.split("\n")

    header_index = _find_header(lines)
    version = lines[header_index][len(_VERSION_PREFIX) :].strip()

    inputs: dict[int, str] = {}
    pages: dict[int, list[Block]] = {}
    leaves: list[Block] = []
    magnification = 1000.0
    unit = 1.0
    factor = _scale_factor(unit, magnification)
    offset_x = offset_y = 0
    cursor = _Cursor()

    for number, line in enumerate(lines[header_index + 1 :], start=header_index + 2):
        line = line.rstrip("\r")
        if not line:
            continue

        match = _INPUT_PATTERN.match(line)
        if match:
            inputs[int(match.group(1))] = match.group(2)
            continue

        match = _OFFSET_PATTERN.match(line)
        if match:
            if match.group(1) == "X":
                offset_x = int(match.group(2))
            else:
                offset_y = int(match.group(2))
            continue

        match = _MAGNIFICATION_PATTERN.match(line)
        if match:
            magnification = float(match.group(1))
            factor = _scale_factor(unit, magnification)
            continue

        match = _UNIT_PATTERN.match(line)
        if match:
            unit = float(match.group(1))
            factor = _scale_factor(unit, magnification)
            continue

        match = _OPEN_PAGE_PATTERN.match(line)
        if match:
            cursor = _Cursor()
            cursor.page = int(match.group(1))
            continue

        match = _CLOSE_PAGE_PATTERN.match(line)
        if match:
            if cursor.stack:
                logger.debug("page %s closed with %d open boxes", match.group(1), len(cursor.stack))
            while cursor.stack:
                _close_box(cursor)
            if cursor.page is not None:
                pages[cursor.page] = cursor.top_level
            cursor = _Cursor()
            continue

        match = _OPEN_BOX_PATTERN.match(line)
        if match:
            page = _current_page(cursor, number)
            box = Block(
                type=BlockType.VBOX if match.group(1) == "[" else BlockType.HBOX,
                page=page,
                left=int(match.group(4)) * factor,
                bottom=int(match.group(5)) * factor,
                width=int(match.group(6)) * factor,
                height=int(match.group(7)) * factor,
                depth=int(match.group(8)) * factor,
                elements=[],
                file=_input_path(inputs, int(match.group(2)), number),
                line=int(match.group(3)),
            )
            cursor.stack.append(box)
            continue

        if line in ("]", ")"):
            if cursor.stack:
                _close_box(cursor)
            continue

        match = _ELEMENT_PATTERN.match(line)
        if match:
            page = _current_page(cursor, number)
            parent = cursor.container
            width = match.group(6)
            element = Block(
                type=_ELEMENT_TYPES.get(match.group(1), BlockType.OTHER),
                page=page,
                left=int(match.group(4)) * factor,
                bottom=int(match.group(5)) * factor,
                width=int(width) * factor if width is not None else None,
                height=parent.height if parent is not None else None,
                file=_input_path(inputs, int(match.group(2)), number),
                line=int(match.group(3)),
            )
            cursor.attach(element)
            leaves.append(element)
            continue

    return SyncTexDocument(
        offset=Offset(x=offset_x * factor, y=offset_y * factor),
        blocks_by_file=index_blocks(leaves),
        version=version,
        inputs=inputs,
        pages=pages,
        magnification=magnification,
        unit=unit,
    )


def _find_header(lines: list[str]) -> int:
    for index, line in enumerate(lines):
        if not line.strip():
            continue
        if line.startswith(_VERSION_PREFIX):
            return index
        break
    raise SyncTexParseError("Missing 'SyncTeX Version:' header")


def _scale_factor(unit: float, magnification: float) -> float:
    return unit * magnification / 1000.0 / SP_PER_BP


def _close_box(cursor: _Cursor) -> None:
    box = cursor.stack.pop()
    cursor.attach(box)


def _current_page(cursor: _Cursor, number: int) -> int:
    if cursor.page is None:
        raise SyncTexParseError(f"Record outside of a page at line {number}")
    return cursor.page


def _input_path(inputs: dict[int, str], tag: int, number: int) -> str:
    try:
        return inputs[tag]
    except KeyError:
        raise SyncTexParseError(f"Undeclared input tag {tag} at line {number}") from None
