"""
Backward search: a point on a page to the source line that produced it.
"""

import math
from dataclasses import dataclass, field

from tex_sync.core.exceptions import NoEntriesInSyncTex, NoMatchFound
from tex_sync.synctex.geometry import Rectangle
from tex_sync.synctex.model import BackwardResult, SyncTexDocument


@dataclass
class _Record:
    input: str | None = None
    line: int = 0
    distance_from_center: float = math.inf
    rect: Rectangle = field(default_factory=Rectangle.unbounded)

    def accepts(self, rect: Rectangle, distance: float) -> bool:
        # A box nested in the current best always wins; otherwise the nearer
        # center wins unless the candidate encloses the current best.
        return self.rect.includes(rect) or (distance < self.distance_from_center and not rect.includes(self.rect))


async def locate(document: SyncTexDocument, page: int, x: float, y: float) -> BackwardResult:
    x0 = x - document.offset.x
    y0 = y - document.offset.y

    if not document.blocks_by_file:
        raise NoEntriesInSyncTex("No entry of the tex file found in the synctex file.")

    record = _Record()
    for file_name, line_page_blocks in document.blocks_by_file.items():
        for line, page_blocks in line_page_blocks.items():
            for block in page_blocks.get(page, ()):
                if not block.is_measurable:
                    continue
                rect = Rectangle.from_block(block)
                distance = rect.distance_from_center(x0, y0)
                if record.accepts(rect, distance):
                    record.input = file_name
                    record.line = line
                    record.distance_from_center = distance
                    record.rect = rect

    if record.input is None:
        raise NoMatchFound(f"Cannot find any line to jump to on page {page}.")

    return BackwardResult(file=record.input, line=record.line, column=0)
