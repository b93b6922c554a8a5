"""
Forward search: source file and line to a position on a page.
"""

import asyncio
import bisect
from collections.abc import Sequence

from tex_sync.core.exceptions import NoLineRecorded, NoSuchFileInSyncTex
from tex_sync.synctex import paths
from tex_sync.synctex.geometry import Rectangle
from tex_sync.synctex.model import Block, ForwardResult, SyncTexDocument


def _first_page_blocks(page_blocks: dict[int, list[Block]]) -> list[Block]:
    return page_blocks[min(page_blocks)]


def _recorded_lines(
    line_page_blocks: dict[int, dict[int, list[Block]]],
) -> list[tuple[int, list[Block], Rectangle]]:
    recorded = []
    for line in sorted(line_page_blocks):
        page_blocks = line_page_blocks[line]
        if not page_blocks:
            continue
        blocks = _first_page_blocks(page_blocks)
        rect = Rectangle.covering(blocks)
        # Lines made only of kerns and rules have nothing to point at.
        if rect.is_degenerate:
            continue
        recorded.append((line, blocks, rect))
    return recorded


async def find_input_file(
    document: SyncTexDocument, file_path: str, encodings: Sequence[str] | None = None
) -> str | None:
    return await asyncio.to_thread(paths.resolve, document.files, file_path, encodings)


async def locate(
    document: SyncTexDocument,
    file_path: str,
    line: int,
    encodings: Sequence[str] | None = None,
) -> ForwardResult:
    input_file = await find_input_file(document, file_path, encodings)
    if input_file is None:
        raise NoSuchFileInSyncTex(file_path, document.files)

    recorded = _recorded_lines(document.blocks_by_file[input_file])
    if not recorded:
        raise NoLineRecorded(f"No line of {input_file} is recorded in the synctex file.")

    offset = document.offset
    line_nums = [entry[0] for entry in recorded]
    i = bisect.bisect_left(line_nums, line)

    if i == len(recorded):
        _, blocks, rect = recorded[-1]
        return ForwardResult(page=blocks[0].page, x=rect.left + offset.x, y=rect.bottom + offset.y)

    if i == 0 or line_nums[i] == line:
        _, blocks, rect = recorded[i]
        return ForwardResult(page=blocks[0].page, x=rect.left + offset.x, y=rect.bottom + offset.y)

    line0, _, rect0 = recorded[i - 1]
    line1, blocks1, rect1 = recorded[i]
    if rect0.bottom < rect1.bottom:
        bottom = rect0.bottom * (line1 - line) / (line1 - line0) + rect1.bottom * (line - line0) / (line1 - line0)
    else:
        bottom = rect1.bottom
    return ForwardResult(page=blocks1[0].page, x=rect1.left + offset.x, y=bottom + offset.y)
