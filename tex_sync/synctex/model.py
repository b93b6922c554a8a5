"""
Parsed form of a synctex file.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum


class BlockType(Enum):
    HBOX = "horizontal-box"
    VBOX = "vertical-box"
    KERN = "kern"
    RULE = "rule"
    GLUE = "glue"
    OTHER = "other"

    @property
    def is_measurable(self) -> bool:
        # Kerns and rules are never used as positions.
        # See https://github.com/jlaurens/synctex/blob/2017/synctex_parser.c#L4655 for types.
        return _MEASURABLE[self]


_MEASURABLE = {
    BlockType.HBOX: True,
    BlockType.VBOX: True,
    BlockType.KERN: False,
    BlockType.RULE: False,
    BlockType.GLUE: True,
    BlockType.OTHER: True,
}


@dataclass
class Block:
    type: BlockType
    page: int
    left: float
    bottom: float
    width: float | None = None
    height: float | None = None
    depth: float | None = None
    elements: list["Block"] | None = None
    file: str = ""
    line: int = 0

    @property
    def is_container(self) -> bool:
        return self.elements is not None

    @property
    def is_measurable(self) -> bool:
        """Whether the block's own rectangle is a usable position."""
        return not self.is_container and self.type.is_measurable


@dataclass(frozen=True)
class Offset:
    x: float = 0.0
    y: float = 0.0


# file path -> line -> page -> blocks
BlockIndex = dict[str, dict[int, dict[int, list[Block]]]]


def index_blocks(blocks: Iterable[Block]) -> BlockIndex:
    index: BlockIndex = {}
    for block in blocks:
        lines = index.setdefault(block.file, {})
        pages = lines.setdefault(block.line, {})
        pages.setdefault(block.page, []).append(block)
    return index


@dataclass(frozen=True)
class SyncTexDocument:
    """A parsed synctex file. Built once by the parser and not changed after."""

    offset: Offset = field(default_factory=Offset)
    blocks_by_file: BlockIndex = field(default_factory=dict)
    version: str = ""
    inputs: dict[int, str] = field(default_factory=dict)
    pages: dict[int, list[Block]] = field(default_factory=dict)
    magnification: float = 1000.0
    unit: float = 1.0

    @property
    def page_count(self) -> int:
        return max(self.pages, default=0)

    @property
    def files(self) -> list[str]:
        return list(self.blocks_by_file)


@dataclass(frozen=True)
class ForwardResult:
    page: int
    x: float
    y: float


@dataclass(frozen=True)
class BackwardResult:
    file: str
    line: int
    column: int = 0
