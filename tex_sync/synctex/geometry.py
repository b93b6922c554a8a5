"""
Rectangles derived from synctex blocks.

y grows downward, so ``top <= bottom`` for every non-degenerate rectangle.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass

from tex_sync.synctex.model import Block


@dataclass(frozen=True)
class Rectangle:
    top: float
    bottom: float
    left: float
    right: float

    @classmethod
    def from_block(cls, block: Block) -> "Rectangle":
        height = block.height or 0.0
        width = block.width or 0.0
        return cls(
            top=block.bottom - height,
            bottom=block.bottom,
            left=block.left,
            right=block.left + width,
        )

    @classmethod
    def covering(cls, blocks: Iterable[Block]) -> "Rectangle":
        """
        Smallest rectangle containing every measurable block.

        With no measurable block the sentinel extrema are returned unchanged;
        check :attr:`is_degenerate` before using the result.
        """
        top = math.inf
        bottom = 0.0
        left = math.inf
        right = 0.0
        for block in blocks:
            # Skip a block if it has boxes inside, or its type is kern or rule.
            if not block.is_measurable:
                continue
            bottom = max(block.bottom, bottom)
            top = min(block.bottom - (block.height or 0.0), top)
            left = min(block.left, left)
            if block.width is not None:
                right = max(block.left + block.width, right)
        return cls(top=top, bottom=bottom, left=left, right=right)

    @classmethod
    def unbounded(cls) -> "Rectangle":
        return cls(top=-math.inf, bottom=math.inf, left=-math.inf, right=math.inf)

    @property
    def is_degenerate(self) -> bool:
        return self.top == math.inf and self.left == math.inf

    def includes(self, other: "Rectangle") -> bool:
        return (
            self.left <= other.left
            and self.right >= other.right
            and self.bottom >= other.bottom
            and self.top <= other.top
        )

    def distance_y(self, y: float) -> float:
        return min(abs(self.bottom - y), abs(self.top - y))

    def distance_xy(self, x: float, y: float) -> float:
        dx = min(abs(self.left - x), abs(self.right - x))
        return math.hypot(dx, self.distance_y(y))

    def distance_from_center(self, x: float, y: float) -> float:
        return math.hypot((self.left + self.right) / 2 - x, (self.bottom + self.top) / 2 - y)
