from tex_sync.synctex.geometry import Rectangle
from tex_sync.synctex.loader import load
from tex_sync.synctex.model import (
    BackwardResult,
    Block,
    BlockType,
    ForwardResult,
    Offset,
    SyncTexDocument,
)
from tex_sync.synctex.parser import parse

__all__ = [
    "BackwardResult",
    "Block",
    "BlockType",
    "ForwardResult",
    "Offset",
    "Rectangle",
    "SyncTexDocument",
    "load",
    "parse",
]
