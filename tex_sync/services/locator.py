import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path

from tex_sync.core.exceptions import InputFileNotFoundError
from tex_sync.synctex import backward, command, forward, loader, paths
from tex_sync.synctex.model import BackwardResult, ForwardResult, SyncTexDocument

logger = logging.getLogger(__name__)


class SyncTexLocator:
    """
    Forward and backward SyncTeX for one PDF at a time.

    The synctex file is parsed again on every call so results always
    reflect the file on disk. With ``use_builtin_engine`` off, lookups run
    the ``synctex`` command at ``synctex_path`` instead.
    """

    def __init__(
        self,
        encodings: Sequence[str] | None = None,
        resolve_input_path: bool = True,
        use_builtin_engine: bool = True,
        synctex_path: str = command.DEFAULT_SYNCTEX_PATH,
    ):
        self.encodings = tuple(encodings) if encodings else None
        self.resolve_input_path = resolve_input_path
        self.use_builtin_engine = use_builtin_engine
        self.synctex_path = synctex_path or command.DEFAULT_SYNCTEX_PATH

    async def load(self, pdf_path: str | Path) -> SyncTexDocument:
        return await loader.load(pdf_path)

    async def forward(self, line: int, file_path: str, pdf_path: str | Path) -> ForwardResult:
        logger.info("Execute forward synctex: pdf=%s file=%s line=%d", pdf_path, file_path, line)
        if not self.use_builtin_engine:
            return await command.forward(line, file_path, pdf_path, self.synctex_path)
        document = await self.load(pdf_path)
        return await forward.locate(document, file_path, line, self.encodings)

    async def backward(self, page: int, x: float, y: float, pdf_path: str | Path) -> BackwardResult:
        logger.info("Execute backward synctex: pdf=%s page=%d x=%s y=%s", pdf_path, page, x, y)
        if self.use_builtin_engine:
            document = await self.load(pdf_path)
            result = await backward.locate(document, page, x, y)
        else:
            result = await command.backward(page, x, y, pdf_path, self.synctex_path)
        if not self.resolve_input_path:
            return result

        input_path = await asyncio.to_thread(paths.convert_input_path, result.file, self.encodings)
        if input_path is None:
            raise InputFileNotFoundError(result.file)
        return BackwardResult(file=input_path, line=result.line, column=result.column)
