"""
Locating and loading the synctex data of a PDF.

``<name>.synctex`` is tried before ``<name>.synctex.gz``; the uncompressed
file, when it parses, always wins.
"""

import asyncio
import gzip
import logging
import zlib
from pathlib import Path

from tex_sync.core.exceptions import SyncTexNotFoundError, SyncTexParseError
from tex_sync.synctex import encoding
from tex_sync.synctex.model import SyncTexDocument
from tex_sync.synctex.parser import parse

logger = logging.getLogger(__name__)

_READ_ERRORS = (OSError, EOFError, zlib.error, SyncTexParseError)


def synctex_paths(pdf_path: str | Path) -> tuple[Path, Path]:
    pdf_path = Path(pdf_path)
    synctex_file = (pdf_path.parent / (pdf_path.stem + ".synctex")).resolve()
    return synctex_file, Path(str(synctex_file) + ".gz")


def _load_plain(path: Path) -> SyncTexDocument:
    return parse(encoding.decode(path.read_bytes()))


def _load_gzip(path: Path) -> SyncTexDocument:
    return parse(encoding.decode(gzip.decompress(path.read_bytes())))


async def load(pdf_path: str | Path) -> SyncTexDocument:
    synctex_file, synctex_file_gz = synctex_paths(pdf_path)
    attempted = []

    for path, reader in ((synctex_file, _load_plain), (synctex_file_gz, _load_gzip)):
        try:
            return await asyncio.to_thread(reader, path)
        except _READ_ERRORS as e:
            if await asyncio.to_thread(path.exists):
                attempted.append(str(path))
                logger.error("parse synctex failed with %s: %s", path, e)

    if not attempted:
        logger.error(".synctex and .synctex.gz file not found: %s, %s", synctex_file, synctex_file_gz)
        raise SyncTexNotFoundError(str(pdf_path), [str(synctex_file), str(synctex_file_gz)])

    raise SyncTexParseError(f"parse synctex failed for {pdf_path}", attempted)
