"""
Matching synctex input paths against file-system paths.

A TeX engine running under another locale may record non-ASCII file names
in a different encoding than the current process uses, so besides plain
real-path equality the raw bytes of each recorded path are re-decoded with a
list of legacy encodings until one names the wanted file.
"""

import logging
import os
import sys
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path

from tex_sync.core.exceptions import EncodingError
from tex_sync.synctex import encoding

logger = logging.getLogger(__name__)

LEGACY_ENCODINGS = (
    "utf-8", "utf-16-le", "utf-16-be", "utf-16",
    "shift_jis", "cp932", "euc_jp",
    "gb2312", "gbk", "gb18030", "cp936",
    "euc_kr", "cp949",
    "big5", "big5hkscs", "cp950",
    "cp874", "cp1250", "cp1251", "cp1252",
    "cp1253", "cp1254", "cp1255", "cp1256",
    "cp1257", "cp1258",
    "iso8859_1", "iso8859_2", "iso8859_3", "iso8859_4", "iso8859_5",
    "iso8859_6", "iso8859_7", "iso8859_8", "iso8859_9", "iso8859_10",
    "iso8859_11", "iso8859_13", "iso8859_14", "iso8859_15", "iso8859_16",
    "cp437", "cp737", "cp775",
    "cp850", "cp852", "cp855", "cp856", "cp857", "cp858",
    "cp860", "cp861", "cp862", "cp863", "cp864", "cp865", "cp866", "cp869",
    "cp1125",
    "koi8_r", "koi8_u", "koi8_t",
)


def normalize(file_path: str) -> str:
    norm_path = os.path.normcase(os.path.normpath(file_path))
    if sys.platform == "win32" and len(norm_path) > 1 and norm_path[1] == ":":
        norm_path = norm_path[0].upper() + norm_path[1:]
    return norm_path


def is_same_real_path(path_a: str, path_b: str) -> bool:
    try:
        a = normalize(str(Path(os.path.normpath(path_a)).resolve(strict=True)))
        b = normalize(str(Path(os.path.normpath(path_b)).resolve(strict=True)))
    except (OSError, RuntimeError, ValueError):
        # RuntimeError: symlink loop on Python 3.11
        return False
    return a == b


class FilenameEncodingVariants:
    """
    The path re-decoded under each encoding in turn.

    Iterating twice starts over; encodings that cannot decode the bytes are
    skipped.
    """

    def __init__(self, file_path: str, encodings: Sequence[str] | None = None):
        self.file_path = file_path
        self.encodings = tuple(encodings) if encodings is not None else LEGACY_ENCODINGS

    def __iter__(self) -> Iterator[str]:
        try:
            raw = encoding.encode(self.file_path)
        except EncodingError:
            # Not a pass-through decoded string; use its UTF-8 bytes instead.
            raw = self.file_path.encode("utf-8", errors="surrogateescape")
        for name in self.encodings:
            try:
                yield raw.decode(name)
            except (UnicodeDecodeError, LookupError):
                continue


def resolve(
    candidates: Iterable[str], target: str, encodings: Sequence[str] | None = None
) -> str | None:
    """Return the first candidate naming the same file as ``target``."""
    candidates = list(candidates)
    for candidate in candidates:
        if is_same_real_path(candidate, target):
            return candidate
    for candidate in candidates:
        for converted in FilenameEncodingVariants(candidate, encodings):
            if is_same_real_path(converted, target):
                logger.debug("resolved %r as %r via re-encoding", candidate, converted)
                return candidate
    return None


def convert_input_path(file_path: str, encodings: Sequence[str] | None = None) -> str | None:
    """Map a synctex input path to a path that exists on disk."""
    if os.path.exists(file_path):
        return file_path
    for converted in FilenameEncodingVariants(file_path, encodings):
        if os.path.exists(converted):
            return converted
    return None
