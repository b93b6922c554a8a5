"""
Forward and backward search through the ``synctex`` command line tool.

Used instead of the built-in parser when ``use_builtin_engine`` is off. Only
the block between ``SyncTeX result begin`` and ``SyncTeX result end`` is
read; when the tool prints several records the last one wins.
"""

import asyncio
import logging
import shutil
from pathlib import Path

from tex_sync.core.exceptions import SyncTexCommandError, SyncTexCommandNotFoundError
from tex_sync.synctex import encoding
from tex_sync.synctex.model import BackwardResult, ForwardResult

logger = logging.getLogger(__name__)

DEFAULT_SYNCTEX_PATH = "synctex"
TIMEOUT = 10

_RESULT_BEGIN = "SyncTeX result begin"
_RESULT_END = "SyncTeX result end"


def _result_fields(output: str, keys: tuple[str, ...]) -> dict[str, str]:
    fields = {}
    started = False
    for line in output.split("\n"):
        if _RESULT_BEGIN in line:
            started = True
            continue
        if _RESULT_END in line:
            break
        if not started:
            continue
        key, sep, value = line.partition(":")
        if not sep:
            continue
        key = key.lower()
        if key in keys:
            fields[key] = value
    return fields


def parse_forward_output(output: str) -> ForwardResult:
    """Read the page and position from ``synctex view`` output."""
    fields = _result_fields(output, ("page", "x", "y"))
    try:
        return ForwardResult(page=int(fields["page"]), x=float(fields["x"]), y=float(fields["y"]))
    except (KeyError, ValueError):
        raise SyncTexCommandError("parse error when parsing the result of synctex forward") from None


def parse_backward_output(output: str) -> BackwardResult:
    """Read the input file, line and column from ``synctex edit`` output."""
    fields = _result_fields(output, ("input", "line", "column"))
    try:
        return BackwardResult(
            file=fields["input"].replace("\r", "").replace("\n", ""),
            line=int(fields["line"]),
            column=int(fields["column"]),
        )
    except (KeyError, ValueError):
        raise SyncTexCommandError("parse error when parsing the result of synctex backward") from None


async def run(args: list[str], cwd: str | Path, synctex_path: str = DEFAULT_SYNCTEX_PATH) -> str:
    """Run ``synctex`` and return its stdout, pass-through decoded."""
    if shutil.which(synctex_path) is None:
        raise SyncTexCommandNotFoundError(synctex_path)

    logger.info("Execute synctex with args %s", args)
    try:
        process = await asyncio.create_subprocess_exec(
            synctex_path,
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=cwd,
        )
    except OSError as e:
        raise SyncTexCommandError(f"Cannot synctex: {e}") from e

    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=TIMEOUT)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        logger.warning("synctex %s timed out", args[0])
        raise SyncTexCommandError(f"synctex {args[0]} timed out after {TIMEOUT}s") from None

    if process.returncode != 0:
        message = stderr.decode("utf-8", errors="replace")
        logger.warning("Cannot synctex, code: %s, %s", process.returncode, message)
        raise SyncTexCommandError(
            f"synctex {args[0]} exited with code {process.returncode}: {message.strip()}",
            returncode=process.returncode,
            stderr=message,
        )
    return encoding.decode(stdout)


async def forward(
    line: int,
    file_path: str,
    pdf_path: str | Path,
    synctex_path: str = DEFAULT_SYNCTEX_PATH,
    column: int = 0,
) -> ForwardResult:
    pdf_path = Path(pdf_path).absolute()
    args = ["view", "-i", f"{line}:{column + 1}:{file_path}", "-o", str(pdf_path)]
    return parse_forward_output(await run(args, pdf_path.parent, synctex_path))


async def backward(
    page: int, x: float, y: float, pdf_path: str | Path, synctex_path: str = DEFAULT_SYNCTEX_PATH
) -> BackwardResult:
    pdf_path = Path(pdf_path).absolute()
    args = ["edit", "-o", f"{page}:{x}:{y}:{pdf_path}"]
    return parse_backward_output(await run(args, pdf_path.parent, synctex_path))
