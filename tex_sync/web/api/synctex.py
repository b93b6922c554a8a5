import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from tex_sync.core.exceptions import (
    EncodingError,
    InputFileNotFoundError,
    NoEntriesInSyncTex,
    NoLineRecorded,
    NoMatchFound,
    NoSuchFileInSyncTex,
    SyncTexError,
    SyncTexNotFoundError,
    SyncTexParseError,
)
from tex_sync.models import Project
from tex_sync.web.dependencies import get_database, get_locator

logger = logging.getLogger(__name__)

router = APIRouter()

_NOT_FOUND = (
    SyncTexNotFoundError,
    NoSuchFileInSyncTex,
    NoLineRecorded,
    NoEntriesInSyncTex,
    NoMatchFound,
    InputFileNotFoundError,
)


class SyncTeXRequest(BaseModel):
    filename: str
    line: int


class SyncTeXResponse(BaseModel):
    page: int
    x: float
    y: float


class ReverseSyncTeXRequest(BaseModel):
    page: int
    x: float
    y: float


class ReverseSyncTeXResponse(BaseModel):
    file: str
    line: int
    column: int = 0


class SyncTeXInfo(BaseModel):
    version: str
    page_count: int
    inputs: list[str]
    files: list[str]


def _get_project(project_id: str) -> Project:
    db = get_database()
    project = db.get_project(project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


def _http_error(e: SyncTexError) -> HTTPException:
    if isinstance(e, _NOT_FOUND):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, EncodingError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, SyncTexParseError):
        return HTTPException(status_code=500, detail=f"Failed to parse SyncTeX file: {e}")
    return HTTPException(status_code=500, detail=str(e))


async def _forward(project_id: str, filename: str, line: int) -> SyncTeXResponse:
    project = _get_project(project_id)
    try:
        result = await get_locator().forward(line, filename, project.pdf_path)
    except SyncTexError as e:
        logger.info("Forward SyncTeX failed: %s", e)
        raise _http_error(e) from e
    return SyncTeXResponse(page=result.page, x=result.x, y=result.y)


@router.post("/{project_id}/forward", response_model=SyncTeXResponse)
async def synctex_forward(project_id: str, request: SyncTeXRequest):
    return await _forward(project_id, request.filename, request.line)


@router.get("/{project_id}/forward", response_model=SyncTeXResponse)
async def synctex_forward_get(project_id: str, line: int, file: str):
    return await _forward(project_id, file, line)


@router.post("/{project_id}/reverse", response_model=ReverseSyncTeXResponse)
async def synctex_reverse(project_id: str, request: ReverseSyncTeXRequest):
    project = _get_project(project_id)
    try:
        result = await get_locator().backward(request.page, request.x, request.y, project.pdf_path)
    except SyncTexError as e:
        logger.info("Backward SyncTeX failed: %s", e)
        raise _http_error(e) from e
    return ReverseSyncTeXResponse(file=result.file, line=result.line, column=result.column)


@router.get("/{project_id}/info", response_model=SyncTeXInfo)
async def synctex_info(project_id: str):
    project = _get_project(project_id)
    try:
        document = await get_locator().load(project.pdf_path)
    except SyncTexError as e:
        raise _http_error(e) from e
    return SyncTeXInfo(
        version=document.version,
        page_count=document.page_count,
        inputs=[document.inputs[tag] for tag in sorted(document.inputs)],
        files=document.files,
    )
