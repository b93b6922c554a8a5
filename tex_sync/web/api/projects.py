from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from tex_sync.web.dependencies import get_database

router = APIRouter()


class CreateProjectRequest(BaseModel):
    name: str
    pdf_path: str
    description: str = ""


class UpdateProjectRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    pdf_path: str | None = None


@router.get("")
async def list_projects():
    db = get_database()
    projects = db.get_projects()
    return [p.to_dict() for p in projects]


@router.post("")
async def create_project(data: CreateProjectRequest):
    db = get_database()
    project = db.create_project(name=data.name, pdf_path=data.pdf_path, description=data.description)
    return project.to_dict()


@router.get("/{project_id}")
async def get_project(project_id: str):
    db = get_database()
    project = db.get_project(project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project.to_dict()


@router.patch("/{project_id}")
async def update_project(project_id: str, data: UpdateProjectRequest):
    db = get_database()
    updates = {k: v for k, v in data.model_dump().items() if v is not None}
    if not updates:
        raise HTTPException(status_code=400, detail="No updates provided")

    success = db.update_project(project_id, **updates)
    if not success:
        raise HTTPException(status_code=404, detail="Project not found")

    project = db.get_project(project_id)
    return project.to_dict()


@router.delete("/{project_id}")
async def delete_project(project_id: str):
    db = get_database()
    success = db.delete_project(project_id)
    if not success:
        raise HTTPException(status_code=404, detail="Project not found")
    return {"success": True}
