import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from workbench.dependencies import get_db, get_file_mirror
from workbench.pipeline.errors import MirrorError
from workbench.schemas.project import ProjectCreate, ProjectUpdate, ProjectResponse
from workbench.services import project_service
from workbench.services.file_mirror import FileMirror

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/projects", tags=["projects"])


@router.post("", response_model=ProjectResponse, status_code=201)
async def create_project(
    data: ProjectCreate,
    db: AsyncSession = Depends(get_db),
    mirror: FileMirror = Depends(get_file_mirror),
):
    project = await project_service.create_project(db, data)
    try:
        await mirror.create_project(project.id)
    except MirrorError as e:
        logger.warning("Could not create mirror directory for %s: %s", project.id, e)
    return project


@router.get("", response_model=list[ProjectResponse])
async def list_projects(db: AsyncSession = Depends(get_db)):
    return await project_service.list_projects(db)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: str, db: AsyncSession = Depends(get_db)):
    project = await project_service.get_project(db, project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project(project_id: str, data: ProjectUpdate, db: AsyncSession = Depends(get_db)):
    project = await project_service.update_project(db, project_id, data)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.delete("/{project_id}", status_code=204)
async def delete_project(
    project_id: str,
    db: AsyncSession = Depends(get_db),
    mirror: FileMirror = Depends(get_file_mirror),
):
    deleted = await project_service.delete_project(db, project_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Project not found")
    try:
        await mirror.delete_project(project_id)
    except MirrorError as e:
        logger.warning("Could not delete mirror directory for %s: %s", project_id, e)
