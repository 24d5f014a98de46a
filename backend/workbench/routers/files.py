import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from workbench.dependencies import get_db, get_file_mirror
from workbench.pipeline.errors import MirrorError
from workbench.schemas.project_file import ProjectFileCreate, ProjectFileResponse, ProjectFileUpdate
from workbench.services import file_service, project_service
from workbench.services.file_mirror import FileMirror

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/projects/{project_id}/files", tags=["files"])
file_router = APIRouter(prefix="/api/v1/files", tags=["files"])


@router.get("", response_model=list[ProjectFileResponse])
async def list_files(project_id: str, db: AsyncSession = Depends(get_db)):
    return await file_service.list_files(db, project_id)


@router.post("", response_model=ProjectFileResponse, status_code=201)
async def create_file(
    project_id: str,
    data: ProjectFileCreate,
    db: AsyncSession = Depends(get_db),
    mirror: FileMirror = Depends(get_file_mirror),
):
    if not await project_service.get_project(db, project_id):
        raise HTTPException(status_code=404, detail="Project not found")
    file = await file_service.create_file(db, project_id, data)
    try:
        await mirror.create_file(project_id, file.path, file.content)
    except MirrorError as e:
        logger.warning("Mirror write failed for %s: %s", file.path, e)
    return file


@file_router.get("/{file_id}", response_model=ProjectFileResponse)
async def get_file(file_id: str, db: AsyncSession = Depends(get_db)):
    file = await file_service.get_file(db, file_id)
    if not file:
        raise HTTPException(status_code=404, detail="File not found")
    return file


@file_router.put("/{file_id}", response_model=ProjectFileResponse)
async def update_file(
    file_id: str,
    data: ProjectFileUpdate,
    db: AsyncSession = Depends(get_db),
    mirror: FileMirror = Depends(get_file_mirror),
):
    file = await file_service.update_file(db, file_id, data)
    if not file:
        raise HTTPException(status_code=404, detail="File not found")
    try:
        await mirror.update_file(file.project_id, file.path, file.content)
    except MirrorError as e:
        logger.warning("Mirror write failed for %s: %s", file.path, e)
    return file


@file_router.delete("/{file_id}", status_code=204)
async def delete_file(
    file_id: str,
    db: AsyncSession = Depends(get_db),
    mirror: FileMirror = Depends(get_file_mirror),
):
    file = await file_service.get_file(db, file_id)
    if not file:
        raise HTTPException(status_code=404, detail="File not found")
    project_id, path = file.project_id, file.path
    await file_service.delete_file(db, file_id)
    try:
        await mirror.delete_file(project_id, path)
    except MirrorError as e:
        logger.warning("Mirror delete failed for %s: %s", path, e)
