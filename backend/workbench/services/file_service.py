from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from workbench.models.project_file import ProjectFile
from workbench.schemas.project_file import ProjectFileCreate, ProjectFileUpdate


async def create_file(
    db: AsyncSession, project_id: str, data: ProjectFileCreate, is_modified: bool = False
) -> ProjectFile:
    file = ProjectFile(
        project_id=project_id,
        path=data.path,
        name=data.name,
        content=data.content,
        type=data.type,
        is_modified=is_modified,
    )
    db.add(file)
    await db.commit()
    await db.refresh(file)
    return file


async def get_file(db: AsyncSession, file_id: str) -> ProjectFile | None:
    return await db.get(ProjectFile, file_id)


async def list_files(db: AsyncSession, project_id: str) -> list[ProjectFile]:
    result = await db.execute(
        select(ProjectFile)
        .where(ProjectFile.project_id == project_id)
        .order_by(ProjectFile.path)
    )
    return list(result.scalars().all())


async def update_file(db: AsyncSession, file_id: str, data: ProjectFileUpdate) -> ProjectFile | None:
    """Apply only the fields set on ``data`` and flag the file as modified."""
    file = await db.get(ProjectFile, file_id)
    if not file:
        return None
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(file, field, value)
    file.is_modified = True
    await db.commit()
    await db.refresh(file)
    return file


async def delete_file(db: AsyncSession, file_id: str) -> bool:
    file = await db.get(ProjectFile, file_id)
    if not file:
        return False
    await db.delete(file)
    await db.commit()
    return True
