from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from workbench.models.project import Project
from workbench.models.project_file import ProjectFile
from workbench.models.conversation import Conversation
from workbench.schemas.project import ProjectCreate, ProjectUpdate


async def create_project(db: AsyncSession, data: ProjectCreate) -> Project:
    project = Project(name=data.name, type=data.type, description=data.description)
    db.add(project)
    await db.commit()
    await db.refresh(project)
    return project


async def list_projects(db: AsyncSession) -> list[Project]:
    result = await db.execute(select(Project).order_by(Project.created_at.desc()))
    return list(result.scalars().all())


async def get_project(db: AsyncSession, project_id: str) -> Project | None:
    return await db.get(Project, project_id)


async def update_project(db: AsyncSession, project_id: str, data: ProjectUpdate) -> Project | None:
    project = await db.get(Project, project_id)
    if not project:
        return None
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(project, field, value)
    await db.commit()
    await db.refresh(project)
    return project


async def delete_project(db: AsyncSession, project_id: str) -> bool:
    project = await db.get(Project, project_id)
    if not project:
        return False
    # Explicit deletes in FK order: files, conversations, then the project
    await db.execute(delete(ProjectFile).where(ProjectFile.project_id == project_id))
    await db.execute(delete(Conversation).where(Conversation.project_id == project_id))
    await db.execute(delete(Project).where(Project.id == project_id))
    await db.commit()
    return True
