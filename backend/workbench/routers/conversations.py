from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from workbench.dependencies import get_db
from workbench.schemas.conversation import ConversationCreate, ConversationResponse
from workbench.services import conversation_service, project_service

router = APIRouter(prefix="/api/v1/projects/{project_id}/conversations", tags=["conversations"])


@router.get("", response_model=list[ConversationResponse])
async def list_conversations(project_id: str, db: AsyncSession = Depends(get_db)):
    return await conversation_service.list_conversations(db, project_id)


@router.post("", response_model=ConversationResponse, status_code=201)
async def create_conversation(project_id: str, data: ConversationCreate, db: AsyncSession = Depends(get_db)):
    if not await project_service.get_project(db, project_id):
        raise HTTPException(status_code=404, detail="Project not found")
    return await conversation_service.create_conversation(
        db, project_id, [m.model_dump() for m in data.messages]
    )
