import uuid
from datetime import datetime

from sqlalchemy import JSON, String, DateTime, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column

from workbench.db.base import Base


class Conversation(Base):
    __tablename__ = "ai_conversations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    project_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("projects.id", ondelete="CASCADE"), nullable=True, index=True
    )
    # [{"role": "user" | "assistant", "content": "..."}]
    messages: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
