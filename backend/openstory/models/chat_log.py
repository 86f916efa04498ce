"""Chat log model - one row per (session, game) holding the serialized log."""

from datetime import datetime

from sqlalchemy import String, Text, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from openstory.db.database import Base


class ChatLogRecord(Base):
    __tablename__ = "chat_logs"

    session_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    game_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    payload: Mapped[str] = mapped_column(Text)  # ConversationLog as JSON

    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )
