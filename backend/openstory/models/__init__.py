"""Database models package."""

from openstory.models.chat_log import ChatLogRecord

__all__ = ["ChatLogRecord"]
