# app/models/database_models/prompt_usage.py
from sqlalchemy import Column, DateTime, ForeignKey, String, Text

from app.data.database import Base


class PromptUsage(Base):
    __tablename__ = "prompt_usage"

    id = Column(String(36), primary_key=True, index=True)
    prompt_id = Column(String(36), ForeignKey("prompts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), nullable=True)
    used_at = Column(DateTime(timezone=True), nullable=False)
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(Text, nullable=True)
