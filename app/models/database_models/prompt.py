# app/models/database_models/prompt.py
from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Integer, String, Text

from app.data.database import Base


class Prompt(Base):
    __tablename__ = "prompts"

    id = Column(String(36), primary_key=True, index=True)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=True)
    prompt = Column(Text, nullable=False)
    category = Column(String(255), nullable=False, default="Uncategorized", index=True)
    category_id = Column(String(36), ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    difficulty = Column(String(20), nullable=False, default="medium")
    estimated_time = Column(String(100), nullable=True)
    usage_count = Column(Integer, nullable=False, default=0)
    rating = Column(Float, nullable=False, default=0.0)
    review_count = Column(Integer, nullable=False, default=0)
    last_used = Column(DateTime(timezone=True), nullable=True)
    user_id = Column(String(36), nullable=True, index=True)
    placeholders = Column(JSON, nullable=False, default=list)
    apps = Column(JSON, nullable=False, default=list)
    urls = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)
