# app/models/database_models/review.py
from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text

from app.data.database import Base


class Review(Base):
    __tablename__ = "reviews"

    id = Column(String(36), primary_key=True, index=True)
    prompt_id = Column(String(36), ForeignKey("prompts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), nullable=True, index=True)
    user_name = Column(String(255), nullable=True)
    rating = Column(Integer, nullable=True)
    comment = Column(Text, nullable=True)
    tool_used = Column(String(255), nullable=True)
    prompt_edits = Column(Text, nullable=True)
    what_worked = Column(Text, nullable=True)
    what_didnt_work = Column(Text, nullable=True)
    improvement_suggestions = Column(Text, nullable=True)
    test_run_graphics_link = Column(String, nullable=True)
    screenshots = Column(JSON, nullable=False, default=list)
    media_files = Column(JSON, nullable=False, default=list)
    parent_review_id = Column(String(36), ForeignKey("reviews.id", ondelete="CASCADE"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
