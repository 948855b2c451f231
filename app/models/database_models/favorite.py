# app/models/database_models/favorite.py
from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint

from app.data.database import Base


class Favorite(Base):
    __tablename__ = "favorites"
    __table_args__ = (UniqueConstraint("user_id", "prompt_id", name="uq_favorites_user_prompt"),)

    id = Column(String(36), primary_key=True, index=True)
    user_id = Column(String(36), nullable=False, index=True)
    prompt_id = Column(String(36), ForeignKey("prompts.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
