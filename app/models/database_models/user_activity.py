# app/models/database_models/user_activity.py
from sqlalchemy import JSON, Column, DateTime, String, Text

from app.data.database import Base


class UserActivity(Base):
    __tablename__ = "user_activities"

    id = Column(String(36), primary_key=True, index=True)
    action = Column(String(100), nullable=False, index=True)
    user_id = Column(String(36), nullable=True, index=True)
    details = Column(JSON, nullable=False, default=dict)
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
