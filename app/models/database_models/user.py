# app/models/database_models/user.py
from sqlalchemy import Boolean, Column, DateTime, String

from app.data.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=True)
    provider = Column(String(50), nullable=False, default="email")
    verified = Column(Boolean, nullable=False, default=False)
    avatar = Column(String, nullable=True)
    verification_code = Column(String(16), nullable=True)
    verification_expiry = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
