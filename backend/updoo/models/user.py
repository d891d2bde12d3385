from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, Enum, Integer, String, func

from updoo.database import Base
from updoo.models.enums import Language, Role


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(512), nullable=False)
    role = Column(Enum(Role, native_enum=False, length=20), nullable=False)
    language = Column(Enum(Language, native_enum=False, length=20), nullable=False, default=Language.POLISH)
    name = Column(String(120))
    surname = Column(String(120))
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
