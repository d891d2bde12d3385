from __future__ import annotations

from sqlalchemy import Column, Integer, String
from sqlalchemy.types import JSON

from updoo.database import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(100), unique=True, nullable=False)
    names = Column(JSON, nullable=False, default=dict)


class Skill(Base):
    __tablename__ = "skills"

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(100), unique=True, nullable=False)
    names = Column(JSON, nullable=False, default=dict)


class Location(Base):
    __tablename__ = "locations"

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(100), unique=True, nullable=False)
    names = Column(JSON, nullable=False, default=dict)
