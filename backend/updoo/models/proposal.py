from __future__ import annotations

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, func
from sqlalchemy.types import JSON

from updoo.database import Base
from updoo.models.enums import ProposalReason, ProposalStatus


class Proposal(Base):
    __tablename__ = "proposals"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), nullable=False, index=True)
    reason = Column(Enum(ProposalReason, native_enum=False, length=32), nullable=False)
    listing_data = Column(JSON, nullable=False)
    token = Column(String(64), unique=True, nullable=False)
    status = Column(Enum(ProposalStatus, native_enum=False, length=20), nullable=False, default=ProposalStatus.PENDING)
    listing_id = Column(Integer, ForeignKey("job_listings.id", ondelete="SET NULL"))
    created_at = Column(DateTime, server_default=func.now())
    responded_at = Column(DateTime)
