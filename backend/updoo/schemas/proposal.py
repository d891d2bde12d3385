from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from updoo.models.enums import Language, ProposalReason, ProposalStatus
from updoo.schemas.auth import EMAIL_PATTERN
from updoo.schemas.listing import ListingCreate


class ProposalCreate(BaseModel):
    email: str = Field(min_length=3, max_length=255, pattern=EMAIL_PATTERN)
    reason: ProposalReason
    language: Language = Language.POLISH
    listing: ListingCreate


class ProposalOut(BaseModel):
    id: int
    email: str
    reason: ProposalReason
    status: ProposalStatus
    listing_id: int | None = None
    created_at: datetime | None = None
    responded_at: datetime | None = None

    class Config:
        from_attributes = True


class ProposalPublicOut(BaseModel):
    email: str
    reason: ProposalReason
    status: ProposalStatus
    title: str


class ProposalAcceptOut(BaseModel):
    listing_id: int
    message: str
