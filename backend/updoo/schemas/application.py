from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class ApplyRequest(BaseModel):
    message: str | None = Field(default=None, max_length=2000)


class ApplicationOut(BaseModel):
    id: int
    applicant_id: int
    listing_id: int
    message: str | None = None
    created_at: datetime

    class Config:
        from_attributes = True
