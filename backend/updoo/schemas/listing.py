from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

from updoo.models.enums import (
    ApplicantType,
    BillingType,
    ExperienceLevel,
    HoursPerWeek,
    Language,
    ListingStatus,
    ProjectType,
)


OfferDays = Literal[7, 14, 21, 30]


class ListingCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=5000)
    category_id: int
    location_id: int | None = None
    language: Language | None = None
    billing_type: BillingType
    hours_per_week: HoursPerWeek | None = None
    rate: Decimal | None = Field(default=None, ge=0)
    currency: str = Field(default="PLN", min_length=3, max_length=3)
    experience_level: ExperienceLevel
    is_remote: bool = False
    project_type: ProjectType
    expected_applicant_type: ApplicantType = ApplicantType.ANY
    expected_offers: int | None = Field(default=None, ge=1)
    offer_days: OfferDays | None = None
    skill_ids: list[int] = Field(default_factory=list, max_length=5)


class ListingUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, min_length=1, max_length=5000)
    category_id: int | None = None
    location_id: int | None = None
    language: Language | None = None
    billing_type: BillingType | None = None
    hours_per_week: HoursPerWeek | None = None
    rate: Decimal | None = Field(default=None, ge=0)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    experience_level: ExperienceLevel | None = None
    is_remote: bool | None = None
    project_type: ProjectType | None = None
    expected_applicant_type: ApplicantType | None = None
    expected_offers: int | None = Field(default=None, ge=1)
    offer_days: OfferDays | None = None
    skill_ids: list[int] | None = Field(default=None, max_length=5)


class RejectRequest(BaseModel):
    reason: str = Field(max_length=5000)


class RefOut(BaseModel):
    id: int
    slug: str
    name: str


class AuthorOut(BaseModel):
    id: int
    name: str | None = None
    surname: str = ""


class ListingOut(BaseModel):
    id: int
    title: str
    description: str
    category: RefOut
    location: RefOut | None = None
    skills: list[RefOut] = []
    author: AuthorOut
    language: Language
    billing_type: BillingType
    hours_per_week: HoursPerWeek | None = None
    rate: str | None = None
    currency: str
    experience_level: ExperienceLevel
    is_remote: bool
    project_type: ProjectType
    expected_applicant_type: ApplicantType
    expected_offers: int | None = None
    offer_days: int
    status: ListingStatus
    display_status: str
    is_expired: bool
    created_at: datetime
    deadline: datetime
    published_at: datetime | None = None
    closed_at: datetime | None = None
    rejected_reason: str | None = None
    is_favorite: bool | None = None


class ListingPage(BaseModel):
    items: list[ListingOut]
    total: int
    page: int
    page_size: int
