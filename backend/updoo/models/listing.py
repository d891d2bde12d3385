from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from updoo.database import Base
from updoo.models.enums import (
    ApplicantType,
    BillingType,
    ExperienceLevel,
    HoursPerWeek,
    Language,
    ListingOrigin,
    ListingStatus,
    ProjectType,
)


listing_skills = Table(
    "listing_skills",
    Base.metadata,
    Column("listing_id", Integer, ForeignKey("job_listings.id", ondelete="CASCADE"), primary_key=True),
    Column("skill_id", Integer, ForeignKey("skills.id", ondelete="CASCADE"), primary_key=True),
)


def _enum(enum_cls):
    return Enum(enum_cls, native_enum=False, length=32)


class JobListing(Base):
    __tablename__ = "job_listings"
    __table_args__ = (
        Index("idx_listing_status_deadline", "status", "deadline"),
        Index("idx_listing_author", "author_id"),
        Index("idx_listing_created", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    author_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    location_id = Column(Integer, ForeignKey("locations.id"))

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    language = Column(_enum(Language), nullable=False, default=Language.POLISH)
    billing_type = Column(_enum(BillingType), nullable=False)
    hours_per_week = Column(_enum(HoursPerWeek))
    rate = Column(String(32))
    currency = Column(String(3), nullable=False, default="PLN")
    experience_level = Column(_enum(ExperienceLevel), nullable=False)
    is_remote = Column(Boolean, nullable=False, default=False)
    project_type = Column(_enum(ProjectType), nullable=False)
    expected_applicant_type = Column(_enum(ApplicantType), nullable=False, default=ApplicantType.ANY)
    expected_offers = Column(Integer)
    offer_days = Column(Integer, nullable=False)

    status = Column(_enum(ListingStatus), nullable=False, default=ListingStatus.DRAFT)
    origin = Column(_enum(ListingOrigin), nullable=False, default=ListingOrigin.CLIENT)
    version = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime, nullable=False)
    # Always written through compute_deadline(created_at, offer_days).
    deadline = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
    published_at = Column(DateTime)
    closed_at = Column(DateTime)
    rejected_at = Column(DateTime)
    rejected_reason = Column(Text)

    author = relationship("User", lazy="joined")
    category = relationship("Category", lazy="joined")
    location = relationship("Location", lazy="joined")
    skills = relationship("Skill", secondary=listing_skills, lazy="selectin", order_by="Skill.id")
    applications = relationship(
        "Application",
        back_populates="listing",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
