from __future__ import annotations

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from updoo.database import Base


class Application(Base):
    __tablename__ = "applications"
    __table_args__ = (UniqueConstraint("applicant_id", "listing_id", name="uq_application_applicant_listing"),)

    id = Column(Integer, primary_key=True, index=True)
    applicant_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    listing_id = Column(Integer, ForeignKey("job_listings.id", ondelete="CASCADE"), nullable=False, index=True)
    message = Column(Text)
    created_at = Column(DateTime, nullable=False)

    applicant = relationship("User", lazy="joined")
    listing = relationship("JobListing", back_populates="applications")
