from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import and_, exists
from sqlalchemy.orm import Session

from updoo.errors import ConflictError
from updoo.models.enums import Language, ListingStatus
from updoo.models.listing import JobListing, listing_skills
from updoo.models.reference import Category, Location, Skill


@dataclass
class ListingFilter:
    statuses: Iterable[ListingStatus] | None = None
    author_id: int | None = None
    category_id: int | None = None
    language: Language | None = None
    skill_ids: list[int] | None = None
    deadline_after: datetime | None = None
    deadline_at_or_before: datetime | None = None


class ListingRepository:
    """SQLAlchemy-backed persistence for job listings.

    ``update`` is the only write path for existing rows and is guarded by the
    row ``version``: the UPDATE only matches when the caller saw the latest
    version, otherwise :class:`ConflictError` is raised and nothing changes.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    def find_by_id(self, listing_id: int) -> JobListing | None:
        return self.db.get(JobListing, listing_id)

    def find_many(self, listing_filter: ListingFilter, page: int = 1, page_size: int = 15) -> list[JobListing]:
        offset = max(page - 1, 0) * page_size
        return (
            self._filtered(listing_filter)
            .order_by(JobListing.created_at.desc(), JobListing.id.desc())
            .offset(offset)
            .limit(page_size)
            .all()
        )

    def find_all(self, listing_filter: ListingFilter) -> list[JobListing]:
        return self._filtered(listing_filter).order_by(JobListing.created_at.desc(), JobListing.id.desc()).all()

    def count(self, listing_filter: ListingFilter) -> int:
        return int(self._filtered(listing_filter).count())

    def create(self, data: dict[str, Any]) -> JobListing:
        values = dict(data)
        skill_ids = values.pop("skill_ids", None) or []
        listing = JobListing(**values)
        if skill_ids:
            listing.skills = self.db.query(Skill).filter(Skill.id.in_(skill_ids)).all()
        self.db.add(listing)
        self.db.commit()
        self.db.refresh(listing)
        return listing

    def update(self, listing_id: int, patch: dict[str, Any], expected_version: int) -> JobListing:
        values = dict(patch)
        skill_ids = values.pop("skill_ids", None)
        values["version"] = JobListing.version + 1

        matched = (
            self.db.query(JobListing)
            .filter(JobListing.id == listing_id, JobListing.version == expected_version)
            .update(values, synchronize_session=False)
        )
        if not matched:
            self.db.rollback()
            raise ConflictError(f"Listing {listing_id} was modified concurrently, reload and retry")

        if skill_ids is not None:
            self.db.execute(listing_skills.delete().where(listing_skills.c.listing_id == listing_id))
            if skill_ids:
                self.db.execute(
                    listing_skills.insert(),
                    [{"listing_id": listing_id, "skill_id": skill_id} for skill_id in skill_ids],
                )
        self.db.commit()

        listing = self.db.get(JobListing, listing_id)
        self.db.refresh(listing)
        return listing

    def delete(self, listing_id: int) -> bool:
        listing = self.db.get(JobListing, listing_id)
        if listing is None:
            return False
        self.db.delete(listing)
        self.db.commit()
        return True

    def category_exists(self, category_id: int) -> bool:
        return self.db.query(exists().where(Category.id == category_id)).scalar()

    def location_exists(self, location_id: int) -> bool:
        return self.db.query(exists().where(Location.id == location_id)).scalar()

    def existing_skill_ids(self, skill_ids: list[int]) -> set[int]:
        if not skill_ids:
            return set()
        return {row.id for row in self.db.query(Skill.id).filter(Skill.id.in_(skill_ids)).all()}

    def _filtered(self, listing_filter: ListingFilter):
        query = self.db.query(JobListing)
        if listing_filter.statuses is not None:
            query = query.filter(JobListing.status.in_(list(listing_filter.statuses)))
        if listing_filter.author_id is not None:
            query = query.filter(JobListing.author_id == listing_filter.author_id)
        if listing_filter.category_id is not None:
            query = query.filter(JobListing.category_id == listing_filter.category_id)
        if listing_filter.language is not None:
            query = query.filter(JobListing.language == listing_filter.language)
        if listing_filter.skill_ids:
            query = query.filter(
                exists().where(
                    and_(
                        listing_skills.c.listing_id == JobListing.id,
                        listing_skills.c.skill_id.in_(listing_filter.skill_ids),
                    )
                )
            )
        if listing_filter.deadline_after is not None:
            query = query.filter(JobListing.deadline > listing_filter.deadline_after)
        if listing_filter.deadline_at_or_before is not None:
            query = query.filter(JobListing.deadline <= listing_filter.deadline_at_or_before)
        return query
