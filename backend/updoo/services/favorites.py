from __future__ import annotations

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from updoo.errors import NotFound
from updoo.models.engagement import Favorite
from updoo.models.enums import ListingStatus
from updoo.models.listing import JobListing


class FavoritesService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def add(self, user_id: int, listing_id: int) -> None:
        listing = self.db.get(JobListing, listing_id)
        if listing is None or ListingStatus(listing.status) != ListingStatus.PUBLISHED:
            raise NotFound("Listing not found")
        if self._exists(user_id, listing_id):
            return
        self.db.add(Favorite(user_id=user_id, listing_id=listing_id))
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()

    def remove(self, user_id: int, listing_id: int) -> None:
        self.db.query(Favorite).filter(Favorite.user_id == user_id, Favorite.listing_id == listing_id).delete(
            synchronize_session=False
        )
        self.db.commit()

    def favorite_ids(self, user_id: int) -> set[int]:
        return {row.listing_id for row in self.db.query(Favorite.listing_id).filter(Favorite.user_id == user_id).all()}

    def listings(self, user_id: int) -> list[JobListing]:
        return (
            self.db.query(JobListing)
            .join(Favorite, Favorite.listing_id == JobListing.id)
            .filter(Favorite.user_id == user_id, JobListing.status == ListingStatus.PUBLISHED)
            .order_by(Favorite.created_at.desc(), Favorite.id.desc())
            .all()
        )

    def _exists(self, user_id: int, listing_id: int) -> bool:
        return (
            self.db.query(Favorite.id).filter(Favorite.user_id == user_id, Favorite.listing_id == listing_id).first()
            is not None
        )
