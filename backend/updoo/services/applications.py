from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from updoo.errors import ConflictError, InvalidState, NotFound, Unauthorized, ValidationError
from updoo.models.application import Application
from updoo.models.enums import ListingStatus, Role
from updoo.models.user import User
from updoo.services.identity import Caller
from updoo.services.listing_lifecycle import ListingLifecycle, is_expired, is_visible_to


logger = logging.getLogger(__name__)

MESSAGE_MAX = 2000


class ApplicationService:
    """Freelancer applications to published listings.

    An application is created once per (applicant, listing) pair and never
    changed afterwards; applying again returns the original application.
    """

    def __init__(self, db: Session, lifecycle: ListingLifecycle, notifier=None) -> None:
        self.db = db
        self.lifecycle = lifecycle
        self.notifier = notifier

    def apply(self, listing_id: int, caller: Caller, message: str | None = None) -> Application:
        if caller.role != Role.FREELANCER:
            raise Unauthorized("Only freelancers can apply to listings")

        listing = self.lifecycle.repository.find_by_id(listing_id)
        if listing is None:
            raise NotFound("Listing not found")
        status = ListingStatus(listing.status)
        if status == ListingStatus.CLOSED:
            raise InvalidState("This listing is closed")
        if status != ListingStatus.PUBLISHED:
            raise NotFound("Listing not found")

        existing = self._find(caller.user_id, listing_id)
        if existing:
            return existing

        now = self.lifecycle.clock.now()
        if is_expired(listing, now):
            raise InvalidState("The deadline for this listing has passed")

        cleaned = (message or "").strip() or None
        if cleaned and len(cleaned) > MESSAGE_MAX:
            raise ValidationError(f"Message must be at most {MESSAGE_MAX} characters")

        if listing.expected_offers and self.count_for_listing(listing_id) >= listing.expected_offers:
            raise InvalidState("This listing already received the expected number of offers")

        application = Application(applicant_id=caller.user_id, listing_id=listing_id, message=cleaned, created_at=now)
        self.db.add(application)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            return self._find(caller.user_id, listing_id)
        self.db.refresh(application)
        logger.info("User %s applied to listing %s", caller.user_id, listing_id)

        if self.notifier is not None:
            try:
                self.notifier.new_application(listing, self.db.get(User, caller.user_id), cleaned)
            except Exception:
                logger.exception("Failed to send new-application notification for listing %s", listing_id)

        if listing.expected_offers:
            try:
                self.lifecycle.close_when_target_reached(listing_id, self.count_for_listing(listing_id))
            except ConflictError:
                logger.warning("Listing %s changed while closing on offers target", listing_id)
        return application

    def for_applicant(self, caller: Caller) -> list[Application]:
        if not caller.is_authenticated:
            raise Unauthorized("Sign in to see your applications")
        return (
            self.db.query(Application)
            .filter(Application.applicant_id == caller.user_id)
            .order_by(Application.created_at.desc(), Application.id.desc())
            .all()
        )

    def for_listing(self, listing_id: int, caller: Caller) -> list[Application]:
        listing = self.lifecycle.repository.find_by_id(listing_id)
        if listing is None or not is_visible_to(listing, caller):
            raise NotFound("Listing not found")
        if not caller.can_manage(listing):
            raise Unauthorized("Only the author or an admin can see applications")
        return (
            self.db.query(Application)
            .filter(Application.listing_id == listing_id)
            .order_by(Application.created_at.asc(), Application.id.asc())
            .all()
        )

    def count_for_listing(self, listing_id: int) -> int:
        return int(self.db.query(Application).filter(Application.listing_id == listing_id).count())

    def _find(self, applicant_id: int, listing_id: int) -> Application | None:
        return (
            self.db.query(Application)
            .filter(Application.applicant_id == applicant_id, Application.listing_id == listing_id)
            .first()
        )
