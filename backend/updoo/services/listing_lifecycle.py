"""Job listing lifecycle: state transitions, derived expiry and visibility.

States move DRAFT -> PENDING_REVIEW -> PUBLISHED -> CLOSED, with REJECTED as
the other way out of review. Expiry is never stored: a PUBLISHED listing whose
deadline has passed is reported as expired at read time and simply drops out
of the public feed.

Every operation receives the caller explicitly and performs a single
read-validate-write against the repository. Writes carry the version that was
read, so two racing transitions cannot both succeed.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from updoo.config import settings
from updoo.errors import InvalidState, NotFound, Unauthorized, ValidationError
from updoo.models.enums import (
    ALLOWED_OFFER_DAYS,
    EDITABLE_STATUSES,
    MAX_LISTING_SKILLS,
    ApplicantType,
    BillingType,
    ExperienceLevel,
    HoursPerWeek,
    Language,
    ListingOrigin,
    ListingStatus,
    ProjectType,
    Role,
)
from updoo.models.listing import JobListing
from updoo.services.clock import Clock, SystemClock, compute_deadline
from updoo.services.identity import Caller
from updoo.services.listing_repository import ListingFilter, ListingRepository


logger = logging.getLogger(__name__)

REJECT_REASON_MIN = 10
REJECT_REASON_MAX = 2000
TITLE_MAX = 200
DESCRIPTION_MAX = 5000

EDITABLE_FIELDS = (
    "title",
    "description",
    "category_id",
    "location_id",
    "language",
    "billing_type",
    "hours_per_week",
    "rate",
    "currency",
    "experience_level",
    "is_remote",
    "project_type",
    "expected_applicant_type",
    "expected_offers",
    "offer_days",
    "skill_ids",
)


@dataclass(frozen=True)
class ListingSnapshot:
    listing: JobListing
    is_expired: bool

    @property
    def status(self) -> ListingStatus:
        return ListingStatus(self.listing.status)

    @property
    def display_status(self) -> str:
        return "EXPIRED" if self.is_expired else self.status.value


@dataclass
class FeedQuery:
    category_id: int | None = None
    language: Language | None = None
    skill_ids: list[int] = field(default_factory=list)
    page: int = 1
    page_size: int = settings.feed_page_size


@dataclass(frozen=True)
class FeedPage:
    items: list[ListingSnapshot]
    total: int
    page: int
    page_size: int


def is_expired(listing: JobListing, now: datetime) -> bool:
    return ListingStatus(listing.status) == ListingStatus.PUBLISHED and listing.deadline <= now


def is_visible_to(listing: JobListing, caller: Caller) -> bool:
    return caller.is_admin or caller.owns(listing) or ListingStatus(listing.status) == ListingStatus.PUBLISHED


class ListingLifecycle:
    def __init__(
        self,
        repository: ListingRepository,
        clock: Clock | None = None,
        notifier=None,
        follows=None,
    ) -> None:
        self.repository = repository
        self.clock = clock or SystemClock()
        self.notifier = notifier
        self.follows = follows

    # Transitions

    def create(
        self,
        data: Mapping[str, Any],
        caller: Caller,
        origin: ListingOrigin | None = None,
    ) -> JobListing:
        if origin == ListingOrigin.PROPOSAL:
            if caller.role != Role.CLIENT:
                raise Unauthorized("Proposal listings must be authored by a client account")
            status = ListingStatus.PENDING_REVIEW
        elif caller.role == Role.CLIENT:
            origin, status = ListingOrigin.CLIENT, ListingStatus.DRAFT
        elif caller.role == Role.ADMIN:
            origin, status = ListingOrigin.ADMIN, ListingStatus.PENDING_REVIEW
        else:
            raise Unauthorized("Only clients and admins can create listings")

        values = self.validate(data, default_language=caller.language or Language.POLISH)
        now = self.clock.now()
        values.update(
            author_id=caller.user_id,
            status=status,
            origin=origin,
            version=1,
            created_at=now,
            deadline=compute_deadline(now, values["offer_days"]),
        )
        listing = self.repository.create(values)
        logger.info("Listing %s created by user %s as %s", listing.id, caller.user_id, status.value)
        return listing

    def submit_for_review(self, listing_id: int, caller: Caller) -> JobListing:
        listing = self._load(listing_id)
        if not caller.can_manage(listing):
            raise Unauthorized("Only the author or an admin can submit this listing")
        self._require_status(listing, ListingStatus.DRAFT, "submitted for review")
        return self._transition(listing, ListingStatus.PENDING_REVIEW)

    def approve(self, listing_id: int, caller: Caller) -> JobListing:
        if not caller.is_admin:
            raise Unauthorized("Only admins can approve listings")
        listing = self._load(listing_id)
        self._require_status(listing, ListingStatus.PENDING_REVIEW, "approved")

        now = self.clock.now()
        patch: dict[str, Any] = {"published_at": now}
        if listing.created_at is None:
            patch["created_at"] = now
            patch["deadline"] = compute_deadline(now, listing.offer_days)
        published = self._transition(listing, ListingStatus.PUBLISHED, **patch)

        self._notify("approval", self._announce_publication, published)
        return published

    def reject(self, listing_id: int, caller: Caller, reason: str) -> JobListing:
        if not caller.is_admin:
            raise Unauthorized("Only admins can reject listings")
        cleaned = (reason or "").strip()
        if not REJECT_REASON_MIN <= len(cleaned) <= REJECT_REASON_MAX:
            raise ValidationError(
                f"Rejection reason must be between {REJECT_REASON_MIN} and {REJECT_REASON_MAX} characters"
            )
        listing = self._load(listing_id)
        self._require_status(listing, ListingStatus.PENDING_REVIEW, "rejected")

        rejected = self._transition(
            listing,
            ListingStatus.REJECTED,
            rejected_at=self.clock.now(),
            rejected_reason=cleaned,
        )
        if self.notifier is not None:
            self._notify("rejection", self.notifier.listing_rejected, rejected, cleaned)
        return rejected

    def close(self, listing_id: int, caller: Caller) -> JobListing:
        listing = self._load(listing_id)
        if not caller.can_manage(listing):
            raise Unauthorized("Only the author or an admin can close this listing")
        self._require_status(listing, ListingStatus.PUBLISHED, "closed")
        return self._transition(listing, ListingStatus.CLOSED, closed_at=self.clock.now())

    def close_when_target_reached(self, listing_id: int, applications_count: int) -> JobListing | None:
        """Close a published listing once it has collected its expected offers."""
        listing = self._load(listing_id)
        if ListingStatus(listing.status) != ListingStatus.PUBLISHED or not listing.expected_offers:
            return None
        if applications_count < listing.expected_offers:
            return None
        return self._transition(listing, ListingStatus.CLOSED, closed_at=self.clock.now())

    def edit(self, listing_id: int, caller: Caller, patch: Mapping[str, Any]) -> JobListing:
        listing = self._load(listing_id)
        status = ListingStatus(listing.status)
        if status not in EDITABLE_STATUSES:
            raise InvalidState(f"A {status.value} listing cannot be edited")
        if not caller.can_manage(listing):
            raise Unauthorized("Only the author or an admin can edit this listing")

        unknown = set(patch) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")
        if (
            status == ListingStatus.PUBLISHED
            and "offer_days" in patch
            and patch["offer_days"] != listing.offer_days
        ):
            raise ValidationError("Offer days cannot change once a listing is published")

        merged = {**self._current_values(listing), **dict(patch)}
        values = self.validate(merged, default_language=Language(listing.language))
        changes = {key: value for key, value in values.items() if key in patch or key == "hours_per_week"}
        if values["offer_days"] != listing.offer_days:
            changes["deadline"] = compute_deadline(listing.created_at, values["offer_days"])

        updated = self.repository.update(listing.id, changes, expected_version=listing.version)
        logger.info("Listing %s edited by user %s", listing.id, caller.user_id)
        return updated

    def delete(self, listing_id: int, caller: Caller) -> None:
        listing = self._load(listing_id)
        if not caller.can_manage(listing):
            raise Unauthorized("Only the author or an admin can delete this listing")
        self.repository.delete(listing.id)
        logger.info("Listing %s deleted by user %s", listing_id, caller.user_id)

    # Reads

    def get(self, listing_id: int, caller: Caller) -> ListingSnapshot:
        listing = self.repository.find_by_id(listing_id)
        if listing is None or not is_visible_to(listing, caller):
            raise NotFound("Listing not found")
        return self.annotate(listing)

    def feed(self, query: FeedQuery) -> FeedPage:
        page = max(query.page, 1)
        page_size = min(max(query.page_size, 1), settings.feed_max_page_size)
        listing_filter = ListingFilter(
            statuses=[ListingStatus.PUBLISHED],
            category_id=query.category_id,
            language=query.language,
            skill_ids=list(query.skill_ids) or None,
            deadline_after=self.clock.now(),
        )
        items = self.repository.find_many(listing_filter, page=page, page_size=page_size)
        total = self.repository.count(listing_filter)
        return FeedPage(items=[self.annotate(item) for item in items], total=total, page=page, page_size=page_size)

    def my_listings(self, caller: Caller) -> list[ListingSnapshot]:
        if not caller.is_authenticated:
            raise Unauthorized("Sign in to see your listings")
        listings = self.repository.find_all(ListingFilter(author_id=caller.user_id))
        return [self.annotate(listing) for listing in listings]

    def admin_listings(
        self,
        caller: Caller,
        status: ListingStatus | None = None,
        page: int = 1,
        page_size: int = settings.feed_page_size,
    ) -> FeedPage:
        if not caller.is_admin:
            raise Unauthorized("Only admins can browse all listings")
        page = max(page, 1)
        page_size = min(max(page_size, 1), settings.feed_max_page_size)
        listing_filter = ListingFilter(statuses=[status] if status else None)
        items = self.repository.find_many(listing_filter, page=page, page_size=page_size)
        total = self.repository.count(listing_filter)
        return FeedPage(items=[self.annotate(item) for item in items], total=total, page=page, page_size=page_size)

    def annotate(self, listing: JobListing) -> ListingSnapshot:
        return ListingSnapshot(listing=listing, is_expired=is_expired(listing, self.clock.now()))

    # Internals

    def _load(self, listing_id: int) -> JobListing:
        listing = self.repository.find_by_id(listing_id)
        if listing is None:
            raise NotFound("Listing not found")
        return listing

    def _require_status(self, listing: JobListing, expected: ListingStatus, action: str) -> None:
        current = ListingStatus(listing.status)
        if current != expected:
            raise InvalidState(f"Only {expected.value} listings can be {action}, this one is {current.value}")

    def _transition(self, listing: JobListing, target: ListingStatus, **extra: Any) -> JobListing:
        source = ListingStatus(listing.status)
        updated = self.repository.update(listing.id, {"status": target, **extra}, expected_version=listing.version)
        logger.info("Listing %s moved %s -> %s", updated.id, source.value, target.value)
        return updated

    def _announce_publication(self, listing: JobListing) -> None:
        if self.notifier is None:
            return
        self.notifier.listing_approved(listing)
        if self.follows is None:
            return
        followers = self.follows.followers_of(listing.category_id, exclude_user_id=listing.author_id)
        if followers:
            self.notifier.new_listing_in_followed_category(listing, followers)

    def _notify(self, label: str, func, *args: Any) -> None:
        try:
            func(*args)
        except Exception:
            logger.exception("Failed to send %s notification for listing %s", label, args[0].id)

    def _current_values(self, listing: JobListing) -> dict[str, Any]:
        values = {name: getattr(listing, name) for name in EDITABLE_FIELDS if name != "skill_ids"}
        values["skill_ids"] = [skill.id for skill in listing.skills]
        return values

    def validate(self, data: Mapping[str, Any], default_language: Language) -> dict[str, Any]:
        title = _required_text(data.get("title"), "title", TITLE_MAX)
        description = _required_text(data.get("description"), "description", DESCRIPTION_MAX)

        category_id = data.get("category_id")
        if category_id is None or not self.repository.category_exists(category_id):
            raise ValidationError("Unknown category")
        location_id = data.get("location_id")
        if location_id is not None and not self.repository.location_exists(location_id):
            raise ValidationError("Unknown location")

        billing_type = _choice(BillingType, data.get("billing_type"), "billing_type")
        hours_per_week = None
        if billing_type == BillingType.HOURLY:
            if data.get("hours_per_week") is None:
                raise ValidationError("Hours per week is required for hourly listings")
            hours_per_week = _choice(HoursPerWeek, data.get("hours_per_week"), "hours_per_week")

        offer_days = data.get("offer_days")
        if offer_days is None:
            offer_days = settings.default_offer_days
        if offer_days not in ALLOWED_OFFER_DAYS:
            raise ValidationError(f"Offer days must be one of {', '.join(map(str, ALLOWED_OFFER_DAYS))}")

        skill_ids = list(dict.fromkeys(data.get("skill_ids") or []))
        if len(skill_ids) > MAX_LISTING_SKILLS:
            raise ValidationError(f"A listing can have at most {MAX_LISTING_SKILLS} skills")
        missing = set(skill_ids) - self.repository.existing_skill_ids(skill_ids)
        if missing:
            raise ValidationError(f"Unknown skills: {', '.join(map(str, sorted(missing)))}")

        expected_offers = data.get("expected_offers")
        if expected_offers is not None and (not isinstance(expected_offers, int) or expected_offers < 1):
            raise ValidationError("Expected offers must be a positive number")

        currency = str(data.get("currency") or "PLN").strip().upper()
        if len(currency) != 3 or not currency.isalpha():
            raise ValidationError("Currency must be a three letter code")

        language = data.get("language") or default_language
        return {
            "title": title,
            "description": description,
            "category_id": category_id,
            "location_id": location_id,
            "language": _choice(Language, language, "language"),
            "billing_type": billing_type,
            "hours_per_week": hours_per_week,
            "rate": _normalize_rate(data.get("rate")),
            "currency": currency,
            "experience_level": _choice(ExperienceLevel, data.get("experience_level"), "experience_level"),
            "is_remote": bool(data.get("is_remote", False)),
            "project_type": _choice(ProjectType, data.get("project_type"), "project_type"),
            "expected_applicant_type": _choice(
                ApplicantType, data.get("expected_applicant_type") or ApplicantType.ANY, "expected_applicant_type"
            ),
            "expected_offers": expected_offers,
            "offer_days": offer_days,
            "skill_ids": skill_ids,
        }


def _required_text(value: Any, name: str, max_length: int) -> str:
    text = str(value or "").strip()
    if not text:
        raise ValidationError(f"{name} is required")
    if len(text) > max_length:
        raise ValidationError(f"{name} must be at most {max_length} characters")
    return text


def _choice(enum_cls, value: Any, name: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"{name} must be one of {allowed}") from None


def _normalize_rate(value: Any) -> str | None:
    if value is None or value == "":
        return None
    try:
        rate = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError("Rate must be a number") from None
    if not rate.is_finite():
        raise ValidationError("Rate must be a number")
    if rate < 0:
        raise ValidationError("Rate cannot be negative")
    try:
        rate = rate.quantize(Decimal("0.01"))
    except InvalidOperation:
        raise ValidationError("Rate is too large") from None
    return format(rate, "f")
