from __future__ import annotations

from updoo.models.enums import Language
from updoo.schemas.listing import AuthorOut, ListingOut, RefOut
from updoo.services.identity import Caller
from updoo.services.listing_lifecycle import ListingSnapshot
from updoo.services.locale import localized_ref, mask_surname


def listing_out(
    snapshot: ListingSnapshot,
    caller: Caller,
    language: Language,
    favorite_ids: set[int] | None = None,
) -> ListingOut:
    """Shape a listing for the response in the request language.

    Rates are only shown to signed-in callers and the author's surname is
    reduced to an initial for everyone but the author and admins.
    """
    listing = snapshot.listing
    author = listing.author
    full_view = caller.can_manage(listing)
    location = localized_ref(listing.location, language)

    return ListingOut(
        id=listing.id,
        title=listing.title,
        description=listing.description,
        category=RefOut(**localized_ref(listing.category, language)),
        location=RefOut(**location) if location else None,
        skills=[RefOut(**localized_ref(skill, language)) for skill in listing.skills],
        author=AuthorOut(
            id=author.id,
            name=author.name,
            surname=(author.surname or "") if full_view else mask_surname(author.surname),
        ),
        language=listing.language,
        billing_type=listing.billing_type,
        hours_per_week=listing.hours_per_week,
        rate=listing.rate if caller.is_authenticated else None,
        currency=listing.currency,
        experience_level=listing.experience_level,
        is_remote=listing.is_remote,
        project_type=listing.project_type,
        expected_applicant_type=listing.expected_applicant_type,
        expected_offers=listing.expected_offers,
        offer_days=listing.offer_days,
        status=snapshot.status,
        display_status=snapshot.display_status,
        is_expired=snapshot.is_expired,
        created_at=listing.created_at,
        deadline=listing.deadline,
        published_at=listing.published_at,
        closed_at=listing.closed_at,
        rejected_reason=listing.rejected_reason if full_view else None,
        is_favorite=(listing.id in favorite_ids) if favorite_ids is not None else None,
    )
