from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from updoo.api.deps import get_application_service, get_lifecycle
from updoo.api.presenters import listing_out
from updoo.auth import get_admin_caller, get_authenticated_caller, get_caller, get_request_language
from updoo.config import settings
from updoo.database import get_db
from updoo.models.application import Application
from updoo.models.enums import Language, ListingStatus
from updoo.schemas.application import ApplicationOut, ApplyRequest
from updoo.schemas.listing import ListingCreate, ListingOut, ListingPage, ListingUpdate, RejectRequest
from updoo.services.applications import ApplicationService
from updoo.services.favorites import FavoritesService
from updoo.services.identity import Caller
from updoo.services.listing_lifecycle import FeedPage, FeedQuery, ListingLifecycle


router = APIRouter()


def _favorite_ids(db: Session, caller: Caller) -> set[int] | None:
    if not caller.is_authenticated:
        return None
    return FavoritesService(db).favorite_ids(caller.user_id)


def _page_out(page: FeedPage, caller: Caller, language: Language, favorite_ids: set[int] | None) -> ListingPage:
    return ListingPage(
        items=[listing_out(item, caller, language, favorite_ids) for item in page.items],
        total=page.total,
        page=page.page,
        page_size=page.page_size,
    )


@router.get("/feed", response_model=ListingPage)
def feed(
    category_id: int | None = None,
    language: Language | None = None,
    skill_ids: list[int] = Query(default=[]),
    page: int = 1,
    page_size: int = settings.feed_page_size,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller),
    request_language: Language = Depends(get_request_language),
    lifecycle: ListingLifecycle = Depends(get_lifecycle),
) -> ListingPage:
    result = lifecycle.feed(
        FeedQuery(
            category_id=category_id,
            language=language,
            skill_ids=skill_ids,
            page=page,
            page_size=page_size,
        )
    )
    return _page_out(result, caller, request_language, _favorite_ids(db, caller))


@router.get("/mine", response_model=list[ListingOut])
def my_listings(
    caller: Caller = Depends(get_authenticated_caller),
    language: Language = Depends(get_request_language),
    lifecycle: ListingLifecycle = Depends(get_lifecycle),
) -> list[ListingOut]:
    return [listing_out(item, caller, language) for item in lifecycle.my_listings(caller)]


@router.get("/admin", response_model=ListingPage)
def admin_listings(
    status: ListingStatus | None = None,
    page: int = 1,
    page_size: int = settings.feed_page_size,
    caller: Caller = Depends(get_admin_caller),
    language: Language = Depends(get_request_language),
    lifecycle: ListingLifecycle = Depends(get_lifecycle),
) -> ListingPage:
    result = lifecycle.admin_listings(caller, status=status, page=page, page_size=page_size)
    return _page_out(result, caller, language, None)


@router.get("/{listing_id}", response_model=ListingOut)
def get_listing(
    listing_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller),
    language: Language = Depends(get_request_language),
    lifecycle: ListingLifecycle = Depends(get_lifecycle),
) -> ListingOut:
    return listing_out(lifecycle.get(listing_id, caller), caller, language, _favorite_ids(db, caller))


@router.post("", response_model=ListingOut, status_code=201)
def create_listing(
    payload: ListingCreate,
    caller: Caller = Depends(get_authenticated_caller),
    language: Language = Depends(get_request_language),
    lifecycle: ListingLifecycle = Depends(get_lifecycle),
) -> ListingOut:
    listing = lifecycle.create(payload.model_dump(), caller)
    return listing_out(lifecycle.annotate(listing), caller, language)


@router.patch("/{listing_id}", response_model=ListingOut)
def edit_listing(
    listing_id: int,
    payload: ListingUpdate,
    caller: Caller = Depends(get_authenticated_caller),
    language: Language = Depends(get_request_language),
    lifecycle: ListingLifecycle = Depends(get_lifecycle),
) -> ListingOut:
    listing = lifecycle.edit(listing_id, caller, payload.model_dump(exclude_unset=True))
    return listing_out(lifecycle.annotate(listing), caller, language)


@router.post("/{listing_id}/submit", response_model=ListingOut)
def submit_listing(
    listing_id: int,
    caller: Caller = Depends(get_authenticated_caller),
    language: Language = Depends(get_request_language),
    lifecycle: ListingLifecycle = Depends(get_lifecycle),
) -> ListingOut:
    listing = lifecycle.submit_for_review(listing_id, caller)
    return listing_out(lifecycle.annotate(listing), caller, language)


@router.post("/{listing_id}/approve", response_model=ListingOut)
def approve_listing(
    listing_id: int,
    caller: Caller = Depends(get_authenticated_caller),
    language: Language = Depends(get_request_language),
    lifecycle: ListingLifecycle = Depends(get_lifecycle),
) -> ListingOut:
    listing = lifecycle.approve(listing_id, caller)
    return listing_out(lifecycle.annotate(listing), caller, language)


@router.post("/{listing_id}/reject", response_model=ListingOut)
def reject_listing(
    listing_id: int,
    payload: RejectRequest,
    caller: Caller = Depends(get_authenticated_caller),
    language: Language = Depends(get_request_language),
    lifecycle: ListingLifecycle = Depends(get_lifecycle),
) -> ListingOut:
    listing = lifecycle.reject(listing_id, caller, payload.reason)
    return listing_out(lifecycle.annotate(listing), caller, language)


@router.post("/{listing_id}/close", response_model=ListingOut)
def close_listing(
    listing_id: int,
    caller: Caller = Depends(get_authenticated_caller),
    language: Language = Depends(get_request_language),
    lifecycle: ListingLifecycle = Depends(get_lifecycle),
) -> ListingOut:
    listing = lifecycle.close(listing_id, caller)
    return listing_out(lifecycle.annotate(listing), caller, language)


@router.delete("/{listing_id}")
def delete_listing(
    listing_id: int,
    caller: Caller = Depends(get_authenticated_caller),
    lifecycle: ListingLifecycle = Depends(get_lifecycle),
) -> dict[str, str | int]:
    lifecycle.delete(listing_id, caller)
    return {"status": "deleted", "listing_id": listing_id}


@router.post("/{listing_id}/apply", response_model=ApplicationOut)
def apply_to_listing(
    listing_id: int,
    payload: ApplyRequest,
    caller: Caller = Depends(get_authenticated_caller),
    service: ApplicationService = Depends(get_application_service),
) -> Application:
    return service.apply(listing_id, caller, payload.message)


@router.get("/{listing_id}/applications", response_model=list[ApplicationOut])
def listing_applications(
    listing_id: int,
    caller: Caller = Depends(get_authenticated_caller),
    service: ApplicationService = Depends(get_application_service),
) -> list[Application]:
    return service.for_listing(listing_id, caller)
