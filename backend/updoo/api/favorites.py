from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from updoo.api.deps import get_lifecycle
from updoo.api.presenters import listing_out
from updoo.auth import get_authenticated_caller, get_request_language
from updoo.database import get_db
from updoo.models.enums import Language
from updoo.schemas.listing import ListingOut
from updoo.services.favorites import FavoritesService
from updoo.services.identity import Caller
from updoo.services.listing_lifecycle import ListingLifecycle


router = APIRouter()


@router.get("", response_model=list[ListingOut])
def list_favorites(
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_authenticated_caller),
    language: Language = Depends(get_request_language),
    lifecycle: ListingLifecycle = Depends(get_lifecycle),
) -> list[ListingOut]:
    service = FavoritesService(db)
    listings = service.listings(caller.user_id)
    favorite_ids = {listing.id for listing in listings}
    return [listing_out(lifecycle.annotate(listing), caller, language, favorite_ids) for listing in listings]


@router.post("/{listing_id}")
def add_favorite(
    listing_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_authenticated_caller),
) -> dict[str, str | int]:
    FavoritesService(db).add(caller.user_id, listing_id)
    return {"status": "added", "listing_id": listing_id}


@router.delete("/{listing_id}")
def remove_favorite(
    listing_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_authenticated_caller),
) -> dict[str, str | int]:
    FavoritesService(db).remove(caller.user_id, listing_id)
    return {"status": "removed", "listing_id": listing_id}
