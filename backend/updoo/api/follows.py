from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from updoo.auth import get_authenticated_caller, get_request_language
from updoo.database import get_db
from updoo.models.enums import Language
from updoo.schemas.listing import RefOut
from updoo.services.category_follows import CategoryFollowService
from updoo.services.identity import Caller
from updoo.services.locale import localized_ref


router = APIRouter()


@router.get("", response_model=list[RefOut])
def followed_categories(
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_authenticated_caller),
    language: Language = Depends(get_request_language),
) -> list[RefOut]:
    categories = CategoryFollowService(db).followed_categories(caller.user_id)
    return [RefOut(**localized_ref(category, language)) for category in categories]


@router.post("/{category_id}")
def follow_category(
    category_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_authenticated_caller),
) -> dict[str, str | int]:
    CategoryFollowService(db).follow(caller.user_id, category_id)
    return {"status": "following", "category_id": category_id}


@router.delete("/{category_id}")
def unfollow_category(
    category_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_authenticated_caller),
) -> dict[str, str | int]:
    removed = CategoryFollowService(db).unfollow(caller.user_id, category_id)
    return {"status": "unfollowed", "category_id": category_id, "removed": removed}
