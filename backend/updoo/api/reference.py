from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from updoo.auth import get_request_language
from updoo.database import get_db
from updoo.models.enums import Language
from updoo.models.reference import Category, Location, Skill
from updoo.schemas.listing import RefOut
from updoo.services.locale import localized_ref


router = APIRouter()


def _localized(db: Session, model, language: Language) -> list[RefOut]:
    rows = db.query(model).order_by(model.id.asc()).all()
    return [RefOut(**localized_ref(row, language)) for row in rows]


@router.get("/categories", response_model=list[RefOut])
def categories(db: Session = Depends(get_db), language: Language = Depends(get_request_language)) -> list[RefOut]:
    return _localized(db, Category, language)


@router.get("/skills", response_model=list[RefOut])
def skills(db: Session = Depends(get_db), language: Language = Depends(get_request_language)) -> list[RefOut]:
    return _localized(db, Skill, language)


@router.get("/locations", response_model=list[RefOut])
def locations(db: Session = Depends(get_db), language: Language = Depends(get_request_language)) -> list[RefOut]:
    return _localized(db, Location, language)
