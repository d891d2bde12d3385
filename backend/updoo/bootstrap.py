from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from updoo.auth import hash_password
from updoo.config import settings
from updoo.models.enums import Language, Role
from updoo.models.reference import Category, Location, Skill
from updoo.models.user import User
from updoo.services.locale import slug_from_name


logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    ("programming", "Programowanie", "Programming"),
    ("design", "Design", "Design"),
    ("marketing", "Marketing", "Marketing"),
    ("writing", "Pisanie", "Writing"),
    ("office-working", "Prace biurowe", "Office Work"),
    ("other", "Inne", "Other"),
]

DEFAULT_SKILLS = [
    "Python",
    "JavaScript",
    "TypeScript",
    "React",
    "SQL",
    "Figma",
    "Copywriting",
    "SEO",
    "Excel",
    "Photoshop",
]

DEFAULT_LOCATIONS = [
    "Warszawa",
    "Kraków",
    "Wrocław",
    "Poznań",
    "Gdańsk",
    "Łódź",
]


def _add_if_missing(db: Session, model, slug: str, names: dict[str, str]) -> bool:
    if db.query(model.id).filter(model.slug == slug).first():
        return False
    db.add(model(slug=slug, names=names))
    return True


def _ensure_admin(db: Session) -> bool:
    email = settings.default_admin_email.strip().lower()
    if not email or db.query(User.id).filter(User.email == email).first():
        return False
    db.add(
        User(
            email=email,
            password_hash=hash_password(settings.default_admin_password),
            role=Role.ADMIN,
            language=Language.POLISH,
            name="Admin",
        )
    )
    return True


def seed_defaults(db: Session) -> None:
    """Insert reference data and the default admin account when they are missing."""
    added = 0
    for slug, polish, english in DEFAULT_CATEGORIES:
        added += _add_if_missing(db, Category, slug, {"POLISH": polish, "ENGLISH": english})
    for name in DEFAULT_SKILLS:
        added += _add_if_missing(db, Skill, slug_from_name(name), {"POLISH": name, "ENGLISH": name})
    for name in DEFAULT_LOCATIONS:
        added += _add_if_missing(db, Location, slug_from_name(name), {"POLISH": name, "ENGLISH": name})
    if _ensure_admin(db):
        added += 1
        logger.info("Created default admin account %s", settings.default_admin_email)
    db.commit()
    if added:
        logger.info("Seeded %s default record(s)", added)
