from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from sqlalchemy.orm import sessionmaker

from updoo import models  # noqa: F401
from updoo.auth import hash_password
from updoo.database import Base, build_engine
from updoo.models.enums import Language, Role
from updoo.models.reference import Category, Location, Skill
from updoo.models.user import User
from updoo.services.category_follows import CategoryFollowService
from updoo.services.identity import Caller
from updoo.services.listing_lifecycle import ListingLifecycle
from updoo.services.listing_repository import ListingRepository


START = datetime(2026, 3, 2, 9, 0, 0)


class FixedClock:
    def __init__(self, current: datetime = START) -> None:
        self.current = current

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


class RecordingNotifier:
    """Collects notification calls instead of sending email."""

    def __init__(self, fail: bool = False) -> None:
        self.calls: list[tuple] = []
        self.fail = fail

    def _record(self, *call) -> None:
        self.calls.append(call)
        if self.fail:
            raise RuntimeError("mail provider down")

    def names(self) -> list[str]:
        return [call[0] for call in self.calls]

    def listing_approved(self, listing) -> None:
        self._record("listing_approved", listing.id)

    def listing_rejected(self, listing, reason) -> None:
        self._record("listing_rejected", listing.id, reason)

    def new_listing_in_followed_category(self, listing, users) -> None:
        self._record("new_listing_in_followed_category", listing.id, [user.id for user in users])

    def new_application(self, listing, applicant, message) -> None:
        self._record("new_application", listing.id, applicant.id, message)

    def proposal_invitation(self, proposal, language) -> None:
        self._record("proposal_invitation", proposal.email, language)

    def proposal_credentials(self, email, password, language) -> None:
        self._record("proposal_credentials", email, language)


@pytest.fixture()
def engine(tmp_path):
    built = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=built)
    yield built
    built.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def clock():
    return FixedClock()


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def lifecycle(db, clock, notifier):
    return ListingLifecycle(ListingRepository(db), clock=clock, notifier=notifier, follows=CategoryFollowService(db))


def make_user(db, email: str, role: Role, language: Language = Language.POLISH, **extra) -> User:
    user = User(email=email, password_hash=hash_password("secret-123"), role=role, language=language, **extra)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture()
def client_user(db):
    return make_user(db, "client@example.com", Role.CLIENT, name="Anna", surname="Kowalska")


@pytest.fixture()
def other_client_user(db):
    return make_user(db, "other@example.com", Role.CLIENT, Language.ENGLISH, name="John", surname="Smith")


@pytest.fixture()
def freelancer_user(db):
    return make_user(db, "freelancer@example.com", Role.FREELANCER, name="Piotr", surname="Nowak")


@pytest.fixture()
def admin_user(db):
    return make_user(db, "admin@example.com", Role.ADMIN, name="Admin")


@pytest.fixture()
def client(client_user):
    return Caller.for_user(client_user)


@pytest.fixture()
def other_client(other_client_user):
    return Caller.for_user(other_client_user)


@pytest.fixture()
def freelancer(freelancer_user):
    return Caller.for_user(freelancer_user)


@pytest.fixture()
def admin(admin_user):
    return Caller.for_user(admin_user)


@pytest.fixture()
def reference(db):
    programming = Category(slug="programming", names={"POLISH": "Programowanie", "ENGLISH": "Programming"})
    writing = Category(slug="writing", names={"POLISH": "Pisanie"})
    python = Skill(slug="python", names={"POLISH": "Python", "ENGLISH": "Python"})
    sql = Skill(slug="sql", names={"POLISH": "SQL", "ENGLISH": "SQL"})
    figma = Skill(slug="figma", names={"POLISH": "Figma", "ENGLISH": "Figma"})
    warsaw = Location(slug="warszawa", names={"POLISH": "Warszawa", "ENGLISH": "Warsaw"})
    db.add_all([programming, writing, python, sql, figma, warsaw])
    db.commit()
    return {
        "programming": programming.id,
        "writing": writing.id,
        "python": python.id,
        "sql": sql.id,
        "figma": figma.id,
        "warsaw": warsaw.id,
    }


def listing_data(reference: dict[str, int], **overrides) -> dict:
    data = {
        "title": "Backend developer for a booking app",
        "description": "We need help building a REST API for our booking system.",
        "category_id": reference["programming"],
        "location_id": reference["warsaw"],
        "billing_type": "HOURLY",
        "hours_per_week": "FROM_11_TO_20",
        "rate": "120",
        "currency": "pln",
        "experience_level": "MID",
        "is_remote": True,
        "project_type": "CONTINUOUS",
        "offer_days": 14,
        "skill_ids": [reference["python"], reference["sql"]],
    }
    data.update(overrides)
    return data


def publish(lifecycle: ListingLifecycle, author: Caller, admin: Caller, reference: dict[str, int], **overrides):
    listing = lifecycle.create(listing_data(reference, **overrides), author)
    lifecycle.submit_for_review(listing.id, author)
    return lifecycle.approve(listing.id, admin)
