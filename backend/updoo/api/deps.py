from __future__ import annotations

from fastapi import Depends
from sqlalchemy.orm import Session

from updoo.database import get_db
from updoo.services.applications import ApplicationService
from updoo.services.category_follows import CategoryFollowService
from updoo.services.clock import SystemClock
from updoo.services.listing_lifecycle import ListingLifecycle
from updoo.services.listing_repository import ListingRepository
from updoo.services.notifier import MailNotifier
from updoo.services.proposals import ProposalService


clock = SystemClock()


def get_clock() -> SystemClock:
    return clock


def get_notifier(db: Session = Depends(get_db)) -> MailNotifier:
    return MailNotifier(db)


def get_lifecycle(
    db: Session = Depends(get_db),
    notifier: MailNotifier = Depends(get_notifier),
    clock: SystemClock = Depends(get_clock),
) -> ListingLifecycle:
    return ListingLifecycle(
        ListingRepository(db),
        clock=clock,
        notifier=notifier,
        follows=CategoryFollowService(db),
    )


def get_application_service(
    db: Session = Depends(get_db),
    lifecycle: ListingLifecycle = Depends(get_lifecycle),
    notifier: MailNotifier = Depends(get_notifier),
) -> ApplicationService:
    return ApplicationService(db, lifecycle, notifier=notifier)


def get_proposal_service(
    db: Session = Depends(get_db),
    lifecycle: ListingLifecycle = Depends(get_lifecycle),
    notifier: MailNotifier = Depends(get_notifier),
) -> ProposalService:
    return ProposalService(db, lifecycle, notifier=notifier)
