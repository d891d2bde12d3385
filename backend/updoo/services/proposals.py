from __future__ import annotations

import logging
import secrets
from collections.abc import Mapping
from typing import Any

from sqlalchemy.orm import Session

from updoo.auth import hash_password
from updoo.errors import InvalidState, NotFound, Unauthorized
from updoo.models.enums import Language, ListingOrigin, ProposalReason, ProposalStatus, Role
from updoo.models.listing import JobListing
from updoo.models.proposal import Proposal
from updoo.models.user import User
from updoo.services.identity import Caller
from updoo.services.listing_lifecycle import ListingLifecycle


logger = logging.getLogger(__name__)

TOKEN_BYTES = 32


class ProposalService:
    """Admin-curated listing drafts sent to prospective clients by email.

    Accepting a proposal creates (or reuses) the client's account and turns
    the stored listing data into a listing waiting for review.
    """

    def __init__(self, db: Session, lifecycle: ListingLifecycle, notifier=None) -> None:
        self.db = db
        self.lifecycle = lifecycle
        self.notifier = notifier

    def create(
        self,
        caller: Caller,
        email: str,
        reason: ProposalReason,
        listing_data: Mapping[str, Any],
        language: Language = Language.POLISH,
    ) -> Proposal:
        if not caller.is_admin:
            raise Unauthorized("Only admins can send proposals")
        self.lifecycle.validate(listing_data, default_language=language)

        proposal = Proposal(
            email=email.strip().lower(),
            reason=ProposalReason(reason),
            listing_data=dict(listing_data),
            token=secrets.token_hex(TOKEN_BYTES),
            status=ProposalStatus.PENDING,
        )
        self.db.add(proposal)
        self.db.commit()
        self.db.refresh(proposal)
        logger.info("Proposal %s created for %s", proposal.id, proposal.email)

        if self.notifier is not None:
            try:
                self.notifier.proposal_invitation(proposal, language)
            except Exception:
                logger.exception("Failed to send invitation for proposal %s", proposal.id)
        return proposal

    def get_by_token(self, token: str) -> Proposal:
        proposal = self.db.query(Proposal).filter(Proposal.token == token).first()
        if proposal is None:
            raise NotFound("Invalid or expired link")
        return proposal

    def list_all(self, caller: Caller, status: ProposalStatus | None = None) -> list[Proposal]:
        if not caller.is_admin:
            raise Unauthorized("Only admins can browse proposals")
        query = self.db.query(Proposal)
        if status is not None:
            query = query.filter(Proposal.status == status)
        return query.order_by(Proposal.created_at.desc(), Proposal.id.desc()).all()

    def accept(self, token: str, language: Language = Language.POLISH) -> JobListing:
        proposal = self.get_by_token(token)
        if ProposalStatus(proposal.status) != ProposalStatus.PENDING:
            raise InvalidState("This link has already been used")

        user = self.db.query(User).filter(User.email == proposal.email).first()
        if user is not None and user.role != Role.CLIENT:
            raise InvalidState("An account with this email already exists with a different account type")

        claimed = self._claim(proposal.id, ProposalStatus.ACCEPTED)
        if not claimed:
            raise InvalidState("This link has already been used")

        try:
            if user is None:
                user = self._create_client(proposal.email, language)
            listing = self.lifecycle.create(
                proposal.listing_data,
                Caller.for_user(user),
                origin=ListingOrigin.PROPOSAL,
            )
        except Exception:
            self.db.rollback()
            self._release(proposal.id)
            raise

        self.db.query(Proposal).filter(Proposal.id == proposal.id).update(
            {"listing_id": listing.id}, synchronize_session=False
        )
        self.db.commit()
        logger.info("Proposal %s accepted, listing %s awaits review", proposal.id, listing.id)
        return listing

    def reject(self, token: str) -> Proposal:
        proposal = self.get_by_token(token)
        if ProposalStatus(proposal.status) == ProposalStatus.PENDING:
            self._claim(proposal.id, ProposalStatus.REJECTED)
            self.db.refresh(proposal)
        return proposal

    def _claim(self, proposal_id: int, target: ProposalStatus) -> bool:
        matched = (
            self.db.query(Proposal)
            .filter(Proposal.id == proposal_id, Proposal.status == ProposalStatus.PENDING)
            .update(
                {"status": target, "responded_at": self.lifecycle.clock.now()},
                synchronize_session=False,
            )
        )
        self.db.commit()
        return bool(matched)

    def _release(self, proposal_id: int) -> None:
        self.db.query(Proposal).filter(Proposal.id == proposal_id).update(
            {"status": ProposalStatus.PENDING, "responded_at": None},
            synchronize_session=False,
        )
        self.db.commit()

    def _create_client(self, email: str, language: Language) -> User:
        password = secrets.token_hex(16)
        user = User(email=email, password_hash=hash_password(password), role=Role.CLIENT, language=language)
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        logger.info("Created client account %s from proposal", user.id)

        if self.notifier is not None:
            try:
                self.notifier.proposal_credentials(email, password, language)
            except Exception:
                logger.exception("Failed to send credentials to new client %s", user.id)
        return user
