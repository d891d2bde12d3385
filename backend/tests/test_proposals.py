from __future__ import annotations

import pytest

from conftest import listing_data, make_user
from updoo.errors import InvalidState, NotFound, Unauthorized, ValidationError
from updoo.models.enums import Language, ListingOrigin, ListingStatus, ProposalReason, ProposalStatus, Role
from updoo.models.proposal import Proposal
from updoo.models.user import User
from updoo.services.proposals import ProposalService


@pytest.fixture()
def proposals(db, lifecycle, notifier):
    return ProposalService(db, lifecycle, notifier=notifier)


def _create(proposals, admin, reference, email="prospect@example.com", **overrides):
    return proposals.create(
        admin,
        email=email,
        reason=ProposalReason.NO_ACCOUNT,
        listing_data=listing_data(reference, **overrides),
        language=Language.ENGLISH,
    )


def test_admin_creates_proposal_and_sends_invitation(proposals, admin, reference, notifier):
    proposal = _create(proposals, admin, reference, email="  Prospect@Example.com ")

    assert proposal.status == ProposalStatus.PENDING
    assert proposal.email == "prospect@example.com"
    assert len(proposal.token) == 64
    assert ("proposal_invitation", "prospect@example.com", Language.ENGLISH) in notifier.calls


def test_proposal_requires_admin_and_valid_listing(proposals, client, admin, reference):
    with pytest.raises(Unauthorized):
        _create(proposals, client, reference)
    with pytest.raises(ValidationError):
        _create(proposals, admin, reference, offer_days=3)


def test_accept_creates_client_and_pending_listing(db, proposals, admin, reference, notifier):
    proposal = _create(proposals, admin, reference)

    listing = proposals.accept(proposal.token, Language.ENGLISH)

    user = db.query(User).filter(User.email == "prospect@example.com").one()
    assert user.role == Role.CLIENT
    assert listing.author_id == user.id
    assert listing.status == ListingStatus.PENDING_REVIEW
    assert listing.origin == ListingOrigin.PROPOSAL
    assert ("proposal_credentials", "prospect@example.com", Language.ENGLISH) in notifier.calls

    db.refresh(proposal)
    assert proposal.status == ProposalStatus.ACCEPTED
    assert proposal.listing_id == listing.id
    assert proposal.responded_at is not None


def test_accept_reuses_existing_client_account(db, proposals, client_user, admin, reference, notifier):
    proposal = _create(proposals, admin, reference, email=client_user.email)

    listing = proposals.accept(proposal.token)

    assert listing.author_id == client_user.id
    assert "proposal_credentials" not in notifier.names()


def test_token_is_single_use(proposals, admin, reference):
    proposal = _create(proposals, admin, reference)
    proposals.accept(proposal.token)

    with pytest.raises(InvalidState):
        proposals.accept(proposal.token)


def test_accept_refuses_non_client_accounts(db, proposals, admin, reference):
    make_user(db, "worker@example.com", Role.FREELANCER)
    proposal = _create(proposals, admin, reference, email="worker@example.com")

    with pytest.raises(InvalidState):
        proposals.accept(proposal.token)

    db.refresh(proposal)
    assert proposal.status == ProposalStatus.PENDING
    assert db.query(Proposal).filter(Proposal.listing_id.isnot(None)).count() == 0


def test_rejected_proposal_cannot_be_accepted(proposals, admin, reference):
    proposal = _create(proposals, admin, reference)

    rejected = proposals.reject(proposal.token)
    assert rejected.status == ProposalStatus.REJECTED
    assert proposals.reject(proposal.token).status == ProposalStatus.REJECTED

    with pytest.raises(InvalidState):
        proposals.accept(proposal.token)


def test_unknown_token(proposals):
    with pytest.raises(NotFound):
        proposals.get_by_token("missing")
    with pytest.raises(NotFound):
        proposals.accept("missing")


def test_list_proposals_by_status(proposals, admin, client, reference):
    first = _create(proposals, admin, reference, email="one@example.com")
    _create(proposals, admin, reference, email="two@example.com")
    proposals.reject(first.token)

    pending = proposals.list_all(admin, status=ProposalStatus.PENDING)
    assert [item.email for item in pending] == ["two@example.com"]
    assert len(proposals.list_all(admin)) == 2
    with pytest.raises(Unauthorized):
        proposals.list_all(client)
