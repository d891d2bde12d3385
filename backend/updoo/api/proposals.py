from __future__ import annotations

from fastapi import APIRouter, Depends

from updoo.api.deps import get_proposal_service
from updoo.auth import get_admin_caller, get_request_language
from updoo.models.enums import Language, ProposalStatus
from updoo.models.proposal import Proposal
from updoo.schemas.proposal import ProposalAcceptOut, ProposalCreate, ProposalOut, ProposalPublicOut
from updoo.services.identity import Caller
from updoo.services.proposals import ProposalService


router = APIRouter()


@router.post("", response_model=ProposalOut, status_code=201)
def create_proposal(
    payload: ProposalCreate,
    caller: Caller = Depends(get_admin_caller),
    service: ProposalService = Depends(get_proposal_service),
) -> Proposal:
    return service.create(
        caller,
        email=payload.email,
        reason=payload.reason,
        listing_data=payload.listing.model_dump(mode="json"),
        language=payload.language,
    )


@router.get("", response_model=list[ProposalOut])
def list_proposals(
    status: ProposalStatus | None = None,
    caller: Caller = Depends(get_admin_caller),
    service: ProposalService = Depends(get_proposal_service),
) -> list[Proposal]:
    return service.list_all(caller, status=status)


@router.get("/{token}", response_model=ProposalPublicOut)
def get_proposal(token: str, service: ProposalService = Depends(get_proposal_service)) -> ProposalPublicOut:
    proposal = service.get_by_token(token)
    return ProposalPublicOut(
        email=proposal.email,
        reason=proposal.reason,
        status=proposal.status,
        title=str(proposal.listing_data.get("title") or ""),
    )


@router.post("/{token}/accept", response_model=ProposalAcceptOut)
def accept_proposal(
    token: str,
    language: Language = Depends(get_request_language),
    service: ProposalService = Depends(get_proposal_service),
) -> ProposalAcceptOut:
    listing = service.accept(token, language=language)
    message = (
        "Oferta została przekazana do weryfikacji."
        if language == Language.POLISH
        else "Your listing has been sent for review."
    )
    return ProposalAcceptOut(listing_id=listing.id, message=message)


@router.post("/{token}/reject", response_model=ProposalOut)
def reject_proposal(token: str, service: ProposalService = Depends(get_proposal_service)) -> Proposal:
    return service.reject(token)
