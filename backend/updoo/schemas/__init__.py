from updoo.schemas.application import ApplicationOut, ApplyRequest
from updoo.schemas.auth import AuthResponse, LoginRequest, MeResponse, RegisterRequest
from updoo.schemas.listing import (
    AuthorOut,
    ListingCreate,
    ListingOut,
    ListingPage,
    ListingUpdate,
    RefOut,
    RejectRequest,
)
from updoo.schemas.proposal import ProposalAcceptOut, ProposalCreate, ProposalOut, ProposalPublicOut

__all__ = [
    "ApplicationOut",
    "ApplyRequest",
    "AuthResponse",
    "AuthorOut",
    "ListingCreate",
    "ListingOut",
    "ListingPage",
    "ListingUpdate",
    "LoginRequest",
    "MeResponse",
    "ProposalAcceptOut",
    "ProposalCreate",
    "ProposalOut",
    "ProposalPublicOut",
    "RefOut",
    "RegisterRequest",
    "RejectRequest",
]
