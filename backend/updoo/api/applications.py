from __future__ import annotations

from fastapi import APIRouter, Depends

from updoo.api.deps import get_application_service
from updoo.auth import get_authenticated_caller
from updoo.models.application import Application
from updoo.schemas.application import ApplicationOut
from updoo.services.applications import ApplicationService
from updoo.services.identity import Caller


router = APIRouter()


@router.get("/mine", response_model=list[ApplicationOut])
def my_applications(
    caller: Caller = Depends(get_authenticated_caller),
    service: ApplicationService = Depends(get_application_service),
) -> list[Application]:
    return service.for_applicant(caller)
