# skillmarket/api/requests.py
"""Skill-exchange request inbox: list, send, accept and reject."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from skillmarket import models
from skillmarket.config import settings
from skillmarket.database import get_db
from skillmarket.schemas import (
    RequestFilters,
    RequestPage,
    SwapRequestCreate,
    SwapRequestResponse,
    StatusUpdateResult,
)
from skillmarket.schemas.swap_request import RequestDirection, StatusDecision, StatusFilter
from skillmarket.services import swap_request_service as service
from skillmarket.utils.security import get_current_user

router = APIRouter(prefix="/requests", tags=["Skill exchange requests"])

ERROR_STATUS = {
    service.REQUEST_NOT_FOUND: 404,
    service.RECIPIENT_NOT_FOUND: 404,
    service.NOT_REQUEST_RECIPIENT: 403,
    service.REQUEST_NOT_PENDING: 409,
    service.INVALID_STATUS: 400,
    service.FETCH_FAILED: 503,
    service.UPDATE_FAILED: 503,
    service.CREATE_FAILED: 503,
}


def _raise(error: str):
    raise HTTPException(status_code=ERROR_STATUS.get(error, 400), detail=error)


# ======================
# INBOX LISTING
# ======================
@router.get("", response_model=RequestPage)
@router.get("/", response_model=RequestPage, include_in_schema=False)
def list_requests(
    status: Optional[StatusFilter] = None,
    search: Optional[str] = None,
    direction: Optional[RequestDirection] = None,
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1, le=100),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    result = service.get_skill_exchange_requests(
        db,
        current_user.id,
        RequestFilters(status=status, search=search, direction=direction),
        page=page,
        page_size=page_size or settings.REQUESTS_DEFAULT_PAGE_SIZE,
    )
    if result.error:
        _raise(result.error)
    return result


@router.get("/{request_id}", response_model=SwapRequestResponse)
def get_request(
    request_id: str,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    result = service.get_skill_exchange_request(db, request_id, current_user.id)
    if result.error:
        _raise(result.error)
    return result.request


# ======================
# SEND REQUEST
# ======================
@router.post("", response_model=SwapRequestResponse, status_code=201)
@router.post("/", response_model=SwapRequestResponse, status_code=201, include_in_schema=False)
def send_request(
    payload: SwapRequestCreate,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    result = service.create_skill_exchange_request(db, current_user.id, payload)
    if result.error:
        _raise(result.error)
    return result.request


# ======================
# RESPOND TO REQUEST
# ======================
def _respond(db: Session, request_id: str, status: StatusDecision, user: models.User) -> StatusUpdateResult:
    result = service.update_request_status(db, request_id, status, user.id)
    if not result.success:
        _raise(result.error)
    return result


@router.patch("/{request_id}/accept", response_model=StatusUpdateResult)
def accept_request(
    request_id: str,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return _respond(db, request_id, "accepted", current_user)


@router.patch("/{request_id}/reject", response_model=StatusUpdateResult)
def reject_request(
    request_id: str,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return _respond(db, request_id, "rejected", current_user)
