# skillmarket/services/swap_request_service.py
"""
Skill-exchange request inbox.

Requests involving a user are fetched from the request store, then
filtered by direction/status/free text, ordered newest first and
paginated here rather than in the store.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple, TypeVar, get_args

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from skillmarket.crud import profile as profile_crud
from skillmarket.crud import swap_request as request_crud
from skillmarket.crud import user as user_crud
from skillmarket.schemas import (
    RequestFilters,
    RequestPage,
    StatusUpdateResult,
    SwapRequestCreate,
    SwapRequestResponse,
    SwapRequestResult,
)
from skillmarket.schemas.swap_request import StatusDecision

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
STATUS_DECISIONS = get_args(StatusDecision)
SEARCHABLE_FIELDS = ("requester_name", "recipient_name", "offered_skill", "wanted_skill", "message")

# User-facing messages
REQUEST_NOT_FOUND = "Skill exchange request not found"
NOT_REQUEST_RECIPIENT = "Only the recipient can respond to this request"
REQUEST_NOT_PENDING = "Only pending requests can be accepted or rejected"
INVALID_STATUS = "Status must be one of: accepted, rejected"
FETCH_FAILED = "Failed to fetch skill exchange requests"
UPDATE_FAILED = "Failed to update request status"
CREATE_FAILED = "Failed to send skill exchange request. Please try again."
RECIPIENT_NOT_FOUND = "User not found"
SELF_REQUEST = "You cannot send a skill exchange request to yourself"
NO_OFFERED_SKILLS = "You need to add skills to your profile before making a request"
NO_WANTED_SKILLS = "This user hasn't specified any skills they want to learn"
OFFERED_SKILL_REQUIRED = "Please select one of your skills to offer"
WANTED_SKILL_REQUIRED = "Please select one of their wanted skills"
MESSAGE_REQUIRED = "Please write a message to introduce yourself"


# ======================
# FILTERING & PAGINATION
# ======================

def _matches_search(request, needle: str) -> bool:
    for field in SEARCHABLE_FIELDS:
        if needle in (getattr(request, field, None) or "").lower():
            return True
    return False


def _created_sort_key(request) -> Tuple[float, str]:
    created = request.created_at
    timestamp = created.timestamp() if isinstance(created, datetime) else 0.0
    return (timestamp, str(request.id))


def filter_requests(requests: Iterable[T], user_id: str, filters: Optional[RequestFilters] = None) -> List[T]:
    """Requests visible to ``user_id`` that satisfy ``filters``, newest first."""
    filters = filters or RequestFilters()
    direction = filters.direction or "all"

    if direction == "sent":
        selected = [r for r in requests if r.requester_id == user_id]
    elif direction == "received":
        selected = [r for r in requests if r.recipient_id == user_id]
    else:
        selected = [r for r in requests if r.requester_id == user_id or r.recipient_id == user_id]

    if filters.status and filters.status != "all":
        selected = [r for r in selected if r.status == filters.status]

    if filters.search:
        needle = filters.search.lower()
        selected = [r for r in selected if _matches_search(r, needle)]

    selected.sort(key=_created_sort_key, reverse=True)
    return selected


def paginate(items: Sequence[T], page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> Tuple[List[T], int, int]:
    """Return ``(page_items, total, total_pages)`` for a 1-based page number."""
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    page = max(page, 1)
    total = len(items)
    total_pages = math.ceil(total / page_size)
    start = (page - 1) * page_size
    return list(items[start:start + page_size]), total, total_pages


def get_skill_exchange_requests(
    db: Session,
    user_id: str,
    filters: Optional[RequestFilters] = None,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> RequestPage:
    try:
        requests = request_crud.list_requests_for_user(db, user_id)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Request inbox fetch failed (user_id=%s): %s", user_id, exc)
        return RequestPage(page=page, page_size=page_size, error=FETCH_FAILED)

    selected = filter_requests(requests, user_id, filters)
    page_items, total, total_pages = paginate(selected, page, page_size)
    return RequestPage(
        requests=[SwapRequestResponse.model_validate(r) for r in page_items],
        total=total,
        total_pages=total_pages,
        page=max(page, 1),
        page_size=page_size,
    )


def get_skill_exchange_request(db: Session, request_id: str, user_id: str) -> SwapRequestResult:
    """Single request, visible only to its requester and recipient."""
    try:
        request = request_crud.get_request(db, request_id)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Request lookup failed (request_id=%s): %s", request_id, exc)
        return SwapRequestResult(error=FETCH_FAILED)

    if request is None or user_id not in (request.requester_id, request.recipient_id):
        return SwapRequestResult(error=REQUEST_NOT_FOUND)
    return SwapRequestResult(request=SwapRequestResponse.model_validate(request))


# ======================
# STATUS UPDATE
# ======================

def update_request_status(
    db: Session,
    request_id: str,
    status: StatusDecision,
    acting_user_id: str,
) -> StatusUpdateResult:
    """
    Accept or reject a pending request on behalf of its recipient.

    Never raises: every failure is reported through ``error``.
    """
    if status not in STATUS_DECISIONS:
        return StatusUpdateResult(success=False, error=INVALID_STATUS)

    try:
        request = request_crud.get_request(db, request_id)
        if request is None:
            return StatusUpdateResult(success=False, error=REQUEST_NOT_FOUND)
        if request.recipient_id != acting_user_id:
            return StatusUpdateResult(success=False, error=NOT_REQUEST_RECIPIENT)
        if request.status != "pending":
            return StatusUpdateResult(success=False, error=REQUEST_NOT_PENDING)

        request = request_crud.set_request_status(db, request, status)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Request status update failed (request_id=%s): %s", request_id, exc)
        return StatusUpdateResult(success=False, error=UPDATE_FAILED)

    logger.info("Request %s %s by user %s", request_id, status, acting_user_id)
    return StatusUpdateResult(success=True, request=SwapRequestResponse.model_validate(request))


# ======================
# CREATE REQUEST
# ======================

def create_skill_exchange_request(
    db: Session,
    requester_id: str,
    payload: SwapRequestCreate,
) -> SwapRequestResult:
    offered_skill = payload.offered_skill.strip()
    wanted_skill = payload.wanted_skill.strip()
    message = payload.message.strip()

    if payload.recipient_id == requester_id:
        return SwapRequestResult(error=SELF_REQUEST)

    try:
        requester = user_crud.get_user(db, requester_id)
        recipient = user_crud.get_user(db, payload.recipient_id)
        if recipient is None or not recipient.is_active:
            return SwapRequestResult(error=RECIPIENT_NOT_FOUND)

        requester_profile = profile_crud.get_profile(db, requester_id)
        recipient_profile = profile_crud.get_profile(db, payload.recipient_id)
        if recipient_profile is None:
            return SwapRequestResult(error=RECIPIENT_NOT_FOUND)

        offered = list(requester_profile.skills_offered or []) if requester_profile else []
        wanted = list(recipient_profile.skills_wanted or [])
        if not offered:
            return SwapRequestResult(error=NO_OFFERED_SKILLS)
        if not wanted:
            return SwapRequestResult(error=NO_WANTED_SKILLS)
        if offered_skill not in offered:
            return SwapRequestResult(error=OFFERED_SKILL_REQUIRED)
        if wanted_skill not in wanted:
            return SwapRequestResult(error=WANTED_SKILL_REQUIRED)
        if not message:
            return SwapRequestResult(error=MESSAGE_REQUIRED)

        request = request_crud.create_request(
            db,
            requester_id=requester_id,
            recipient_id=payload.recipient_id,
            requester_name=requester_profile.name or requester.full_name,
            recipient_name=recipient_profile.name or recipient.full_name,
            requester_avatar=requester_profile.avatar_url,
            recipient_avatar=recipient_profile.avatar_url,
            offered_skill=offered_skill,
            wanted_skill=wanted_skill,
            message=message,
        )
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Request creation failed (requester_id=%s): %s", requester_id, exc)
        return SwapRequestResult(error=CREATE_FAILED)

    logger.info("Request %s sent from %s to %s", request.id, requester_id, payload.recipient_id)
    return SwapRequestResult(request=SwapRequestResponse.model_validate(request))
