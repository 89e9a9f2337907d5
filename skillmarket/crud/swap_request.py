# skillmarket/crud/swap_request.py
from datetime import datetime, UTC
from typing import List, Optional

from sqlalchemy.orm import Session

from skillmarket import models


def get_request(db: Session, request_id: str) -> Optional[models.SwapRequest]:
    return db.query(models.SwapRequest).filter(models.SwapRequest.id == request_id).first()


def list_requests_for_user(db: Session, user_id: str) -> List[models.SwapRequest]:
    """Every request the user sent or received, unordered."""
    return db.query(models.SwapRequest).filter(
        (models.SwapRequest.requester_id == user_id) |
        (models.SwapRequest.recipient_id == user_id)
    ).all()


def create_request(db: Session, **fields) -> models.SwapRequest:
    request = models.SwapRequest(status="pending", **fields)
    db.add(request)
    db.commit()
    db.refresh(request)
    return request


def set_request_status(db: Session, request: models.SwapRequest, new_status: str) -> models.SwapRequest:
    request.status = new_status
    request.updated_at = datetime.now(UTC)
    db.commit()
    db.refresh(request)
    return request
