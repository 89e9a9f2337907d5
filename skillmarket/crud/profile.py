# skillmarket/crud/profile.py
from datetime import datetime, UTC
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from skillmarket import models, schemas

PROFILE_ORDERINGS = {
    "newest": (models.Profile.created_at.desc(),),
    "oldest": (models.Profile.created_at.asc(),),
    "most_active": (models.Profile.updated_at.desc(),),
    # Ranking happens in the service layer; keep the fetch order stable.
    "best_match": (models.Profile.created_at.desc(),),
    "name": (models.Profile.name.asc(),),
}


def _escape_like(value: str) -> str:
    """Make % and _ in user input match literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def get_profile(db: Session, profile_id: str) -> Optional[models.Profile]:
    return db.query(models.Profile).filter(models.Profile.id == profile_id).first()


def list_profiles(
    db: Session,
    *,
    exclude_visibility: Optional[str] = "private",
    exclude_id: Optional[str] = None,
    availability: Optional[str] = None,
    location: Optional[str] = None,
    visibility: Optional[str] = None,
    updated_since: Optional[datetime] = None,
    order_by: Optional[str] = None,
    offset: int = 0,
    limit: Optional[int] = None,
) -> Tuple[List[models.Profile], int]:
    """
    Fetch profiles matching the given filters.

    Returns the requested window of rows and the total number of matching
    rows before offset/limit are applied.
    """
    query = db.query(models.Profile)

    if exclude_visibility:
        query = query.filter(models.Profile.profile_visibility != exclude_visibility)
    if exclude_id:
        query = query.filter(models.Profile.id != exclude_id)
    if availability:
        query = query.filter(models.Profile.availability == availability)
    if location:
        query = query.filter(models.Profile.location.ilike(f"%{_escape_like(location)}%", escape="\\"))
    if visibility:
        query = query.filter(models.Profile.profile_visibility == visibility)
    if updated_since is not None:
        query = query.filter(models.Profile.updated_at >= updated_since)

    total = query.count()

    ordering = PROFILE_ORDERINGS.get(order_by or "name", PROFILE_ORDERINGS["name"])
    query = query.order_by(*ordering, models.Profile.id.asc())

    if offset:
        query = query.offset(offset)
    if limit is not None:
        query = query.limit(limit)

    return query.all(), total


def upsert_profile(db: Session, profile_id: str, data: schemas.ProfileUpsert) -> models.Profile:
    profile = get_profile(db, profile_id)
    if profile is None:
        profile = models.Profile(id=profile_id)
        db.add(profile)

    for key, value in data.model_dump().items():
        setattr(profile, key, value)
    profile.updated_at = datetime.now(UTC)

    db.commit()
    db.refresh(profile)
    return profile
