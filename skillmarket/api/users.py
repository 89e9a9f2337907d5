from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from skillmarket import models
from skillmarket.crud import profile as profile_crud
from skillmarket.database import get_db
from skillmarket.schemas import DiscoveryFilters, DiscoveryPage, PlatformStats, SimilarProfile
from skillmarket.schemas.profile import Availability, DiscoverySort
from skillmarket.services import discovery_service
from skillmarket.utils.security import get_current_user, get_optional_current_user

router = APIRouter(prefix="/users", tags=["Users"])


def _current_id(user: Optional[models.User]) -> Optional[str]:
    return user.id if user else None


# ======================
# GET: Browse the directory
# ======================
@router.get("/discover", response_model=DiscoveryPage)
def discover_users(
    availability: Optional[Availability] = None,
    location: Optional[str] = None,
    sort_by: DiscoverySort = "newest",
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: Optional[models.User] = Depends(get_optional_current_user),
    db: Session = Depends(get_db),
):
    page = discovery_service.get_discoverable_profiles(
        db,
        current_user_id=_current_id(current_user),
        filters=DiscoveryFilters(availability=availability, location=location, sort_by=sort_by),
        limit=limit,
        offset=offset,
    )
    if page.error:
        raise HTTPException(status_code=503, detail=page.error)
    return page


@router.get("/recent", response_model=DiscoveryPage)
def recently_active_users(
    limit: int = Query(10, ge=1, le=50),
    current_user: Optional[models.User] = Depends(get_optional_current_user),
    db: Session = Depends(get_db),
):
    page = discovery_service.get_recently_active_users(db, _current_id(current_user), limit)
    if page.error:
        raise HTTPException(status_code=503, detail=page.error)
    return page


# ======================
# GET: People with overlapping skills
# ======================
@router.get("/similar", response_model=List[SimilarProfile])
def similar_users(
    limit: int = Query(5, ge=1, le=50),
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    profile = profile_crud.get_profile(db, current_user.id)
    if profile is None:
        return []
    user_skills = list(profile.skills_offered or []) + list(profile.skills_wanted or [])
    return discovery_service.get_similar_users(db, user_skills, current_user.id, limit)


@router.get("/stats", response_model=PlatformStats)
def platform_stats(db: Session = Depends(get_db)):
    stats = discovery_service.get_platform_stats(db)
    if stats.error:
        raise HTTPException(status_code=503, detail=stats.error)
    return stats
