from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from skillmarket import models
from skillmarket.crud import profile as profile_crud
from skillmarket.database import get_db
from skillmarket.schemas import DiscoverableProfile, ProfileUpsert
from skillmarket.services import discovery_service
from skillmarket.utils.security import get_current_user, get_optional_current_user

router = APIRouter(prefix="/profiles", tags=["Profiles"])

LOOKUP_ERROR_STATUS = {
    "Profile not found": 404,
    "This profile is private": 403,
}


# ======================
# GET: Own profile
# ======================
@router.get("/me", response_model=DiscoverableProfile)
def get_my_profile(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    lookup = discovery_service.get_profile_by_id(db, current_user.id, current_user.id)
    if lookup.error:
        raise HTTPException(status_code=LOOKUP_ERROR_STATUS.get(lookup.error, 503), detail=lookup.error)
    return lookup.profile


# ======================
# PUT: Create or update own profile
# ======================
@router.put("/me", response_model=DiscoverableProfile)
def save_my_profile(
    payload: ProfileUpsert,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        profile = profile_crud.upsert_profile(db, current_user.id, payload)
    except SQLAlchemyError:
        db.rollback()
        raise HTTPException(status_code=503, detail="An unexpected error occurred. Please try again.")

    return discovery_service.to_discoverable(profile)


# ======================
# GET: Any profile by id
# ======================
@router.get("/{profile_id}", response_model=DiscoverableProfile)
def get_profile(
    profile_id: str,
    current_user: Optional[models.User] = Depends(get_optional_current_user),
    db: Session = Depends(get_db),
):
    lookup = discovery_service.get_profile_by_id(
        db,
        profile_id,
        current_user.id if current_user else None,
    )
    if lookup.error:
        raise HTTPException(status_code=LOOKUP_ERROR_STATUS.get(lookup.error, 503), detail=lookup.error)
    return lookup.profile
