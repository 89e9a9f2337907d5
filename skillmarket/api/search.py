from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from skillmarket import models
from skillmarket.database import get_db
from skillmarket.schemas import SearchFilters, SearchResponse
from skillmarket.schemas.profile import Availability, Visibility
from skillmarket.services import search_service
from skillmarket.utils.security import get_optional_current_user

router = APIRouter(prefix="/search", tags=["Search"])


@router.get("/users", response_model=SearchResponse)
def search_users(
    q: str = Query("", description="Free-text skills, e.g. 'python, guitar'"),
    availability: Optional[Availability] = None,
    location: Optional[str] = None,
    visibility: Optional[Visibility] = None,
    current_user: Optional[models.User] = Depends(get_optional_current_user),
    db: Session = Depends(get_db),
):
    """
    Rank visible profiles by how well their skills match the query.

    An empty or stop-word-only query returns no results.
    """
    response = search_service.search_users_by_skills(
        db,
        q,
        SearchFilters(availability=availability, location=location, profile_visibility=visibility),
        current_user.id if current_user else None,
    )
    if response.error:
        raise HTTPException(status_code=503, detail=response.error)
    return response


@router.get("/popular-skills", response_model=List[str])
def popular_skills(
    limit: int = Query(search_service.POPULAR_SKILLS_LIMIT, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return search_service.get_popular_skills(db, limit)
