from pydantic import BaseModel
from typing import Optional, List, Literal

from .profile import Availability, Profile, Visibility

MatchType = Literal["offered", "wanted", "both"]

# ======================
# SEARCH REQUEST MODELS
# ======================

class SearchFilters(BaseModel):
    availability: Optional[Availability] = None
    location: Optional[str] = None
    profile_visibility: Optional[Visibility] = None

# ======================
# USER SEARCH RESULTS
# ======================

class MatchInfo(BaseModel):
    match_type: MatchType
    matched_skills: List[str] = []


class SearchResult(Profile):
    match_type: MatchType
    matched_skills: List[str] = []
    relevance_score: int


class SearchResponse(BaseModel):
    results: List[SearchResult] = []
    searched_skills: List[str] = []
    error: Optional[str] = None
