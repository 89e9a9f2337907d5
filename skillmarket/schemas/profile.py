from datetime import datetime
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

Availability = Literal["weekends", "weekdays", "evenings", "flexible"]
Visibility = Literal["public", "private", "friends_only"]
DiscoverySort = Literal["newest", "oldest", "most_active", "best_match"]

# Same width as the skill and name columns (String(100))
SkillName = Annotated[str, Field(max_length=100)]


def normalize_skill_list(values: Optional[List[str]]) -> List[str]:
    """Strip entries, drop blanks and keep the first copy of each skill (case-sensitive)."""
    cleaned: List[str] = []
    for value in values or []:
        skill = str(value).strip()
        if skill and skill not in cleaned:
            cleaned.append(skill)
    return cleaned


# ======================
# PROFILE WRITE SCHEMAS
# ======================

class ProfileUpsert(BaseModel):
    name: str = Field(..., max_length=100)
    location: Optional[str] = Field(None, max_length=150)
    skills_offered: List[SkillName] = []
    skills_wanted: List[SkillName] = []
    availability: Availability = "weekends"
    profile_visibility: Visibility = "public"
    avatar_url: Optional[str] = Field(None, max_length=500)

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: str) -> str:
        value = (value or "").strip()
        if not value:
            raise ValueError("Name is required")
        return value

    @field_validator("location", "avatar_url")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None

    @field_validator("skills_offered", "skills_wanted")
    @classmethod
    def _dedupe_skills(cls, value: List[str]) -> List[str]:
        return normalize_skill_list(value)


# ======================
# PROFILE READ SCHEMAS
# ======================

class Profile(BaseModel):
    id: str
    name: str
    location: Optional[str] = None
    skills_offered: List[str] = []
    skills_wanted: List[str] = []
    availability: str = "weekends"
    profile_visibility: str = "public"
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class DiscoverableProfile(Profile):
    profile_completion: int = 0


class SimilarProfile(DiscoverableProfile):
    similarity_score: int = 0


# ======================
# DISCOVERY
# ======================

class DiscoveryFilters(BaseModel):
    availability: Optional[Availability] = None
    location: Optional[str] = None
    sort_by: DiscoverySort = "newest"


class DiscoveryPage(BaseModel):
    profiles: List[DiscoverableProfile] = []
    total: int = 0
    error: Optional[str] = None


class ProfileLookup(BaseModel):
    profile: Optional[DiscoverableProfile] = None
    error: Optional[str] = None


class PlatformStats(BaseModel):
    total_users: int = 0
    active_users: int = 0
    total_skills: int = 0
    error: Optional[str] = None
