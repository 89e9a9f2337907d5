from __future__ import annotations

import logging
from datetime import datetime, timedelta, UTC
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from skillmarket.crud import profile as profile_crud
from skillmarket.schemas import (
    DiscoverableProfile,
    DiscoveryFilters,
    DiscoveryPage,
    PlatformStats,
    ProfileLookup,
    SimilarProfile,
)
from skillmarket.services.search_service import skills_match

logger = logging.getLogger(__name__)


class CompletionWeights:
    """Profile completion checklist (7 points total)."""
    NAME = 1
    LOCATION = 1
    SKILLS_OFFERED = 2
    SKILLS_WANTED = 2
    AVATAR = 1
    MAX_SCORE = 7


ACTIVE_WINDOW_DAYS = 30
SIMILAR_EXACT_POINTS = 10
SIMILAR_PARTIAL_POINTS = 5


def calculate_profile_completion(profile) -> int:
    """Percentage (0-100) of the completion checklist a profile satisfies."""
    score = 0
    if getattr(profile, "name", None):
        score += CompletionWeights.NAME
    if getattr(profile, "location", None):
        score += CompletionWeights.LOCATION
    if getattr(profile, "skills_offered", None):
        score += CompletionWeights.SKILLS_OFFERED
    if getattr(profile, "skills_wanted", None):
        score += CompletionWeights.SKILLS_WANTED
    if getattr(profile, "avatar_url", None):
        score += CompletionWeights.AVATAR

    # Half-up rounding; round() would bank 50% cases to even.
    percent = Decimal(score * 100) / Decimal(CompletionWeights.MAX_SCORE)
    return int(percent.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_discoverable(profile) -> DiscoverableProfile:
    return DiscoverableProfile(
        **DiscoverableProfile.model_validate(profile).model_dump(exclude={"profile_completion"}),
        profile_completion=calculate_profile_completion(profile),
    )


def get_discoverable_profiles(
    db: Session,
    current_user_id: Optional[str] = None,
    filters: Optional[DiscoveryFilters] = None,
    limit: int = 20,
    offset: int = 0,
) -> DiscoveryPage:
    filters = filters or DiscoveryFilters()
    try:
        rows, total = profile_crud.list_profiles(
            db,
            exclude_visibility="private",
            exclude_id=current_user_id,
            availability=filters.availability,
            location=filters.location,
            order_by=filters.sort_by,
            offset=offset,
            limit=limit,
        )
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Discoverable profile lookup failed: %s", exc)
        return DiscoveryPage(error="Failed to fetch discoverable profiles")

    return DiscoveryPage(profiles=[to_discoverable(row) for row in rows], total=total)


def get_profile_by_id(
    db: Session,
    profile_id: str,
    current_user_id: Optional[str] = None,
) -> ProfileLookup:
    try:
        profile = profile_crud.get_profile(db, profile_id)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Profile lookup failed (profile_id=%s): %s", profile_id, exc)
        return ProfileLookup(error="Failed to fetch profile")

    if profile is None:
        return ProfileLookup(error="Profile not found")
    if profile.profile_visibility == "private" and current_user_id != profile_id:
        return ProfileLookup(error="This profile is private")

    return ProfileLookup(profile=to_discoverable(profile))


def get_recently_active_users(
    db: Session,
    current_user_id: Optional[str] = None,
    limit: int = 10,
) -> DiscoveryPage:
    try:
        rows, total = profile_crud.list_profiles(
            db,
            exclude_visibility="private",
            exclude_id=current_user_id,
            order_by="most_active",
            limit=limit,
        )
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Recently active lookup failed: %s", exc)
        return DiscoveryPage(error="Failed to fetch recently active users")

    return DiscoveryPage(profiles=[to_discoverable(row) for row in rows], total=total)


def similarity_score(user_skills: List[str], profile) -> int:
    score = 0
    profile_skills = list(profile.skills_offered or []) + list(profile.skills_wanted or [])
    for user_skill in user_skills:
        for profile_skill in profile_skills:
            if user_skill.lower() == profile_skill.lower():
                score += SIMILAR_EXACT_POINTS
            elif skills_match(user_skill, profile_skill):
                score += SIMILAR_PARTIAL_POINTS
    return score


def get_similar_users(
    db: Session,
    user_skills: List[str],
    current_user_id: Optional[str] = None,
    limit: int = 5,
) -> List[SimilarProfile]:
    """Profiles sharing skills with ``user_skills``, most similar first."""
    if not user_skills:
        return []

    try:
        rows, _ = profile_crud.list_profiles(
            db,
            exclude_visibility="private",
            exclude_id=current_user_id,
        )
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Similar users lookup failed: %s", exc)
        return []

    scored = []
    for row in rows:
        score = similarity_score(user_skills, row)
        if score > 0:
            scored.append(SimilarProfile(
                **to_discoverable(row).model_dump(),
                similarity_score=score,
            ))

    scored.sort(key=lambda p: (-p.similarity_score, p.name.lower(), p.id))
    return scored[:limit]


def get_platform_stats(db: Session) -> PlatformStats:
    try:
        profiles, total_users = profile_crud.list_profiles(db, exclude_visibility="private")
        _, active_users = profile_crud.list_profiles(
            db,
            exclude_visibility="private",
            updated_since=datetime.now(UTC) - timedelta(days=ACTIVE_WINDOW_DAYS),
            limit=0,
        )
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Platform stats lookup failed: %s", exc)
        return PlatformStats(error="Failed to fetch platform statistics")

    unique_skills = set()
    for profile in profiles:
        for skill in list(profile.skills_offered or []) + list(profile.skills_wanted or []):
            unique_skills.add(skill.lower())

    return PlatformStats(
        total_users=total_users,
        active_users=active_users,
        total_skills=len(unique_skills),
    )
