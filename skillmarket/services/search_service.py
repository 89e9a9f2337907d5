"""
Skill search over user profiles.

A free-text query is reduced to candidate skill terms, every visible
profile is scored by how well its offered/wanted skills overlap those
terms, and the matches are returned best first. Profiles are fetched
wholesale from the profile store; ranking happens in memory.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from typing import Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from skillmarket.crud import profile as profile_crud
from skillmarket.schemas import MatchInfo, Profile, SearchFilters, SearchResponse, SearchResult

logger = logging.getLogger(__name__)


STOP_WORDS = frozenset({
    "and", "or", "the", "a", "an", "in", "on", "at", "to", "for", "of", "with", "by",
})
TOKEN_SPLIT_RE = re.compile(r"[,\s]+")


class ScoreWeights:
    """Points awarded per candidate skill."""
    EXACT_OFFERED = 10
    EXACT_WANTED = 8
    PARTIAL_OFFERED = 5
    PARTIAL_WANTED = 3


SEARCH_FAILED_MESSAGE = "Search is unavailable right now. Please try again."
POPULAR_SKILLS_LIMIT = 20


# =====================================
# QUERY PARSING
# =====================================

def extract_skills_from_query(query: Optional[str]) -> List[str]:
    """
    Turn a free-text query into candidate skill terms.

    >>> extract_skills_from_query("JavaScript, the Design and Marketing")
    ['Javascript', 'Design', 'Marketing']
    """
    skills: List[str] = []
    for token in TOKEN_SPLIT_RE.split((query or "").lower()):
        token = token.strip()
        if len(token) <= 1 or token in STOP_WORDS:
            continue
        skill = token[0].upper() + token[1:]
        if skill not in skills:
            skills.append(skill)
    return skills


# =====================================
# MATCHING
# =====================================

def skills_match(candidate: str, skill: str) -> bool:
    """Case-insensitive substring match in either direction."""
    a = candidate.lower()
    b = skill.lower()
    return a in b or b in a


def _skill_lists(profile) -> tuple[List[str], List[str]]:
    return (
        list(getattr(profile, "skills_offered", None) or []),
        list(getattr(profile, "skills_wanted", None) or []),
    )


def _first_match(candidate: str, skills: Iterable[str]) -> Optional[str]:
    for skill in skills:
        if skills_match(candidate, skill):
            return skill
    return None


def calculate_relevance_score(profile, searched_skills: List[str]) -> int:
    """
    Additive relevance score for one profile.

    An exact match also earns the partial award, so a skill offered
    verbatim scores 10 + 5.
    """
    offered, wanted = _skill_lists(profile)
    offered_lower = [skill.lower() for skill in offered]
    wanted_lower = [skill.lower() for skill in wanted]

    score = 0
    for candidate in searched_skills:
        needle = candidate.lower()
        if needle in offered_lower:
            score += ScoreWeights.EXACT_OFFERED
        if needle in wanted_lower:
            score += ScoreWeights.EXACT_WANTED
        if _first_match(candidate, offered) is not None:
            score += ScoreWeights.PARTIAL_OFFERED
        if _first_match(candidate, wanted) is not None:
            score += ScoreWeights.PARTIAL_WANTED
    return score


def get_match_info(profile, searched_skills: List[str]) -> MatchInfo:
    """Classify why a profile matched and collect the profile's matching skills."""
    offered, wanted = _skill_lists(profile)
    matched_skills: List[str] = []
    has_offered_match = False
    has_wanted_match = False

    for candidate in searched_skills:
        offered_match = _first_match(candidate, offered)
        if offered_match is not None:
            has_offered_match = True
            if offered_match not in matched_skills:
                matched_skills.append(offered_match)

        wanted_match = _first_match(candidate, wanted)
        if wanted_match is not None:
            has_wanted_match = True
            if wanted_match not in matched_skills:
                matched_skills.append(wanted_match)

    if has_offered_match and has_wanted_match:
        match_type = "both"
    elif has_offered_match:
        match_type = "offered"
    else:
        match_type = "wanted"

    return MatchInfo(match_type=match_type, matched_skills=matched_skills)


def rank_profiles(profiles: Iterable, searched_skills: List[str]) -> List[SearchResult]:
    """Score, classify and order profiles; zero-score profiles are dropped."""
    results: List[SearchResult] = []
    for profile in profiles:
        score = calculate_relevance_score(profile, searched_skills)
        if score <= 0:
            continue
        info = get_match_info(profile, searched_skills)
        results.append(SearchResult(
            **Profile.model_validate(profile).model_dump(),
            match_type=info.match_type,
            matched_skills=info.matched_skills,
            relevance_score=score,
        ))

    results.sort(key=lambda r: (-r.relevance_score, (r.name or "").lower(), r.id))
    return results


# =====================================
# SEARCH PIPELINE
# =====================================

def search_users_by_skills(
    db: Session,
    query: Optional[str],
    filters: Optional[SearchFilters] = None,
    current_user_id: Optional[str] = None,
) -> SearchResponse:
    searched_skills = extract_skills_from_query(query)
    if not searched_skills:
        return SearchResponse(results=[], searched_skills=[])

    filters = filters or SearchFilters()
    try:
        profiles, _ = profile_crud.list_profiles(
            db,
            exclude_visibility="private",
            exclude_id=current_user_id,
            availability=filters.availability,
            location=filters.location,
            visibility=filters.profile_visibility,
        )
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Profile search failed for skills %s: %s", searched_skills, exc)
        return SearchResponse(
            results=[],
            searched_skills=searched_skills,
            error=SEARCH_FAILED_MESSAGE,
        )

    return SearchResponse(
        results=rank_profiles(profiles, searched_skills),
        searched_skills=searched_skills,
    )


def get_popular_skills(db: Session, limit: int = POPULAR_SKILLS_LIMIT) -> List[str]:
    """Most common offered/wanted skills across visible profiles."""
    try:
        profiles, _ = profile_crud.list_profiles(db, exclude_visibility="private")
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Popular skills lookup failed: %s", exc)
        return []

    counts: Counter = Counter()
    for profile in profiles:
        offered, wanted = _skill_lists(profile)
        counts.update(offered + wanted)

    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0].lower(), item[0]))
    return [skill for skill, _ in ranked[:limit]]
