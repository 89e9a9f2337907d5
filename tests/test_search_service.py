from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from skillmarket import models
from skillmarket.schemas import SearchFilters
from skillmarket.services import search_service


def _profile(name: str, *, offered=(), wanted=(), profile_id: str | None = None) -> models.Profile:
    return models.Profile(
        id=profile_id or f"id-{name.lower()}",
        name=name,
        skills_offered=list(offered),
        skills_wanted=list(wanted),
        availability="weekends",
        profile_visibility="public",
    )


# =====================================
# QUERY PARSING
# =====================================

def test_extract_skills_drops_stop_words_and_capitalizes():
    skills = search_service.extract_skills_from_query("JavaScript, the Design and Marketing")
    assert skills == ["Javascript", "Design", "Marketing"]


def test_extract_skills_dedupes_and_drops_single_characters():
    skills = search_service.extract_skills_from_query("python Python,PYTHON   go x")
    assert skills == ["Python", "Go"]


def test_extract_skills_of_blank_or_stop_word_query_is_empty():
    assert search_service.extract_skills_from_query("") == []
    assert search_service.extract_skills_from_query(None) == []
    assert search_service.extract_skills_from_query("   ,  ") == []
    assert search_service.extract_skills_from_query("the and of a") == []


# =====================================
# SCORING & CLASSIFICATION
# =====================================

def test_exact_offered_match_earns_exact_and_partial_points():
    profile = _profile("Marc", offered=["JavaScript"])

    assert search_service.calculate_relevance_score(profile, ["Javascript"]) == 15
    info = search_service.get_match_info(profile, ["Javascript"])
    assert info.match_type == "offered"
    assert info.matched_skills == ["JavaScript"]


def test_exact_wanted_match_scores_eleven():
    profile = _profile("Emma", wanted=["React"])

    assert search_service.calculate_relevance_score(profile, ["React"]) == 11
    assert search_service.get_match_info(profile, ["React"]).match_type == "wanted"


def test_substring_matches_score_and_classify_as_both():
    profile = _profile("Lee", offered=["React"], wanted=["React Native"])

    # exact offered 10 + partial offered 5 + partial wanted 3
    assert search_service.calculate_relevance_score(profile, ["React"]) == 18
    info = search_service.get_match_info(profile, ["React"])
    assert info.match_type == "both"
    assert info.matched_skills == ["React", "React Native"]


def test_profile_skill_contained_in_search_term_still_matches():
    profile = _profile("Gus", offered=["Go"])

    assert search_service.skills_match("Golang", "Go")
    assert search_service.calculate_relevance_score(profile, ["Golang"]) == 5
    assert search_service.get_match_info(profile, ["Golang"]).matched_skills == ["Go"]


def test_unrelated_profile_scores_zero():
    profile = _profile("Nia", offered=["Pottery"], wanted=["Welding"])
    assert search_service.calculate_relevance_score(profile, ["Python"]) == 0


def test_rank_profiles_orders_by_score_then_name_and_drops_non_matches():
    profiles = [
        _profile("Zed", offered=["React"]),
        _profile("Amy", wanted=["React"]),
        _profile("bob", offered=["React"]),
        _profile("Dan", offered=["Python"]),
    ]

    ranked = search_service.rank_profiles(profiles, ["React"])

    assert [r.name for r in ranked] == ["bob", "Zed", "Amy"]
    assert [r.relevance_score for r in ranked] == [15, 15, 11]
    assert all(r.relevance_score > 0 for r in ranked)


# =====================================
# SEARCH PIPELINE
# =====================================

def test_search_without_usable_terms_never_touches_the_store():
    response = search_service.search_users_by_skills(None, "the and of")
    assert response.results == []
    assert response.searched_skills == []
    assert response.error is None


def test_search_excludes_private_profiles_and_the_searcher(db_session, create_profile):
    me = create_profile("Me", skills_offered=["Python"])
    create_profile("Ana", skills_offered=["Python"], availability="evenings", location="Boston, MA")
    create_profile("Ben", skills_wanted=["Python"], location="Austin, TX")
    create_profile("Cy", skills_offered=["Python"], profile_visibility="private")

    response = search_service.search_users_by_skills(db_session, "python", current_user_id=me.id)

    assert response.searched_skills == ["Python"]
    assert [r.name for r in response.results] == ["Ana", "Ben"]
    assert [r.match_type for r in response.results] == ["offered", "wanted"]


def test_search_applies_availability_and_location_filters(db_session, create_profile):
    create_profile("Ana", skills_offered=["Python"], availability="evenings", location="Boston, MA")
    create_profile("Ben", skills_wanted=["Python"], location="Austin, TX")

    by_availability = search_service.search_users_by_skills(
        db_session, "python", SearchFilters(availability="evenings")
    )
    by_location = search_service.search_users_by_skills(
        db_session, "python", SearchFilters(location="boston")
    )

    assert [r.name for r in by_availability.results] == ["Ana"]
    assert [r.name for r in by_location.results] == ["Ana"]


def test_search_store_failure_returns_error_with_terms(db_session, monkeypatch):
    def _boom(*args, **kwargs):
        raise SQLAlchemyError("connection lost")

    monkeypatch.setattr(search_service.profile_crud, "list_profiles", _boom)

    response = search_service.search_users_by_skills(db_session, "python guitar")

    assert response.results == []
    assert response.searched_skills == ["Python", "Guitar"]
    assert response.error == search_service.SEARCH_FAILED_MESSAGE


def test_popular_skills_counts_visible_profiles(db_session, create_profile):
    create_profile("Ana", skills_offered=["Python", "React"], skills_wanted=["React"])
    create_profile("Ben", skills_offered=["React"], skills_wanted=["Go"])
    create_profile("Cy", skills_offered=["Python", "Python"], profile_visibility="private")

    assert search_service.get_popular_skills(db_session) == ["React", "Go", "Python"]
    assert search_service.get_popular_skills(db_session, limit=1) == ["React"]


def test_location_filter_treats_wildcards_literally(db_session, create_profile):
    create_profile("Ana", skills_offered=["Python"], location="Boston_MA")
    create_profile("Ben", skills_offered=["Python"], location="BostonXMA")
    create_profile("Cy", skills_offered=["Python"], location="Austin, TX")

    underscore = search_service.search_users_by_skills(db_session, "python", SearchFilters(location="n_m"))
    percent = search_service.search_users_by_skills(db_session, "python", SearchFilters(location="%"))

    assert [r.name for r in underscore.results] == ["Ana"]
    assert percent.results == []
