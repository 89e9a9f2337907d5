from __future__ import annotations

from datetime import datetime

from skillmarket import models
from skillmarket.schemas import DiscoveryFilters
from skillmarket.services import discovery_service


def test_profile_completion_percentages():
    partial = models.Profile(name="Ana", location="Boston", skills_offered=["Python"], skills_wanted=[])
    complete = models.Profile(
        name="Ben",
        location="Austin",
        skills_offered=["Go"],
        skills_wanted=["Rust"],
        avatar_url="https://img/ben.png",
    )
    name_only = models.Profile(name="Cy", skills_offered=[], skills_wanted=[])
    empty = models.Profile(name="", skills_offered=[], skills_wanted=[])

    assert discovery_service.calculate_profile_completion(partial) == 57
    assert discovery_service.calculate_profile_completion(complete) == 100
    assert discovery_service.calculate_profile_completion(name_only) == 14
    assert discovery_service.calculate_profile_completion(empty) == 0


def test_discoverable_profiles_hide_private_and_current_user(db_session, create_profile):
    me = create_profile("Me", created_at=datetime(2024, 1, 4))
    create_profile("Old", created_at=datetime(2024, 1, 1))
    create_profile("Mid", created_at=datetime(2024, 1, 2))
    create_profile("New", created_at=datetime(2024, 1, 3), location="Boston", skills_offered=["Python"])
    create_profile("Hidden", created_at=datetime(2024, 1, 5), profile_visibility="private")

    newest = discovery_service.get_discoverable_profiles(db_session, current_user_id=me.id)
    oldest = discovery_service.get_discoverable_profiles(
        db_session, current_user_id=me.id, filters=DiscoveryFilters(sort_by="oldest")
    )

    assert [p.name for p in newest.profiles] == ["New", "Mid", "Old"]
    assert newest.total == 3
    assert newest.profiles[0].profile_completion == 57
    assert [p.name for p in oldest.profiles] == ["Old", "Mid", "New"]


def test_discoverable_profiles_window_keeps_full_total(db_session, create_profile):
    for day in range(1, 6):
        create_profile(f"User {day}", created_at=datetime(2024, 1, day))

    page = discovery_service.get_discoverable_profiles(db_session, limit=2, offset=2)

    assert page.total == 5
    assert [p.name for p in page.profiles] == ["User 3", "User 2"]


def test_profile_lookup_respects_privacy(db_session, create_profile):
    secret = create_profile("Secret", profile_visibility="private")
    viewer = create_profile("Viewer")

    assert discovery_service.get_profile_by_id(db_session, secret.id, secret.id).profile.name == "Secret"
    assert discovery_service.get_profile_by_id(db_session, secret.id, viewer.id).error == "This profile is private"
    assert discovery_service.get_profile_by_id(db_session, secret.id).error == "This profile is private"
    assert discovery_service.get_profile_by_id(db_session, "missing").error == "Profile not found"
    assert discovery_service.get_profile_by_id(db_session, viewer.id).profile.id == viewer.id


def test_recently_active_users_are_ordered_by_last_update(db_session, create_profile):
    create_profile("Stale", updated_at=datetime(2023, 5, 1))
    create_profile("Fresh", updated_at=datetime(2024, 6, 1))
    create_profile("Middle", updated_at=datetime(2024, 1, 1))

    page = discovery_service.get_recently_active_users(db_session, limit=2)

    assert [p.name for p in page.profiles] == ["Fresh", "Middle"]


def test_similar_users_score_exact_and_partial_overlap(db_session, create_profile):
    me = create_profile("Me", skills_offered=["Python"], skills_wanted=["React"])
    create_profile("Exact", skills_offered=["Python"])
    create_profile("Partial", skills_wanted=["React Native"])
    create_profile("Unrelated", skills_offered=["Cooking"])
    create_profile("Private", skills_offered=["Python"], profile_visibility="private")

    similar = discovery_service.get_similar_users(db_session, ["Python", "React"], me.id)

    assert [(p.name, p.similarity_score) for p in similar] == [("Exact", 10), ("Partial", 5)]
    assert discovery_service.get_similar_users(db_session, [], me.id) == []


def test_platform_stats_count_users_active_users_and_distinct_skills(db_session, create_profile):
    create_profile("Ana", skills_offered=["Python", "react"], skills_wanted=["Go"])
    create_profile("Ben", skills_offered=["React"], updated_at=datetime(2020, 1, 1))
    create_profile("Cy", skills_offered=["Welding"], profile_visibility="private")

    stats = discovery_service.get_platform_stats(db_session)

    assert stats.error is None
    assert stats.total_users == 2
    assert stats.active_users == 1
    assert stats.total_skills == 3
