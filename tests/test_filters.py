"""Tests for the project filter predicate pipeline."""

from datetime import datetime, timedelta, timezone
from itertools import product

import pytest

from project_browser.domain.filters import (
    filter_projects,
    matches,
    matches_category,
    matches_owner,
    matches_search,
    matches_status,
    matches_tags,
    matches_updated_since,
)
from project_browser.domain.models import Project, ProjectFilters, ProjectStatus, UpdatedSince
from project_browser.infrastructure.repositories.memory_project_repository import generate_projects

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _make_project(**overrides) -> Project:
    values = dict(
        id="1",
        name="Project Atlas",
        summary="Deliver the next milestone for web initiatives.",
        category="Web",
        owner="Avery",
        status=ProjectStatus.ACTIVE,
        updated_at=NOW - timedelta(days=3),
        tags=("priority", "design"),
    )
    values.update(overrides)
    return Project(**values)


# ---------------------------------------------------------------------------
# Individual predicates
# ---------------------------------------------------------------------------

class TestSearch:
    def test_empty_and_blank_search_match_everything(self):
        project = _make_project()
        assert matches_search(project, "")
        assert matches_search(project, "   ")

    def test_case_insensitive_substring_of_name(self):
        assert matches_search(_make_project(), "ATLAS")

    def test_search_covers_summary_and_tags(self):
        project = _make_project()
        assert matches_search(project, "milestone")
        assert matches_search(project, "design")

    def test_search_text_is_trimmed(self):
        assert matches_search(_make_project(), "  atlas  ")

    def test_owner_and_category_are_not_searched(self):
        project = _make_project(owner="Zion", summary="Plain summary")
        assert not matches_search(project, "zion")


class TestSelections:
    def test_status_none_means_all(self):
        assert matches_status(_make_project(), None)
        assert matches_status(_make_project(), ProjectStatus.ACTIVE)
        assert not matches_status(_make_project(), ProjectStatus.PAUSED)

    def test_category_is_or_matched(self):
        project = _make_project(category="Mobile")
        assert matches_category(project, frozenset())
        assert matches_category(project, {"Web", "Mobile"})
        assert not matches_category(project, {"Web"})

    def test_owner_is_or_matched(self):
        project = _make_project(owner="Kai")
        assert matches_owner(project, frozenset())
        assert matches_owner(project, {"Kai", "River"})
        assert not matches_owner(project, {"River"})

    def test_tags_are_and_matched(self):
        project = _make_project(tags=("priority", "design"))
        assert matches_tags(project, frozenset())
        assert matches_tags(project, {"priority"})
        assert matches_tags(project, {"priority", "design"})
        assert not matches_tags(project, {"priority", "launch"})


class TestUpdatedSince:
    def test_any_is_unbounded(self):
        old = _make_project(updated_at=NOW - timedelta(days=4000))
        assert matches_updated_since(old, UpdatedSince.ANY, NOW)

    @pytest.mark.parametrize(
        "window, days, expected",
        [
            (UpdatedSince.DAYS_7, 7, True),
            (UpdatedSince.DAYS_7, 8, False),
            (UpdatedSince.DAYS_30, 30, True),
            (UpdatedSince.DAYS_30, 31, False),
            (UpdatedSince.DAYS_90, 90, True),
            (UpdatedSince.DAYS_90, 91, False),
        ],
    )
    def test_threshold_is_inclusive(self, window, days, expected):
        project = _make_project(updated_at=NOW - timedelta(days=days))
        assert matches_updated_since(project, window, NOW) is expected

    def test_naive_timestamps_are_treated_as_utc(self):
        naive = (NOW - timedelta(days=2)).replace(tzinfo=None)
        assert matches_updated_since(_make_project(updated_at=naive), UpdatedSince.DAYS_7, NOW)


# ---------------------------------------------------------------------------
# Combined predicate
# ---------------------------------------------------------------------------

def _filter_grid():
    statuses = [None, ProjectStatus.ACTIVE, ProjectStatus.COMPLETED]
    categories = [frozenset(), frozenset({"Web"}), frozenset({"Mobile", "Infrastructure"})]
    owners = [frozenset(), frozenset({"Avery", "Kai"})]
    tags = [frozenset(), frozenset({"priority"}), frozenset({"priority", "growth"})]
    windows = [UpdatedSince.ANY, UpdatedSince.DAYS_30]
    for status, cats, owns, tgs, window in product(statuses, categories, owners, tags, windows):
        yield ProjectFilters(
            status=status,
            categories=cats,
            owners=owns,
            tags=tgs,
            updated_since=window,
        )


def test_matches_is_conjunction_of_sub_predicates():
    projects = generate_projects(60, today=NOW)
    for filters in _filter_grid():
        for search in ("", "project 1", "web"):
            for project in projects:
                expected = (
                    matches_search(project, search)
                    and matches_status(project, filters.status)
                    and matches_category(project, filters.categories)
                    and matches_owner(project, filters.owners)
                    and matches_tags(project, filters.tags)
                    and matches_updated_since(project, filters.updated_since, NOW)
                )
                assert matches(project, search, filters, NOW) is expected


def test_filter_projects_preserves_source_order():
    projects = generate_projects(40, today=NOW)
    result = filter_projects(projects, "", ProjectFilters(status=ProjectStatus.PAUSED), NOW)

    assert [p.id for p in result] == [str(i + 1) for i in range(40) if i % 4 == 2]


def test_filter_projects_defaults_now_to_wall_clock():
    recent = _make_project(updated_at=datetime.now(timezone.utc) - timedelta(days=1))
    stale = _make_project(id="2", updated_at=datetime.now(timezone.utc) - timedelta(days=20))

    result = filter_projects([recent, stale], "", ProjectFilters(updated_since=UpdatedSince.DAYS_7))

    assert result == [recent]
