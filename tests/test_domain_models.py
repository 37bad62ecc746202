"""Tests for the project query value objects."""

from datetime import timedelta

import pytest

from project_browser.domain.models import (
    PageResult,
    ProjectFilters,
    ProjectQuery,
    ProjectStatus,
    UpdatedSince,
    normalize_selection,
)
from project_browser.errors import InvalidFilterValueError


class TestProjectStatus:
    @pytest.mark.parametrize("value", ["all", None])
    def test_all_means_no_filter(self, value):
        assert ProjectStatus.parse_filter(value) is None

    def test_parses_known_values(self):
        assert ProjectStatus.parse_filter("completed") is ProjectStatus.COMPLETED
        assert ProjectStatus.parse_filter(ProjectStatus.PAUSED) is ProjectStatus.PAUSED

    @pytest.mark.parametrize("value", ["archived", " COMPLETED ", "Completed", "ALL", " all "])
    def test_unknown_value_raises(self, value):
        with pytest.raises(InvalidFilterValueError):
            ProjectStatus.parse_filter(value)


class TestUpdatedSince:
    def test_thresholds(self):
        assert UpdatedSince.ANY.threshold is None
        assert UpdatedSince.DAYS_7.threshold == timedelta(days=7)
        assert UpdatedSince.DAYS_30.days == 30
        assert UpdatedSince.DAYS_90.days == 90

    def test_parse(self):
        assert UpdatedSince.parse("7d") is UpdatedSince.DAYS_7

    @pytest.mark.parametrize("value", ["1y", "7D", " 30d", "Any"])
    def test_parse_rejects_inexact_values(self, value):
        with pytest.raises(InvalidFilterValueError):
            UpdatedSince.parse(value)


class TestProjectFilters:
    def test_structural_equality(self):
        a = ProjectFilters.create(categories=["Web", "Mobile"], tags=["priority"])
        b = ProjectFilters.create(categories={"Mobile", "Web"}, tags=("priority",))
        assert a == b
        assert hash(a) == hash(b)

    def test_with_helpers_return_copies(self):
        base = ProjectFilters()
        changed = base.with_status("active").with_owners(["Kai"])
        assert base.status is None
        assert changed.status is ProjectStatus.ACTIVE
        assert changed.owners == frozenset({"Kai"})

    def test_active_count(self):
        filters = ProjectFilters.create(
            status="paused",
            categories=["Web", "Mobile"],
            tags=["design"],
            updated_since="30d",
        )
        assert filters.active_count == 5
        assert ProjectFilters().is_empty

    def test_rejects_bare_string_selection(self):
        with pytest.raises(InvalidFilterValueError):
            ProjectFilters().with_categories("Web")

    def test_rejects_non_string_members(self):
        with pytest.raises(InvalidFilterValueError):
            normalize_selection(["Web", 3], "category")


class TestProjectQuery:
    @pytest.mark.parametrize("page_size", [0, -1, True, 2.5])
    def test_rejects_invalid_page_size(self, page_size):
        with pytest.raises(InvalidFilterValueError):
            ProjectQuery(page_size=page_size)

    def test_rejects_non_string_search(self):
        with pytest.raises(InvalidFilterValueError):
            ProjectQuery(search=None)

    def test_to_params(self):
        query = ProjectQuery(
            search="atlas",
            filters=ProjectFilters.create(
                status="active",
                categories=["Web", "Mobile"],
                tags=["priority"],
                updated_since="7d",
            ),
            page_size=10,
        )

        assert query.to_params(2) == {
            "page": 2,
            "pageSize": 10,
            "search": "atlas",
            "status": "active",
            "category": ["Mobile", "Web"],
            "tag": ["priority"],
            "updatedSince": "7d",
        }

    def test_to_params_defaults(self):
        assert ProjectQuery().to_params(0) == {
            "page": 0,
            "pageSize": 24,
            "status": "all",
            "updatedSince": "any",
        }


class TestPageResult:
    def test_has_more_and_total_pages(self):
        assert PageResult(page=0, page_size=24, total_count=200).has_more
        assert not PageResult(page=8, page_size=24, total_count=200).has_more
        assert PageResult(page=0, page_size=24, total_count=200).total_pages == 9
        assert PageResult(total_count=0).total_pages == 0
