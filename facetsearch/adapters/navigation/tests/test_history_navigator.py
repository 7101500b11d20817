"""Unit tests for HistoryNavigator, FakeNavigator and URL parsing."""

from dataclasses import dataclass, field
from typing import Dict, Optional

import pytest

from facetsearch.adapters.navigation.fake import FakeNavigator
from facetsearch.adapters.navigation.history import HistoryNavigator, location_from_url
from facetsearch.core.exceptions import NavigationDuplicatedError, NavigationError
from facetsearch.core.protocols.navigation import Location, Navigator


@dataclass
class UrlCase:
    desc: str
    url: str
    entity_type: Optional[str]
    query: Dict[str, str] = field(default_factory=dict)


URL_CASES = [
    UrlCase("root", "/", None),
    UrlCase("entity only", "/works", "works"),
    UrlCase(
        "with query",
        "/works?filter=is_oa:true&page=2",
        "works",
        {"filter": "is_oa:true", "page": "2"},
    ),
    UrlCase("encoded query", "/works?filter=type%3A%21dataset", "works", {"filter": "type:!dataset"}),
    UrlCase("absolute url", "https://explore.test/authors?page=1", "authors", {"page": "1"}),
    UrlCase("blank values dropped", "/works?filter=&page=3", "works", {"page": "3"}),
]


@pytest.mark.parametrize("case", URL_CASES, ids=lambda c: c.desc)
def test_location_from_url(case: UrlCase):
    location = location_from_url(case.url)

    assert location.name == "Serp"
    assert location.entity_type == case.entity_type
    assert location.query == case.query


class TestLocation:
    def test_to_url_sorts_query(self):
        location = Location(entity_type="works", query={"page": "1", "filter": "a:b|c"})
        assert location.to_url() == "/works?filter=a%3Ab%7Cc&page=1"

    def test_to_url_root(self):
        assert Location().to_url() == "/"

    def test_url_round_trip(self):
        location = Location(entity_type="works", query={"page": "4", "filter": "type:!x,is_oa:true"})
        assert location_from_url(location.to_url()) == location

    def test_equality_ignores_query_order(self):
        a = Location(entity_type="works", query={"page": "1", "sort": "x"})
        b = Location(entity_type="works", query={"sort": "x", "page": "1"})
        assert a == b


class TestHistoryNavigator:
    def test_satisfies_protocol(self):
        assert isinstance(HistoryNavigator(), Navigator)

    def test_from_url(self):
        navigator = HistoryNavigator.from_url("/concepts?page=2")

        assert navigator.current_location().entity_type == "concepts"
        assert navigator.current_location().query == {"page": "2"}

    def test_push_and_back(self):
        navigator = HistoryNavigator()
        target = Location(entity_type="works", query={"page": "1"})

        navigator.push(target)
        assert navigator.current_location() == target
        assert len(navigator.history) == 2

        assert navigator.back() == Location()
        assert navigator.back() == Location()

    def test_duplicate_push_raises(self):
        target = Location(entity_type="works", query={"page": "1"})
        navigator = HistoryNavigator(target)

        with pytest.raises(NavigationDuplicatedError) as exc_info:
            navigator.push(Location(entity_type="works", query={"page": "1"}))

        assert isinstance(exc_info.value, NavigationError)
        assert exc_info.value.location == "/works?page=1"
        assert len(navigator.history) == 1


class TestFakeNavigator:
    def test_satisfies_protocol(self):
        assert isinstance(FakeNavigator(), Navigator)

    def test_records_pushes_and_duplicates(self):
        fake = FakeNavigator()
        target = Location(entity_type="works")

        fake.push(target)
        with pytest.raises(NavigationDuplicatedError):
            fake.push(target)

        assert fake.push_count == 1
        assert fake.duplicates == 1

    def test_fail_with(self):
        fake = FakeNavigator()
        fake.fail_with(NavigationError("router gone"))

        with pytest.raises(NavigationError, match="router gone"):
            fake.push(Location(entity_type="works"))

        fake.fail_with(None)
        fake.push(Location(entity_type="works"))
        assert fake.push_count == 1
