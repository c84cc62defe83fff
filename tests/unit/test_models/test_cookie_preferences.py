"""Tests for CookiePreferences and SearchCriteria models."""

import pytest
from idrhub.models.cookie_preferences import CookiePreferences
from idrhub.models.search_criteria import SearchCriteria


@pytest.mark.unit
def test_minimal_is_necessary_only():
    prefs = CookiePreferences.minimal()

    assert prefs.model_dump() == {
        "necessary": True,
        "analytics": False,
        "marketing": False,
        "preferences": False,
    }


@pytest.mark.unit
def test_all_accepted():
    assert all(CookiePreferences.all_accepted().model_dump().values())


@pytest.mark.unit
def test_necessary_cannot_be_disabled():
    assert CookiePreferences(necessary=False).necessary is True


@pytest.mark.unit
def test_search_criteria_emptiness():
    assert SearchCriteria().is_empty()
    assert SearchCriteria(location="", min_price=0).is_empty()
    assert not SearchCriteria(bedrooms=2).is_empty()
