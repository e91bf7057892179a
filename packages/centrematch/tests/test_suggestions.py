"""Tests for no-result search suggestions."""

from centrematch.config import SuggestionConfig
from centrematch.suggestions import (
    find_centres_in_location,
    find_similar_centres,
    get_search_suggestions,
)
from centrematch.types import LocationEntry


def test_typo_suggests_similar_name(entries):
    suggestions = get_search_suggestions(entries, "Eastgate Bondi Junctoin")
    assert suggestions[0].kind == "similar_name"
    assert suggestions[0].centre_id == 1
    assert suggestions[0].reason == 'Did you mean "Eastgate Bondi Junction"?'
    assert suggestions[0].similarity > 0.9


def test_centre_suggested_once(entries):
    suggestions = get_search_suggestions(entries, "parramatta")
    ids = [s.centre_id for s in suggestions]
    assert ids.count(2) == 1
    assert suggestions[0].kind == "similar_name"


def test_location_suggestion(entries):
    suggestions = get_search_suggestions(entries, "Maribyrnong")
    nearby = [s for s in suggestions if s.kind == "nearby"]
    assert [s.centre_id for s in nearby] == [7]
    assert nearby[0].reason == 'Try "Highpoint" in Maribyrnong'


def test_query_containing_suburb(entries):
    suggestions = find_centres_in_location(entries, "shops near erina")
    assert [s.centre_id for s in suggestions] == [4]


def test_blank_query(entries):
    assert get_search_suggestions(entries, "   ") == []


def test_max_total(entries):
    suggestions = get_search_suggestions(entries, "sydney", SuggestionConfig(max_total=1))
    assert len(suggestions) == 1


def test_max_nearby(entries):
    assert len(find_centres_in_location(entries, "sydney", max_suggestions=2)) == 2


def test_entry_without_location_never_matches():
    entries = [LocationEntry(1, "Pop-up Market")]
    assert find_centres_in_location(entries, "bondi") == []


def test_similar_threshold(entries):
    assert find_similar_centres(entries, "zzzz", threshold=0.4) == []
