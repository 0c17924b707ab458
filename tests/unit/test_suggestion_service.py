import pytest

from app.modules.suggestions.service import DESTINATION_SUGGESTIONS, SuggestionService, get_destination_key


@pytest.mark.parametrize("destination,key", [
    ("Paris, France", "paris"),
    ("TOKYO", "tokyo"),
    ("New York City", "new york"),
    ("nyc", "new york"),
    ("Greater London", "london"),
    ("Nowhere", "default"),
    ("", "default"),
])
def test_destination_key(destination, key):
    assert get_destination_key(destination) == key


def test_suggest_returns_first_five_and_echoes_destination():
    result = SuggestionService().suggest("Paris, France")
    assert result["destination"] == "Paris, France"
    assert result["suggestions"] == DESTINATION_SUGGESTIONS["paris"][:5]


def test_limit_is_configurable():
    assert len(SuggestionService(limit=3).suggest("Tokyo")["suggestions"]) == 3
    assert len(SuggestionService(limit=20).suggest("Tokyo")["suggestions"]) == 8
