import pytest

from filterforge.exclusion import load_rules
from filterforge.exclusion.repository import get_rules
from filterforge.models.rules import RuleSet


@pytest.fixture(autouse=True)
def clear_rules_cache():
    """Clear the cached rule set between tests.

    Tests that point settings at another rule file must not leak the
    cached RuleSet into later tests.
    """
    get_rules.cache_clear()
    yield
    get_rules.cache_clear()


@pytest.fixture
def rules() -> RuleSet:
    """The packaged exclusion rules."""
    return load_rules()


@pytest.fixture
def sample_filters_payload() -> dict:
    """Filter object as the search dialog posts it."""
    return {
        "cardType": None,
        "attributes": [],
        "spellTypes": [],
        "trapTypes": [],
        "races": [],
        "monsterTypes": [],
        "monsterTypeMatchMode": "or",
        "levelType": "level",
        "levelValues": [],
        "linkValues": [],
        "scaleValues": [],
        "linkMarkers": [],
        "linkMarkerMatchMode": "or",
        "atk": {"exact": False, "unknown": False},
        "def": {"exact": False, "unknown": False},
        "releaseDate": {},
    }
