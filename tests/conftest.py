import pytest

from heroledger.config import PACKAGE_DATA_DIR
from heroledger.engine import LevelUpOptions, create_character, level_up
from heroledger.models import AbilityScores, Character
from heroledger.rules.tables import RuleTables


@pytest.fixture(scope="session")
def tables():
    return RuleTables(PACKAGE_DATA_DIR)


@pytest.fixture
def character():
    return Character(name="Tester", ability_scores=AbilityScores(dexterity=14, constitution=14))


@pytest.fixture
def build(tables):
    """Create a character and level it in one class; returns the character."""

    def _build(class_name, level=1, subclass=None, **scores):
        base = {"str": 10, "dex": 10, "con": 10, "int": 10, "wis": 10, "cha": 10}
        base.update(scores)
        c = create_character(tables, "Hero", class_name, base)
        for _ in range(level - 1):
            level_up(c, tables, class_name, LevelUpOptions(subclass=subclass))
        return c

    return _build
