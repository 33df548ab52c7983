__all__ = ["__version__", "Character", "RuleTables", "level_up"]
__version__ = "0.1.0"

from .models.character import Character  # noqa: E402
from .rules.tables import RuleTables  # noqa: E402
from .engine.leveling import level_up  # noqa: E402
