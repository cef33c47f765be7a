"""Battle simulation over the static type chart."""

from .engine import (
    AttackOutcome,
    BattleEngine,
    BattleSnapshot,
    BattleState,
    CombatantCatalog,
    Phase,
    Side,
)
from .random_source import RandomSource, SequenceRandom

__all__ = [
    "AttackOutcome",
    "BattleEngine",
    "BattleSnapshot",
    "BattleState",
    "CombatantCatalog",
    "Phase",
    "RandomSource",
    "SequenceRandom",
    "Side",
]
