"""Pokédex battle simulator and team coverage utilities."""

from .analysis.team_analyzer import TeamAnalyzer
from .battle import BattleEngine, Phase, Side
from .data.type_chart import TYPE_CHART, ElementalType, TypeChart

__all__ = [
    "BattleEngine",
    "ElementalType",
    "Phase",
    "Side",
    "TYPE_CHART",
    "TeamAnalyzer",
    "TypeChart",
]
