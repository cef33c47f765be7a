"""Shared dataclasses for Pokédex analysis and battles."""

from .pokemon import BaseStats, Combatant
from .team import MAX_TEAM_SIZE, Recommendation, TeamReport, TeamRoster, TypeAnalysis

__all__ = [
    "BaseStats",
    "Combatant",
    "MAX_TEAM_SIZE",
    "Recommendation",
    "TeamReport",
    "TeamRoster",
    "TypeAnalysis",
]
