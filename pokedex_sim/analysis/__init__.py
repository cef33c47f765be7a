"""Analysis utilities for Pokédex teams."""

from .team_analyzer import TeamAnalyzer

__all__ = ["TeamAnalyzer"]
