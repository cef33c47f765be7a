"""Service layer shared by the CLI, the MCP server and the web API."""

from .battle_service import BattleService

__all__ = ["BattleService"]
