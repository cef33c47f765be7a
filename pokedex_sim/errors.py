"""Exceptions raised by the battle and team-building core."""


class PokedexError(Exception):
    """Base class for recoverable core errors."""


class InvalidRosterError(PokedexError, ValueError):
    """Raised when a roster is empty, overfull or references unknown members."""


class IllegalStateTransition(PokedexError, RuntimeError):
    """Raised when a battle action is not allowed in the current phase."""


class UnknownSessionError(PokedexError, KeyError):
    """Raised when a battle session id is not registered."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "Unknown battle session"
