"""Session-level orchestration of catalog lookups, battles and team reports."""

from __future__ import annotations

import logging
import time
import uuid
from collections import OrderedDict
from typing import Callable, Dict, Iterable, Optional, Tuple, Union

from ..analysis import TeamAnalyzer
from ..battle import BattleEngine, BattleSnapshot, Phase, RandomSource, Side
from ..clients import PokeAPIClient
from ..errors import UnknownSessionError
from ..models import TeamReport, TeamRoster
from ..models.pokemon import Combatant

logger = logging.getLogger(__name__)

SIMULATION_TURN_LIMIT = 500
DEFAULT_SESSION_TTL = 1800
DEFAULT_MAX_SESSIONS = 256


class BattleService:
    """Coordinates the catalog, the analyzer and one engine per battle session.

    The engine never moves the opponent on its own; this service plays the
    opponent's reply right after every player attack or switch.

    Sessions idle for longer than ``session_ttl`` seconds are dropped, and
    once ``max_sessions`` are open the least recently used one makes room
    for a new battle.
    """

    def __init__(
        self,
        *,
        catalog=None,
        analyzer: Optional[TeamAnalyzer] = None,
        rng: Optional[RandomSource] = None,
        debug_logger: Optional[Callable[[str], None]] = None,
        session_ttl: float = DEFAULT_SESSION_TTL,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.catalog = catalog or PokeAPIClient()
        self.analyzer = analyzer or TeamAnalyzer()
        self.rng = rng
        self.session_ttl = session_ttl
        self.max_sessions = max_sessions
        self._clock = clock
        self._sessions: "OrderedDict[str, BattleEngine]" = OrderedDict()
        self._last_used: Dict[str, float] = {}
        self._debug_logger = debug_logger

    def _debug(self, message: str) -> None:
        logger.debug(message)
        if self._debug_logger:
            self._debug_logger(message)

    # ------------------------------------------------------------------
    # Team building
    # ------------------------------------------------------------------
    def build_roster(
        self, identifiers: Iterable[Union[int, str]], *, name: Optional[str] = None
    ) -> TeamRoster:
        roster = TeamRoster(name=name)
        for identifier in identifiers:
            combatant = self.catalog.get_combatant(identifier)
            self._debug(f"Fetched {combatant.name} ({'/'.join(t.value for t in combatant.types)})")
            roster.add(combatant)
        return roster

    def analyze_team(self, roster: TeamRoster) -> TeamReport:
        self._debug(f"Analyzing team of {len(roster)}")
        return self.analyzer.report(roster)

    # ------------------------------------------------------------------
    # Battle sessions
    # ------------------------------------------------------------------
    def start(self, roster: Iterable[Combatant]) -> Tuple[str, BattleSnapshot]:
        engine = self._new_engine()
        snapshot = engine.prepare_battle(roster)
        self._expire_idle()
        while len(self._sessions) >= self.max_sessions:
            self._drop(next(iter(self._sessions)), "evicted")
        session_id = uuid.uuid4().hex
        self._sessions[session_id] = engine
        self._last_used[session_id] = self._clock()
        self._debug(f"Started battle session {session_id}")
        return session_id, snapshot

    def get_engine(self, session_id: str) -> BattleEngine:
        self._expire_idle()
        try:
            engine = self._sessions[session_id]
        except KeyError:
            raise UnknownSessionError(f"Battle session {session_id} not found") from None
        self._sessions.move_to_end(session_id)
        self._last_used[session_id] = self._clock()
        return engine

    def snapshot(self, session_id: str) -> BattleSnapshot:
        return self.get_engine(session_id).snapshot()

    def select_starter(self, session_id: str, combatant_id: int) -> BattleSnapshot:
        return self.get_engine(session_id).select_starter(combatant_id)

    def attack(self, session_id: str) -> BattleSnapshot:
        engine = self.get_engine(session_id)
        engine.attack(Side.PLAYER)
        return self._finish_round(engine)

    def switch(self, session_id: str, combatant_id: int) -> BattleSnapshot:
        engine = self.get_engine(session_id)
        engine.switch_active(combatant_id)
        return self._finish_round(engine)

    def reset(self, session_id: str) -> BattleSnapshot:
        return self.get_engine(session_id).reset_battle()

    def discard(self, session_id: str) -> None:
        if session_id not in self._sessions:
            raise UnknownSessionError(f"Battle session {session_id} not found")
        self._drop(session_id, "discarded")

    def simulate(
        self,
        roster: Iterable[Combatant],
        *,
        rng: Optional[RandomSource] = None,
        turn_limit: int = SIMULATION_TURN_LIMIT,
    ) -> BattleSnapshot:
        """Play a whole battle: always attack, send in the next survivor on a faint."""

        engine = self._new_engine(rng)
        engine.prepare_battle(roster)
        engine.select_starter(engine.state.player_team[0])
        for _ in range(turn_limit):
            phase = engine.phase
            if phase.is_terminal:
                break
            if phase is Phase.PLAYER_TURN:
                engine.attack(Side.PLAYER)
            elif phase is Phase.OPPONENT_TURN:
                engine.resolve_opponent_turn()
            elif phase is Phase.AWAITING_SWITCH:
                engine.switch_active(engine.state.player_team[0])
        else:
            logger.warning("Simulation stopped after %d turns without a winner", turn_limit)
        self._debug(f"Simulation finished in phase {engine.phase.value}")
        return engine.snapshot()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _new_engine(self, rng: Optional[RandomSource] = None) -> BattleEngine:
        return BattleEngine(self.catalog, chart=self.analyzer.chart, rng=rng or self.rng)

    def _expire_idle(self) -> None:
        now = self._clock()
        stale = [sid for sid, used in self._last_used.items() if now - used >= self.session_ttl]
        for session_id in stale:
            self._drop(session_id, "expired")

    def _drop(self, session_id: str, reason: str) -> None:
        engine = self._sessions.pop(session_id)
        self._last_used.pop(session_id, None)
        logger.info("Battle session %s %s in phase %s", session_id, reason, engine.phase.value)

    @staticmethod
    def _finish_round(engine: BattleEngine) -> BattleSnapshot:
        if engine.phase is Phase.OPPONENT_TURN:
            engine.resolve_opponent_turn()
        return engine.snapshot()
