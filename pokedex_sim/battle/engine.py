"""Turn-based battle state machine driven by explicit caller actions."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Protocol, Tuple, Union

from ..data.type_chart import TYPE_CHART, TypeChart
from ..errors import IllegalStateTransition, InvalidRosterError
from ..models import Combatant, TeamRoster
from .random_source import RandomSource

logger = logging.getLogger(__name__)

OPPONENT_TEAM_SIZE = 3
BASE_DAMAGE = 20
ROLL_MIN = 0.85
ROLL_SPAN = 0.30
HP_MULTIPLIER = 2


class Phase(str, Enum):
    NOT_STARTED = "not_started"
    AWAITING_SELECTION = "awaiting_selection"
    PLAYER_TURN = "player_turn"
    OPPONENT_TURN = "opponent_turn"
    AWAITING_SWITCH = "awaiting_switch"
    WON = "won"
    LOST = "lost"

    @property
    def is_terminal(self) -> bool:
        return self in (Phase.WON, Phase.LOST)


class Side(str, Enum):
    PLAYER = "player"
    OPPONENT = "opponent"

    @property
    def other(self) -> "Side":
        return Side.OPPONENT if self is Side.PLAYER else Side.PLAYER

    @property
    def turn(self) -> Phase:
        return Phase.PLAYER_TURN if self is Side.PLAYER else Phase.OPPONENT_TURN


class CombatantCatalog(Protocol):
    """Source of opponent combatants, usually :class:`PokeAPIClient`."""

    def get_combatant(self, identifier: Union[int, str]) -> Combatant: ...

    def random_combatant_id(self, rng: RandomSource) -> int: ...


@dataclass
class BattleState:
    player_team: List[Combatant] = field(default_factory=list)
    opponent_team: List[Combatant] = field(default_factory=list)
    active_player: Optional[Combatant] = None
    active_opponent: Optional[Combatant] = None
    player_hp: int = 0
    opponent_hp: int = 0
    log: List[str] = field(default_factory=list)
    phase: Phase = Phase.NOT_STARTED

    def team(self, side: Side) -> List[Combatant]:
        return self.player_team if side is Side.PLAYER else self.opponent_team

    def active(self, side: Side) -> Optional[Combatant]:
        return self.active_player if side is Side.PLAYER else self.active_opponent

    def hp(self, side: Side) -> int:
        return self.player_hp if side is Side.PLAYER else self.opponent_hp

    def set_hp(self, side: Side, value: int) -> None:
        if value < 0:
            raise ValueError(f"HP cannot be negative, got {value}")
        if side is Side.PLAYER:
            self.player_hp = value
        else:
            self.opponent_hp = value

    def set_active(self, side: Side, combatant: Optional[Combatant], hp: int) -> None:
        if side is Side.PLAYER:
            self.active_player = combatant
        else:
            self.active_opponent = combatant
        self.set_hp(side, hp)


@dataclass(frozen=True)
class BattleSnapshot:
    """Read-only view of a battle handed to renderers."""

    phase: Phase
    player_team: Tuple[Combatant, ...]
    opponent_team: Tuple[Combatant, ...]
    active_player: Optional[Combatant]
    active_opponent: Optional[Combatant]
    player_hp: int
    opponent_hp: int
    player_max_hp: int
    opponent_max_hp: int
    log: Tuple[str, ...]

    @property
    def result(self) -> Optional[str]:
        if self.phase is Phase.WON:
            return "win"
        if self.phase is Phase.LOST:
            return "lose"
        return None

    def as_dict(self) -> dict[str, object]:
        return {
            "phase": self.phase.value,
            "result": self.result,
            "player_team": [c.as_dict() for c in self.player_team],
            "opponent_team": [c.as_dict() for c in self.opponent_team],
            "active_player": self.active_player.as_dict() if self.active_player else None,
            "active_opponent": self.active_opponent.as_dict() if self.active_opponent else None,
            "player_hp": self.player_hp,
            "opponent_hp": self.opponent_hp,
            "player_max_hp": self.player_max_hp,
            "opponent_max_hp": self.opponent_max_hp,
            "log": list(self.log),
        }


@dataclass(frozen=True)
class AttackOutcome:
    side: Side
    attacker: str
    defender: str
    effectiveness: float
    damage: int
    fainted: bool
    phase: Phase


class BattleEngine:
    """Runs one simulated battle at a time against a random opponent team.

    Every action validates the current phase first and raises
    :class:`IllegalStateTransition` when it is not allowed. Opponent turns
    are never taken automatically: after the player attacks or switches the
    caller invokes :meth:`resolve_opponent_turn`.
    """

    def __init__(
        self,
        catalog: CombatantCatalog,
        *,
        chart: Optional[TypeChart] = None,
        rng: Optional[RandomSource] = None,
    ) -> None:
        self.catalog = catalog
        self.chart = chart or TYPE_CHART
        self.rng: RandomSource = rng or random.Random()
        self.state = BattleState()
        self._roster: List[Combatant] = []

    @property
    def phase(self) -> Phase:
        return self.state.phase

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def prepare_battle(self, roster: Iterable[Combatant]) -> BattleSnapshot:
        members = list(TeamRoster.of(roster))
        if not members:
            raise InvalidRosterError("You need Pokémon on your team before you can battle")

        # Fetch everything first so a catalog failure leaves the state untouched.
        opponents = [
            self.catalog.get_combatant(self.catalog.random_combatant_id(self.rng))
            for _ in range(OPPONENT_TEAM_SIZE)
        ]
        self._roster = members
        self.state = BattleState(
            player_team=list(members),
            opponent_team=opponents,
            phase=Phase.AWAITING_SELECTION,
            log=[
                "A trainer challenges you with "
                f"{', '.join(c.display_name for c in opponents)}! Choose your first Pokémon."
            ],
        )
        logger.info(
            "Battle prepared: %d player Pokémon vs %s",
            len(members),
            [c.name for c in opponents],
        )
        return self.snapshot()

    def reset_battle(self, roster: Optional[Iterable[Combatant]] = None) -> BattleSnapshot:
        members = list(roster) if roster is not None else list(self._roster)
        self.state = BattleState()
        return self.prepare_battle(members)

    def select_starter(self, combatant: Union[Combatant, int]) -> BattleSnapshot:
        self._require(Phase.AWAITING_SELECTION, "choose a starter")
        member = self._find_player_member(combatant)
        opponent = self.state.opponent_team[0]
        self.state.set_active(Side.PLAYER, member, self.get_max_hp(member))
        self.state.set_active(Side.OPPONENT, opponent, self.get_max_hp(opponent))
        self.state.log.append(f"Go, {member.display_name}!")
        self.state.log.append(f"The opponent sent out {opponent.display_name}!")
        self.state.phase = Phase.PLAYER_TURN
        return self.snapshot()

    def switch_active(self, combatant: Union[Combatant, int]) -> BattleSnapshot:
        """Bring in a new player combatant; the opponent moves next."""

        self._require((Phase.AWAITING_SWITCH, Phase.PLAYER_TURN), "switch Pokémon")
        member = self._find_player_member(combatant)
        current = self.state.active_player
        if current is not None and current.id == member.id:
            raise InvalidRosterError(f"{member.display_name} is already in battle")
        if current is not None:
            self.state.log.append(f"{current.display_name}, come back!")
        self.state.set_active(Side.PLAYER, member, self.get_max_hp(member))
        self.state.log.append(f"Go, {member.display_name}!")
        self.state.phase = Phase.OPPONENT_TURN
        return self.snapshot()

    # ------------------------------------------------------------------
    # Turns
    # ------------------------------------------------------------------
    def attack(self, side: Side) -> AttackOutcome:
        self._require(side.turn, f"attack as the {side.value}")
        state = self.state
        defending_side = side.other
        attacker = state.active(side)
        defender = state.active(defending_side)
        if attacker is None or defender is None:
            raise IllegalStateTransition("Both sides need an active Pokémon to attack")

        effectiveness = self.effectiveness(attacker, defender)
        damage = self.calculate_damage(attacker, defender, effectiveness)
        remaining = max(0, state.hp(defending_side) - damage)
        state.set_hp(defending_side, remaining)

        attacker_label = self._label(side, attacker)
        defender_label = self._label(defending_side, defender)
        state.log.append(f"{attacker_label} attacks {defender_label}!")
        if effectiveness == 0:
            state.log.append(f"It had no effect on {defender_label}...")
        elif effectiveness > 1:
            state.log.append("It's super effective!")
        elif effectiveness < 1:
            state.log.append("It's not very effective...")
        state.log.append(f"{defender_label} took {damage} damage!")

        fainted = remaining == 0
        if fainted:
            self._handle_faint(defending_side)
        else:
            state.phase = defending_side.turn

        logger.debug(
            "%s hit %s for %d (x%s), phase now %s",
            attacker.name,
            defender.name,
            damage,
            effectiveness,
            state.phase.value,
        )
        return AttackOutcome(
            side=side,
            attacker=attacker.display_name,
            defender=defender.display_name,
            effectiveness=effectiveness,
            damage=damage,
            fainted=fainted,
            phase=state.phase,
        )

    def resolve_opponent_turn(self) -> AttackOutcome:
        return self.attack(Side.OPPONENT)

    # ------------------------------------------------------------------
    # Numbers
    # ------------------------------------------------------------------
    def effectiveness(self, attacker: Combatant, defender: Combatant) -> float:
        result = 1.0
        for attack_type in attacker.types:
            result *= self.chart.combined_multiplier(attack_type, defender.types)
        return result

    def calculate_damage(
        self,
        attacker: Combatant,
        defender: Combatant,
        effectiveness: Optional[float] = None,
    ) -> int:
        if effectiveness is None:
            effectiveness = self.effectiveness(attacker, defender)
        roll = ROLL_MIN + self.rng.random() * ROLL_SPAN
        ratio = self.get_attack(attacker) / self.get_defense(defender)
        raw = math.floor(ratio * BASE_DAMAGE * effectiveness * roll)
        if effectiveness == 0:
            return 0
        return max(1, raw)

    @staticmethod
    def get_max_hp(combatant: Combatant) -> int:
        return combatant.stats.hp * HP_MULTIPLIER

    @staticmethod
    def get_attack(combatant: Combatant) -> int:
        return combatant.stats.attack

    @staticmethod
    def get_defense(combatant: Combatant) -> int:
        # Zero defense is treated as one to keep the damage ratio finite.
        return max(1, combatant.stats.defense)

    def snapshot(self) -> BattleSnapshot:
        state = self.state
        return BattleSnapshot(
            phase=state.phase,
            player_team=tuple(state.player_team),
            opponent_team=tuple(state.opponent_team),
            active_player=state.active_player,
            active_opponent=state.active_opponent,
            player_hp=state.player_hp,
            opponent_hp=state.opponent_hp,
            player_max_hp=self.get_max_hp(state.active_player) if state.active_player else 0,
            opponent_max_hp=self.get_max_hp(state.active_opponent) if state.active_opponent else 0,
            log=tuple(state.log),
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _handle_faint(self, side: Side) -> None:
        state = self.state
        fainted = state.active(side)
        state.log.append(f"{self._label(side, fainted)} fainted!")
        team = state.team(side)
        for index, member in enumerate(team):
            if member is fainted:
                del team[index]
                break

        if not team:
            state.set_active(side, None, 0)
            if side is Side.OPPONENT:
                state.phase = Phase.WON
                state.log.append("You defeated every opposing Pokémon. You win!")
            else:
                state.phase = Phase.LOST
                state.log.append("All of your Pokémon have fainted. You lose!")
            logger.info("Battle finished: %s", state.phase.value)
            return

        if side is Side.OPPONENT:
            replacement = team[0]
            state.set_active(side, replacement, self.get_max_hp(replacement))
            state.log.append(f"The opponent sent out {replacement.display_name}!")
            state.phase = Phase.OPPONENT_TURN
        else:
            state.set_active(side, None, 0)
            state.log.append("Choose your next Pokémon!")
            state.phase = Phase.AWAITING_SWITCH

    def _require(self, allowed: Union[Phase, Tuple[Phase, ...]], action: str) -> None:
        if isinstance(allowed, Phase):
            allowed = (allowed,)
        if self.state.phase not in allowed:
            raise IllegalStateTransition(
                f"Cannot {action} during phase '{self.state.phase.value}'"
            )

    def _find_player_member(self, combatant: Union[Combatant, int]) -> Combatant:
        wanted = combatant.id if isinstance(combatant, Combatant) else int(combatant)
        for member in self.state.player_team:
            if member.id == wanted:
                return member
        raise InvalidRosterError(f"No Pokémon with id {wanted} is left on your team")

    @staticmethod
    def _label(side: Side, combatant: Combatant) -> str:
        if side is Side.OPPONENT:
            return f"Foe {combatant.display_name}"
        return combatant.display_name
