"""Team type-coverage analysis over the static type chart."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from ..data.type_chart import TYPE_CHART, TYPE_ORDER, ElementalType, TypeChart
from ..data.type_examples import TYPE_EXAMPLES
from ..models import Recommendation, TeamReport, TeamRoster, TypeAnalysis
from ..models.pokemon import Combatant
from ..models.team import in_type_order

logger = logging.getLogger(__name__)

STRONG_OFFENSE_THRESHOLD = 2
IMMUNE_DEFENSE_THRESHOLD = -4
MIN_TYPES_FOR_RECOMMENDATION = 2
MAX_RECOMMENDATIONS = 3


class TeamAnalyzer:
    """Scores a roster's coverage and suggests types that patch its gaps."""

    def __init__(self, *, chart: Optional[TypeChart] = None) -> None:
        self.chart = chart or TYPE_CHART

    def analyze(self, roster: Iterable[Combatant]) -> TypeAnalysis:
        members = list(roster)
        offense = self._offense_scores(members)
        defense = self._defense_scores(members)

        analysis = TypeAnalysis(
            strong_against=tuple(
                t for t in TYPE_ORDER if offense[t] >= STRONG_OFFENSE_THRESHOLD
            ),
            weak_against=tuple(t for t in TYPE_ORDER if offense[t] == 0),
            immune_to=tuple(
                t for t in TYPE_ORDER if defense[t] <= IMMUNE_DEFENSE_THRESHOLD
            ),
            resistant_to=tuple(
                t for t in TYPE_ORDER if IMMUNE_DEFENSE_THRESHOLD < defense[t] < 0
            ),
            vulnerable_to=tuple(t for t in TYPE_ORDER if defense[t] > 0),
        )
        logger.debug(
            "Analyzed %d members: %d strong, %d weak, %d vulnerable",
            len(members),
            len(analysis.strong_against),
            len(analysis.weak_against),
            len(analysis.vulnerable_to),
        )
        return analysis

    def recommend(
        self, analysis: TypeAnalysis, roster: Iterable[Combatant]
    ) -> List[Recommendation]:
        if not isinstance(roster, TeamRoster):
            roster = TeamRoster.of(roster)
        present = roster.types_present()
        candidates = [t for t in TYPE_ORDER if t not in present]

        recommendations: List[Recommendation] = []
        for candidate in candidates:
            covered = [
                weak
                for weak in analysis.weak_against
                if self.chart.multiplier(candidate, weak) > 1
            ]
            if len(covered) >= MIN_TYPES_FOR_RECOMMENDATION:
                recommendations.append(
                    self._build_recommendation(candidate, "Strong against", covered)
                )

        sheltered = set(analysis.resistant_to) | set(analysis.immune_to)
        critical = [t for t in analysis.vulnerable_to if t not in sheltered]
        for candidate in candidates:
            resisted = [
                threat
                for threat in critical
                if self.chart.multiplier(threat, candidate) < 1
            ]
            if len(resisted) >= MIN_TYPES_FOR_RECOMMENDATION:
                recommendations.append(
                    self._build_recommendation(candidate, "Resists", resisted)
                )

        return recommendations[:MAX_RECOMMENDATIONS]

    def report(self, roster: TeamRoster) -> TeamReport:
        analysis = self.analyze(roster)
        return TeamReport(
            members=tuple(member.display_name for member in roster),
            analysis=analysis,
            recommendations=tuple(self.recommend(analysis, roster)),
        )

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------
    def _offense_scores(self, members: List[Combatant]) -> Dict[ElementalType, int]:
        offense = {t: 0 for t in TYPE_ORDER}
        for member in members:
            for own_type in member.types:
                for target, multiplier in self.chart.matchups(own_type).items():
                    if multiplier > 1:
                        offense[target] += 1
        return offense

    def _defense_scores(self, members: List[Combatant]) -> Dict[ElementalType, int]:
        defense = {t: 0 for t in TYPE_ORDER}
        for member in members:
            for attack_type in TYPE_ORDER:
                multiplier = self.chart.combined_multiplier(attack_type, member.types)
                if multiplier == 0:
                    defense[attack_type] -= 2
                elif multiplier < 1:
                    defense[attack_type] -= 1
                elif multiplier > 1:
                    defense[attack_type] += 1
        return defense

    @staticmethod
    def _build_recommendation(
        candidate: ElementalType, lead: str, types: List[ElementalType]
    ) -> Recommendation:
        labels = ", ".join(t.label for t in in_type_order(types))
        return Recommendation(
            type=candidate,
            reason=f"{lead} {labels}",
            examples=TYPE_EXAMPLES.get(candidate, ()),
        )
