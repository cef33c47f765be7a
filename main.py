"""Command-line interface for team analysis and battle simulation."""

from __future__ import annotations

import argparse
import json
import logging
import random
import sys

from pokedex_sim.battle import BattleSnapshot
from pokedex_sim.clients import CatalogUnavailable, PokeAPIClient
from pokedex_sim.config import load_settings
from pokedex_sim.errors import InvalidRosterError
from pokedex_sim.logging_setup import setup_logging
from pokedex_sim.models import TeamReport
from pokedex_sim.services import BattleService


def _humanize_report(report: TeamReport) -> str:
    analysis = report.analysis
    lines: list[str] = [f"Team: {', '.join(report.members)}", ""]

    sections = [
        ("Strong against", analysis.strong_against),
        ("Weak against", analysis.weak_against),
        ("Immune to", analysis.immune_to),
        ("Resistant to", analysis.resistant_to),
        ("Vulnerable to", analysis.vulnerable_to),
    ]
    for title, types in sections:
        labels = ", ".join(t.label for t in types) or "none"
        lines.append(f"{title}: {labels}")

    if report.recommendations:
        lines.append("")
        lines.append("Recommendations:")
        for rec in report.recommendations:
            lines.append(
                f"  - {rec.type.label}: {rec.reason} (e.g. {', '.join(rec.examples)})"
            )

    return "\n".join(lines).strip()


def _humanize_battle(snapshot: BattleSnapshot) -> str:
    lines = list(snapshot.log)
    outcome = {"win": "Victory!", "lose": "Defeat!"}.get(snapshot.result or "", "No winner.")
    lines.append("")
    lines.append(outcome)
    return "\n".join(lines)


def _debug_print(enabled: bool, message: str) -> None:
    if enabled:
        sys.stderr.write(f"[debug] {message}\n")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Analyze Pokémon teams and simulate battles")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit the result as JSON",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print debug progress information to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Report a team's type coverage")
    analyze.add_argument("pokemon", nargs="+", help="Up to six species names or ids")
    analyze.add_argument("--team-name", help="Optional nickname for the submitted team")

    battle = subparsers.add_parser("battle", help="Auto-play a battle against random opponents")
    battle.add_argument("pokemon", nargs="+", help="Up to six species names or ids")
    battle.add_argument("--seed", type=int, help="Seed for a reproducible battle")
    return parser


def main(argv: list[str] | None = None, *, service: BattleService | None = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = load_settings()
    setup_logging(settings, level=logging.DEBUG if args.debug else None, stream=sys.stderr)

    _debug_print(args.debug, f"Arguments parsed: {args}")
    if service is None:
        service = BattleService(
            catalog=PokeAPIClient.from_settings(settings),
            debug_logger=(lambda msg: _debug_print(args.debug, msg)),
        )

    try:
        roster = service.build_roster(args.pokemon, name=getattr(args, "team_name", None))
        _debug_print(args.debug, f"Built roster with {len(roster)} Pokémon")
        if args.command == "analyze":
            report = service.analyze_team(roster)
            payload = report.as_dict()
            text = _humanize_report(report)
        else:
            snapshot = service.simulate(roster, rng=random.Random(args.seed))
            payload = snapshot.as_dict()
            text = _humanize_battle(snapshot)
    except (CatalogUnavailable, InvalidRosterError) as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 1

    if args.json:
        json.dump(payload, sys.stdout, indent=2)
        sys.stdout.write("\n")
    else:
        print(text)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
