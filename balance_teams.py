"""
Command-line front end for the team balancer.

Usage:
  python balance_teams.py generate --roster roster.json --buff Alice --nerf Bob --top 5
  python balance_teams.py generate --players Alice Bob Cara Dan Eve
  python balance_teams.py record --team1 Alice Dan --team2 Bob Cara --score 13 9 --map Dust
  python balance_teams.py leaderboard
  python balance_teams.py history
  python balance_teams.py delete-match 12
  python balance_teams.py handicap
  python balance_teams.py export backup.json
  python balance_teams.py import backup.json

A roster file is either a list of {"name": ..., "strength": ...} objects or
a {name: strength} mapping. Without --roster the rating store is used.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List

from config import DB_PATH, DEFAULT_PLAYER_RATING, LOG_LEVEL
from domain.models.player import Player
from infrastructure.service_container import ServiceConfig, ServiceContainer
from utils.formatting import (
    format_handicap_examples,
    format_team_result,
    get_balance_quality,
)

logger = logging.getLogger("qmg_teams.cli")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def load_roster_file(path: str) -> List[Player]:
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)
    if isinstance(data, dict):
        return [Player(name=name, strength=float(strength)) for name, strength in data.items()]
    return [Player(name=p["name"], strength=float(p["strength"])) for p in data]


def _resolve_team(container: ServiceContainer, names: List[str]) -> List[Player]:
    """Known players play at their stored rating; newcomers at the default."""
    known = {p.name: p for p in container.player_service.get_roster(names)}
    return [known.get(name, Player(name=name, strength=DEFAULT_PLAYER_RATING)) for name in names]


def _cmd_generate(container: ServiceContainer, args) -> int:
    roster = load_roster_file(args.roster) if args.roster else None
    lobby = container.create_lobby(roster=roster)
    if args.players:
        selected = lobby.set_active_players(args.players)
        if not selected:
            print(f"ERROR: {selected.error}", file=sys.stderr)
            return 2

    for name in args.buff or []:
        outcome = lobby.buff(name)
        if not outcome:
            print(f"ERROR: {outcome.error}", file=sys.stderr)
            return 2
    for name in args.nerf or []:
        outcome = lobby.nerf(name)
        if not outcome:
            print(f"ERROR: {outcome.error}", file=sys.stderr)
            return 2
    if args.handicap_offset:
        lobby.set_manual_handicap_offset(args.handicap_offset)

    result = lobby.generate_teams(max_results=args.top)
    if not result:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return 2

    teams = result.value
    if not lobby.is_even_split():
        coefficient = lobby.effective_handicap_coefficient()
        print(f"Handicap coefficient: {coefficient:.1f}")
        for line in format_handicap_examples(coefficient):
            print(f"  {line}")
    for index, team_result in enumerate(teams, 1):
        quality = get_balance_quality(team_result.strength_difference)
        print(f"{format_team_result(team_result, index=index)} [{quality}]")
    return 0


def _cmd_record(container: ServiceContainer, args) -> int:
    team1 = _resolve_team(container, args.team1)
    team2 = _resolve_team(container, args.team2)
    result = container.match_service.record_match(
        team1, team2, args.score[0], args.score[1], map_played=args.map
    )
    if not result:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return 2
    record = result.value
    print(f"Recorded match {record.match_id}")
    for name, change in record.rating_changes.items():
        print(f"  {name}: {change:+d}")
    if record.handicap_coefficient_after is not None:
        print(
            f"Handicap coefficient: {record.handicap_coefficient_before:.2f} -> "
            f"{record.handicap_coefficient_after:.2f}"
        )
    return 0


def _cmd_leaderboard(container: ServiceContainer, args) -> int:
    for rank, rating in enumerate(container.player_service.get_leaderboard(args.limit), 1):
        print(f"{rank}. {rating}")
    return 0


def _cmd_history(container: ServiceContainer, args) -> int:
    for record in container.match_service.get_match_history():
        names1 = ", ".join(p.name for p in record.team1)
        names2 = ", ".join(p.name for p in record.team2)
        map_note = f" on {record.map_played}" if record.map_played else ""
        print(
            f"#{record.match_id} {record.played_at:%Y-%m-%d %H:%M} "
            f"[{names1}] {record.team1_score}-{record.team2_score} [{names2}]{map_note}"
        )
    return 0


def _cmd_delete_match(container: ServiceContainer, args) -> int:
    result = container.match_service.delete_match(args.match_id)
    if not result:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return 2
    print(f"Deleted match {args.match_id}")
    return 0


def _cmd_handicap(container: ServiceContainer, args) -> int:
    if args.set is not None:
        container.settings_repo.set_handicap_coefficient(args.set)
    coefficient = container.settings_repo.get_handicap_coefficient()
    print(f"Handicap coefficient: {coefficient:.2f}")
    for line in format_handicap_examples(coefficient):
        print(f"  {line}")
    return 0


def _cmd_export(container: ServiceContainer, args) -> int:
    with open(args.path, "w", encoding="utf-8") as fh:
        fh.write(container.backup_service.export_data())
    print(f"Exported to {args.path}")
    return 0


def _cmd_import(container: ServiceContainer, args) -> int:
    with open(args.path, encoding="utf-8") as fh:
        result = container.backup_service.import_data(fh.read())
    if not result:
        print(f"ERROR: {result.error}", file=sys.stderr)
        return 2
    print(f"Imported {result.value['ratings']} rating(s), {result.value['matches']} match(es)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Split players into two balanced teams.")
    parser.add_argument("--db-path", default=DB_PATH, help="Path to SQLite DB (default: DB_PATH)")
    parser.add_argument("--log-level", default=LOG_LEVEL, help="Logging level (default: LOG_LEVEL)")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Rank candidate team splits")
    gen.add_argument("--roster", help="JSON roster file (default: rating store)")
    gen.add_argument("--players", nargs="+", help="Only these players are active")
    gen.add_argument("--buff", nargs="+", help="Players who are on fire")
    gen.add_argument("--nerf", nargs="+", help="Players having an off day")
    gen.add_argument("--top", type=int, default=5, help="Number of splits to show")
    gen.add_argument(
        "--handicap-offset", type=float, default=0.0, help="Adjust the stored coefficient"
    )
    gen.set_defaults(func=_cmd_generate)

    rec = sub.add_parser("record", help="Record a played match")
    rec.add_argument("--team1", nargs="+", required=True)
    rec.add_argument("--team2", nargs="+", required=True)
    rec.add_argument("--score", nargs=2, type=int, required=True, metavar=("TEAM1", "TEAM2"))
    rec.add_argument("--map", help="Map played")
    rec.set_defaults(func=_cmd_record)

    board = sub.add_parser("leaderboard", help="Show stored ratings")
    board.add_argument("--limit", type=int)
    board.set_defaults(func=_cmd_leaderboard)

    sub.add_parser("history", help="Show match history").set_defaults(func=_cmd_history)

    delete = sub.add_parser("delete-match", help="Remove a match from the history")
    delete.add_argument("match_id", type=int)
    delete.set_defaults(func=_cmd_delete_match)

    handicap = sub.add_parser("handicap", help="Show or set the handicap coefficient")
    handicap.add_argument("--set", type=float)
    handicap.set_defaults(func=_cmd_handicap)

    export = sub.add_parser("export", help="Write a JSON backup")
    export.add_argument("path")
    export.set_defaults(func=_cmd_export)

    imp = sub.add_parser("import", help="Restore from a JSON backup")
    imp.add_argument("path")
    imp.set_defaults(func=_cmd_import)

    return parser


def main(argv: List[str]) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.log_level.upper())

    logger.debug(f"Running {args.command} against {args.db_path}")
    container = ServiceContainer(ServiceConfig(db_path=args.db_path))
    container.initialize()
    return args.func(container, args)


def run() -> int:
    return main(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(run())
