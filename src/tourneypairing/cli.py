"""Command line interface for Tourney Pairing.

Every command works on a JSON event file and prints JSON. Run without
arguments (or with ``shell``) for an interactive session.
"""

# Tourney Pairing
# Copyright (C) 2025  Tourney Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import argparse
import json
import logging
import shlex
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import NestedCompleter, WordCompleter
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.styles import Style

from tourneypairing import __version__
from tourneypairing.constants import (
    COMPETITOR_STATUSES,
    DEFAULT_ALGORITHM,
    PAIRING_ALGORITHMS,
    SAVE_FILE_EXTENSION,
    TOURNAMENT_TYPES,
    TYPE_INDIVIDUAL,
)
from tourneypairing.exceptions import (
    InvalidConfigurationException,
    TourneyPairingException,
)
from tourneypairing.models import GameResult
from tourneypairing.pairing import generate_round_robin_schedule
from tourneypairing.standings import compute_team_standings
from tourneypairing.testing.simulator import EventSimulator, SimulationConfig
from tourneypairing.tournament import (
    JsonFileScheduleStore,
    PairingOrchestrator,
    ResultRecorder,
)
from tourneypairing.utils import set_log_level, setup_logger

logger = setup_logger(__name__)


# ANSI color codes for terminal output
class Colors:
    OKBLUE = "\033[94m"
    OKGREEN = "\033[92m"
    WARNING = "\033[93m"
    FAIL = "\033[91m"
    ENDC = "\033[0m"
    BOLD = "\033[1m"


COMMANDS = {
    "pair": {
        "description": "Pair the next round (or --round N)",
        "options": {"--file": "Event file (JSON)", "--round": "Round to pair"},
    },
    "unpair": {
        "description": "Remove the latest paired round",
        "options": {"--file": "Event file (JSON)", "--round": "Round to remove"},
    },
    "state": {
        "description": "Show the state of a round",
        "options": {"--file": "Event file (JSON)", "--round": "Round to inspect"},
    },
    "standings": {
        "description": "Show standings",
        "options": {
            "--file": "Event file (JSON)",
            "--as-of": "Only count results up to this round",
            "--division": "Only show one division",
        },
    },
    "schedule": {
        "description": "Preview the full round robin schedule",
        "options": {
            "--file": "Event file (JSON)",
            "--division": "Division to schedule",
        },
    },
    "record": {
        "description": "Record a game result",
        "options": {
            "--file": "Event file (JSON)",
            "--round": "Round of the game",
            "--player1": "First competitor id",
            "--player2": "Second competitor id",
            "--score1": "Score of the first competitor",
            "--score2": "Score of the second competitor",
            "--match-id": "League match id",
        },
    },
    "status": {
        "description": "Pause, withdraw or reactivate a competitor",
        "options": {
            "--file": "Event file (JSON)",
            "--competitor": "Competitor id",
            "--set": "active/paused/withdrawn",
        },
    },
    "simulate": {
        "description": "Simulate a complete event with random results",
        "options": {
            "--competitors": "Number of competitors (default: 16)",
            "--rounds": "Number of rounds (default: 5)",
            "--algorithm": "Pairing algorithm",
            "--type": "Tournament type (individual/team/league)",
            "--seed": "Random seed for reproducibility",
            "--output": "Write the simulated event file here",
        },
    },
}


def open_event(path: str) -> Tuple[JsonFileScheduleStore, str]:
    """Store and tournament id of an event file."""
    event = Path(path)
    if event.suffix != SAVE_FILE_EXTENSION:
        raise InvalidConfigurationException(
            f"Event files must end in {SAVE_FILE_EXTENSION}, got '{event.name}'"
        )
    return JsonFileScheduleStore(event.parent), event.stem


def emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2))


def run_pair_command(args: argparse.Namespace) -> int:
    store, tournament_id = open_event(args.file)
    outcome = PairingOrchestrator(store).pair_round(tournament_id, args.round)
    emit(outcome.to_dict())
    return 0


def run_unpair_command(args: argparse.Namespace) -> int:
    store, tournament_id = open_event(args.file)
    version = PairingOrchestrator(store).unpair_round(tournament_id, args.round)
    snapshot = store.load(tournament_id)
    emit({"current_round": snapshot.current_round, "version": version})
    return 0


def run_state_command(args: argparse.Namespace) -> int:
    store, tournament_id = open_event(args.file)
    state = PairingOrchestrator(store).round_state(tournament_id, args.round)
    emit({"round": args.round, "state": state.value})
    return 0


def run_standings_command(args: argparse.Namespace) -> int:
    store, tournament_id = open_event(args.file)
    snapshot = store.load(tournament_id)
    ranked = PairingOrchestrator(store).standings(snapshot, as_of_round=args.as_of)
    competitors = ranked.in_division(args.division) if args.division else list(ranked)
    payload: Dict[str, Any] = {
        "as_of_round": args.as_of,
        "mode": ranked.mode,
        "standings": [
            {
                "rank": c.rank,
                "id": c.id,
                "name": c.name,
                "division": c.division,
                "wins": c.wins,
                "losses": c.losses,
                "ties": c.ties,
                "spread": c.spread,
                "match_wins": c.match_wins,
            }
            for c in competitors
        ],
        "warnings": ranked.warnings,
    }
    if snapshot.config.is_team_event:
        payload["teams"] = [
            t.to_dict()
            for t in compute_team_standings(
                snapshot.teams, snapshot.competitors, snapshot.results, args.as_of
            )
        ]
    emit(payload)
    return 0


def run_schedule_command(args: argparse.Namespace) -> int:
    store, tournament_id = open_event(args.file)
    snapshot = store.load(tournament_id)
    config = snapshot.config
    if args.division:
        divisions: List[Optional[str]] = [args.division]
    elif config.divisions:
        divisions = list(config.divisions)
    else:
        divisions = [None]

    payload = {}
    for division in divisions:
        schedule = generate_round_robin_schedule(
            snapshot.competitors, cycles=config.round_robin_cycles, division=division
        )
        payload[division or "all"] = {
            str(round_number): [p.to_dict() for p in pairings]
            for round_number, pairings in schedule.items()
        }
    emit(payload)
    return 0


def run_record_command(args: argparse.Namespace) -> int:
    store, tournament_id = open_event(args.file)
    result = ResultRecorder(store).record_result(
        tournament_id,
        GameResult(
            round=args.round,
            player1_id=args.player1,
            player2_id=args.player2,
            score1=args.score1,
            score2=args.score2,
            match_id=args.match_id,
        ),
    )
    emit(result.to_dict())
    return 0


def run_status_command(args: argparse.Namespace) -> int:
    store, tournament_id = open_event(args.file)
    version = store.set_status(tournament_id, args.competitor, args.set)
    emit({"competitor": args.competitor, "status": args.set, "version": version})
    return 0


def run_simulate_command(args: argparse.Namespace) -> int:
    config = SimulationConfig(
        num_competitors=args.competitors,
        num_rounds=args.rounds,
        algorithm=args.algorithm,
        tournament_type=args.type,
        seed=args.seed,
    )
    store = None
    if args.output:
        store, config.tournament_id = open_event(args.output)
    report = EventSimulator(config, store=store).run()
    emit(
        {
            "tournament_id": report.snapshot.tournament_id,
            "rounds_paired": report.rounds_paired,
            "results": len(report.snapshot.results),
            "violations": report.violations,
        }
    )
    return 0 if report.ok else 1


def create_main_parser() -> argparse.ArgumentParser:
    """Create main argument parser."""
    parser = argparse.ArgumentParser(
        prog="tourney-pairing",
        description="Pairing and ranking engine for multi-round tournaments",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Interactive mode
  tourney-pairing

  # Pair the next round
  tourney-pairing pair --file club.json

  # Record a game
  tourney-pairing record --file club.json --round 1 --player1 a --player2 b \\
      --score1 412 --score2 380

  # Standings after round 3
  tourney-pairing standings --file club.json --as-of 3
        """,
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--interactive", "-i", action="store_true", help="Start in interactive mode"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Log pairing decisions"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    pair_parser = subparsers.add_parser("pair", help=COMMANDS["pair"]["description"])
    pair_parser.add_argument("--file", required=True)
    pair_parser.add_argument("--round", type=int)
    pair_parser.set_defaults(func=run_pair_command)

    unpair_parser = subparsers.add_parser(
        "unpair", help=COMMANDS["unpair"]["description"]
    )
    unpair_parser.add_argument("--file", required=True)
    unpair_parser.add_argument("--round", type=int)
    unpair_parser.set_defaults(func=run_unpair_command)

    state_parser = subparsers.add_parser(
        "state", help=COMMANDS["state"]["description"]
    )
    state_parser.add_argument("--file", required=True)
    state_parser.add_argument("--round", type=int, required=True)
    state_parser.set_defaults(func=run_state_command)

    standings_parser = subparsers.add_parser(
        "standings", help=COMMANDS["standings"]["description"]
    )
    standings_parser.add_argument("--file", required=True)
    standings_parser.add_argument("--as-of", type=int)
    standings_parser.add_argument("--division")
    standings_parser.set_defaults(func=run_standings_command)

    schedule_parser = subparsers.add_parser(
        "schedule", help=COMMANDS["schedule"]["description"]
    )
    schedule_parser.add_argument("--file", required=True)
    schedule_parser.add_argument("--division")
    schedule_parser.set_defaults(func=run_schedule_command)

    record_parser = subparsers.add_parser(
        "record", help=COMMANDS["record"]["description"]
    )
    record_parser.add_argument("--file", required=True)
    record_parser.add_argument("--round", type=int, required=True)
    record_parser.add_argument("--player1", required=True)
    record_parser.add_argument("--player2", required=True)
    record_parser.add_argument("--score1", type=int, required=True)
    record_parser.add_argument("--score2", type=int, required=True)
    record_parser.add_argument("--match-id")
    record_parser.set_defaults(func=run_record_command)

    status_parser = subparsers.add_parser(
        "status", help=COMMANDS["status"]["description"]
    )
    status_parser.add_argument("--file", required=True)
    status_parser.add_argument("--competitor", required=True)
    status_parser.add_argument("--set", choices=COMPETITOR_STATUSES, required=True)
    status_parser.set_defaults(func=run_status_command)

    sim_parser = subparsers.add_parser(
        "simulate", help=COMMANDS["simulate"]["description"]
    )
    sim_parser.add_argument("--competitors", type=int, default=16)
    sim_parser.add_argument("--rounds", type=int, default=5)
    sim_parser.add_argument(
        "--algorithm", choices=PAIRING_ALGORITHMS, default=DEFAULT_ALGORITHM
    )
    sim_parser.add_argument(
        "--type", choices=TOURNAMENT_TYPES, default=TYPE_INDIVIDUAL
    )
    sim_parser.add_argument("--seed", type=int)
    sim_parser.add_argument("--output")
    sim_parser.set_defaults(func=run_simulate_command)

    shell_parser = subparsers.add_parser("shell", help="Start in interactive mode")
    shell_parser.add_argument("--file", help="Default event file for the session")

    return parser


def dispatch(parser: argparse.ArgumentParser, argv: List[str]) -> int:
    """Parse one command line and run it, mapping engine errors to exit 1."""
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return 0
    try:
        return args.func(args)
    except TourneyPairingException as e:
        logger.error("%s failed: %s", args.command, e)
        print(f"{Colors.FAIL}Error: {e}{Colors.ENDC}", file=sys.stderr)
        return 1


def print_commands_list():
    """Print list of all available commands."""
    print(f"\n{Colors.BOLD}Available Commands:{Colors.ENDC}\n")
    for cmd, info in COMMANDS.items():
        print(f"  {Colors.OKGREEN}{cmd:12}{Colors.ENDC} - {info['description']}")
    print()


def create_completer() -> NestedCompleter:
    """Create autocomplete completer for interactive mode."""
    completions = {}
    for cmd, info in COMMANDS.items():
        completions[cmd] = WordCompleter(list(info["options"].keys()))
    completions["help"] = None
    completions["exit"] = None
    return NestedCompleter.from_nested_dict(completions)


def run_interactive_mode(default_file: Optional[str] = None) -> int:
    """Run in interactive mode with autocomplete.

    With a default event file, ``--file`` may be left out of commands.
    """
    print(
        f"{Colors.OKBLUE}Tourney Pairing {__version__}{Colors.ENDC} - "
        f"type {Colors.BOLD}help{Colors.ENDC} for commands, "
        f"{Colors.BOLD}exit{Colors.ENDC} to leave"
    )
    parser = create_main_parser()
    session = PromptSession(
        completer=create_completer(),
        history=InMemoryHistory(),
        style=Style.from_dict({"prompt": "#00aa00 bold"}),
    )

    while True:
        try:
            user_input = session.prompt("tourney> ").strip()
        except KeyboardInterrupt:
            print(f"\n{Colors.WARNING}Use 'exit' or 'quit' to leave{Colors.ENDC}")
            continue
        except EOFError:
            break

        if not user_input:
            continue
        if user_input in ["exit", "quit", "q"]:
            break
        if user_input in ["help", "?"]:
            print_commands_list()
            continue

        try:
            argv = shlex.split(user_input)
        except ValueError as e:
            print(f"{Colors.FAIL}Error: {e}{Colors.ENDC}")
            continue
        if argv[0] not in COMMANDS:
            print(f"{Colors.FAIL}Unknown command: {argv[0]}{Colors.ENDC}")
            continue
        if default_file and "--file" in COMMANDS[argv[0]]["options"]:
            if "--file" not in argv:
                argv += ["--file", default_file]

        try:
            dispatch(parser, argv)
        except SystemExit:
            # argparse calls sys.exit on error, catch it
            continue

    print(f"\n{Colors.OKGREEN}Goodbye!{Colors.ENDC}\n")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the tourney-pairing CLI."""
    argv = sys.argv[1:] if argv is None else list(argv)
    # Logs share stdout with the JSON output
    verbose = "--verbose" in argv or "-v" in argv
    set_log_level(logging.INFO if verbose else logging.WARNING)
    if not argv:
        return run_interactive_mode()

    parser = create_main_parser()
    if argv[0] == "shell" or "--interactive" in argv or "-i" in argv:
        args, _ = parser.parse_known_args(argv)
        return run_interactive_mode(getattr(args, "file", None))
    return dispatch(parser, argv)


if __name__ == "__main__":
    sys.exit(main())
