"""Operator CLI for Bracket Engine.

Runs a tournament from the terminal. State lives in a JSON snapshot given by
``--file``; every mutating command loads it, applies one operation and saves
it again. With no arguments (or ``--interactive``) an interactive session
keeps the tournament in memory instead.
"""

# Bracket Engine
# Copyright (C) 2025  Bracket Engine developers
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
import random
import shlex
import sys
from pathlib import Path
from typing import List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import NestedCompleter, WordCompleter
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.styles import Style

from bracketengine.constants import DEFAULT_FINALS_SIZE, VALID_FINALS_SIZES
from bracketengine.controllers.operation_result import OperationResult
from bracketengine.controllers.tournament_manager import TournamentManager
from bracketengine.exceptions import (
    BracketEngineException,
    MatchNotFoundException,
    NotFoundException,
)
from bracketengine.models.enums import (
    BestOf,
    BracketType,
    Generation,
    MatchType,
    TournamentStage,
    TournamentType,
)
from bracketengine.models.tournament.match import Match
from bracketengine.models.tournament.submission import PendingScoreSubmission
from bracketengine.models.tournament.tournament import Tournament
from bracketengine.models.tournament.tournament_config import (
    StageConfig,
    TournamentConfig,
)
from bracketengine.simulation import SimulationConfig, TournamentSimulator
from bracketengine.utils import setup_logger
from bracketengine.utils.persistence import load_snapshot, save_snapshot
from bracketengine.utils.validation import format_room_code

logger = setup_logger(__name__)

SHORT_ID_LENGTH = 8


# ANSI color codes for terminal output
class Colors:
    HEADER = "\033[95m"
    OKBLUE = "\033[94m"
    OKCYAN = "\033[96m"
    OKGREEN = "\033[92m"
    WARNING = "\033[93m"
    FAIL = "\033[91m"
    ENDC = "\033[0m"
    BOLD = "\033[1m"


# Command definitions with their options
COMMANDS = {
    "create": {
        "description": "Create a tournament and generate its first stage",
        "options": {
            "--name": "Tournament name",
            "--type": "Format (single/double/swiss/roundRobin/groupRR)",
            "--players": "Player names in seed order",
            "--shuffle": "Randomize seeding",
            "--seed": "Random seed for the shuffle and room code",
            "--room-code": "Six-digit room code (generated when omitted)",
            "--generation": "Rule set (x/burst/mfb-zero-g/plastics-hms)",
            "--match-type": "Point target (3pts/4pts/5pts/7pts/nolimit)",
            "--best-of": "Series length (none/bo3/bo5)",
            "--own-finish": "Enable own-finish scoring (X only)",
            "--multi-stage": "Swiss / round robin feed a finals bracket",
            "--finals-type": "Finals format (single/double)",
            "--finals-size": "Number of finalists (2/4/8/16/32)",
        },
    },
    "show": {
        "description": "Show the tournament and every match",
        "options": {"--stage": "Only show one stage (main/group1/group2/finals)"},
    },
    "devices": {"description": "List connected scoreboards", "options": {}},
    "register": {
        "description": "Connect a scoreboard device",
        "options": {"--name": "Display name"},
    },
    "remove": {"description": "Disconnect a scoreboard device", "options": {}},
    "assign": {"description": "Assign a match to a scoreboard", "options": {}},
    "unassign": {"description": "Return a match to pending", "options": {}},
    "start": {"description": "Mark an assigned match as in progress", "options": {}},
    "submit": {
        "description": "Report a score from a scoreboard",
        "options": {
            "--device": "Reporting device (defaults to the assigned one)",
            "--winner": "Winner name",
            "--score1": "Player 1 final score",
            "--score2": "Player 2 final score",
            "--sets1": "Player 1 set wins",
            "--sets2": "Player 2 set wins",
        },
    },
    "approve": {"description": "Approve a submitted score", "options": {}},
    "reject": {
        "description": "Reject a submitted score",
        "options": {"--reason": "Reason sent back to the scoreboard"},
    },
    "pending": {"description": "List scores awaiting approval", "options": {}},
    "standings": {
        "description": "Show Swiss / round robin standings",
        "options": {"--stage": "Stage to rank (main/group1/group2)"},
    },
    "simulate": {
        "description": "Play a random tournament to the end",
        "options": {
            "--type": "Format",
            "--players": "Number of players (default: 8)",
            "--seed": "Random seed for reproducibility",
            "--devices": "Number of scoreboards (default: 2)",
            "--reject-rate": "Chance a score is rejected first (default: 0)",
            "--multi-stage": "Swiss / round robin feed a finals bracket",
            "--finals-type": "Finals format",
            "--finals-size": "Number of finalists",
            "--output": "Save the finished tournament here",
        },
    },
    "save": {"description": "Save the session to a snapshot file", "options": {}},
    "load": {"description": "Load a snapshot file into the session", "options": {}},
}

TYPE_CHOICES = [t.value for t in TournamentType]
FINALS_TYPE_CHOICES = [t.value for t in TournamentType if t.valid_for_finals]
STAGE_CHOICES = [s.value for s in TournamentStage]


class Session:
    """The tournament a command operates on, and where it is persisted."""

    def __init__(self, path: Optional[str] = None):
        self.path: Optional[Path] = Path(path) if path else None
        self.manager: Optional[TournamentManager] = None

    def require_manager(self) -> TournamentManager:
        if self.manager is None:
            if self.path is None:
                raise NotFoundException(
                    "No tournament loaded; run 'create' or pass --file"
                )
            self.manager = TournamentManager.from_dict(load_snapshot(self.path))
        return self.manager

    def save(self) -> None:
        if self.path is not None and self.manager is not None:
            self.path = save_snapshot(self.path, self.manager.to_dict())


# ========== Output ==========


def print_banner():
    """Print the application banner."""
    banner = f"""
{Colors.OKBLUE}╔═══════════════════════════════════════════════════════════════╗
║                                                               ║
║                    BRACKET ENGINE - CONSOLE                   ║
║                                                               ║
╚═══════════════════════════════════════════════════════════════╝{Colors.ENDC}

Type {Colors.BOLD}/help{Colors.ENDC} to see all available commands
Type {Colors.BOLD}exit{Colors.ENDC} or {Colors.BOLD}quit{Colors.ENDC} to leave interactive mode
"""
    print(banner)


def print_commands_list():
    """Print list of all available commands."""
    print(f"\n{Colors.BOLD}Available Commands:{Colors.ENDC}\n")
    for cmd, info in COMMANDS.items():
        print(f"  {Colors.OKGREEN}{cmd:15}{Colors.ENDC} - {info['description']}")
    print()


def print_command_help(command: str):
    """Print detailed help for a specific command."""
    if command not in COMMANDS:
        print(f"{Colors.FAIL}Unknown command: {command}{Colors.ENDC}")
        print_commands_list()
        return

    cmd_info = COMMANDS[command]
    print(f"\n{Colors.BOLD}{Colors.OKBLUE}Command: {command}{Colors.ENDC}")
    print(f"{Colors.BOLD}Description:{Colors.ENDC} {cmd_info['description']}\n")

    if cmd_info["options"]:
        print(f"{Colors.BOLD}Options:{Colors.ENDC}")
        for option, description in cmd_info["options"].items():
            print(f"  {Colors.OKCYAN}{option:20}{Colors.ENDC} {description}")
    print()


def report(result: OperationResult) -> int:
    """Print an operation outcome and turn it into an exit code."""
    if result:
        if result.message:
            print(f"{Colors.OKGREEN}{result.message}{Colors.ENDC}")
        if result.new_matches:
            print(f"{len(result.new_matches)} new matches generated")
        return 0
    kind = result.error_kind.value if result.error_kind else "error"
    print(f"{Colors.FAIL}[{kind}] {result.message}{Colors.ENDC}")
    return 1


def short_id(match: Match) -> str:
    return match.id[:SHORT_ID_LENGTH]


def format_match(match: Match) -> str:
    label = match.display_name
    if match.is_grand_final_reset:
        label = "Reset"
    elif match.is_grand_final:
        label = "Grand Final"
    players = f"{match.player1 or '-'} vs {match.player2 or '-'}"
    line = f"  [{short_id(match)}] {label:12} {players:40} {match.status.value}"
    if match.is_complete and match.winner:
        line += f"  {Colors.OKGREEN}{match.winner}{Colors.ENDC}"
        if not match.is_bye:
            line += f" ({match.score_display})"
    if match.assigned_device_id and not match.is_complete:
        line += f"  @{match.assigned_device_id}"
    return line


def print_tournament(tournament: Tournament, stage: Optional[TournamentStage] = None):
    completed, total = tournament.progress
    print(
        f"\n{Colors.BOLD}{tournament.name}{Colors.ENDC} "
        f"({tournament.tournament_type.display_name}) "
        f"room {format_room_code(tournament.room_code)}"
    )
    print(
        f"Status: {tournament.status.value}  Stage: "
        f"{tournament.current_stage.display_name}  Progress: {completed}/{total}"
    )
    if tournament.winner:
        print(f"{Colors.OKGREEN}Winner: {tournament.winner}{Colors.ENDC}")

    stages = [stage] if stage else list(TournamentStage)
    for current in stages:
        stage_matches = tournament.matches_in_stage(current)
        if not stage_matches:
            continue
        print(f"\n{Colors.HEADER}== {current.display_name} =={Colors.ENDC}")
        brackets = {m.bracket_type for m in stage_matches}
        for bracket in [b for b in BracketType if b in brackets]:
            rounds = sorted(
                {m.round_number for m in stage_matches if m.bracket_type is bracket}
            )
            for round_number in rounds:
                heading = f"{bracket.value} round {round_number}"
                print(f"{Colors.OKBLUE}{heading}{Colors.ENDC}")
                for match in tournament.matches_in_round(
                    round_number, current, bracket
                ):
                    print(format_match(match))
    print()


def resolve_match_id(tournament: Tournament, token: str) -> str:
    """Accept a full match id or a unique prefix of one."""
    candidates = [m.id for m in tournament.matches if m.id.startswith(token)]
    if len(candidates) != 1:
        raise MatchNotFoundException(
            f"'{token}' matches {len(candidates)} matches; use a longer id"
        )
    return candidates[0]


# ========== Commands ==========


def run_create_command(args: argparse.Namespace, session: Session) -> int:
    generation = Generation(args.generation)
    match_type = (
        MatchType(args.match_type) if args.match_type else generation.default_match_type
    )
    config = TournamentConfig(
        generation=generation,
        match_type=match_type,
        best_of=BestOf(args.best_of),
        own_finish_enabled=args.own_finish,
    )
    stage_config = StageConfig(
        is_multi_stage=args.multi_stage,
        finals_type=TournamentType(args.finals_type),
        finals_size=args.finals_size,
    )
    rng = random.Random(args.seed) if args.seed is not None else None
    tournament = Tournament.create(
        name=args.name,
        players=args.players,
        tournament_type=TournamentType(args.type),
        config=config,
        stage_config=stage_config,
        room_code=args.room_code,
        shuffle=args.shuffle,
        rng=rng,
    )
    session.manager = TournamentManager(tournament)
    session.save()
    print_tournament(tournament)
    return 0


def run_show_command(args: argparse.Namespace, session: Session) -> int:
    stage = TournamentStage(args.stage) if args.stage else None
    print_tournament(session.require_manager().tournament, stage)
    return 0


def run_devices_command(args: argparse.Namespace, session: Session) -> int:
    manager = session.require_manager()
    if not manager.devices:
        print("No scoreboards connected")
    for device in manager.devices.values():
        current = (device.current_match_id or "-")[:SHORT_ID_LENGTH]
        print(
            f"  {device.id:20} {device.device_name:20} {device.status.value:10} "
            f"{current}  last seen {device.last_seen.isoformat(timespec='seconds')}"
        )
    return 0


def run_register_command(args: argparse.Namespace, session: Session) -> int:
    code = report(session.require_manager().register_device(args.device, args.name))
    session.save()
    return code


def run_remove_command(args: argparse.Namespace, session: Session) -> int:
    code = report(session.require_manager().remove_device(args.device))
    session.save()
    return code


def run_assign_command(args: argparse.Namespace, session: Session) -> int:
    manager = session.require_manager()
    match_id = resolve_match_id(manager.tournament, args.match)
    code = report(manager.assign_match(match_id, args.device))
    if code == 0:
        configuration = manager.tournament.match_configuration(match_id)
        print(
            f"  {configuration.player1_name} vs {configuration.player2_name}: "
            f"{configuration.generation.value}, {configuration.match_type.value}, "
            f"{configuration.best_of.value}"
        )
    session.save()
    return code


def run_unassign_command(args: argparse.Namespace, session: Session) -> int:
    manager = session.require_manager()
    match_id = resolve_match_id(manager.tournament, args.match)
    code = report(manager.unassign_match(match_id))
    session.save()
    return code


def run_start_command(args: argparse.Namespace, session: Session) -> int:
    manager = session.require_manager()
    code = report(manager.start_match(resolve_match_id(manager.tournament, args.match)))
    session.save()
    return code


def run_submit_command(args: argparse.Namespace, session: Session) -> int:
    manager = session.require_manager()
    match_id = resolve_match_id(manager.tournament, args.match)
    match = manager.tournament.get_match(match_id)
    submission = PendingScoreSubmission(
        match_id=match.id,
        device_id=args.device or match.assigned_device_id or "",
        winner=args.winner,
        player1_final_score=args.score1,
        player2_final_score=args.score2,
        player1_set_wins=args.sets1,
        player2_set_wins=args.sets2,
    )
    code = report(manager.receive_submission(submission))
    session.save()
    return code


def run_approve_command(args: argparse.Namespace, session: Session) -> int:
    manager = session.require_manager()
    code = report(manager.approve(resolve_match_id(manager.tournament, args.match)))
    if manager.tournament.is_complete:
        winner = manager.tournament.winner
        print(f"{Colors.BOLD}Tournament complete: {winner}{Colors.ENDC}")
    session.save()
    return code


def run_reject_command(args: argparse.Namespace, session: Session) -> int:
    manager = session.require_manager()
    match_id = resolve_match_id(manager.tournament, args.match)
    code = report(manager.reject(match_id, args.reason))
    session.save()
    return code


def run_pending_command(args: argparse.Namespace, session: Session) -> int:
    manager = session.require_manager()
    if not manager.has_pending_submissions:
        print("No scores awaiting approval")
    for submission in manager.pending_submissions:
        match = manager.tournament.get_match(submission.match_id)
        print(
            f"  [{short_id(match)}] {match.display_name:8} {submission.winner} wins "
            f"{submission.player1_final_score}-{submission.player2_final_score} "
            f"(from {submission.device_id})"
        )
    return 0


def run_standings_command(args: argparse.Namespace, session: Session) -> int:
    tournament = session.require_manager().tournament
    stage = TournamentStage(args.stage) if args.stage else TournamentStage.MAIN
    standings = tournament.standings(stage)
    if not standings:
        print(f"{stage.display_name} has no standings")
        return 0

    print(f"\n{Colors.BOLD}{stage.display_name} standings{Colors.ENDC}")
    for rank, standing in enumerate(standings, start=1):
        if tournament.format_for_stage(stage) is TournamentType.SWISS:
            detail = (
                f"{standing.points:4.1f} pts  "
                f"Buchholz {standing.buchholz_score:5.1f}"
            )
        else:
            detail = f"diff {standing.point_differential:+d}"
        print(
            f"  {rank:3}. {standing.player_name:24} "
            f"{standing.wins}-{standing.losses}  {detail}"
        )
    print()
    return 0


def run_simulate_command(args: argparse.Namespace, session: Session) -> int:
    config = SimulationConfig(
        tournament_type=TournamentType(args.type),
        num_players=args.players,
        seed=args.seed,
        num_devices=args.devices,
        reject_rate=args.reject_rate,
        stage_config=StageConfig(
            is_multi_stage=args.multi_stage,
            finals_type=TournamentType(args.finals_type),
            finals_size=args.finals_size,
        ),
    )
    print(f"\n{Colors.BOLD}Simulating tournament...{Colors.ENDC}")
    simulator = TournamentSimulator(config)
    manager = simulator.run()
    print_tournament(manager.tournament)
    print(f"Submissions: {simulator.submissions}, rejected: {simulator.rejections}")

    session.manager = manager
    if args.output:
        session.path = Path(args.output)
    session.save()
    return 0


def run_save_command(args: argparse.Namespace, session: Session) -> int:
    session.require_manager()
    session.path = Path(args.path)
    session.save()
    print(f"Saved to {session.path}")
    return 0


def run_load_command(args: argparse.Namespace, session: Session) -> int:
    session.path = Path(args.path)
    session.manager = None
    print_tournament(session.require_manager().tournament)
    return 0


# ========== Parsers ==========


def _add_stage_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--multi-stage", action="store_true")
    parser.add_argument(
        "--finals-type",
        choices=FINALS_TYPE_CHOICES,
        default=TournamentType.SINGLE_ELIMINATION.value,
    )
    parser.add_argument(
        "--finals-size",
        type=int,
        choices=VALID_FINALS_SIZES,
        default=DEFAULT_FINALS_SIZE,
    )


def create_main_parser():
    """Create main argument parser."""
    parser = argparse.ArgumentParser(
        prog="bracket-engine",
        description="Run a tournament from the terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Interactive mode
  bracket-engine

  # Create an 8 player double elimination event
  bracket-engine -f cup.json create --type double --players A B C D E F G H

  # Assign, score and approve a match
  bracket-engine -f cup.json register board-1
  bracket-engine -f cup.json assign 3f2a board-1
  bracket-engine -f cup.json submit 3f2a --winner A --score1 4 --score2 2
  bracket-engine -f cup.json approve 3f2a

  # Simulate a Swiss event with top-8 finals
  bracket-engine simulate --type swiss --players 20 --multi-stage --seed 7
        """,
    )

    parser.add_argument(
        "--interactive", "-i", action="store_true", help="Start in interactive mode"
    )
    parser.add_argument("--file", "-f", help="Tournament snapshot (JSON)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    create_parser = subparsers.add_parser("create", help="Create a tournament")
    create_parser.add_argument("--name", default="Tournament")
    create_parser.add_argument(
        "--type", choices=TYPE_CHOICES, default=TournamentType.SINGLE_ELIMINATION.value
    )
    create_parser.add_argument("--players", nargs="+", required=True)
    create_parser.add_argument("--shuffle", action="store_true")
    create_parser.add_argument("--seed", type=int)
    create_parser.add_argument("--room-code")
    create_parser.add_argument(
        "--generation",
        choices=[g.value for g in Generation],
        default=Generation.X.value,
    )
    create_parser.add_argument("--match-type", choices=[m.value for m in MatchType])
    create_parser.add_argument(
        "--best-of", choices=[b.value for b in BestOf], default=BestOf.NONE.value
    )
    create_parser.add_argument("--own-finish", action="store_true")
    _add_stage_options(create_parser)
    create_parser.set_defaults(func=run_create_command)

    show_parser = subparsers.add_parser("show", help="Show the tournament")
    show_parser.add_argument("--stage", choices=STAGE_CHOICES)
    show_parser.set_defaults(func=run_show_command)

    devices_parser = subparsers.add_parser("devices", help="List scoreboards")
    devices_parser.set_defaults(func=run_devices_command)

    register_parser = subparsers.add_parser("register", help="Connect a scoreboard")
    register_parser.add_argument("device")
    register_parser.add_argument("--name")
    register_parser.set_defaults(func=run_register_command)

    remove_parser = subparsers.add_parser("remove", help="Disconnect a scoreboard")
    remove_parser.add_argument("device")
    remove_parser.set_defaults(func=run_remove_command)

    assign_parser = subparsers.add_parser("assign", help="Assign a match")
    assign_parser.add_argument("match")
    assign_parser.add_argument("device")
    assign_parser.set_defaults(func=run_assign_command)

    unassign_parser = subparsers.add_parser("unassign", help="Unassign a match")
    unassign_parser.add_argument("match")
    unassign_parser.set_defaults(func=run_unassign_command)

    start_parser = subparsers.add_parser("start", help="Start a match")
    start_parser.add_argument("match")
    start_parser.set_defaults(func=run_start_command)

    submit_parser = subparsers.add_parser("submit", help="Submit a score")
    submit_parser.add_argument("match")
    submit_parser.add_argument("--device")
    submit_parser.add_argument("--winner", required=True)
    submit_parser.add_argument("--score1", type=int, default=0)
    submit_parser.add_argument("--score2", type=int, default=0)
    submit_parser.add_argument("--sets1", type=int, default=0)
    submit_parser.add_argument("--sets2", type=int, default=0)
    submit_parser.set_defaults(func=run_submit_command)

    approve_parser = subparsers.add_parser("approve", help="Approve a score")
    approve_parser.add_argument("match")
    approve_parser.set_defaults(func=run_approve_command)

    reject_parser = subparsers.add_parser("reject", help="Reject a score")
    reject_parser.add_argument("match")
    reject_parser.add_argument("--reason")
    reject_parser.set_defaults(func=run_reject_command)

    pending_parser = subparsers.add_parser("pending", help="List pending scores")
    pending_parser.set_defaults(func=run_pending_command)

    standings_parser = subparsers.add_parser("standings", help="Show standings")
    standings_parser.add_argument("--stage", choices=STAGE_CHOICES)
    standings_parser.set_defaults(func=run_standings_command)

    sim_parser = subparsers.add_parser("simulate", help="Simulate a tournament")
    sim_parser.add_argument(
        "--type", choices=TYPE_CHOICES, default=TournamentType.SINGLE_ELIMINATION.value
    )
    sim_parser.add_argument("--players", type=int, default=8)
    sim_parser.add_argument("--seed", type=int)
    sim_parser.add_argument("--devices", type=int, default=2)
    sim_parser.add_argument("--reject-rate", type=float, default=0.0)
    sim_parser.add_argument("--output")
    _add_stage_options(sim_parser)
    sim_parser.set_defaults(func=run_simulate_command)

    save_parser = subparsers.add_parser("save", help="Save the session")
    save_parser.add_argument("path")
    save_parser.set_defaults(func=run_save_command)

    load_parser = subparsers.add_parser("load", help="Load a snapshot")
    load_parser.add_argument("path")
    load_parser.set_defaults(func=run_load_command)

    return parser


def run_command(args: argparse.Namespace, session: Session) -> int:
    """Run a parsed subcommand, reporting engine errors instead of raising."""
    try:
        return args.func(args, session)
    except BracketEngineException as e:
        print(f"{Colors.FAIL}Error: {e}{Colors.ENDC}")
        logger.debug(f"Command {args.command} failed: {e}")
        return 1


# ========== Modes ==========


def create_completer():
    """Create autocomplete completer for interactive mode."""
    # Support both "/command" and "command" formats
    completions = {}
    for cmd, info in COMMANDS.items():
        options_completer = (
            WordCompleter(list(info["options"].keys())) if info["options"] else None
        )
        completions[cmd] = options_completer
        completions[f"/{cmd}"] = options_completer

    completions["/help"] = None
    completions["/list"] = None

    return NestedCompleter.from_nested_dict(completions)


def run_interactive_mode(session: Optional[Session] = None) -> int:
    """Run in interactive mode with autocomplete."""
    session = session or Session()
    parser = create_main_parser()
    print_banner()

    style = Style.from_dict(
        {
            "prompt": "#00aa00 bold",
        }
    )
    prompt = PromptSession(
        completer=create_completer(),
        history=InMemoryHistory(),
        style=style,
    )

    while True:
        try:
            user_input = prompt.prompt("bracket-engine> ").strip()

            if not user_input:
                continue

            if user_input in ["exit", "quit", "q"]:
                print(f"\n{Colors.OKGREEN}Goodbye!{Colors.ENDC}\n")
                break

            if user_input in ["/help", "help", "?", "/list"]:
                print_commands_list()
                continue

            if user_input.startswith("/help ") or user_input.startswith("help "):
                print_command_help(user_input.split()[1].lstrip("/"))
                continue

            parts = shlex.split(user_input)
            command = parts[0].lstrip("/")
            if command not in COMMANDS:
                print(f"{Colors.FAIL}Unknown command: {command}{Colors.ENDC}")
                print(f"Type {Colors.BOLD}/help{Colors.ENDC} to see available commands")
                continue

            try:
                args = parser.parse_args([command] + parts[1:])
            except SystemExit:
                # argparse calls sys.exit on error, catch it
                continue
            run_command(args, session)

        except ValueError as e:
            # Unbalanced quotes from shlex
            print(f"{Colors.FAIL}Error: {e}{Colors.ENDC}")
        except KeyboardInterrupt:
            print(f"\n{Colors.WARNING}Use 'exit' or 'quit' to leave{Colors.ENDC}")
        except EOFError:
            print(f"\n{Colors.OKGREEN}Goodbye!{Colors.ENDC}\n")
            break

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the bracket-engine CLI."""
    parser = create_main_parser()
    args = parser.parse_args(argv)
    session = Session(args.file)

    # If no command, start interactive mode
    if args.interactive or not args.command:
        if session.path is not None and session.path.exists():
            session.require_manager()
        return run_interactive_mode(session)

    return run_command(args, session)


if __name__ == "__main__":
    sys.exit(main())
