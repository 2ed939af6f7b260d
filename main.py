import argparse
import logging
import random
import signal
import sys
from pathlib import Path

from rich.console import Console

from config import Settings, configure_logging, get_settings
from errors import LevelNotFoundError, ParseError
from exercises import correct_answer_text, load_catalog, load_level
from models import Exercise, LevelOutcome, MatchingExercise
from progression import ProgressionStore
from session import LevelSession
from storage import get_preferences_repo
from ui import LevelTable, QuizUI
from ui.styles import DEFAULT_THEME

logger = logging.getLogger(__name__)


def create_parser(settings: Settings) -> argparse.ArgumentParser:
    """Create argument parser with subcommands."""
    parser = argparse.ArgumentParser(description="RSE Quiz")
    parser.add_argument(
        "--levels",
        type=Path,
        default=settings.levels_path,
        help=f"Level catalog JSON file (default: {settings.levels_path})",
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=settings.db_path,
        help=f"Progress database path (default: {settings.db_path})",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Play subcommand
    play_parser = subparsers.add_parser("play", help="Play a level")
    play_parser.add_argument("level_id", type=int, help="Level to play")
    play_parser.add_argument(
        "--unlocked",
        action="store_true",
        help="Allow playing a level that is still locked",
    )
    play_parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for matching column order",
    )

    subparsers.add_parser("levels", help="List levels and progression")
    subparsers.add_parser("check", help="Parse the catalog and report exercise counts")
    subparsers.add_parser("reset", help="Erase all progression")

    return parser


def create_sigint_handler(ui: QuizUI):
    """Create a SIGINT handler that exits cleanly.

    Progression is written through on every win, so nothing is pending.
    """

    def sigint_handler(signum, frame):
        ui.show_quit_message()
        sys.exit(0)

    return sigint_handler


def run_play(args, settings: Settings) -> int:
    """Run the play subcommand."""
    console = Console(theme=DEFAULT_THEME)
    ui = QuizUI(console, rng=random.Random(args.seed))
    progression = ProgressionStore(get_preferences_repo(args.db))

    if not args.unlocked and not progression.is_unlocked(args.level_id):
        ui.show_error(
            f"Level {args.level_id} is locked. "
            f"Highest unlocked level: {progression.get_highest_unlocked()}"
        )
        return 1

    try:
        level = load_level(args.levels, args.level_id)
    except (LevelNotFoundError, ParseError) as e:
        ui.show_error(str(e))
        return 1

    session = LevelSession(
        points_per_life=settings.points_per_life,
        two_star_ratio=settings.two_star_ratio,
    )

    def on_answer(exercise: Exercise, is_correct: bool) -> None:
        ui.show_feedback(
            is_correct,
            correct_answer_text(exercise),
            exercise.explanation or None,
            lives=session.lives,
            max_lives=session.max_lives,
        )

    def on_finished(outcome: LevelOutcome) -> None:
        progression.record_outcome(outcome)
        ui.show_level_result(
            outcome, has_next_level=progression.has_next_level(outcome.level_id)
        )

    session.on_answer_submitted(on_answer)
    session.on_finished(on_finished)

    signal.signal(signal.SIGINT, create_sigint_handler(ui))

    session.start(level, max_lives=settings.max_lives)
    ui.clear_screen()
    ui.show_info(f"Level {level.level_id}: {level.theme}")

    while not session.is_finished:
        exercise = session.current_exercise
        if isinstance(exercise, MatchingExercise) and not settings.shuffle_matching:
            exercise = exercise.model_copy(update={"shuffle_right_column": False})

        answer = ui.ask_answer(
            exercise,
            exercise_number=session.cursor + 1,
            total_exercises=level.exercise_count,
            lives=session.lives,
            max_lives=session.max_lives,
        )
        if answer is None:
            ui.show_quit_message()
            return 0

        result = session.submit_answer(answer)
        logger.debug("Exercise %d done, correct=%s", result.exercise_id, result.is_correct)
        if session.is_finished:
            break

        ui.wait_for_continue()
        session.advance()
        if not session.is_finished:
            ui.clear_screen()

    return 0


def run_levels(args) -> int:
    """Run the levels subcommand."""
    console = Console(theme=DEFAULT_THEME)
    ui = QuizUI(console)
    try:
        catalog = load_catalog(args.levels)
    except ParseError as e:
        ui.show_error(str(e))
        return 1

    progression = ProgressionStore(get_preferences_repo(args.db))
    record = progression.load_record(catalog.level_ids())
    rows = [
        (level.level_id, level.theme, level.exercise_count) for level in catalog.levels
    ]
    ui.show_levels(LevelTable(rows, record))

    if catalog.levels and progression.is_all_complete(catalog.level_ids()):
        ui.show_success("Every level completed with 3 stars!")
    return 0


def run_check(args) -> int:
    """Run the check subcommand: parse the catalog and print a report."""
    console = Console(theme=DEFAULT_THEME)
    try:
        catalog = load_catalog(args.levels)
    except ParseError as e:
        console.print(f"Error: {e}", style="error")
        return 1

    if not catalog.levels:
        console.print("No levels found.", style="error")
        return 1

    status = 0
    for level in catalog.levels:
        if level.exercises:
            console.print(
                f"Level {level.level_id} ({level.theme}): "
                f"{level.exercise_count} exercise(s)"
            )
            for kind, count in level.type_stats().items():
                console.print(f"  {kind.wire_name}: {count}")
        else:
            console.print(
                f"Level {level.level_id} ({level.theme}): no playable exercises",
                style="error",
            )
            status = 1
    return status


def run_reset(args) -> int:
    """Run the reset subcommand."""
    console = Console(theme=DEFAULT_THEME)
    ProgressionStore(get_preferences_repo(args.db)).reset_progress()
    console.print("Progress reset.")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point with CLI routing."""
    settings = get_settings()
    parser = create_parser(settings)
    args = parser.parse_args(argv)

    configure_logging("DEBUG" if args.verbose else settings.log_level)

    if args.command == "play":
        return run_play(args, settings)
    elif args.command == "levels":
        return run_levels(args)
    elif args.command == "check":
        return run_check(args)
    elif args.command == "reset":
        return run_reset(args)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
