import random
from typing import Any, Callable, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from exercises.base import (
    parse_index_list,
    parse_letter_input,
    parse_true_false,
    parse_word_choices,
)
from exercises.validator import map_display_matches
from models import (
    Exercise,
    FillInBlankExercise,
    LevelOutcome,
    MatchingExercise,
    QuizExercise,
    SortingExercise,
    TrueFalseExercise,
)
from ui.components import (
    ExercisePanel,
    FeedbackPanel,
    LevelResultPanel,
    LevelTable,
)
from ui.styles import (
    DEFAULT_THEME,
    SUCCESS_GREEN,
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
)

QUIT = "q"


class QuizUI:
    """Main UI orchestrator for the RSE quiz terminal host."""

    def __init__(
        self,
        console: Optional[Console] = None,
        rng: Optional[random.Random] = None,
    ):
        self.console = console or Console(theme=DEFAULT_THEME)
        self.rng = rng or random.Random()

    def ask_answer(
        self,
        exercise: Exercise,
        exercise_number: int,
        total_exercises: int,
        lives: int,
        max_lives: int,
    ) -> Optional[Any]:
        """Display an exercise and read a typed answer payload.

        Returns:
            The answer payload for the exercise kind, or None if the user quits.
        """
        lines, hint, parse = self._describe(exercise)
        panel = ExercisePanel(
            type_name=exercise.type_name,
            prompt_text=self._prompt_text(exercise),
            lines=lines,
            hint=hint,
            exercise_number=exercise_number,
            total_exercises=total_exercises,
            lives=lives,
            max_lives=max_lives,
        )
        self.console.print(panel)
        self.console.print()
        return self._read(parse, hint)

    def _prompt_text(self, exercise: Exercise) -> str:
        if isinstance(exercise, FillInBlankExercise):
            return exercise.display_sentence()
        return exercise.main_text

    def _describe(
        self, exercise: Exercise
    ) -> tuple[List[str], str, Callable[[str], Optional[Any]]]:
        """Return display lines, input hint and input parser for an exercise."""
        if isinstance(exercise, QuizExercise):
            lines = [
                f"{chr(65 + i)}. {option}" for i, option in enumerate(exercise.options)
            ]
            last = chr(64 + len(exercise.options))
            return (
                lines,
                f"Type A-{last} (or 'q' to quit)",
                lambda s: parse_letter_input(s, len(exercise.options)),
            )

        if isinstance(exercise, TrueFalseExercise):
            return (
                ["V. Vrai", "F. Faux"],
                "Type V or F (or 'q' to quit)",
                parse_true_false,
            )

        if isinstance(exercise, FillInBlankExercise):
            lines = [f"{i + 1}. {word}" for i, word in enumerate(exercise.word_options)]
            return (
                lines,
                f"Enter {exercise.blank_count} word(s) or numbers, comma-separated",
                lambda s: parse_word_choices(
                    s, exercise.word_options, exercise.blank_count
                ),
            )

        if isinstance(exercise, SortingExercise):
            lines = ["Categories:"]
            lines += [
                f"  {i + 1}. {category.name}"
                for i, category in enumerate(exercise.categories)
            ]
            lines.append("Items:")
            lines += [f"  - {item.name}" for item in exercise.items]
            return (
                lines,
                f"Enter a category number for each of the {exercise.item_count} items",
                lambda s: parse_index_list(
                    s, exercise.item_count, exercise.category_count
                ),
            )

        if isinstance(exercise, MatchingExercise):
            right_items, permutation = exercise.shuffled_right_items(self.rng)
            lines = [f"{exercise.left_column_header}:"]
            lines += [
                f"  {i + 1}. {item}" for i, item in enumerate(exercise.left_items())
            ]
            lines.append(f"{exercise.right_column_header}:")
            lines += [f"  {i + 1}. {item}" for i, item in enumerate(right_items)]

            def parse_matches(s: str) -> Optional[dict[int, int]]:
                picks = parse_index_list(s, exercise.pair_count, exercise.pair_count)
                if picks is None:
                    return None
                return map_display_matches(dict(enumerate(picks)), permutation)

            return (
                lines,
                f"For each {exercise.left_column_header.lower()} entry, "
                f"enter the matching number",
                parse_matches,
            )

        raise TypeError(f"Unsupported exercise type: {type(exercise).__name__}")

    def _read(self, parse: Callable[[str], Optional[Any]], hint: str) -> Optional[Any]:
        """Read input until it parses, or the user quits."""
        while True:
            user_input = self.console.input(
                Text("Your answer: ", style=f"bold {MUTED_GRAY}")
            ).strip()

            if user_input.lower() == QUIT:
                return None

            answer = parse(user_input)
            if answer is not None:
                return answer

            self.console.print(Text(f"{hint}\n", style=ERROR_RED))

    def show_feedback(
        self,
        is_correct: bool,
        correct_answer: str,
        explanation: Optional[str] = None,
        lives: int = 0,
        max_lives: int = 0,
    ) -> None:
        """Display feedback for the user's answer."""
        feedback = FeedbackPanel(
            is_correct=is_correct,
            correct_answer=correct_answer,
            explanation=explanation,
            lives=lives,
            max_lives=max_lives,
        )
        self.console.print(feedback)
        self.console.print()

    def show_level_result(self, outcome: LevelOutcome, has_next_level: bool) -> None:
        """Display the victory or game-over screen."""
        self.console.print(LevelResultPanel(outcome, has_next_level))

    def show_levels(self, table: LevelTable) -> None:
        self.console.print(table)

    def show_error(self, message: str) -> None:
        """Display an error message."""
        self.console.print(
            Panel(
                Text(f"Error: {message}", style=ERROR_RED),
                title="Error",
                border_style=ERROR_RED,
            )
        )

    def show_info(self, message: str) -> None:
        """Display an informational message."""
        self.console.print(Text(message, style=INFO_BLUE))

    def show_success(self, message: str) -> None:
        """Display a success message."""
        self.console.print(Text(message, style=SUCCESS_GREEN))

    def show_quit_message(self) -> None:
        """Display the quit message."""
        self.console.print()
        self.console.print(
            Text("Goodbye! Your progress has been saved.", style=MUTED_GRAY)
        )

    def clear_screen(self) -> None:
        """Clear the terminal screen."""
        self.console.clear()

    def wait_for_continue(self) -> None:
        """Wait for user to press Enter to continue."""
        self.console.input(
            Text("Press Enter to continue...", style=f"bold {MUTED_GRAY}")
        )
