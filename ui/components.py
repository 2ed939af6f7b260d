from rich.text import Text
from rich.panel import Panel
from rich.table import Table
from rich.style import Style
from rich.align import Align
from rich import box
from typing import Optional, List

from models import LevelOutcome, ProgressionRecord
from ui.styles import (
    RSE_GREEN,
    RSE_GOLD,
    SUCCESS_GREEN,
    ERROR_RED,
    MUTED_GRAY,
    TEXT_WHITE,
    format_lives,
    format_stars,
    get_stars_style,
)


class ExercisePanel:
    """A styled panel for displaying exercise content."""

    def __init__(
        self,
        type_name: str,
        prompt_text: str,
        lines: List[str],
        hint: str,
        exercise_number: int = 0,
        total_exercises: int = 0,
        lives: int = 0,
        max_lives: int = 0,
    ):
        self.type_name = type_name
        self.prompt_text = prompt_text
        self.lines = lines
        self.hint = hint
        self.exercise_number = exercise_number
        self.total_exercises = total_exercises
        self.lives = lives
        self.max_lives = max_lives

    @property
    def progress_percent(self) -> float:
        if self.total_exercises == 0:
            return 0.0
        return (self.exercise_number - 1) / self.total_exercises * 100

    def render(self) -> Panel:
        content = Text()

        if self.total_exercises > 0:
            content.append(self._create_progress_bar(), Style(color=MUTED_GRAY))
            content.append("   ")
            content.append(format_lives(self.lives, self.max_lives))
            content.append("\n")
            content.append(
                f"Exercise {self.exercise_number}/{self.total_exercises}\n\n",
                Style(color=MUTED_GRAY),
            )

        content.append(self.prompt_text, Style(color=RSE_GREEN, bold=True))
        content.append("\n\n")

        for line in self.lines:
            content.append(line, Style(color=TEXT_WHITE))
            content.append("\n")

        return Panel(
            Align.left(content),
            title=self.type_name,
            subtitle=self.hint,
            border_style=RSE_GREEN,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def _create_progress_bar(self) -> str:
        """Create a text-based progress bar."""
        width = 30
        filled = int(width * self.progress_percent / 100)
        remaining = width - filled
        bar = "█" * filled + "░" * remaining
        return f"[{bar}] {self.progress_percent:.0f}%"

    def __rich__(self) -> Panel:
        return self.render()


class FeedbackPanel:
    """A styled panel for displaying exercise feedback."""

    def __init__(
        self,
        is_correct: bool,
        correct_answer: str,
        explanation: Optional[str] = None,
        lives: int = 0,
        max_lives: int = 0,
    ):
        self.is_correct = is_correct
        self.correct_answer = correct_answer
        self.explanation = explanation
        self.lives = lives
        self.max_lives = max_lives

    def render(self) -> Panel:
        content = Text()

        if self.is_correct:
            content.append("✓ ", Style(color=SUCCESS_GREEN, bold=True))
            content.append("Correct!\n", Style(color=SUCCESS_GREEN, bold=True))
        else:
            content.append("✗ ", Style(color=ERROR_RED, bold=True))
            content.append("Not quite!  ", Style(color=ERROR_RED, bold=True))
            content.append(format_lives(self.lives, self.max_lives))
            content.append("\n")

        content.append("\n")
        content.append("Correct answer: ", Style(color=MUTED_GRAY))
        content.append(self.correct_answer, Style(color=SUCCESS_GREEN, bold=True))

        if self.explanation:
            content.append("\n\n")
            content.append("Explanation:\n", Style(color=RSE_GOLD, bold=True))
            content.append(self.explanation, Style(color=TEXT_WHITE))

        return Panel(
            Align.left(content),
            title="Result",
            border_style=SUCCESS_GREEN if self.is_correct else ERROR_RED,
            box=box.HEAVY,
            padding=(1, 2),
        )

    def __rich__(self) -> Panel:
        return self.render()


class LevelResultPanel:
    """Victory or game-over screen for a finished level."""

    def __init__(self, outcome: LevelOutcome, has_next_level: bool = False):
        self.outcome = outcome
        self.has_next_level = has_next_level

    def render(self) -> Panel:
        content = Text()

        if not self.outcome.won:
            content.append("Game Over\n\n", Style(color=ERROR_RED, bold=True))
            content.append(
                "No more lives! Try the level again.", Style(color=MUTED_GRAY)
            )
            return Panel(
                Align.center(content),
                title=f"Level {self.outcome.level_id}",
                border_style=ERROR_RED,
                box=box.HEAVY,
                padding=(2, 3),
            )

        content.append("Level complete!\n\n", Style(color=RSE_GREEN, bold=True))
        content.append(
            format_stars(self.outcome.stars) + "\n\n",
            get_stars_style(self.outcome.stars),
        )

        stats = Table(show_header=False, border_style=MUTED_GRAY, box=box.SIMPLE)
        stats.add_column("Label", style=Style(color=MUTED_GRAY))
        stats.add_column("Value", justify="right")
        stats.add_row(
            "Score", Text(str(self.outcome.score), style=Style(color=RSE_GOLD, bold=True))
        )
        stats.add_row(
            "Lives", format_lives(self.outcome.lives_remaining, self.outcome.max_lives)
        )
        if self.outcome.elapsed_seconds is not None:
            stats.add_row("Time", f"{self.outcome.elapsed_seconds:.1f}s")

        table = Table.grid()
        table.add_row(Align.center(content))
        table.add_row(Align.center(stats))
        if self.has_next_level:
            table.add_row(
                Align.center(Text("Next level unlocked!", Style(color=SUCCESS_GREEN)))
            )

        return Panel(
            table,
            title=f"Level {self.outcome.level_id}",
            border_style=RSE_GOLD,
            box=box.HEAVY,
            padding=(2, 3),
        )

    def __rich__(self) -> Panel:
        return self.render()


class LevelTable:
    """A styled table of catalog levels with the player's progression."""

    def __init__(
        self,
        levels: List[tuple[int, str, int]],
        record: ProgressionRecord,
    ):
        # (level_id, theme, exercise_count)
        self.levels = levels
        self.record = record

    def render(self) -> Panel:
        table = Table(
            show_header=True,
            header_style=Style(color=RSE_GREEN, bold=True),
            border_style=MUTED_GRAY,
            row_styles=[Style(), Style(dim=True)],
            box=box.HEAVY,
        )

        table.add_column("Level", justify="right")
        table.add_column("Theme", style=Style(color=TEXT_WHITE))
        table.add_column("Exercises", justify="right")
        table.add_column("Stars", justify="center")
        table.add_column("Best Time", style=Style(color=MUTED_GRAY))

        for level_id, theme, exercise_count in self.levels:
            if level_id > self.record.highest_unlocked:
                table.add_row(
                    str(level_id),
                    theme,
                    str(exercise_count),
                    Text("locked", style=Style(color=MUTED_GRAY)),
                    "",
                )
                continue

            stars = self.record.stars.get(level_id, 0)
            best_time = self.record.best_times.get(level_id)
            table.add_row(
                str(level_id),
                theme,
                str(exercise_count),
                Text(format_stars(stars), style=get_stars_style(stars)),
                f"{best_time:.1f}s" if best_time is not None else "N/A",
            )

        return Panel(
            Align.center(table),
            title=f"Levels ({self.record.total_stars()} stars)",
            border_style=RSE_GOLD,
            box=box.HEAVY,
            padding=(1, 1),
        )

    def __rich__(self) -> Panel:
        return self.render()
