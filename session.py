"""Level session state machine.

A session walks one play-through of a level:

    NOT_STARTED -> IN_PROGRESS -> COMPLETED | FAILED

``submit_answer`` and ``advance`` are separate calls so the presentation
layer can show feedback for as long as it likes in between. The session is
not thread-safe; a caller sharing one across threads must serialize access.
"""

import logging
import time
from enum import Enum
from typing import Any, Callable

from pydantic import BaseModel

from errors import InvalidStateError
from exercises.validator import validate
from models import Exercise, LevelDefinition, LevelOutcome

logger = logging.getLogger(__name__)

DEFAULT_MAX_LIVES = 3
DEFAULT_POINTS_PER_LIFE = 100
DEFAULT_TWO_STAR_RATIO = 0.66


class SessionStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


def calculate_stars(
    lives_remaining: int,
    max_lives: int,
    two_star_ratio: float = DEFAULT_TWO_STAR_RATIO,
) -> int:
    """Stars earned on completion, from the share of lives kept.

    3 stars with every life left, 2 when at least ``two_star_ratio`` of them
    are left, otherwise 1.
    """
    ratio = lives_remaining / max_lives
    if ratio >= 1.0:
        return 3
    if ratio >= two_star_ratio:
        return 2
    return 1


def calculate_score(
    lives_remaining: int, points_per_life: int = DEFAULT_POINTS_PER_LIFE
) -> int:
    """End-of-level score: a fixed amount per remaining life."""
    return lives_remaining * points_per_life


class AnswerResult(BaseModel):
    """Outcome of one submission."""

    exercise_id: int
    is_correct: bool
    lives_remaining: int
    status: SessionStatus


AnswerListener = Callable[[Exercise, bool], Any]
AdvanceListener = Callable[[int, float], Any]
FinishListener = Callable[[LevelOutcome], Any]


class LevelSession:
    """Tracks cursor, lives and score for one play-through of a level."""

    def __init__(
        self,
        points_per_life: int = DEFAULT_POINTS_PER_LIFE,
        two_star_ratio: float = DEFAULT_TWO_STAR_RATIO,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.points_per_life = points_per_life
        self.two_star_ratio = two_star_ratio
        self._clock = clock

        self._level: LevelDefinition | None = None
        self._status = SessionStatus.NOT_STARTED
        self._cursor = 0
        self._max_lives = DEFAULT_MAX_LIVES
        self._lives = DEFAULT_MAX_LIVES
        self._score = 0
        self._stars = 0
        self._answered = False
        self._started_at: float | None = None
        self._elapsed: float | None = None

        self._answer_listeners: list[AnswerListener] = []
        self._advance_listeners: list[AdvanceListener] = []
        self._finish_listeners: list[FinishListener] = []

    # ------------------------------------------------------------------
    # Event sink
    # ------------------------------------------------------------------

    def on_answer_submitted(self, listener: AnswerListener) -> None:
        """Register ``listener(exercise, is_correct)``."""
        self._answer_listeners.append(listener)

    def on_exercise_advanced(self, listener: AdvanceListener) -> None:
        """Register ``listener(cursor, progress)``."""
        self._advance_listeners.append(listener)

    def on_finished(self, listener: FinishListener) -> None:
        """Register ``listener(outcome)``, called once per terminal state."""
        self._finish_listeners.append(listener)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def level(self) -> LevelDefinition | None:
        return self._level

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def lives(self) -> int:
        return self._lives

    @property
    def max_lives(self) -> int:
        return self._max_lives

    @property
    def score(self) -> int:
        return self._score

    @property
    def stars(self) -> int:
        return self._stars

    @property
    def is_finished(self) -> bool:
        return self._status in (SessionStatus.COMPLETED, SessionStatus.FAILED)

    @property
    def awaiting_advance(self) -> bool:
        """True once the current exercise has been answered."""
        return self._answered

    @property
    def progress(self) -> float:
        """Fraction of exercises passed, from 0.0 to 1.0."""
        if self._level is None or not self._level.exercises:
            return 0.0
        return self._cursor / len(self._level.exercises)

    @property
    def current_exercise(self) -> Exercise:
        self._require_in_progress("read the current exercise")
        return self._level.exercises[self._cursor]

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start(self, level: LevelDefinition, max_lives: int = DEFAULT_MAX_LIVES) -> None:
        """Begin a play-through.

        Raises:
            InvalidStateError: If the session was already started.
            ValueError: If max_lives < 1 or the level has no exercises.
        """
        if self._status != SessionStatus.NOT_STARTED:
            raise InvalidStateError("start", self._status.value)
        if max_lives < 1:
            raise ValueError(f"max_lives must be at least 1, got {max_lives}")
        if not level.exercises:
            raise ValueError(f"Level {level.level_id} has no exercises")

        self._level = level
        self._max_lives = max_lives
        self._reset()
        logger.info(
            "Level %d started with %d exercises and %d lives",
            level.level_id,
            level.exercise_count,
            max_lives,
        )

    def restart(self) -> None:
        """Start the same level over with full lives.

        Raises:
            InvalidStateError: If the session was never started.
        """
        if self._level is None:
            raise InvalidStateError("restart", self._status.value)
        logger.info("Restarting level %d", self._level.level_id)
        self._reset()

    def submit_answer(self, answer: Any) -> AnswerResult:
        """Validate an answer for the current exercise.

        A wrong answer costs a life; losing the last one fails the session.

        Raises:
            InvalidStateError: If the session is not in progress, or the
                current exercise was already answered.
        """
        self._require_in_progress("submit an answer")
        if self._answered:
            raise InvalidStateError(
                "submit an answer",
                self._status.value,
                f"exercise {self._cursor} already answered, call advance()",
            )

        exercise = self._level.exercises[self._cursor]
        is_correct = validate(exercise, answer)
        self._answered = True

        if is_correct:
            logger.debug("Exercise %d answered correctly", exercise.id)
        else:
            self._lives -= 1
            logger.info("Wrong answer! Lives remaining: %d", self._lives)
            if self._lives <= 0:
                self._lives = 0
                self._finish(SessionStatus.FAILED)

        for listener in self._answer_listeners:
            listener(exercise, is_correct)
        if self._status == SessionStatus.FAILED:
            self._notify_finished()

        return AnswerResult(
            exercise_id=exercise.id,
            is_correct=is_correct,
            lives_remaining=self._lives,
            status=self._status,
        )

    def advance(self) -> int:
        """Move to the next exercise; past the last one the level is won.

        Returns:
            The new cursor.

        Raises:
            InvalidStateError: If not in progress or the current exercise has
                not been answered yet.
        """
        self._require_in_progress("advance")
        if not self._answered:
            raise InvalidStateError(
                "advance",
                self._status.value,
                f"exercise {self._cursor} has not been answered",
            )

        self._cursor += 1
        self._answered = False
        completed = self._cursor >= len(self._level.exercises)
        if completed:
            self._score = calculate_score(self._lives, self.points_per_life)
            self._stars = calculate_stars(
                self._lives, self._max_lives, self.two_star_ratio
            )
            self._finish(SessionStatus.COMPLETED)

        for listener in self._advance_listeners:
            listener(self._cursor, self.progress)
        if completed:
            self._notify_finished()

        return self._cursor

    def outcome(self) -> LevelOutcome:
        """Summary of a finished session.

        Raises:
            InvalidStateError: If the session has not reached a terminal state.
        """
        if not self.is_finished:
            raise InvalidStateError("read the outcome", self._status.value)
        return LevelOutcome(
            level_id=self._level.level_id,
            won=self._status == SessionStatus.COMPLETED,
            lives_remaining=self._lives,
            max_lives=self._max_lives,
            score=self._score,
            stars=self._stars,
            elapsed_seconds=self._elapsed,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _reset(self) -> None:
        self._status = SessionStatus.IN_PROGRESS
        self._cursor = 0
        self._lives = self._max_lives
        self._score = 0
        self._stars = 0
        self._answered = False
        self._started_at = self._clock()
        self._elapsed = None

    def _require_in_progress(self, operation: str) -> None:
        if self._status != SessionStatus.IN_PROGRESS:
            raise InvalidStateError(operation, self._status.value)

    def _finish(self, status: SessionStatus) -> None:
        self._status = status
        self._elapsed = self._clock() - self._started_at
        if status == SessionStatus.COMPLETED:
            logger.info(
                "Level %d completed: score %d, %d star(s)",
                self._level.level_id,
                self._score,
                self._stars,
            )
        else:
            logger.info("No more lives! Level %d failed", self._level.level_id)

    def _notify_finished(self) -> None:
        outcome = self.outcome()
        for listener in self._finish_listeners:
            listener(outcome)
