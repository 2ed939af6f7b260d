import random
import re
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from errors import LevelNotFoundError

PLACEHOLDER_PATTERN = re.compile(r"\{(\d+)\}")


class ExerciseKind(str, Enum):
    QUIZ = "quiz"
    TRUE_FALSE = "true_false"
    FILL_IN_BLANK = "fill_in_blank"
    SORTING = "sorting"
    MATCHING = "matching"

    @property
    def wire_name(self) -> str:
        """Canonical discriminator written back to the level JSON format."""
        return _WIRE_NAMES[self]


_WIRE_NAMES = {
    ExerciseKind.QUIZ: "Quiz",
    ExerciseKind.TRUE_FALSE: "TrueFalse",
    ExerciseKind.FILL_IN_BLANK: "FillInBlank",
    ExerciseKind.SORTING: "Sorting",
    ExerciseKind.MATCHING: "Matching",
}


class Difficulty(int, Enum):
    EASY = 0
    MEDIUM = 1
    HARD = 2


class Category(int, Enum):
    """RSE topic taxonomy."""

    ENVIRONMENT = 0
    SOCIAL = 1
    GOVERNANCE = 2
    ECONOMY = 3


# ============================================================================
# Exercise Models
# ============================================================================


class BaseExercise(BaseModel):
    """Fields shared by every exercise kind.

    Image and sprite names are opaque resource references; resolving them to
    something displayable is left to the presentation layer.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    explanation: str = ""
    difficulty: Difficulty = Difficulty.EASY
    category: Category = Category.ENVIRONMENT
    image_name: str | None = None

    @property
    def type_name(self) -> str:
        return ExerciseKind(self.kind).wire_name


class QuizExercise(BaseExercise):
    """Multiple choice: pick one option from a list."""

    kind: Literal["quiz"] = "quiz"
    question_text: str
    options: list[str]
    correct_option_index: int

    @model_validator(mode="after")
    def _check_index(self) -> "QuizExercise":
        if not 0 <= self.correct_option_index < len(self.options):
            raise ValueError(
                f"correct_option_index {self.correct_option_index} out of range "
                f"for {len(self.options)} options"
            )
        return self

    @property
    def main_text(self) -> str:
        return self.question_text


class TrueFalseExercise(BaseExercise):
    """Binary choice on a single statement."""

    kind: Literal["true_false"] = "true_false"
    statement: str
    is_true: bool

    @property
    def main_text(self) -> str:
        return self.statement


class FillInBlankExercise(BaseExercise):
    """Complete a sentence whose blanks are marked {0}, {1}, ...

    Example:
        sentence_with_blanks="La RSE signifie {0} Sociétale des {1}"
        correct_answers=["Responsabilité", "Entreprises"]
    """

    kind: Literal["fill_in_blank"] = "fill_in_blank"
    sentence_with_blanks: str
    correct_answers: list[str]
    word_options: list[str] = Field(default_factory=list)
    case_sensitive: bool = False

    @model_validator(mode="after")
    def _check_blanks(self) -> "FillInBlankExercise":
        placeholders = self.placeholder_indices()
        if len(placeholders) != len(self.correct_answers):
            raise ValueError(
                f"sentence has {len(placeholders)} blanks but "
                f"{len(self.correct_answers)} correct answers were given"
            )
        return self

    @property
    def main_text(self) -> str:
        return self.sentence_with_blanks

    @property
    def blank_count(self) -> int:
        return len(self.correct_answers)

    def placeholder_indices(self) -> list[int]:
        """Distinct placeholder indices referenced in the sentence, sorted."""
        return sorted(
            {int(m) for m in PLACEHOLDER_PATTERN.findall(self.sentence_with_blanks)}
        )

    def display_sentence(self, underscore_count: int = 5) -> str:
        """Return the sentence with every blank replaced by underscores."""
        blank = "_" * underscore_count
        return PLACEHOLDER_PATTERN.sub(blank, self.sentence_with_blanks)


class SortingCategory(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    icon_name: str | None = None
    color: str = "#FFFFFF"  # Hex color string


class SortableItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    sprite_name: str | None = None
    correct_category_index: int


class SortingExercise(BaseExercise):
    """Place each item into its correct category."""

    kind: Literal["sorting"] = "sorting"
    instruction: str = ""
    categories: list[SortingCategory]
    items: list[SortableItem]

    @model_validator(mode="after")
    def _check_categories(self) -> "SortingExercise":
        for i, item in enumerate(self.items):
            if not 0 <= item.correct_category_index < len(self.categories):
                raise ValueError(
                    f"item {i} ({item.name!r}) references category "
                    f"{item.correct_category_index}, but only "
                    f"{len(self.categories)} categories exist"
                )
        return self

    @property
    def main_text(self) -> str:
        return self.instruction

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def category_count(self) -> int:
        return len(self.categories)

    def items_for_category(self, category_index: int) -> list[SortableItem]:
        """Items that belong in the given category (for showing solutions)."""
        return [
            item
            for item in self.items
            if item.correct_category_index == category_index
        ]


class MatchPair(BaseModel):
    model_config = ConfigDict(frozen=True)

    left_item: str
    right_item: str
    left_sprite_name: str | None = None
    right_sprite_name: str | None = None


class MatchingExercise(BaseExercise):
    """Connect each left item to its right item.

    The correct match for left index i is right index i in the pair list.
    Shuffling only affects display order, never that rule.
    """

    kind: Literal["matching"] = "matching"
    instruction: str = ""
    left_column_header: str = "Actions"
    right_column_header: str = "Impacts"
    pairs: list[MatchPair]
    shuffle_right_column: bool = True

    @property
    def main_text(self) -> str:
        return self.instruction

    @property
    def pair_count(self) -> int:
        return len(self.pairs)

    def left_items(self) -> list[str]:
        return [pair.left_item for pair in self.pairs]

    def right_items(self) -> list[str]:
        return [pair.right_item for pair in self.pairs]

    def shuffled_right_items(
        self, rng: random.Random | None = None
    ) -> tuple[list[str], list[int]]:
        """Return right items in display order plus the permutation used.

        permutation[display_index] is the original pair index of the item
        shown at display_index. Identity when shuffle_right_column is False.
        """
        permutation = list(range(len(self.pairs)))
        if self.shuffle_right_column:
            (rng or random).shuffle(permutation)
        right = self.right_items()
        return [right[i] for i in permutation], permutation


Exercise = Annotated[
    Union[
        QuizExercise,
        TrueFalseExercise,
        FillInBlankExercise,
        SortingExercise,
        MatchingExercise,
    ],
    Field(discriminator="kind"),
]


# ============================================================================
# Level Models
# ============================================================================


class LevelDefinition(BaseModel):
    """An ordered sequence of exercises sharing a theme."""

    model_config = ConfigDict(frozen=True)

    level_id: int
    theme: str = ""
    exercises: list[Exercise] = Field(default_factory=list)

    @property
    def exercise_count(self) -> int:
        return len(self.exercises)

    def type_stats(self) -> dict[ExerciseKind, int]:
        """Count exercises per kind."""
        stats: dict[ExerciseKind, int] = {}
        for exercise in self.exercises:
            kind = ExerciseKind(exercise.kind)
            stats[kind] = stats.get(kind, 0) + 1
        return stats


class LevelCatalog(BaseModel):
    """All levels parsed from one catalog document."""

    levels: list[LevelDefinition] = Field(default_factory=list)

    def get(self, level_id: int) -> LevelDefinition:
        for level in self.levels:
            if level.level_id == level_id:
                return level
        raise LevelNotFoundError(level_id)

    def level_ids(self) -> list[int]:
        return [level.level_id for level in self.levels]


# ============================================================================
# Progression Models
# ============================================================================


class ProgressionRecord(BaseModel):
    """Snapshot of a player's persisted progression."""

    highest_unlocked: int = 1
    stars: dict[int, int] = Field(default_factory=dict)  # level_id -> 0..3
    best_times: dict[int, float] = Field(default_factory=dict)  # seconds

    def total_stars(self) -> int:
        return sum(self.stars.values())


class LevelOutcome(BaseModel):
    """Result of a finished level session."""

    level_id: int
    won: bool
    lives_remaining: int
    max_lives: int
    score: int = 0
    stars: int = 0
    elapsed_seconds: float | None = None
