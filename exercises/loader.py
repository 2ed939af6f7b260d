"""Catalog loader: turns flat level JSON records into typed exercises.

The wire format carries one flat record per exercise. A string
discriminator (``exerciseType``) picks the kind and every kind-specific
field sits next to the common ones; fields belonging to other kinds are
simply absent. Loading is best-effort: a malformed exercise is logged and
skipped, the rest of the level still loads.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Callable

from pydantic import ValidationError

from errors import LevelNotFoundError, ParseError
from models import (
    Exercise,
    ExerciseKind,
    FillInBlankExercise,
    LevelCatalog,
    LevelDefinition,
    MatchingExercise,
    MatchPair,
    QuizExercise,
    SortableItem,
    SortingCategory,
    SortingExercise,
    TrueFalseExercise,
)

logger = logging.getLogger(__name__)

# Discriminator synonyms, matched after lower-casing
KIND_SYNONYMS: dict[str, ExerciseKind] = {
    "quiz": ExerciseKind.QUIZ,
    "truefalse": ExerciseKind.TRUE_FALSE,
    "true_false": ExerciseKind.TRUE_FALSE,
    "true-false": ExerciseKind.TRUE_FALSE,
    "fillinblank": ExerciseKind.FILL_IN_BLANK,
    "fill_in_blank": ExerciseKind.FILL_IN_BLANK,
    "fill-in-blank": ExerciseKind.FILL_IN_BLANK,
    "fillintheblank": ExerciseKind.FILL_IN_BLANK,
    "sorting": ExerciseKind.SORTING,
    "sort": ExerciseKind.SORTING,
    "categorize": ExerciseKind.SORTING,
    "matching": ExerciseKind.MATCHING,
    "match": ExerciseKind.MATCHING,
    "connect": ExerciseKind.MATCHING,
}

HEX_COLOR_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
DEFAULT_COLOR = "#FFFFFF"


def resolve_kind(raw: Any) -> ExerciseKind:
    """Map a raw discriminator to an ExerciseKind.

    Missing, non-string or unrecognized discriminators fall back to QUIZ,
    which keeps older level files (written before other kinds existed)
    loadable.
    """
    if not isinstance(raw, str):
        if raw is not None:
            logger.debug("Non-string exercise type %r, defaulting to quiz", raw)
        return ExerciseKind.QUIZ
    if not raw.strip():
        return ExerciseKind.QUIZ
    kind = KIND_SYNONYMS.get(raw.strip().lower())
    if kind is None:
        logger.debug("Unknown exercise type %r, defaulting to quiz", raw)
        return ExerciseKind.QUIZ
    return kind


# ============================================================================
# Field helpers
# ============================================================================


def _require(record: dict, field: str, position: int | None) -> Any:
    value = record.get(field)
    if value is None:
        raise ParseError(f"missing required field '{field}'", position)
    return value


def _require_list(record: dict, field: str, position: int | None) -> list:
    value = _require(record, field, position)
    if not isinstance(value, list):
        raise ParseError(
            f"field '{field}' must be an array, got {type(value).__name__}",
            position,
        )
    return value


def _require_dicts(record: dict, field: str, position: int | None) -> list[dict]:
    entries = _require_list(record, field, position)
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ParseError(f"'{field}[{i}]' must be an object", position)
    return entries


def _parse_color(raw: Any) -> str:
    if raw is None or raw == "":
        return DEFAULT_COLOR
    if isinstance(raw, str) and HEX_COLOR_PATTERN.match(raw):
        return raw
    logger.debug("Invalid category color %r, using %s", raw, DEFAULT_COLOR)
    return DEFAULT_COLOR


# ============================================================================
# Per-kind builders
# ============================================================================


def _build_quiz(record: dict, position: int | None) -> dict[str, Any]:
    return {
        "question_text": _require(record, "questionText", position),
        "options": _require_list(record, "options", position),
        "correct_option_index": _require(record, "correctOptionIndex", position),
    }


def _build_true_false(record: dict, position: int | None) -> dict[str, Any]:
    return {
        "statement": _require(record, "statement", position),
        "is_true": _require(record, "isTrue", position),
    }


def _build_fill_in_blank(record: dict, position: int | None) -> dict[str, Any]:
    return {
        "sentence_with_blanks": _require(record, "sentenceWithBlanks", position),
        "correct_answers": _require_list(record, "correctAnswers", position),
        "word_options": record.get("wordOptions") or [],
        "case_sensitive": record.get("caseSensitive", False),
    }


def _build_sorting(record: dict, position: int | None) -> dict[str, Any]:
    categories = [
        SortingCategory(
            name=entry.get("categoryName", ""),
            icon_name=entry.get("categoryIconName") or None,
            color=_parse_color(entry.get("categoryColor")),
        )
        for entry in _require_dicts(record, "categories", position)
    ]
    items = [
        SortableItem(
            name=entry.get("itemName", ""),
            sprite_name=entry.get("itemSpriteName") or None,
            correct_category_index=entry.get("correctCategoryIndex", 0),
        )
        for entry in _require_dicts(record, "items", position)
    ]
    return {
        "instruction": record.get("instruction") or "",
        "categories": categories,
        "items": items,
    }


def _build_matching(record: dict, position: int | None) -> dict[str, Any]:
    pairs = [
        MatchPair(
            left_item=entry.get("leftItem", ""),
            right_item=entry.get("rightItem", ""),
            left_sprite_name=entry.get("leftSpriteName") or None,
            right_sprite_name=entry.get("rightSpriteName") or None,
        )
        for entry in _require_dicts(record, "pairs", position)
    ]
    return {
        "instruction": record.get("instruction") or "",
        "left_column_header": record.get("leftColumnHeader") or "Actions",
        "right_column_header": record.get("rightColumnHeader") or "Impacts",
        "pairs": pairs,
        "shuffle_right_column": record.get("shuffleRightColumn", False),
    }


# Registry of per-kind builders and the model each one feeds
EXERCISE_BUILDERS: dict[
    ExerciseKind, tuple[Callable[[dict, int | None], dict[str, Any]], type]
] = {
    ExerciseKind.QUIZ: (_build_quiz, QuizExercise),
    ExerciseKind.TRUE_FALSE: (_build_true_false, TrueFalseExercise),
    ExerciseKind.FILL_IN_BLANK: (_build_fill_in_blank, FillInBlankExercise),
    ExerciseKind.SORTING: (_build_sorting, SortingExercise),
    ExerciseKind.MATCHING: (_build_matching, MatchingExercise),
}


# ============================================================================
# Parsing
# ============================================================================


def parse_exercise(record: dict, position: int = 1) -> Exercise:
    """Parse one flat exercise record.

    Args:
        record: Raw exercise record from the level JSON.
        position: 1-based position of the record within its level. Used as
            the exercise id when the record has none, and in error messages.

    Raises:
        ParseError: If the record is malformed for its resolved kind.
    """
    if not isinstance(record, dict):
        raise ParseError("exercise record must be an object", position)

    kind = resolve_kind(record.get("exerciseType"))
    builder, model = EXERCISE_BUILDERS[kind]

    try:
        fields = builder(record, position)
        # A null id counts as missing
        exercise_id = record.get("id")
        fields.update(
            id=position if exercise_id is None else exercise_id,
            explanation=record.get("explanation") or "",
            difficulty=record.get("difficulty", 0),
            category=record.get("category", 0),
            image_name=record.get("imageName") or None,
        )
        return model(**fields)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or kind.value}: {err['msg']}"
            for err in e.errors()
        )
        raise ParseError(f"invalid {kind.wire_name} exercise ({errors})", position)


def parse_exercises(records: list[dict] | None) -> list[Exercise]:
    """Parse a level's exercise records, skipping the malformed ones."""
    if not records:
        logger.warning("No exercises to convert")
        return []

    exercises: list[Exercise] = []
    for position, record in enumerate(records, start=1):
        try:
            exercises.append(parse_exercise(record, position))
        except ParseError as e:
            logger.warning("Skipping exercise: %s", e)
    return exercises


def parse_level(record: dict) -> LevelDefinition:
    """Parse a level record (levelId, theme, exercises).

    Raises:
        ParseError: If the record is not an object, has no integer levelId,
            or carries level fields of the wrong type.
    """
    if not isinstance(record, dict):
        raise ParseError("level record must be an object")

    level_id = record.get("levelId")
    if not isinstance(level_id, int) or isinstance(level_id, bool):
        raise ParseError(f"level record has invalid levelId {level_id!r}")

    raw_exercises = record.get("exercises")
    if raw_exercises is not None and not isinstance(raw_exercises, list):
        raise ParseError(f"level {level_id}: 'exercises' must be an array")

    exercises = parse_exercises(raw_exercises)
    skipped = len(raw_exercises or []) - len(exercises)
    if skipped:
        logger.warning(
            "Level %d: skipped %d malformed exercise(s), %d loaded",
            level_id,
            skipped,
            len(exercises),
        )

    try:
        return LevelDefinition(
            level_id=level_id,
            theme=record.get("theme") or "",
            exercises=exercises,
        )
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ParseError(f"level {level_id}: invalid level record ({errors})")


def parse_catalog(document: dict | list) -> LevelCatalog:
    """Parse a catalog document: {"levels": [...]} or a bare list of levels."""
    if isinstance(document, dict):
        raw_levels = document.get("levels")
    else:
        raw_levels = document

    if not isinstance(raw_levels, list):
        raise ParseError("catalog document has no 'levels' array")

    levels = []
    for record in raw_levels:
        try:
            levels.append(parse_level(record))
        except ParseError as e:
            logger.warning("Skipping level: %s", e)
    return LevelCatalog(levels=levels)


def load_catalog(path: Path) -> LevelCatalog:
    """Load and parse a catalog JSON file.

    Raises:
        ParseError: If the file is missing or not valid JSON.
    """
    if not path.exists():
        raise ParseError(f"catalog file not found: {path}")
    try:
        with open(path, encoding="utf-8") as f:
            document = json.load(f)
    except json.JSONDecodeError as e:
        raise ParseError(f"invalid JSON in {path}: {e}")

    catalog = parse_catalog(document)
    logger.info("Loaded %d level(s) from %s", len(catalog.levels), path)
    return catalog


def load_level(path: Path, level_id: int) -> LevelDefinition:
    """Load a single playable level from a catalog file.

    Raises:
        LevelNotFoundError: If the catalog has no level with this id.
        ParseError: If the file cannot be read, or the level has no
            exercise that parsed successfully.
    """
    level = load_catalog(path).get(level_id)
    if not level.exercises:
        raise ParseError(f"level {level_id} has no playable exercises")
    logger.info(
        "Level %d loaded (Theme: %s, Exercises: %d)",
        level.level_id,
        level.theme,
        level.exercise_count,
    )
    return level


# ============================================================================
# Serialization
# ============================================================================


def serialize_exercise(exercise: Exercise) -> dict[str, Any]:
    """Write an exercise back to the flat wire record format."""
    record: dict[str, Any] = {
        "id": exercise.id,
        "exerciseType": exercise.type_name,
        "explanation": exercise.explanation,
        "difficulty": exercise.difficulty.value,
        "category": exercise.category.value,
    }
    if exercise.image_name:
        record["imageName"] = exercise.image_name

    if isinstance(exercise, QuizExercise):
        record.update(
            questionText=exercise.question_text,
            options=list(exercise.options),
            correctOptionIndex=exercise.correct_option_index,
        )
    elif isinstance(exercise, TrueFalseExercise):
        record.update(statement=exercise.statement, isTrue=exercise.is_true)
    elif isinstance(exercise, FillInBlankExercise):
        record.update(
            sentenceWithBlanks=exercise.sentence_with_blanks,
            correctAnswers=list(exercise.correct_answers),
            wordOptions=list(exercise.word_options),
            caseSensitive=exercise.case_sensitive,
        )
    elif isinstance(exercise, SortingExercise):
        record.update(
            instruction=exercise.instruction,
            categories=[
                _drop_none(
                    {
                        "categoryName": c.name,
                        "categoryIconName": c.icon_name,
                        "categoryColor": c.color,
                    }
                )
                for c in exercise.categories
            ],
            items=[
                _drop_none(
                    {
                        "itemName": item.name,
                        "itemSpriteName": item.sprite_name,
                        "correctCategoryIndex": item.correct_category_index,
                    }
                )
                for item in exercise.items
            ],
        )
    elif isinstance(exercise, MatchingExercise):
        record.update(
            instruction=exercise.instruction,
            leftColumnHeader=exercise.left_column_header,
            rightColumnHeader=exercise.right_column_header,
            pairs=[
                _drop_none(
                    {
                        "leftItem": pair.left_item,
                        "rightItem": pair.right_item,
                        "leftSpriteName": pair.left_sprite_name,
                        "rightSpriteName": pair.right_sprite_name,
                    }
                )
                for pair in exercise.pairs
            ],
            shuffleRightColumn=exercise.shuffle_right_column,
        )
    else:
        raise TypeError(f"Unsupported exercise type: {type(exercise).__name__}")
    return record


def serialize_level(level: LevelDefinition) -> dict[str, Any]:
    """Write a level back to its wire record."""
    return {
        "levelId": level.level_id,
        "theme": level.theme,
        "exercises": [serialize_exercise(ex) for ex in level.exercises],
    }


def _drop_none(entry: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in entry.items() if v is not None}
