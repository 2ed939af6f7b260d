"""Exercise catalog loading and answer validation.

Architecture:
- The loader turns flat level JSON records into typed exercise models
  (see models.py) and writes them back for round-tripping
- The validator decides whether an answer payload is correct for any
  exercise kind
- Input parsers turn raw terminal text into typed answer payloads

Answer payloads per kind:
- Quiz: selected option index (int)
- TrueFalse: bool, or int 0/1
- FillInBlank: list of strings (one per blank), or a single string
- Sorting: {item_index: category_index} or a positional list
- Matching: {left_index: right_index} or a positional list, original indices
"""

from exercises.base import (
    parse_index_list,
    parse_letter_input,
    parse_true_false,
    parse_word_choices,
)
from exercises.loader import (
    EXERCISE_BUILDERS,
    KIND_SYNONYMS,
    load_catalog,
    load_level,
    parse_catalog,
    parse_exercise,
    parse_exercises,
    parse_level,
    resolve_kind,
    serialize_exercise,
    serialize_level,
)
from exercises.validator import (
    correct_answer_text,
    map_display_matches,
    validate,
    validate_fill_in_blank,
    validate_matching,
    validate_quiz,
    validate_sorting,
    validate_true_false,
)

__all__ = [
    # Input parsers
    "parse_letter_input",
    "parse_true_false",
    "parse_index_list",
    "parse_word_choices",
    # Loader
    "EXERCISE_BUILDERS",
    "KIND_SYNONYMS",
    "resolve_kind",
    "parse_exercise",
    "parse_exercises",
    "parse_level",
    "parse_catalog",
    "load_catalog",
    "load_level",
    "serialize_exercise",
    "serialize_level",
    # Validator
    "validate",
    "validate_quiz",
    "validate_true_false",
    "validate_fill_in_blank",
    "validate_sorting",
    "validate_matching",
    "map_display_matches",
    "correct_answer_text",
]
