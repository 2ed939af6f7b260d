"""Answer validation for every exercise kind.

``validate`` dispatches on the exercise variant. Each per-kind function
accepts the payload shapes that kind understands; any other shape is an
incorrect answer, not an error. Correctness is all-or-nothing.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from models import (
    Exercise,
    FillInBlankExercise,
    MatchingExercise,
    QuizExercise,
    SortingExercise,
    TrueFalseExercise,
)

logger = logging.getLogger(__name__)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_index_list(value: Any) -> bool:
    return (
        isinstance(value, Sequence)
        and not isinstance(value, (str, bytes))
        and all(_is_int(v) for v in value)
    )


def _is_index_mapping(value: Any) -> bool:
    return isinstance(value, Mapping) and all(
        _is_int(k) and _is_int(v) for k, v in value.items()
    )


def _unexpected(exercise: Exercise, answer: Any) -> bool:
    logger.debug(
        "%s exercise %d received unexpected answer type: %s",
        exercise.type_name,
        exercise.id,
        type(answer).__name__,
    )
    return False


def validate_quiz(exercise: QuizExercise, answer: Any) -> bool:
    """Answer is the selected option index."""
    if not _is_int(answer):
        return _unexpected(exercise, answer)
    return answer == exercise.correct_option_index


def validate_true_false(exercise: TrueFalseExercise, answer: Any) -> bool:
    """Answer is a bool, or an int where 1 means true and anything else false."""
    if isinstance(answer, bool):
        return answer == exercise.is_true
    if _is_int(answer):
        return (answer == 1) == exercise.is_true
    return _unexpected(exercise, answer)


def _upper_char(ch: str) -> str:
    # One-to-one mapping only; characters whose upper form expands (ß) stay put
    upper = ch.upper()
    return upper if len(upper) == 1 else ch


def _simple_upper(text: str) -> str:
    return "".join(_upper_char(ch) for ch in text)


def _words_match(correct: str, given: str, case_sensitive: bool) -> bool:
    if case_sensitive:
        return correct == given
    return _simple_upper(correct) == _simple_upper(given)


def validate_fill_in_blank(exercise: FillInBlankExercise, answer: Any) -> bool:
    """Answer is one string per blank, or a single string for one blank."""
    if isinstance(answer, str):
        if exercise.blank_count != 1:
            return _unexpected(exercise, answer)
        return _words_match(
            exercise.correct_answers[0], answer, exercise.case_sensitive
        )

    if not isinstance(answer, Sequence) or isinstance(answer, bytes):
        return _unexpected(exercise, answer)
    if len(answer) != exercise.blank_count:
        return False
    if not all(isinstance(word, str) for word in answer):
        return _unexpected(exercise, answer)

    return all(
        _words_match(correct, given, exercise.case_sensitive)
        for correct, given in zip(exercise.correct_answers, answer)
    )


def validate_sorting(exercise: SortingExercise, answer: Any) -> bool:
    """Answer maps item index to placed category index.

    A list is read positionally: value i is the category chosen for item i.
    """
    if _is_index_list(answer):
        answer = dict(enumerate(answer))
    if not _is_index_mapping(answer):
        return _unexpected(exercise, answer)

    if len(answer) != exercise.item_count:
        return False  # Not all items have been sorted

    for item_index, item in enumerate(exercise.items):
        if answer.get(item_index) != item.correct_category_index:
            return False
    return True


def validate_matching(exercise: MatchingExercise, answer: Any) -> bool:
    """Answer maps left pair index to right pair index (original indices).

    A list is read positionally: value i is the right index chosen for left i.
    """
    if _is_index_list(answer):
        answer = dict(enumerate(answer))
    if not _is_index_mapping(answer):
        return _unexpected(exercise, answer)

    if len(answer) != exercise.pair_count:
        return False  # Not all pairs matched

    return all(answer.get(i) == i for i in range(exercise.pair_count))


def validate(exercise: Exercise, answer: Any) -> bool:
    """Check an answer against any exercise kind.

    Raises:
        TypeError: If the exercise is not one of the known variants.
    """
    if isinstance(exercise, QuizExercise):
        return validate_quiz(exercise, answer)
    elif isinstance(exercise, TrueFalseExercise):
        return validate_true_false(exercise, answer)
    elif isinstance(exercise, FillInBlankExercise):
        return validate_fill_in_blank(exercise, answer)
    elif isinstance(exercise, SortingExercise):
        return validate_sorting(exercise, answer)
    elif isinstance(exercise, MatchingExercise):
        return validate_matching(exercise, answer)
    raise TypeError(f"Unsupported exercise type: {type(exercise).__name__}")


def map_display_matches(
    display_matches: Mapping[int, int], permutation: Sequence[int]
) -> dict[int, int]:
    """Translate left -> display-order right indices into original indices.

    ``permutation`` is the one returned by
    ``MatchingExercise.shuffled_right_items``. Display indices outside the
    permutation map to -1, which never validates.
    """
    return {
        left: permutation[display] if 0 <= display < len(permutation) else -1
        for left, display in display_matches.items()
    }


def correct_answer_text(exercise: Exercise) -> str:
    """Human-readable correct answer, for feedback displays."""
    if isinstance(exercise, QuizExercise):
        return exercise.options[exercise.correct_option_index]
    elif isinstance(exercise, TrueFalseExercise):
        return "Vrai" if exercise.is_true else "Faux"
    elif isinstance(exercise, FillInBlankExercise):
        return ", ".join(exercise.correct_answers)
    elif isinstance(exercise, SortingExercise):
        return "; ".join(
            f"{category.name}: "
            + ", ".join(item.name for item in exercise.items_for_category(i))
            for i, category in enumerate(exercise.categories)
        )
    elif isinstance(exercise, MatchingExercise):
        return "; ".join(
            f"{pair.left_item} -> {pair.right_item}" for pair in exercise.pairs
        )
    raise TypeError(f"Unsupported exercise type: {type(exercise).__name__}")
