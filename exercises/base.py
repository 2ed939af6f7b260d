"""Parsers that turn raw terminal input into typed answer payloads.

Each parser returns None when the input cannot be read, so the caller can
ask again instead of counting a typo as a wrong answer.
"""

TRUE_WORDS = {"v", "vrai", "t", "true", "o", "oui", "y", "yes", "1"}
FALSE_WORDS = {"f", "faux", "false", "n", "non", "no", "0"}


def parse_letter_input(user_input: str, max_options: int = 4) -> int | None:
    """Parse letter (A, B, ...) or number (1, 2, ...) input to 0-based index.

    Args:
        user_input: Raw user input string.
        max_options: Maximum number of valid options.

    Returns:
        0-based index or None if input is invalid or out of bounds.
    """
    user_input = user_input.strip().upper()

    if len(user_input) == 1 and "A" <= user_input <= "Z":
        index = ord(user_input) - ord("A")
    elif user_input.isascii() and user_input.isdigit():
        index = int(user_input) - 1
    else:
        return None

    if index < 0 or index >= max_options:
        return None

    return index


def parse_true_false(user_input: str) -> bool | None:
    """Parse French or English yes/no style input."""
    word = user_input.strip().lower()
    if word in TRUE_WORDS:
        return True
    if word in FALSE_WORDS:
        return False
    return None


def parse_index_list(user_input: str, count: int, max_value: int) -> list[int] | None:
    """Parse space-separated 1-based numbers into a list of 0-based indices.

    Args:
        user_input: e.g. "2 1 1" for three entries.
        count: Exact number of entries expected.
        max_value: Largest accepted 1-based number.

    Returns:
        0-based indices, or None if the count or any value is invalid.
    """
    try:
        numbers = [int(x) for x in user_input.replace(",", " ").split()]
    except ValueError:
        return None

    if len(numbers) != count:
        return None
    if not all(1 <= n <= max_value for n in numbers):
        return None
    return [n - 1 for n in numbers]


def parse_word_choices(
    user_input: str, word_options: list[str], blank_count: int
) -> list[str] | None:
    """Parse blanks typed as words or as 1-based picks from the word list.

    Entries are separated by commas. A purely numeric entry picks from
    ``word_options`` when that list is non-empty; anything else is taken as
    typed text.
    """
    entries = [entry.strip() for entry in user_input.split(",")]
    if len(entries) != blank_count or not all(entries):
        return None

    words = []
    for entry in entries:
        if word_options and entry.isdigit():
            index = int(entry) - 1
            if not 0 <= index < len(word_options):
                return None
            words.append(word_options[index])
        else:
            words.append(entry)
    return words
