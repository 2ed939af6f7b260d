"""Integration tests for the command-line entry point in main.py.

These tests simulate user input through stdin by mocking Console.input().
"""

import json
from typing import Any

import pytest
from rich.console import Console

import main
from progression import ProgressionStore
from storage import SQLitePreferencesRepository


class InputSequence:
    """Callable providing sequential inputs for mocked Console.input().

    Tracks all prompts received for debugging failed tests.
    """

    def __init__(self, inputs: list[str]):
        self.inputs = inputs
        self.index = 0
        self.call_history: list[tuple[int, Any]] = []

    def __call__(self, prompt: Any = "", **kwargs) -> str:
        """Return next input in sequence, tracking prompts received."""
        self.call_history.append((self.index, prompt))
        if self.index >= len(self.inputs):
            history = "\n".join(f"  {i}: {p}" for i, p in self.call_history)
            raise StopIteration(
                f"Ran out of inputs at call {self.index}.\n"
                f"Prompt: {prompt}\n"
                f"History:\n{history}"
            )
        result = self.inputs[self.index]
        self.index += 1
        return result

    @property
    def remaining(self) -> int:
        """Number of unused inputs remaining."""
        return len(self.inputs) - self.index


def quiz(exercise_id: int) -> dict:
    return {
        "id": exercise_id,
        "exerciseType": "Quiz",
        "questionText": f"Question {exercise_id}",
        "options": ["Bonne", "Mauvaise"],
        "correctOptionIndex": 0,
    }


@pytest.fixture
def catalog_path(tmp_path):
    """Write a catalog with a quiz level and a mixed level."""
    levels = [
        {"levelId": 1, "theme": "Quiz", "exercises": [quiz(1), quiz(2), quiz(3)]},
        {
            "levelId": 2,
            "theme": "Mixte",
            "exercises": [
                {
                    "exerciseType": "TrueFalse",
                    "statement": "La RSE concerne aussi les PME.",
                    "isTrue": True,
                },
                {
                    "exerciseType": "FillInBlank",
                    "sentenceWithBlanks": "La RSE signifie {0} Sociétale des {1}",
                    "correctAnswers": ["Responsabilité", "Entreprises"],
                    "wordOptions": ["Responsabilité", "Entreprises", "Rentabilité"],
                },
                {
                    "exerciseType": "Sorting",
                    "categories": [{"categoryName": "Env"}, {"categoryName": "Social"}],
                    "items": [
                        {"itemName": "Compost", "correctCategoryIndex": 0},
                        {"itemName": "Formation", "correctCategoryIndex": 1},
                        {"itemName": "Solaire", "correctCategoryIndex": 0},
                    ],
                },
                {
                    "exerciseType": "Matching",
                    "shuffleRightColumn": False,
                    "pairs": [
                        {"leftItem": "Covoiturage", "rightItem": "Moins de CO2"},
                        {"leftItem": "Tri", "rightItem": "Recyclage"},
                    ],
                },
            ],
        },
    ]
    path = tmp_path / "levels.json"
    path.write_text(json.dumps({"levels": levels}), encoding="utf-8")
    return path


@pytest.fixture
def cli(tmp_path, monkeypatch, catalog_path):
    """Fixture providing a patched main() runner.

    Patches:
    - Console.input to use the provided InputSequence
    - Console.clear to no-op (avoid terminal issues)
    - signal.signal to no-op (avoid handler issues in tests)

    Returns a callable taking CLI args and an optional InputSequence.
    """
    db_path = tmp_path / "progress.db"

    monkeypatch.setattr("signal.signal", lambda *args, **kwargs: None)
    monkeypatch.setattr(Console, "clear", lambda self, *args, **kwargs: None)

    def runner(args: list[str], inputs: InputSequence | None = None) -> int:
        if inputs is not None:
            monkeypatch.setattr(Console, "input", lambda self, *a, **k: inputs(*a, **k))
        return main.main(
            ["--levels", str(catalog_path), "--db", str(db_path), *args]
        )

    runner.db_path = db_path
    return runner


def progression_for(db_path) -> ProgressionStore:
    return ProgressionStore(SQLitePreferencesRepository(db_path))


class TestPlayCommand:
    """Tests for the play subcommand."""

    def test_perfect_run_unlocks_next_level(self, cli):
        """Answering everything correctly stores 3 stars and unlocks level 2."""
        inputs = InputSequence(["A", "", "A", "", "A", ""])
        assert cli(["play", "1"], inputs) == 0
        assert inputs.remaining == 0

        progression = progression_for(cli.db_path)
        assert progression.get_highest_unlocked() == 2
        assert progression.get_level_stars(1) == 3
        assert progression.get_best_time(1) is not None

    def test_one_mistake_gives_two_stars(self, cli):
        """One wrong answer still wins with 2 stars."""
        inputs = InputSequence(["B", "", "A", "", "A", ""])
        assert cli(["play", "1"], inputs) == 0
        assert progression_for(cli.db_path).get_level_stars(1) == 2

    def test_three_mistakes_fail(self, cli):
        """Losing every life ends the level without progression."""
        inputs = InputSequence(["B", "", "B", "", "B"])
        assert cli(["play", "1"], inputs) == 0
        assert inputs.remaining == 0

        progression = progression_for(cli.db_path)
        assert progression.get_highest_unlocked() == 1
        assert progression.get_level_stars(1) == 0

    def test_invalid_input_is_asked_again(self, cli):
        """Unreadable input does not cost a life."""
        inputs = InputSequence(["Z", "A", "", "A", "", "A", ""])
        assert cli(["play", "1"], inputs) == 0
        assert progression_for(cli.db_path).get_level_stars(1) == 3

    def test_quit(self, cli):
        """Typing q leaves without recording anything."""
        inputs = InputSequence(["q"])
        assert cli(["play", "1"], inputs) == 0
        assert progression_for(cli.db_path).get_highest_unlocked() == 1

    def test_locked_level_refused(self, cli):
        """A locked level cannot be played."""
        assert cli(["play", "2"], InputSequence([])) == 1

    def test_unknown_level(self, cli):
        """An absent level reports an error."""
        assert cli(["play", "9", "--unlocked"], InputSequence([])) == 1

    def test_every_exercise_kind(self, cli):
        """Typed answers for every kind are parsed and validated."""
        inputs = InputSequence(
            [
                "v",
                "",
                "1, 2",
                "",
                "1 2 1",
                "",
                "1 2",
                "",
            ]
        )
        assert cli(["play", "2", "--unlocked"], inputs) == 0
        assert progression_for(cli.db_path).get_level_stars(2) == 3


class TestOtherCommands:
    """Tests for levels, check and reset."""

    def test_levels(self, cli, capsys):
        """levels lists every level with its lock state."""
        assert cli(["levels"]) == 0
        out = capsys.readouterr().out
        assert "Quiz" in out
        assert "locked" in out

    def test_check(self, cli, capsys):
        """check reports per-kind counts for each level."""
        assert cli(["check"]) == 0
        out = capsys.readouterr().out
        assert "Quiz: 3" in out
        assert "Matching: 1" in out

    def test_check_missing_file(self, tmp_path, capsys):
        """check fails on a missing catalog."""
        status = main.main(
            ["--levels", str(tmp_path / "absent.json"), "--db", str(tmp_path / "p.db"), "check"]
        )
        assert status == 1

    def test_reset(self, cli):
        """reset erases progression."""
        cli(["play", "1"], InputSequence(["A", "", "A", "", "A", ""]))
        assert cli(["reset"]) == 0
        progression = progression_for(cli.db_path)
        assert progression.get_highest_unlocked() == 1
        assert progression.get_level_stars(1) == 0
