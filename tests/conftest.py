"""Shared pytest fixtures for the RSE quiz test suite."""

import pytest

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from models import (
    FillInBlankExercise,
    LevelDefinition,
    MatchingExercise,
    MatchPair,
    QuizExercise,
    SortableItem,
    SortingCategory,
    SortingExercise,
    TrueFalseExercise,
)
from progression import ProgressionStore
from storage import SQLitePreferencesRepository, init_schema


@pytest.fixture
def quiz_exercise() -> QuizExercise:
    """Create a quiz whose correct option is the second one."""
    return QuizExercise(
        id=1,
        question_text="Quel gaz contribue le plus à l'effet de serre ?",
        options=["Oxygène", "Dioxyde de carbone", "Azote"],
        correct_option_index=1,
        explanation="Le CO2 est le principal gaz à effet de serre d'origine humaine.",
    )


@pytest.fixture
def true_false_exercise() -> TrueFalseExercise:
    """Create a true statement."""
    return TrueFalseExercise(
        id=2,
        statement="Le recyclage réduit la consommation de matières premières.",
        is_true=True,
    )


@pytest.fixture
def fill_in_blank_exercise() -> FillInBlankExercise:
    """Create a two-blank sentence."""
    return FillInBlankExercise(
        id=3,
        sentence_with_blanks="La RSE signifie {0} Sociétale des {1}",
        correct_answers=["Responsabilité", "Entreprises"],
        word_options=["Responsabilité", "Entreprises", "Rentabilité"],
    )


@pytest.fixture
def sorting_exercise() -> SortingExercise:
    """Create a sorting exercise with two categories and three items."""
    return SortingExercise(
        id=4,
        instruction="Classe chaque action.",
        categories=[
            SortingCategory(name="Environnement", color="#2E7D32"),
            SortingCategory(name="Social"),
        ],
        items=[
            SortableItem(name="Panneaux solaires", correct_category_index=0),
            SortableItem(name="Formation", correct_category_index=1),
            SortableItem(name="Compost", correct_category_index=0),
        ],
    )


@pytest.fixture
def matching_exercise() -> MatchingExercise:
    """Create a matching exercise with three pairs."""
    return MatchingExercise(
        id=5,
        instruction="Relie chaque action à son impact.",
        pairs=[
            MatchPair(left_item="Covoiturage", right_item="Moins de CO2"),
            MatchPair(left_item="Tri", right_item="Recyclage"),
            MatchPair(left_item="LED", right_item="Moins d'électricité"),
        ],
    )


@pytest.fixture
def sample_exercises(
    quiz_exercise,
    true_false_exercise,
    fill_in_blank_exercise,
    sorting_exercise,
    matching_exercise,
) -> list:
    """One exercise of every kind."""
    return [
        quiz_exercise,
        true_false_exercise,
        fill_in_blank_exercise,
        sorting_exercise,
        matching_exercise,
    ]


@pytest.fixture
def sample_level(sample_exercises) -> LevelDefinition:
    """Create a level containing one exercise of every kind."""
    return LevelDefinition(level_id=1, theme="Découverte", exercises=sample_exercises)


@pytest.fixture
def three_quiz_level() -> LevelDefinition:
    """Create a level of three quizzes, each answered correctly by index 0."""
    return LevelDefinition(
        level_id=2,
        theme="Quiz",
        exercises=[
            QuizExercise(
                id=i,
                question_text=f"Question {i}",
                options=["Bonne réponse", "Mauvaise réponse"],
                correct_option_index=0,
            )
            for i in range(1, 4)
        ],
    )


@pytest.fixture
def sample_level_records() -> list[dict]:
    """Raw wire records for a catalog with two levels."""
    return [
        {
            "levelId": 1,
            "theme": "Découverte",
            "exercises": [
                {
                    "id": 1,
                    "exerciseType": "Quiz",
                    "questionText": "Que signifie RSE ?",
                    "options": ["Responsabilité Sociétale des Entreprises", "Autre"],
                    "correctOptionIndex": 0,
                },
                {
                    "id": 2,
                    "exerciseType": "TrueFalse",
                    "statement": "La RSE concerne aussi les PME.",
                    "isTrue": True,
                },
            ],
        },
        {
            "levelId": 2,
            "theme": "Environnement",
            "exercises": [
                {
                    "id": 1,
                    "exerciseType": "FillInBlank",
                    "sentenceWithBlanks": "L'économie {0}",
                    "correctAnswers": ["circulaire"],
                },
            ],
        },
    ]


@pytest.fixture
def test_db_path(tmp_path) -> Path:
    """Create a temporary database path for testing."""
    db_path = tmp_path / "test_progress.db"
    init_schema(db_path)
    return db_path


@pytest.fixture
def preferences_repo(test_db_path) -> SQLitePreferencesRepository:
    """Create a preferences repository on the temporary database."""
    return SQLitePreferencesRepository(test_db_path)


@pytest.fixture
def progression(preferences_repo) -> ProgressionStore:
    """Create a progression store for a new player."""
    return ProgressionStore(preferences_repo)
