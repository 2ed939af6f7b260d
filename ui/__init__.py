"""RSE Quiz UI module - terminal host for playing levels."""

from ui.app import QuizUI
from ui.components import (
    ExercisePanel,
    FeedbackPanel,
    LevelResultPanel,
    LevelTable,
)
from ui.styles import (
    RSE_GREEN,
    RSE_GOLD,
    SUCCESS_GREEN,
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
)

__all__ = [
    "QuizUI",
    "ExercisePanel",
    "FeedbackPanel",
    "LevelResultPanel",
    "LevelTable",
    "RSE_GREEN",
    "RSE_GOLD",
    "SUCCESS_GREEN",
    "ERROR_RED",
    "INFO_BLUE",
    "MUTED_GRAY",
]
