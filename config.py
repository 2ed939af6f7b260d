"""Runtime settings and logging setup."""

import logging
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

DATA_DIR = Path(__file__).parent / "data"

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class Settings(BaseSettings):
    """Game settings, overridable through RSE_QUIZ_* environment variables."""

    max_lives: int = Field(default=3, ge=1)
    points_per_life: int = Field(default=100, ge=0)
    two_star_ratio: float = Field(default=0.66, gt=0.0, le=1.0)
    levels_path: Path = DATA_DIR / "levels_data.json"
    db_path: Path = DATA_DIR / "progress.db"
    shuffle_matching: bool = True
    log_level: str = "WARNING"

    model_config = {"env_prefix": "RSE_QUIZ_", "env_file": ".env"}


def get_settings() -> Settings:
    """Build settings from the environment."""
    return Settings()


def configure_logging(level: str | int = logging.WARNING) -> None:
    """Configure root logging for command-line use."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S")
