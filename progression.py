"""Player progression: unlocked levels, star records and best times.

All state lives in a PreferencesRepository under three kinds of keys:

    HighestLevelUnlocked     int, default 1
    Level_{id}_Stars         int 0-3, default 0
    Level_{id}_BestTime      float seconds, unset until a first win

Every mutation is written through to the repository before returning.
"""

import logging
from collections.abc import Iterable

from models import LevelOutcome, ProgressionRecord
from storage import PreferencesRepository

logger = logging.getLogger(__name__)

HIGHEST_LEVEL_KEY = "HighestLevelUnlocked"
LEVEL_KEY_PREFIX = "Level_"
STARS_KEY_SUFFIX = "_Stars"
BEST_TIME_KEY_SUFFIX = "_BestTime"
MAX_STARS = 3


def stars_key(level_id: int) -> str:
    return f"{LEVEL_KEY_PREFIX}{level_id}{STARS_KEY_SUFFIX}"


def best_time_key(level_id: int) -> str:
    return f"{LEVEL_KEY_PREFIX}{level_id}{BEST_TIME_KEY_SUFFIX}"


class ProgressionStore:
    """Reads and updates a player's progression."""

    def __init__(self, repo: PreferencesRepository):
        self.repo = repo

    # ------------------------------------------------------------------
    # Level unlocking
    # ------------------------------------------------------------------

    def get_highest_unlocked(self) -> int:
        """Highest level the player may play (1 for a new player)."""
        return self.repo.get_int(HIGHEST_LEVEL_KEY, 1)

    def is_unlocked(self, level_id: int) -> bool:
        return level_id <= self.get_highest_unlocked()

    def has_next_level(self, level_id: int) -> bool:
        """True if the level after level_id is already unlocked."""
        return self.is_unlocked(level_id + 1)

    def record_level_completion(self, level_id: int, won: bool) -> bool:
        """Unlock the next level after a win at the progression frontier.

        Replaying an older level, or losing, changes nothing.

        Returns:
            True if a new level was unlocked.
        """
        if not won:
            return False

        highest = self.get_highest_unlocked()
        if level_id < highest:
            logger.info(
                "Level %d replayed, no progression update (already at level %d)",
                level_id,
                highest,
            )
            return False

        next_level = level_id + 1
        self.repo.set_int(HIGHEST_LEVEL_KEY, next_level)
        logger.info("New level unlocked: %d", next_level)
        return True

    # ------------------------------------------------------------------
    # Stars and times
    # ------------------------------------------------------------------

    def get_level_stars(self, level_id: int) -> int:
        """Best star rating for a level (0 if never won)."""
        return self.repo.get_int(stars_key(level_id), 0)

    def save_level_stars(self, level_id: int, stars: int) -> bool:
        """Store a star rating if it beats the previous record.

        Returns:
            True if a new record was stored.

        Raises:
            ValueError: If stars is outside 0-3.
        """
        if not 0 <= stars <= MAX_STARS:
            raise ValueError(f"stars must be between 0 and {MAX_STARS}, got {stars}")

        previous = self.get_level_stars(level_id)
        if stars <= previous:
            logger.debug(
                "Level %d: %d stars (current record: %d)", level_id, stars, previous
            )
            return False

        self.repo.set_int(stars_key(level_id), stars)
        logger.info("Level %d: new record of %d stars!", level_id, stars)
        return True

    def get_best_time(self, level_id: int) -> float | None:
        """Fastest winning time in seconds, or None if never won."""
        return self.repo.get_float(best_time_key(level_id))

    def save_best_time(self, level_id: int, seconds: float) -> bool:
        """Store a completion time if it beats the previous best.

        Returns:
            True if a new best time was stored.
        """
        if seconds < 0:
            raise ValueError(f"seconds must be non-negative, got {seconds}")

        previous = self.get_best_time(level_id)
        if previous is not None and seconds >= previous:
            return False

        self.repo.set_float(best_time_key(level_id), seconds)
        logger.info("Level %d: new best time %.1fs", level_id, seconds)
        return True

    def record_outcome(self, outcome: LevelOutcome) -> bool:
        """Apply a finished session to the stored progression.

        Only wins are recorded. Returns True if a new level was unlocked.
        """
        if not outcome.won:
            return False

        unlocked = self.record_level_completion(outcome.level_id, won=True)
        self.save_level_stars(outcome.level_id, outcome.stars)
        if outcome.elapsed_seconds is not None:
            self.save_best_time(outcome.level_id, outcome.elapsed_seconds)
        return unlocked

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    def get_total_stars(self, level_ids: Iterable[int]) -> int:
        return sum(self.get_level_stars(level_id) for level_id in level_ids)

    def is_all_complete(self, level_ids: Iterable[int]) -> bool:
        """True if every listed level has the maximum star rating."""
        return all(
            self.get_level_stars(level_id) >= MAX_STARS for level_id in level_ids
        )

    def load_record(self, level_ids: Iterable[int]) -> ProgressionRecord:
        """Snapshot progression for the given levels."""
        record = ProgressionRecord(highest_unlocked=self.get_highest_unlocked())
        for level_id in level_ids:
            stars = self.get_level_stars(level_id)
            if stars:
                record.stars[level_id] = stars
            best_time = self.get_best_time(level_id)
            if best_time is not None:
                record.best_times[level_id] = best_time
        return record

    def reset_progress(self) -> None:
        """Forget all progression: unlocks, stars and best times."""
        self.repo.delete(HIGHEST_LEVEL_KEY)
        removed = self.repo.delete_prefix(LEVEL_KEY_PREFIX)
        logger.info("Progress reset (%d level record(s) removed)", removed)
