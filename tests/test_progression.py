"""Tests for player progression persistence."""

import pytest

from models import LevelOutcome
from progression import (
    HIGHEST_LEVEL_KEY,
    ProgressionStore,
    best_time_key,
    stars_key,
)
from storage import SQLitePreferencesRepository


def win(level_id: int, stars: int = 3, seconds: float | None = 30.0) -> LevelOutcome:
    """Build a winning outcome."""
    return LevelOutcome(
        level_id=level_id,
        won=True,
        lives_remaining=stars,
        max_lives=3,
        score=stars * 100,
        stars=stars,
        elapsed_seconds=seconds,
    )


class TestKeys:
    """Tests for preference key naming."""

    def test_key_names(self):
        """Keys follow the Level_{id}_* scheme."""
        assert HIGHEST_LEVEL_KEY == "HighestLevelUnlocked"
        assert stars_key(4) == "Level_4_Stars"
        assert best_time_key(4) == "Level_4_BestTime"


class TestUnlocking:
    """Tests for level unlocking."""

    def test_new_player(self, progression):
        """A new player has only level 1 unlocked."""
        assert progression.get_highest_unlocked() == 1
        assert progression.is_unlocked(1) is True
        assert progression.is_unlocked(2) is False

    def test_win_unlocks_next_level(self, progression):
        """Winning the frontier level unlocks the next one."""
        assert progression.record_level_completion(1, won=True) is True
        assert progression.get_highest_unlocked() == 2
        assert progression.has_next_level(1) is True

    def test_loss_changes_nothing(self, progression):
        """Losing never unlocks anything."""
        assert progression.record_level_completion(1, won=False) is False
        assert progression.get_highest_unlocked() == 1

    def test_completion_is_idempotent(self, progression):
        """Winning the same level twice unlocks only once."""
        progression.record_level_completion(1, won=True)
        assert progression.record_level_completion(1, won=True) is False
        assert progression.get_highest_unlocked() == 2

    def test_replay_never_lowers(self, progression):
        """Replaying an earlier level keeps the frontier."""
        progression.record_level_completion(1, won=True)
        progression.record_level_completion(2, won=True)
        progression.record_level_completion(1, won=True)
        assert progression.get_highest_unlocked() == 3

    def test_persists_across_instances(self, test_db_path):
        """Unlocks are written through to storage."""
        ProgressionStore(SQLitePreferencesRepository(test_db_path)).record_level_completion(
            1, won=True
        )
        reopened = ProgressionStore(SQLitePreferencesRepository(test_db_path))
        assert reopened.get_highest_unlocked() == 2


class TestStars:
    """Tests for star records."""

    def test_default_zero(self, progression):
        """Unplayed levels have no stars."""
        assert progression.get_level_stars(1) == 0

    def test_only_improvements_stored(self, progression):
        """A worse or equal rating never overwrites the record."""
        assert progression.save_level_stars(1, 2) is True
        assert progression.save_level_stars(1, 1) is False
        assert progression.save_level_stars(1, 2) is False
        assert progression.get_level_stars(1) == 2
        assert progression.save_level_stars(1, 3) is True
        assert progression.get_level_stars(1) == 3

    def test_rejects_out_of_range(self, progression):
        """Stars must be between 0 and 3."""
        with pytest.raises(ValueError):
            progression.save_level_stars(1, 4)
        with pytest.raises(ValueError):
            progression.save_level_stars(1, -1)

    def test_total_stars(self, progression):
        """Total stars sum over the listed levels."""
        progression.save_level_stars(1, 3)
        progression.save_level_stars(2, 1)
        assert progression.get_total_stars([1, 2, 3]) == 4

    def test_all_complete(self, progression):
        """All complete means three stars everywhere."""
        progression.save_level_stars(1, 3)
        progression.save_level_stars(2, 2)
        assert progression.is_all_complete([1, 2]) is False
        progression.save_level_stars(2, 3)
        assert progression.is_all_complete([1, 2]) is True


class TestBestTime:
    """Tests for best time records."""

    def test_unset_until_first_win(self, progression):
        """No best time before a win."""
        assert progression.get_best_time(1) is None

    def test_only_faster_times_stored(self, progression):
        """A slower time never replaces the record."""
        assert progression.save_best_time(1, 50.0) is True
        assert progression.save_best_time(1, 60.0) is False
        assert progression.save_best_time(1, 45.5) is True
        assert progression.get_best_time(1) == pytest.approx(45.5)

    def test_rejects_negative(self, progression):
        """Negative durations are invalid."""
        with pytest.raises(ValueError):
            progression.save_best_time(1, -1.0)


class TestRecordOutcome:
    """Tests for applying session outcomes."""

    def test_win_updates_everything(self, progression):
        """A win unlocks, and stores stars and time."""
        assert progression.record_outcome(win(1, stars=2, seconds=80.0)) is True
        assert progression.get_highest_unlocked() == 2
        assert progression.get_level_stars(1) == 2
        assert progression.get_best_time(1) == pytest.approx(80.0)

    def test_loss_is_ignored(self, progression):
        """A failed session leaves progression untouched."""
        outcome = LevelOutcome(level_id=1, won=False, lives_remaining=0, max_lives=3)
        assert progression.record_outcome(outcome) is False
        assert progression.get_highest_unlocked() == 1
        assert progression.get_level_stars(1) == 0

    def test_worse_replay_keeps_records(self, progression):
        """Replaying worse and slower keeps the earlier records."""
        progression.record_outcome(win(1, stars=3, seconds=20.0))
        progression.record_outcome(win(1, stars=1, seconds=90.0))
        assert progression.get_level_stars(1) == 3
        assert progression.get_best_time(1) == pytest.approx(20.0)

    def test_load_record(self, progression):
        """load_record snapshots unlocks, stars and times."""
        progression.record_outcome(win(1, stars=3, seconds=12.0))
        record = progression.load_record([1, 2])
        assert record.highest_unlocked == 2
        assert record.stars == {1: 3}
        assert record.best_times == {1: pytest.approx(12.0)}


class TestReset:
    """Tests for resetting progression."""

    def test_reset_progress(self, progression):
        """Reset returns the player to a new state."""
        progression.record_outcome(win(1))
        progression.record_outcome(win(2))
        progression.reset_progress()

        assert progression.get_highest_unlocked() == 1
        assert progression.get_level_stars(1) == 0
        assert progression.get_best_time(2) is None

    def test_reset_keeps_unrelated_keys(self, preferences_repo, progression):
        """Only progression keys are removed."""
        preferences_repo.set_int("SoundVolume", 7)
        progression.record_outcome(win(1))
        progression.reset_progress()
        assert preferences_repo.get_int("SoundVolume", 0) == 7
