"""Unit tests for XP System (wellness/gamification/xp_system.py)"""
import pytest

from wellness.gamification.xp_system import (
    ACTIVITY_XP,
    calculate_level,
    calculate_level_from_xp,
    get_xp_for_activity,
)


# ============================================================================
# Level Calculation Tests
# ============================================================================

@pytest.mark.parametrize("total_xp, expected_level", [
    (0, 1),
    (99, 1),
    (100, 2),
    (105, 2),
    (199, 2),
    (200, 3),
    (450, 5),
])
def test_calculate_level(total_xp, expected_level):
    """Level is floor(xp / 100) + 1"""
    assert calculate_level(total_xp) == expected_level


def test_level_info_mid_level():
    """Test progress-bar values inside a level"""
    info = calculate_level_from_xp(130)

    assert info.current_level == 2
    assert info.xp_in_current_level == 30
    assert info.xp_to_next_level == 70
    assert info.progress_percentage == pytest.approx(30.0)


def test_level_info_exact_boundary():
    """Test a user exactly on a level boundary has a full level to go"""
    info = calculate_level_from_xp(100)

    assert info.current_level == 2
    assert info.xp_in_current_level == 0
    assert info.xp_to_next_level == 100


def test_level_info_fresh_user():
    info = calculate_level_from_xp(0)

    assert info.current_level == 1
    assert info.xp_to_next_level == 100
    assert info.progress_percentage == 0


# ============================================================================
# Activity Award Tests
# ============================================================================

def test_activity_awards():
    """Test XP table matches the dashboard's advertised rewards"""
    assert get_xp_for_activity("task") == (10, "Task completed")
    assert get_xp_for_activity("mood") == (5, "Mood tracked")
    assert get_xp_for_activity("journal") == (15, "Journal entry")
    assert get_xp_for_activity("wordle") == (20, "Wordle completed")
    assert get_xp_for_activity("streak") == (20, "Daily streak claimed")


def test_all_awards_positive():
    assert all(award.amount > 0 for award in ACTIVITY_XP.values())


def test_unknown_activity():
    with pytest.raises(KeyError):
        get_xp_for_activity("meditation")
