"""
Streak Service for BPTracker

Consecutive-day logging streaks with milestone tracking and badges.
"""

from datetime import date, timedelta
from typing import List, Optional, Sequence

from bptracker.calculations.constants import STREAK_MILESTONES
from bptracker.models import BloodPressureReading, MilestoneBadge, StreakData
from bptracker.utils.time_utils import ensure_utc, utc_now

# (minimum streak, emoji, title, description, color), highest first
BADGES = (
    (365, "👑", "Legend", "1 Year Streak!", "yellow"),
    (180, "💎", "Diamond", "6 Month Streak!", "cyan"),
    (90, "🏆", "Champion", "90 Day Streak!", "purple"),
    (60, "🌟", "Superstar", "60 Day Streak!", "indigo"),
    (30, "⭐", "Star", "30 Day Streak!", "yellow"),
    (21, "🔥", "Hot Streak", "3 Week Streak!", "orange"),
    (14, "💪", "Strong", "2 Week Streak!", "blue"),
    (7, "🎯", "Consistent", "1 Week Streak!", "green"),
    (3, "🌱", "Growing", "3 Day Streak!", "lime"),
)

STARTER_BADGE = MilestoneBadge(
    emoji="🆕",
    title="Getting Started",
    description="Keep it up!",
    color="gray",
)


def calculate_streak(
    readings: Sequence[BloodPressureReading],
    today: Optional[date] = None
) -> StreakData:
    """
    Current and longest daily logging streak.

    The current streak survives one day of grace: it counts only when the
    latest reading is from today or yesterday (UTC).

    Args:
        readings: BP readings in any order
        today: Reference day, defaults to the current UTC date

    Returns:
        StreakData with milestone progress toward the next of
        3, 7, 14, 21, 30, 60, 90, 180, 365 days
    """
    if not readings:
        return StreakData(
            next_milestone=STREAK_MILESTONES[0],
            days_until_milestone=STREAK_MILESTONES[0],
        )

    reference = today or utc_now().date()
    latest = max(readings, key=lambda reading: ensure_utc(reading.measured_at))
    days: List[date] = sorted(
        {ensure_utc(reading.measured_at).date() for reading in readings},
        reverse=True,
    )

    current_streak = 0
    if days[0] in (reference, reference - timedelta(days=1)):
        current_streak = 1
        expected = days[0] - timedelta(days=1)
        for day in days[1:]:
            if day != expected:
                break
            current_streak += 1
            expected -= timedelta(days=1)

    longest_streak = 0
    run = 1
    for newer, older in zip(days, days[1:]):
        if (newer - older).days == 1:
            run += 1
            longest_streak = max(longest_streak, run)
        else:
            run = 1
    longest_streak = max(longest_streak, run, current_streak)

    next_milestone = next(
        (milestone for milestone in STREAK_MILESTONES if milestone > current_streak),
        STREAK_MILESTONES[-1],
    )
    previous_milestone = next(
        (milestone for milestone in reversed(STREAK_MILESTONES) if milestone <= current_streak),
        0,
    )
    if previous_milestone == next_milestone:
        progress = 100
    else:
        progress = (current_streak - previous_milestone) / (next_milestone - previous_milestone) * 100

    return StreakData(
        current_streak=current_streak,
        longest_streak=longest_streak,
        last_log_date=ensure_utc(latest.measured_at),
        next_milestone=next_milestone,
        days_until_milestone=next_milestone - current_streak,
        milestone_progress=round(progress),
    )


def get_milestone_badge(streak: int) -> MilestoneBadge:
    """Badge for the highest milestone reached."""
    for minimum, emoji, title, description, color in BADGES:
        if streak >= minimum:
            return MilestoneBadge(emoji=emoji, title=title, description=description, color=color)
    return STARTER_BADGE


def get_motivational_message(days_until_milestone: int) -> str:
    if days_until_milestone == 0:
        return "🎉 Milestone reached! Amazing work!"
    if days_until_milestone == 1:
        return "🎉 One more day to your next milestone!"
    if days_until_milestone <= 3:
        return "🔥 You're so close! Keep going!"
    if days_until_milestone <= 7:
        return "💪 Great progress! Stay consistent!"
    return "🌟 Stay consistent to reach your next goal!"
