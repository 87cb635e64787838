"""
Streak state transitions for the CircleStreaks application.

Pure functions, no I/O. Rules are evaluated in order:

    1. RESET      not everyone was active today      -> (0, lastStreakDate kept)
    2. UNCHANGED  already credited today              -> state as is
    3. CONTINUE   credited yesterday with streak > 0  -> (streak + 1, today)
    4. RESTART    anything else                       -> (1, today)

The next state depends only on the current state, today's aggregate and the
two date strings, so re-running an evaluation on a duplicate event is safe.
"""

from ..models.circle import StreakState, StreakTransition


def classify_transition(
    state: StreakState, all_active_today: bool, today: str, yesterday: str
) -> StreakTransition:
    """Return which streak rule applies."""
    if not all_active_today:
        return StreakTransition.RESET
    if state.last_streak_date == today:
        return StreakTransition.UNCHANGED
    if state.last_streak_date == yesterday and state.streak > 0:
        return StreakTransition.CONTINUE
    return StreakTransition.RESTART


def apply_transition(
    state: StreakState, kind: StreakTransition, today: str
) -> StreakState:
    """Return the state produced by a classified rule; UNCHANGED returns state itself."""
    if kind is StreakTransition.RESET:
        return StreakState(streak=0, last_streak_date=state.last_streak_date)
    if kind is StreakTransition.UNCHANGED:
        return state
    if kind is StreakTransition.CONTINUE:
        return StreakState(streak=state.streak + 1, last_streak_date=today)
    return StreakState(streak=1, last_streak_date=today)


def transition(
    state: StreakState, all_active_today: bool, today: str, yesterday: str
) -> StreakState:
    """
    Compute a circle's next streak state.

    Args:
        state: Current persisted streak state
        all_active_today: Whether every member was active today
        today: Today's date (YYYY-MM-DD)
        yesterday: Yesterday's date (YYYY-MM-DD)

    Returns:
        The new streak state

    Example:
        >>> transition(StreakState(streak=5, last_streak_date="2024-01-09"),
        ...            True, "2024-01-10", "2024-01-09")
        StreakState(streak=6, last_streak_date='2024-01-10')
    """
    kind = classify_transition(state, all_active_today, today, yesterday)
    return apply_transition(state, kind, today)
