# activities/state_machine.py
"""
Activity State Machine.

Enforces valid state transitions for the activity lifecycle:
upcoming → ongoing → completed
    └────────┴──→ cancelled

completed and cancelled are terminal.
Any transition not in VALID_TRANSITIONS is rejected.
"""
from typing import Tuple
import logging

from core.exceptions import InvalidTransition, ValidationError
from .models import Activity, CheckIn

logger = logging.getLogger('club.activities')


# Valid state transitions: from_status -> list of allowed to_statuses
VALID_TRANSITIONS = {
    Activity.STATUS_UPCOMING: [Activity.STATUS_ONGOING, Activity.STATUS_CANCELLED],
    Activity.STATUS_ONGOING: [Activity.STATUS_COMPLETED, Activity.STATUS_CANCELLED],
    Activity.STATUS_COMPLETED: [],
    Activity.STATUS_CANCELLED: [],
}

# Statuses in which members may still check in
CHECKIN_OPEN_STATUSES = (Activity.STATUS_UPCOMING, Activity.STATUS_ONGOING)

# Check-in decisions are one-shot: only pending may be decided
CHECKIN_DECISIONS = (CheckIn.STATUS_ATTENDED, CheckIn.STATUS_REJECTED)


def is_valid_status(status) -> bool:
    return status in dict(Activity.STATUS_CHOICES)


def get_allowed_transitions(status: str) -> list:
    return VALID_TRANSITIONS.get(status, [])


def is_terminal_status(status: str) -> bool:
    return status in VALID_TRANSITIONS and len(VALID_TRANSITIONS[status]) == 0


def can_transition(current_status: str, new_status: str) -> Tuple[bool, str]:
    """
    Check if an activity can move from current_status to new_status.

    Returns (can_transition: bool, reason: str)
    """
    if not is_valid_status(new_status):
        return False, f"Invalid status: {new_status}"

    if new_status == current_status:
        return True, "Same status"

    if is_terminal_status(current_status):
        return False, f"Activity is {current_status}; its status can no longer change"

    if new_status not in get_allowed_transitions(current_status):
        return False, f"Cannot transition from '{current_status}' to '{new_status}'"

    return True, ""


def ensure_transition(activity, new_status: str, actor=None) -> None:
    """
    Raise unless `activity` may move to `new_status`.

    Unknown statuses are a ValidationError; known but disallowed moves are
    an InvalidTransition.
    """
    if not is_valid_status(new_status):
        raise ValidationError(
            f"Invalid status: {new_status}",
            fields={"status": f"Must be one of {', '.join(VALID_TRANSITIONS)}."},
        )

    can, reason = can_transition(activity.status, new_status)
    if not can:
        logger.warning(
            f"Invalid state transition attempted: activity={activity.id}, "
            f"from={activity.status}, to={new_status}, actor={actor or 'unknown'}. "
            f"Reason: {reason}"
        )
        raise InvalidTransition(reason)


def is_checkin_open(activity) -> Tuple[bool, str]:
    """
    Check whether members may submit check-ins for an activity.
    """
    if not activity.checkin_enabled:
        return False, "Check-in is disabled for this activity"

    if activity.status not in CHECKIN_OPEN_STATUSES:
        return False, f"Check-in is closed for {activity.status} activities"

    return True, ""
