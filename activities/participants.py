# activities/participants.py
from .models import CheckIn
from .repositories import DjangoActivityRepository, DjangoCheckInRepository


def summarize(check_ins) -> dict:
    """
    Attendance counts over one snapshot of check-ins, so the three status
    counts always add up to the total.
    """
    counts = {status: 0 for status, _ in CheckIn.STATUS_CHOICES}
    for check_in in check_ins:
        counts[check_in.status] = counts.get(check_in.status, 0) + 1

    return {
        "total_participants": len(check_ins),
        "attended_count": counts[CheckIn.STATUS_ATTENDED],
        "pending_count": counts[CheckIn.STATUS_PENDING],
        "rejected_count": counts[CheckIn.STATUS_REJECTED],
    }


class ParticipantAggregator:
    """Read-only admin view of who checked in to an activity."""

    def __init__(self, activities=None, check_ins=None):
        self.activities = activities or DjangoActivityRepository()
        self.check_ins = check_ins or DjangoCheckInRepository()

    def list_participants(self, activity_id):
        activity = self.activities.get(activity_id)
        participants = self.check_ins.for_activity(activity.id)

        return {
            "activity": activity,
            "participants": participants,
            "stats": summarize(participants),
        }
