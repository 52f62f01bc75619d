# activities/ledger.py
"""
Check-in ledger: one attendance claim per (member, activity), decided once
by an administrator.
"""
import logging

from django.utils import timezone

from core.exceptions import Conflict, InvalidTransition, PreconditionFailed, ValidationError
from core.sanitizers import sanitize_evidence
from rewards.accountant import RewardAccountant
from .models import CheckIn
from .repositories import DjangoActivityRepository, DjangoCheckInRepository
from .state_machine import CHECKIN_DECISIONS, is_checkin_open

logger = logging.getLogger('club.activities')


class CheckInLedger:
    def __init__(self, activities=None, check_ins=None, accountant=None):
        self.activities = activities or DjangoActivityRepository()
        self.check_ins = check_ins or DjangoCheckInRepository()
        self.accountant = accountant or RewardAccountant()

    def submit(self, user_id, activity_id, evidence=None):
        """
        Record a pending check-in for `user_id`.

        Order of checks: activity exists, check-in open, evidence present
        when required, no earlier check-in for the pair.
        """
        activity = self.activities.get(activity_id)

        is_open, reason = is_checkin_open(activity)
        if not is_open:
            raise PreconditionFailed(reason)

        evidence = sanitize_evidence(evidence)
        if activity.requires_evidence and not evidence:
            raise ValidationError(
                "Evidence is required for this activity",
                fields={"evidence": "This field is required."},
            )

        with self.check_ins.atomic():
            # Fast fail; the unique constraint is what actually decides races
            if self.check_ins.exists(user_id, activity.id):
                raise Conflict("Already checked in to this activity")

            check_in = self.check_ins.add(
                user_id=user_id,
                activity_id=activity.id,
                evidence=evidence or None,
                checked_at=timezone.now(),
            )

        logger.info(f"Check-in submitted: id={check_in.id}, user={user_id}, activity={activity.id}")
        return check_in

    def review(self, check_in_id, decision, reviewer_id=None):
        """
        Decide a pending check-in as attended or rejected.

        Only pending check-ins can be decided, so a retried or concurrent
        review raises InvalidTransition instead of crediting twice. On
        attended, the reward is settled in the same transaction.
        """
        if decision not in CHECKIN_DECISIONS:
            raise ValidationError(
                f"Invalid decision: {decision}",
                fields={"decision": f"Must be one of {', '.join(CHECKIN_DECISIONS)}."},
            )

        with self.check_ins.atomic():
            check_in = self.check_ins.get(check_in_id, for_update=True)

            if check_in.status != CheckIn.STATUS_PENDING:
                raise InvalidTransition(f"Check-in already {check_in.status}")

            # Captured now: later gem_amount edits never touch settled rewards
            activity = self.activities.get(check_in.activity_id)
            gem_amount = activity.gem_amount

            if not self.check_ins.decide(check_in.id, decision, reviewer_id, timezone.now()):
                raise InvalidTransition("Check-in was already reviewed")

            if decision == CheckIn.STATUS_ATTENDED:
                self.accountant.credit(check_in, gem_amount)

            check_in = self.check_ins.get(check_in.id)

        logger.info(
            f"Check-in reviewed: id={check_in.id}, decision={decision}, "
            f"reviewer={reviewer_id or 'unknown'}"
        )
        return check_in

    def for_user(self, user_id):
        return self.check_ins.for_user(user_id)
