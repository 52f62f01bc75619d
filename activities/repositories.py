# activities/repositories.py
"""
Persistence seams for activities and check-ins.

Services talk to these repositories instead of the ORM so they can be
exercised against an in-memory store in tests. The Django implementations
are the defaults everywhere else.
"""
from typing import List, Optional, Tuple

from django.db import IntegrityError, transaction
from django.db.models import ProtectedError

from core.exceptions import Conflict, NotFound, PreconditionFailed
from .models import Activity, CheckIn


class ActivityRepository:
    def atomic(self):
        raise NotImplementedError

    def list(self, limit: Optional[int] = None, offset: int = 0) -> Tuple[int, list]:
        raise NotImplementedError

    def get(self, activity_id):
        raise NotImplementedError

    def add(self, **fields):
        raise NotImplementedError

    def save(self, activity, fields: List[str]) -> None:
        raise NotImplementedError

    def remove(self, activity) -> None:
        raise NotImplementedError


class CheckInRepository:
    def atomic(self):
        raise NotImplementedError

    def get(self, check_in_id, for_update: bool = False):
        raise NotImplementedError

    def exists(self, user_id, activity_id) -> bool:
        raise NotImplementedError

    def add(self, user_id, activity_id, evidence, checked_at):
        raise NotImplementedError

    def decide(self, check_in_id, decision, reviewer_id, reviewed_at) -> bool:
        raise NotImplementedError

    def for_activity(self, activity_id) -> list:
        raise NotImplementedError

    def for_user(self, user_id) -> list:
        raise NotImplementedError


class DjangoActivityRepository(ActivityRepository):
    def atomic(self):
        return transaction.atomic()

    def list(self, limit=None, offset=0):
        qs = Activity.objects.order_by("-starts_at", "-id")
        total = qs.count()
        if limit is None:
            return total, list(qs[offset:])
        return total, list(qs[offset:offset + limit])

    def get(self, activity_id):
        try:
            return Activity.objects.get(pk=activity_id)
        except Activity.DoesNotExist:
            raise NotFound("Activity not found")

    def add(self, **fields):
        return Activity.objects.create(**fields)

    def save(self, activity, fields):
        # updated_at is auto_now and refreshed on every save
        activity.save(update_fields=list(fields) + ["updated_at"])

    def remove(self, activity):
        try:
            with transaction.atomic():
                activity.delete()
        except (ProtectedError, IntegrityError):
            raise PreconditionFailed(
                "Activity has check-ins and cannot be deleted; cancel it instead"
            )


class DjangoCheckInRepository(CheckInRepository):
    def atomic(self):
        return transaction.atomic()

    def get(self, check_in_id, for_update=False):
        qs = CheckIn.objects.select_related("activity", "user")
        if for_update:
            # Row lock on PostgreSQL; `of` keeps the joined rows unlocked
            qs = qs.select_for_update(of=("self",))
        try:
            return qs.get(pk=check_in_id)
        except CheckIn.DoesNotExist:
            raise NotFound("Check-in not found")

    def exists(self, user_id, activity_id):
        return CheckIn.objects.filter(user_id=user_id, activity_id=activity_id).exists()

    def add(self, user_id, activity_id, evidence, checked_at):
        # Savepoint: a uniqueness violation must not break the caller's transaction
        try:
            with transaction.atomic():
                return CheckIn.objects.create(
                    user_id=user_id,
                    activity_id=activity_id,
                    evidence=evidence,
                    checked_at=checked_at,
                )
        except IntegrityError:
            raise Conflict("Already checked in to this activity")

    def decide(self, check_in_id, decision, reviewer_id, reviewed_at):
        # Compare-and-set: only a pending row may be decided
        updated = CheckIn.objects.filter(
            pk=check_in_id,
            status=CheckIn.STATUS_PENDING,
        ).update(
            status=decision,
            reviewed_by_id=reviewer_id,
            reviewed_at=reviewed_at,
        )
        return updated == 1

    def for_activity(self, activity_id):
        return list(
            CheckIn.objects
            .filter(activity_id=activity_id)
            .select_related("user")
            .order_by("-checked_at", "-id")
        )

    def for_user(self, user_id):
        return list(
            CheckIn.objects
            .filter(user_id=user_id)
            .select_related("activity")
            .order_by("-checked_at", "-id")
        )
