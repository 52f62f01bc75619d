from django.db import transaction

from activities.models import CheckIn
from .models import GemTransaction


class RewardLedgerRepository:
    def atomic(self):
        raise NotImplementedError

    def record_reward(self, check_in, amount: int, rewarded_at) -> bool:
        """
        Persist the reward marker for `check_in`.
        Returns False if the check-in had already been rewarded.
        """
        raise NotImplementedError


class DjangoRewardLedgerRepository(RewardLedgerRepository):
    def atomic(self):
        return transaction.atomic()

    def record_reward(self, check_in, amount, rewarded_at):
        # Conditional update is the marker; losing callers see 0 rows
        marked = CheckIn.objects.filter(
            pk=check_in.pk,
            rewarded_at__isnull=True,
        ).update(rewarded_at=rewarded_at, gems_awarded=amount)
        if not marked:
            return False

        # One-to-one on check_in: a second row can never be written
        GemTransaction.objects.create(
            user_id=check_in.user_id,
            check_in_id=check_in.pk,
            amount=amount,
            reason=GemTransaction.REASON_ACTIVITY_ATTENDED,
        )

        check_in.rewarded_at = rewarded_at
        check_in.gems_awarded = amount
        return True
