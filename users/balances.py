# users/balances.py
"""
Gem balance store.

The user's gem total is owned by the users app, but the only code path that
mutates it is rewards.accountant.RewardAccountant, which calls credit_gems()
inside its own transaction.
"""
import logging

from django.contrib.auth import get_user_model
from django.db.models import F

from core.exceptions import NotFound, ValidationError

logger = logging.getLogger('club.rewards')


class GemBalanceStore:
    def credit_gems(self, user_id, amount: int) -> int:
        """
        Add `amount` gems to the user's balance and return the new balance.

        Uses an F() expression so concurrent credits to the same user never
        overwrite each other.
        """
        if amount < 0:
            raise ValidationError("Gem credits cannot be negative")

        User = get_user_model()
        updated = User.objects.filter(pk=user_id).update(gems=F('gems') + amount)
        if not updated:
            raise NotFound("User not found")

        balance = User.objects.filter(pk=user_id).values_list('gems', flat=True).get()
        logger.info(f"Gems credited: user={user_id}, amount={amount}, balance={balance}")
        return balance

    def balance_of(self, user_id) -> int:
        User = get_user_model()
        try:
            return User.objects.filter(pk=user_id).values_list('gems', flat=True).get()
        except User.DoesNotExist:
            raise NotFound("User not found")
