import logging

from django.utils import timezone

from core.exceptions import ValidationError
from users.balances import GemBalanceStore
from .repositories import DjangoRewardLedgerRepository

logger = logging.getLogger('club.rewards')


class RewardAccountant:
    """
    The only write path to member gem balances.

    credit() is idempotent per check-in: the reward marker and the balance
    increment are written in one transaction, and the marker is set with a
    conditional update, so retries and concurrent callers credit at most once.
    """

    def __init__(self, ledger=None, balances=None):
        self.ledger = ledger or DjangoRewardLedgerRepository()
        self.balances = balances or GemBalanceStore()

    def credit(self, check_in, amount: int):
        """
        Credit `amount` gems for an attended check-in.

        `amount` is the activity's gem_amount captured when attendance was
        confirmed. Returns the new balance, or None if this check-in was
        already rewarded.
        """
        if amount is None or amount < 0:
            raise ValidationError("Gem credits cannot be negative")

        with self.ledger.atomic():
            if not self.ledger.record_reward(check_in, amount, timezone.now()):
                logger.info(f"Reward already settled: check_in={check_in.id}, user={check_in.user_id}")
                return None

            balance = self.balances.credit_gems(check_in.user_id, amount)

        logger.info(
            f"Reward settled: check_in={check_in.id}, user={check_in.user_id}, "
            f"amount={amount}, balance={balance}"
        )
        return balance
