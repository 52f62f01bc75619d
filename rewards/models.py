from django.db import models
from django.conf import settings


class GemTransaction(models.Model):
    """
    Immutable audit trail of gems credited to a member.
    Linked to the CheckIn that earned it ("Why do I have these gems?").

    The one-to-one link is the per-check-in idempotency key: a check-in
    can back at most one credit.
    """
    REASON_ACTIVITY_ATTENDED = "activity.attended"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="gem_transactions",
    )
    amount = models.PositiveIntegerField()
    reason = models.CharField(max_length=64, default=REASON_ACTIVITY_ATTENDED)
    check_in = models.OneToOneField(
        "activities.CheckIn",
        on_delete=models.CASCADE,
        related_name="gem_transaction",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["user", "-created_at"], name="gemtx_user_created_idx"),
        ]

    def __str__(self):
        return f"{self.user} (+{self.amount}): {self.reason}"
