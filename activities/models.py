# activities/models.py
from django.db import models
from django.conf import settings
from django.utils import timezone


class Activity(models.Model):
    STATUS_UPCOMING = "upcoming"
    STATUS_ONGOING = "ongoing"
    STATUS_COMPLETED = "completed"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_UPCOMING, "Upcoming"),
        (STATUS_ONGOING, "Ongoing"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    title = models.CharField(max_length=255)
    # Free-form category: "workshop", "talk", "hackathon", ...
    type = models.CharField(max_length=64)
    starts_at = models.DateTimeField()
    ends_at = models.DateTimeField(blank=True, null=True)
    location = models.CharField(max_length=255, blank=True, null=True)
    description = models.TextField(blank=True, null=True)

    checkin_enabled = models.BooleanField(default=True)
    requires_evidence = models.BooleanField(default=False)
    status = models.CharField(max_length=32, choices=STATUS_CHOICES, default=STATUS_UPCOMING)
    gem_amount = models.PositiveIntegerField(default=0, help_text="Gems granted per confirmed attendance")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-starts_at", "-id"]
        indexes = [
            models.Index(fields=["starts_at"], name="activity_starts_idx"),
            models.Index(fields=["status", "starts_at"], name="activity_status_starts_idx"),
        ]

    def __str__(self):
        return self.title


class CheckIn(models.Model):
    STATUS_PENDING = "pending"
    STATUS_ATTENDED = "attended"
    STATUS_REJECTED = "rejected"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_ATTENDED, "Attended"),
        (STATUS_REJECTED, "Rejected"),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="check_ins",
    )
    # PROTECT: an activity with check-ins cannot be hard-deleted
    activity = models.ForeignKey(
        Activity,
        on_delete=models.PROTECT,
        related_name="check_ins",
    )
    checked_at = models.DateTimeField(default=timezone.now)
    status = models.CharField(max_length=32, choices=STATUS_CHOICES, default=STATUS_PENDING)
    evidence = models.TextField(blank=True, null=True)

    reviewed_at = models.DateTimeField(blank=True, null=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="reviewed_check_ins",
        null=True,
        blank=True,
    )

    # Reward marker, written by rewards.accountant in the review transaction
    rewarded_at = models.DateTimeField(blank=True, null=True)
    gems_awarded = models.PositiveIntegerField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["user", "activity"],
                name="unique_checkin_per_user_activity",
            ),
        ]
        indexes = [
            models.Index(fields=["activity", "checked_at"], name="checkin_activity_checked_idx"),
            models.Index(fields=["user", "checked_at"], name="checkin_user_checked_idx"),
        ]

    @property
    def is_rewarded(self):
        return self.rewarded_at is not None

    def __str__(self):
        return f"{self.user_id} @ {self.activity_id} ({self.status})"
