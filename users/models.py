# users/models.py
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    ROLE_MEMBER = 'member'
    ROLE_ADMIN = 'admin'

    ROLE_CHOICES = (
        (ROLE_MEMBER, 'Member'),
        (ROLE_ADMIN, 'Admin'),
    )

    role = models.CharField(
        max_length=30,
        choices=ROLE_CHOICES,
        default=ROLE_MEMBER
    )

    # Display label shown next to the member (e.g. "Core Team", "Lead")
    club_role = models.CharField(max_length=64, blank=True, null=True)
    avatar = models.CharField(max_length=1024, blank=True, null=True)

    # Written only through users.balances.GemBalanceStore
    gems = models.PositiveIntegerField(default=0, db_index=True)

    def __str__(self):
        return self.username
