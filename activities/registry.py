# activities/registry.py
"""
Activity registry: create, read, partially update and delete activities.

Partial updates go through ActivityPatch, a typed structure with one slot
per attribute. A slot left at UNSET is "absent" and never touched; an
explicit None is a real value (and is rejected for required attributes).
"""
from dataclasses import dataclass, fields as dataclass_fields
from datetime import datetime
from typing import Any
import logging

from django.utils import timezone

from core.exceptions import ValidationError
from core.sanitizers import (
    MAX_LOCATION_LENGTH,
    MAX_TITLE_LENGTH,
    MAX_TYPE_LENGTH,
    sanitize_description,
    sanitize_text,
    sanitize_title,
    validate_gem_amount,
)
from .models import Activity
from .repositories import DjangoActivityRepository
from .state_machine import ensure_transition, is_valid_status

logger = logging.getLogger('club.activities')


class _Unset:
    def __bool__(self):
        return False

    def __repr__(self):
        return "UNSET"


UNSET = _Unset()

REQUIRED_FIELDS = ("title", "type", "starts_at")
NULLABLE_FIELDS = ("ends_at", "location", "description")

DEFAULTS = {
    "checkin_enabled": True,
    "requires_evidence": False,
    "status": Activity.STATUS_UPCOMING,
    "gem_amount": 0,
}


@dataclass
class ActivityPatch:
    title: Any = UNSET
    type: Any = UNSET
    starts_at: Any = UNSET
    ends_at: Any = UNSET
    location: Any = UNSET
    description: Any = UNSET
    checkin_enabled: Any = UNSET
    requires_evidence: Any = UNSET
    status: Any = UNSET
    gem_amount: Any = UNSET

    @classmethod
    def field_names(cls):
        return tuple(f.name for f in dataclass_fields(cls))

    @classmethod
    def from_mapping(cls, data):
        """Build a patch from any mapping; unknown keys are ignored."""
        names = cls.field_names()
        return cls(**{key: value for key, value in data.items() if key in names})

    def present(self) -> dict:
        return {
            name: getattr(self, name)
            for name in self.field_names()
            if getattr(self, name) is not UNSET
        }

    def is_empty(self) -> bool:
        return not self.present()


def _clean_value(name, value):
    """
    Normalize one attribute value. Raises ValidationError for bad values.
    """
    if name in ("title", "type"):
        if value is not None and not isinstance(value, str):
            raise ValidationError(f"{name} must be text", fields={name: "Must be a string."})
        max_length = MAX_TITLE_LENGTH if name == "title" else MAX_TYPE_LENGTH
        cleaned = sanitize_title(value, max_length=max_length, field=name)
        if not cleaned:
            raise ValidationError(f"{name} cannot be empty", fields={name: "This field may not be blank."})
        return cleaned

    if name in ("starts_at", "ends_at"):
        if value is None:
            if name == "starts_at":
                raise ValidationError("starts_at is required", fields={name: "This field may not be null."})
            return None
        if not isinstance(value, datetime):
            raise ValidationError(f"{name} must be a datetime", fields={name: "Must be a datetime."})
        if timezone.is_naive(value):
            value = timezone.make_aware(value)
        return value

    if name == "location":
        return sanitize_text(value, max_length=MAX_LOCATION_LENGTH, field="location") or None

    if name == "description":
        return sanitize_description(value) or None

    if name in ("checkin_enabled", "requires_evidence"):
        if not isinstance(value, bool):
            raise ValidationError(f"{name} must be a boolean", fields={name: "Must be true or false."})
        return value

    if name == "status":
        if not is_valid_status(value):
            raise ValidationError(f"Invalid status: {value}", fields={"status": "Unknown status."})
        return value

    if name == "gem_amount":
        return validate_gem_amount(value)

    return value


def _check_schedule(starts_at, ends_at):
    if starts_at and ends_at and ends_at < starts_at:
        raise ValidationError(
            "ends_at must not be before starts_at",
            fields={"ends_at": "ends_at must be on or after starts_at."},
        )


class ActivityRegistry:
    def __init__(self, activities=None):
        self.activities = activities or DjangoActivityRepository()

    def list_activities(self, limit=None, offset=0):
        """Returns (total, activities) ordered by starts_at, newest first."""
        return self.activities.list(limit=limit, offset=offset)

    def get(self, activity_id):
        return self.activities.get(activity_id)

    def create(self, data, actor=None):
        """
        Create an activity from a mapping of attribute values.

        title, type and starts_at are required; everything else falls back
        to DEFAULTS or None. Nothing is persisted when validation fails.
        """
        missing = [name for name in REQUIRED_FIELDS if data.get(name) in (None, "")]
        if missing:
            raise ValidationError(
                "title, type, and starts_at are required",
                fields={name: "This field is required." for name in missing},
            )

        values = {}
        for name in ActivityPatch.field_names():
            if name in data:
                values[name] = _clean_value(name, data[name])
            elif name in DEFAULTS:
                values[name] = DEFAULTS[name]

        _check_schedule(values["starts_at"], values.get("ends_at"))

        activity = self.activities.add(**values)
        logger.info(f"Activity created: id={activity.id}, title={activity.title!r}, actor={actor or 'unknown'}")
        return activity

    def update(self, activity_id, patch: ActivityPatch, actor=None):
        """
        Apply only the attributes present in `patch` and refresh updated_at.

        An empty patch is rejected, not treated as a no-op.
        """
        changes = patch.present()
        if not changes:
            raise ValidationError("No fields to update")

        with self.activities.atomic():
            activity = self.activities.get(activity_id)

            cleaned = {}
            for name in ActivityPatch.field_names():
                if name not in changes:
                    continue
                value = changes[name]
                if value is None and name not in NULLABLE_FIELDS:
                    raise ValidationError(f"{name} may not be null", fields={name: "This field may not be null."})
                cleaned[name] = _clean_value(name, value)

            if "status" in cleaned:
                ensure_transition(activity, cleaned["status"], actor=actor)

            _check_schedule(
                cleaned.get("starts_at", activity.starts_at),
                cleaned.get("ends_at", activity.ends_at),
            )

            for name, value in cleaned.items():
                setattr(activity, name, value)
            self.activities.save(activity, list(cleaned))

        logger.info(
            f"Activity updated: id={activity.id}, fields={sorted(cleaned)}, actor={actor or 'unknown'}"
        )
        return activity

    def delete(self, activity_id, actor=None):
        """
        Hard-delete an activity. Refused while check-ins reference it.
        Returns the identity of the deleted record.
        """
        with self.activities.atomic():
            activity = self.activities.get(activity_id)
            deleted = {"id": activity.id, "title": activity.title}
            self.activities.remove(activity)

        logger.info(f"Activity deleted: id={deleted['id']}, actor={actor or 'unknown'}")
        return deleted
