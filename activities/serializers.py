from rest_framework import serializers

from .models import Activity, CheckIn
from .state_machine import CHECKIN_DECISIONS, get_allowed_transitions


# -----------------------------------------
# ACTIVITY SERIALIZERS
# -----------------------------------------
class ActivitySerializer(serializers.ModelSerializer):
    # Statuses an admin may move this activity to next
    allowed_transitions = serializers.SerializerMethodField()

    class Meta:
        model = Activity
        fields = [
            "id",
            "title",
            "type",
            "starts_at",
            "ends_at",
            "location",
            "description",
            "checkin_enabled",
            "requires_evidence",
            "status",
            "allowed_transitions",
            "gem_amount",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_allowed_transitions(self, obj):
        return list(get_allowed_transitions(obj.status))


class ActivityInputSerializer(serializers.Serializer):
    """
    Parses request bodies for create and partial update.

    Only wire-level typing happens here; presence and business rules are
    checked by the registry. Every field is optional and nullable so an
    explicit null reaches the registry as a value distinct from "absent".
    """
    title = serializers.CharField(required=False, allow_null=True, allow_blank=True, trim_whitespace=False)
    type = serializers.CharField(required=False, allow_null=True, allow_blank=True, trim_whitespace=False)
    starts_at = serializers.DateTimeField(required=False, allow_null=True)
    ends_at = serializers.DateTimeField(required=False, allow_null=True)
    location = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    description = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    checkin_enabled = serializers.BooleanField(required=False, allow_null=True)
    requires_evidence = serializers.BooleanField(required=False, allow_null=True)
    status = serializers.ChoiceField(choices=Activity.STATUS_CHOICES, required=False, allow_null=True)
    gem_amount = serializers.IntegerField(required=False, allow_null=True, min_value=0)


class ActivitySummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Activity
        fields = ["id", "title", "type", "status", "gem_amount"]
        read_only_fields = fields


# -----------------------------------------
# CHECK-IN SERIALIZERS
# -----------------------------------------
class CheckInSerializer(serializers.ModelSerializer):
    activity_title = serializers.CharField(source="activity.title", read_only=True)

    class Meta:
        model = CheckIn
        fields = [
            "id",
            "user",
            "activity",
            "activity_title",
            "checked_at",
            "status",
            "evidence",
            "reviewed_at",
            "gems_awarded",
            "created_at",
        ]
        read_only_fields = fields


class SubmitCheckInSerializer(serializers.Serializer):
    evidence = serializers.CharField(required=False, allow_null=True, allow_blank=True)


class ReviewCheckInSerializer(serializers.Serializer):
    decision = serializers.ChoiceField(choices=CHECKIN_DECISIONS)


# -----------------------------------------
# PARTICIPANTS (admin review)
# -----------------------------------------
class ParticipantSerializer(serializers.ModelSerializer):
    user_id = serializers.IntegerField(read_only=True)
    username = serializers.CharField(source="user.username", read_only=True)
    avatar = serializers.CharField(source="user.avatar", read_only=True)
    email = serializers.EmailField(source="user.email", read_only=True)
    club_role = serializers.CharField(source="user.club_role", read_only=True)

    class Meta:
        model = CheckIn
        fields = [
            "id",
            "user_id",
            "checked_at",
            "status",
            "evidence",
            "created_at",
            "username",
            "avatar",
            "email",
            "club_role",
        ]
        read_only_fields = fields
