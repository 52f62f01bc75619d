from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.exceptions import PermissionDenied
from rest_framework import status

from activities.ledger import CheckInLedger
from activities.permissions import IsClubAdmin, is_admin, is_self
from activities.serializers import (
    CheckInSerializer,
    ReviewCheckInSerializer,
    SubmitCheckInSerializer,
)


class SubmitCheckInView(APIView):
    """
    POST /api/activities/<activity_id>/check-in/
    Body: { "evidence": "<url or note>" }   (required only if the activity asks for it)
    """
    permission_classes = [IsAuthenticated]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "checkin-submit"

    def post(self, request, activity_id):
        serializer = SubmitCheckInSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        check_in = CheckInLedger().submit(
            user_id=request.user.pk,
            activity_id=activity_id,
            evidence=serializer.validated_data.get("evidence"),
        )
        return Response(CheckInSerializer(check_in).data, status=status.HTTP_201_CREATED)


class ReviewCheckInView(APIView):
    """
    POST /api/activities/check-ins/<check_in_id>/review/
    Body: { "decision": "attended" | "rejected" }
    """
    permission_classes = [IsClubAdmin]

    def post(self, request, check_in_id):
        serializer = ReviewCheckInSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        check_in = CheckInLedger().review(
            check_in_id,
            serializer.validated_data["decision"],
            reviewer_id=request.user.pk,
        )
        return Response(CheckInSerializer(check_in).data)


class UserCheckInsView(APIView):
    """
    GET /api/activities/me/check-ins/
    GET /api/activities/users/<user_id>/check-ins/   (self or admin)
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, user_id=None):
        if user_id is None:
            user_id = request.user.pk
        elif not (is_self(request.user, user_id) or is_admin(request.user)):
            raise PermissionDenied("You can only view your own check-ins.")

        check_ins = CheckInLedger().for_user(user_id)
        return Response(CheckInSerializer(check_ins, many=True).data)
