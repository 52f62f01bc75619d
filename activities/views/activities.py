from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status

from activities.permissions import IsClubAdmin, IsClubAdminOrReadOnly
from activities.registry import ActivityPatch, ActivityRegistry
from activities.participants import ParticipantAggregator
from activities.serializers import (
    ActivityInputSerializer,
    ActivitySerializer,
    ActivitySummarySerializer,
    ParticipantSerializer,
)
from .generics import actor_label, parse_pagination


def _parse_input(request):
    # partial: form bodies must not turn absent fields into nulls
    serializer = ActivityInputSerializer(data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


class ActivityListCreateView(APIView):
    """
    GET  /api/activities/   -> public, newest first, ?limit=&offset=
    POST /api/activities/   -> admin only
    """
    permission_classes = [IsClubAdminOrReadOnly]

    def get(self, request):
        limit, offset = parse_pagination(request)
        total, activities = ActivityRegistry().list_activities(limit=limit, offset=offset)

        return Response({
            "count": total,
            "results": ActivitySerializer(activities, many=True).data,
            "limit": limit,
            "offset": offset,
        })

    def post(self, request):
        data = _parse_input(request)
        activity = ActivityRegistry().create(data, actor=actor_label(request))
        return Response(ActivitySerializer(activity).data, status=status.HTTP_201_CREATED)


class ActivityDetailView(APIView):
    """
    GET              /api/activities/<pk>/  -> public
    PUT/PATCH        /api/activities/<pk>/  -> admin, partial update
    DELETE           /api/activities/<pk>/  -> admin
    """
    permission_classes = [IsClubAdminOrReadOnly]

    def get(self, request, pk):
        activity = ActivityRegistry().get(pk)
        return Response(ActivitySerializer(activity).data)

    def patch(self, request, pk):
        patch = ActivityPatch.from_mapping(_parse_input(request))
        activity = ActivityRegistry().update(pk, patch, actor=actor_label(request))
        return Response(ActivitySerializer(activity).data)

    # PUT keeps partial semantics: only supplied fields change
    put = patch

    def delete(self, request, pk):
        deleted = ActivityRegistry().delete(pk, actor=actor_label(request))
        return Response({
            "message": "Activity deleted successfully",
            "deleted_activity": deleted,
        })


class ActivityParticipantsView(APIView):
    """
    GET /api/activities/<activity_id>/participants/
    Check-ins joined with member identity, plus attendance stats.
    """
    permission_classes = [IsClubAdmin]

    def get(self, request, activity_id):
        result = ParticipantAggregator().list_participants(activity_id)

        return Response({
            "activity": ActivitySummarySerializer(result["activity"]).data,
            "participants": ParticipantSerializer(result["participants"], many=True).data,
            "stats": result["stats"],
        })
