import time

from django.conf import settings
from django.db import DatabaseError, connections
from rest_framework import status
from rest_framework.views import APIView
from rest_framework.permissions import AllowAny
from rest_framework.response import Response


def _database_reachable() -> bool:
    try:
        with connections["default"].cursor() as cursor:
            cursor.execute("SELECT 1")
        return True
    except DatabaseError:
        return False


class HealthCheckView(APIView):
    """
    GET /api/health/  (public, used by uptime checks)

    The database is required: 503 when it cannot be reached.
    The assistant is optional: without GEMINI_API_KEY only chat fails.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        started = time.monotonic()
        db_ok = _database_reachable()

        payload = {
            "status": "ok" if db_ok else "degraded",
            "club": settings.CLUB_NAME,
            "checks": {
                "database": db_ok,
                "assistant_configured": bool(settings.ASSISTANT.get("API_KEY")),
            },
            "latency_ms": int((time.monotonic() - started) * 1000),
        }
        return Response(
            payload,
            status=status.HTTP_200_OK if db_ok else status.HTTP_503_SERVICE_UNAVAILABLE,
        )
