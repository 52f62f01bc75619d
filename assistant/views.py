from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from rest_framework.throttling import ScopedRateThrottle

from .services import generate_reply


class AssistantChatView(APIView):
    """
    POST /api/assistant/chat/
    Body: { "message": "...", "history": [{ "role": "user"|"model", "parts": [{ "text": "..." }] }] }
    """
    permission_classes = [IsAuthenticated]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "assistant"

    def post(self, request):
        reply = generate_reply(
            request.data.get("message"),
            history=request.data.get("history"),
        )
        return Response({"reply": reply})


class AssistantHistoryView(APIView):
    """
    GET /api/assistant/history/
    Conversations are not stored; the client keeps its own history.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response({"messages": []})
