# assistant/services.py
# Stateless club assistant backed by Gemini.

import logging
from functools import lru_cache

from django.conf import settings
from google import genai
from google.genai import types

from core.exceptions import UpstreamFailure, ValidationError

logger = logging.getLogger("club.assistant")

FALLBACK_REPLY = "I'm sorry, I don't have that information at the moment."


def system_instruction() -> str:
    club = settings.CLUB_NAME
    return (
        f'You are a helpful assistant for the "{club}" club. Provide concise and relevant '
        "answers about the club's activities, membership, events, and other related "
        "information. Answer in plain text without markdown. If you don't know the answer, "
        f'respond with "{FALLBACK_REPLY}"'
    )


@lru_cache(maxsize=1)
def get_client():
    """
    Shared Gemini client (singleton). The API key comes from GEMINI_API_KEY.
    """
    return genai.Client(api_key=settings.ASSISTANT["API_KEY"])


def build_contents(message: str, history=None) -> list:
    """
    Caller-supplied history (Gemini format: {role, parts: [{text}]}) plus the
    new user turn. Anything that is not a list is ignored.
    """
    contents = list(history) if isinstance(history, list) else []
    contents.append({"role": "user", "parts": [{"text": message}]})
    return contents


def clean_message(message) -> str:
    if not isinstance(message, str) or not message.strip():
        raise ValidationError("Message is required", fields={"message": "This field is required."})

    text = message.strip()
    max_length = settings.ASSISTANT["MAX_MESSAGE_LENGTH"]
    if len(text) > max_length:
        raise ValidationError(
            "Message too long",
            fields={"message": f"Ensure this field has no more than {max_length} characters."},
        )
    return text


def generate_reply(message, history=None, client=None) -> str:
    """
    (message, history) -> reply. Nothing is stored server-side.
    """
    text = clean_message(message)
    contents = build_contents(text, history)

    try:
        client = client or get_client()
        response = client.models.generate_content(
            model=settings.ASSISTANT["MODEL"],
            contents=contents,
            config=types.GenerateContentConfig(
                system_instruction=system_instruction(),
                temperature=settings.ASSISTANT["TEMPERATURE"],
                thinking_config=types.ThinkingConfig(include_thoughts=False),
            ),
        )
    except Exception as e:
        logger.error(f"Assistant upstream error: {e}")
        raise UpstreamFailure("Failed to fetch response from the assistant")

    reply = (getattr(response, "text", None) or "").strip()
    return reply or FALLBACK_REPLY
