# core/sanitizers.py
"""
Input sanitization and validation for the club backend.

All member- and admin-supplied text passes through these functions
before being stored or rendered.
"""
import re
from typing import Optional

import bleach

from .exceptions import ValidationError


# Allowed HTML tags for rich text (activity descriptions)
ALLOWED_TAGS = [
    'p', 'br', 'strong', 'em', 'u', 'a', 'ul', 'ol', 'li',
    'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'blockquote', 'code', 'pre'
]

ALLOWED_ATTRIBUTES = {
    'a': ['href', 'title'],
}

MAX_TITLE_LENGTH = 255
MAX_TYPE_LENGTH = 64
MAX_LOCATION_LENGTH = 255
MAX_DESCRIPTION_LENGTH = 10000
MAX_EVIDENCE_LENGTH = 2048
MAX_GEM_AMOUNT = 100000


def _check_length(text: str, max_length: Optional[int], field: str) -> str:
    # Over-long input is rejected, never cut
    if max_length and len(text) > max_length:
        raise ValidationError(
            f"{field} cannot exceed {max_length} characters",
            fields={field: f"Ensure this field has no more than {max_length} characters."},
        )
    return text


def sanitize_text(text: Optional[str], max_length: Optional[int] = None, strip: bool = True,
                  field: str = "text") -> str:
    """
    Sanitize plain text input.

    - Strips leading/trailing whitespace
    - Removes control characters
    - Rejects text longer than max_length
    - Returns empty string for None input
    """
    if text is None:
        return ""

    if strip:
        text = text.strip()

    # Remove control characters except newlines and tabs
    text = re.sub(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]', '', text)

    return _check_length(text, max_length, field)


def sanitize_html(html: Optional[str], max_length: Optional[int] = None, field: str = "text") -> str:
    """
    Sanitize HTML content, removing dangerous elements.
    """
    if html is None:
        return ""

    clean = bleach.clean(
        html.strip(),
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        strip=True
    )

    return _check_length(clean, max_length, field)


def sanitize_title(title: Optional[str], max_length: int = MAX_TITLE_LENGTH, field: str = "title") -> str:
    """
    Sanitize single-line labels (activity titles and types).

    - No newlines
    - Whitespace collapsed
    """
    text = sanitize_text(title, field=field)
    text = re.sub(r'[\r\n]+', ' ', text)
    text = re.sub(r'\s+', ' ', text)
    return _check_length(text, max_length, field)


def sanitize_description(description: Optional[str]) -> str:
    """Max 10000 characters, HTML sanitized."""
    return sanitize_html(description, max_length=MAX_DESCRIPTION_LENGTH, field="description")


def sanitize_evidence(evidence: Optional[str]) -> str:
    """
    Evidence is a link or a short note; stored as plain text.
    Returns an empty string when nothing usable was supplied.
    """
    if evidence is None:
        return ""
    if not isinstance(evidence, str):
        raise ValidationError("Evidence must be text", fields={"evidence": "Must be a string."})
    return sanitize_text(evidence, max_length=MAX_EVIDENCE_LENGTH, field="evidence")


def validate_gem_amount(value, max_value: int = MAX_GEM_AMOUNT) -> int:
    """
    Validate a gem reward.

    - Must be an integer (bools are rejected)
    - Must be between 0 and max_value
    """
    if isinstance(value, bool):
        raise ValidationError("gem_amount must be a valid integer", fields={"gem_amount": "Must be an integer."})
    try:
        amount = int(value)
    except (TypeError, ValueError):
        raise ValidationError("gem_amount must be a valid integer", fields={"gem_amount": "Must be an integer."})

    if amount < 0:
        raise ValidationError("gem_amount cannot be negative", fields={"gem_amount": "Must be >= 0."})

    if amount > max_value:
        raise ValidationError(f"gem_amount cannot exceed {max_value}", fields={"gem_amount": f"Must be <= {max_value}."})

    return amount
