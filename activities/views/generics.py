from core.exceptions import ValidationError

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100


def parse_pagination(request):
    """
    Read ?limit=&offset= from the query string.
    Returns (limit, offset) with limit capped at MAX_PAGE_SIZE.
    """
    limit = request.query_params.get("limit")
    offset = request.query_params.get("offset")

    try:
        limit_val = int(limit) if limit is not None else DEFAULT_PAGE_SIZE
        offset_val = int(offset) if offset is not None else 0
    except ValueError:
        raise ValidationError("Invalid pagination params")

    limit_val = max(1, min(limit_val, MAX_PAGE_SIZE))
    offset_val = max(0, offset_val)
    return limit_val, offset_val


def actor_label(request):
    """Identifies the caller in log lines."""
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return "anonymous"
    return f"user:{user.pk}"
