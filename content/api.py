import json
import logging

from django.http import JsonResponse

logger = logging.getLogger(__name__)


def json_error(message, status=500, exc=None):
    if exc is not None:
        logger.error("API error (status %s): %s", status, message, exc_info=exc)
    elif status >= 500:
        logger.error("API error (status %s): %s", status, message)
    else:
        logger.warning("API error (status %s): %s", status, message)
    return JsonResponse({"error": message}, status=status)


def load_json_body(request):
    """The decoded JSON object of the request body, or None when it is missing or malformed."""
    try:
        body = json.loads(request.body or b"")
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return body if isinstance(body, dict) else None


def user_label(user):
    return user.email or user.get_username() or "unknown user"
