from django.conf import settings
from django.core.cache import cache


def client_ip(request):
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR", "")


def hit_rate_limit(request, scope="contact"):
    """Count one request for the client; True once the limit for the window is exceeded."""
    key = f"ratelimit:{scope}:{client_ip(request)}"
    # add() only sets the key when missing, so the window starts at the first hit
    if cache.add(key, 1, settings.CONTACT_RATE_WINDOW):
        count = 1
    else:
        try:
            count = cache.incr(key)
        except ValueError:
            cache.set(key, 1, settings.CONTACT_RATE_WINDOW)
            count = 1
    return count > settings.CONTACT_RATE_LIMIT
