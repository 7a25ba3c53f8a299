import logging

import requests
from django.conf import settings

logger = logging.getLogger(__name__)


class TurnstileConfigError(Exception):
    pass


def verify_token(token, remote_ip=None):
    """Ask Cloudflare whether a Turnstile token is valid."""
    secret = settings.TURNSTILE_SECRET_KEY
    if not secret:
        raise TurnstileConfigError("TURNSTILE_SECRET_KEY is not configured.")

    payload = {"secret": secret, "response": token}
    if remote_ip:
        payload["remoteip"] = remote_ip
    try:
        response = requests.post(settings.TURNSTILE_VERIFY_URL, data=payload, timeout=10)
        response.raise_for_status()
        result = response.json()
    except (requests.RequestException, ValueError) as exc:
        logger.error("Turnstile verification request failed: %s", exc)
        return False

    if not result.get("success"):
        logger.warning("Turnstile rejected a token: %s", result.get("error-codes"))
        return False
    return True
