import logging

from contact.models import Message
from content import store
from content.exceptions import ContentError

logger = logging.getLogger(__name__)


def _count(content_type):
    try:
        return len(store.list_content(content_type))
    except (ContentError, OSError) as exc:
        logger.error("Could not count %s: %s", content_type, exc)
        return 0


def dashboard_stats():
    return {
        "blog": _count("blog"),
        "projects": _count("projects"),
        "popups": _count("popups"),
        "messages": Message.objects.count(),
        "unread_messages": Message.objects.filter(is_read=False).count(),
    }
