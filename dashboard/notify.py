import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

logger = logging.getLogger(__name__)

DASHBOARD_GROUP = "admin_dashboard"


def notify_dashboard(event, data):
    """Push an event to every admin with the dashboard open."""
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    try:
        async_to_sync(channel_layer.group_send)(
            DASHBOARD_GROUP, {"type": "dashboard.event", "event": event, "data": data}
        )
    except Exception as exc:
        # The live feed is best effort; the data is already saved
        logger.warning("Dashboard notification '%s' failed: %s", event, exc)
