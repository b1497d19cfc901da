import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.utils import timezone

logger = logging.getLogger(__name__)

UPDATES_GROUP = "updates"


def broadcast_change(collection: str, action: str, object_id) -> None:
    """Tell connected clients that a row of ``collection`` changed."""
    channel_layer = get_channel_layer()
    if channel_layer is None:
        return
    now = timezone.now()
    event = {
        "type": "broadcast.refresh",
        "version": int(now.timestamp()),
        "ts": now.isoformat(),
        "keys": [collection],
        "collection": collection,
        "action": action,
        "id": object_id,
    }
    try:
        async_to_sync(channel_layer.group_send)(UPDATES_GROUP, event)
    except Exception:
        logger.warning("Could not broadcast %s %s #%s", action, collection, object_id, exc_info=True)
