import json

from channels.generic.websocket import AsyncWebsocketConsumer

from reminders.services.broadcast import UPDATES_GROUP


class UpdatesConsumer(AsyncWebsocketConsumer):
    """Pushes collection change events; payloads carry ids only, never record data."""
    GROUP = UPDATES_GROUP

    async def connect(self):
        await self.channel_layer.group_add(self.GROUP, self.channel_name)
        await self.accept()
        await self.send(json.dumps({"type": "welcome", "message": "connected"}))

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(self.GROUP, self.channel_name)

    async def broadcast_refresh(self, event):
        # event: {"type": "broadcast.refresh", "collection": ..., "action": ..., "id": ..., "keys": [...]}
        await self.send(json.dumps(event))
