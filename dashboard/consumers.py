# dashboard/consumers.py
import json

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer

from accounts.permissions import is_admin
from contact.models import Message

from .notify import DASHBOARD_GROUP
from .stats import dashboard_stats


class DashboardConsumer(AsyncWebsocketConsumer):
    async def connect(self):
        self.user = self.scope.get("user")
        if self.user is None or self.user.is_anonymous:
            await self.close()
            return

        allowed = await database_sync_to_async(is_admin)(self.user)
        if not allowed:
            await self.close()
            return

        await self.channel_layer.group_add(DASHBOARD_GROUP, self.channel_name)
        await self.accept()
        await self.send_stats()

    async def disconnect(self, close_code):
        await self.channel_layer.group_discard(DASHBOARD_GROUP, self.channel_name)

    async def receive(self, text_data=None, bytes_data=None):
        try:
            data = json.loads(text_data or "")
        except json.JSONDecodeError:
            await self.send(text_data=json.dumps({"action": "error", "error": "Invalid JSON."}))
            return
        if not isinstance(data, dict):
            await self.send(text_data=json.dumps({"action": "error", "error": "Expected a JSON object."}))
            return
        action = data.get("action")

        if action == "refresh":
            await self.send_stats()

        elif action == "mark_read":
            updated = await self.mark_read(data.get("message_id"))
            if updated:
                await self.channel_layer.group_send(
                    DASHBOARD_GROUP,
                    {"type": "dashboard.event", "event": "message_read", "data": {"id": data.get("message_id")}},
                )

    async def dashboard_event(self, event):
        await self.send(text_data=json.dumps({"action": event["event"], "data": event["data"]}))
        if event["event"] in ("new_message", "message_read"):
            await self.send_stats()

    async def send_stats(self):
        stats = await database_sync_to_async(dashboard_stats)()
        await self.send(text_data=json.dumps({"action": "stats", "data": stats}))

    @database_sync_to_async
    def mark_read(self, message_id):
        if not str(message_id).isdigit():
            return 0
        return Message.objects.filter(pk=int(message_id), is_read=False).update(is_read=True)
