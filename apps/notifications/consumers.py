import json
from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken, AuthenticationFailed

from .services import user_group_name


class NotificationConsumer(AsyncWebsocketConsumer):
    async def connect(self):
        # JWT Authentication
        token = self.get_token_from_scope()
        self.user = await self.authenticate_token(token)

        if not self.user:
            await self.close(code=4001)
            return

        self.room_group_name = user_group_name(self.user.pk)

        await self.channel_layer.group_add(self.room_group_name, self.channel_name)
        await self.accept()

        unread = await self.count_unread()
        await self.send(text_data=json.dumps({
            'type': 'unread_count',
            'count': unread,
        }))

    async def disconnect(self, close_code):
        if hasattr(self, 'room_group_name'):
            await self.channel_layer.group_discard(self.room_group_name, self.channel_name)

    async def notification_created(self, event):
        await self.send(text_data=json.dumps({
            'type': 'notification',
            'data': event['notification'],
        }))

    def get_token_from_scope(self):
        query_string = self.scope.get('query_string', b'').decode()
        tokens = parse_qs(query_string).get('token')
        return tokens[0] if tokens else None

    @database_sync_to_async
    def authenticate_token(self, token):
        if not token:
            return None
        jwt_auth = JWTAuthentication()
        try:
            validated_token = jwt_auth.get_validated_token(token.encode())
            return jwt_auth.get_user(validated_token)
        except (InvalidToken, AuthenticationFailed):
            return None

    @database_sync_to_async
    def count_unread(self):
        return self.user.notifications.filter(is_read=False).count()
