import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

from .models import Notification

logger = logging.getLogger(__name__)


def user_group_name(user_id):
    return f'notifications_user_{user_id}'


def serialize_notification(notification):
    return {
        'id': notification.id,
        'title': notification.title,
        'message': notification.message,
        'type': notification.type,
        'action_url': notification.action_url,
        'is_read': notification.is_read,
        'created_at': notification.created_at.isoformat(),
    }


def notify(user, title, message, type='info', action_url=''):
    """Store a notification and push it to the user's open WebSocket connections."""
    notification = Notification.objects.create(
        user=user,
        title=title,
        message=message,
        type=type,
        action_url=action_url,
    )

    channel_layer = get_channel_layer()
    if channel_layer is not None:
        try:
            async_to_sync(channel_layer.group_send)(
                user_group_name(user.pk),
                {
                    'type': 'notification_created',
                    'notification': serialize_notification(notification),
                }
            )
        except Exception as e:
            # The row is the source of truth; a failed push is picked up on next poll
            logger.error(f"Failed to push notification {notification.id} to user {user.pk}: {e}")

    return notification
