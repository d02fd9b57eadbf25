"""
ASGI config for the Lunaris portal.

HTTP goes to Django, WebSocket connections go to the notification consumer.
"""

import os
from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "core.settings.local")

django_asgi_app = get_asgi_application()

from channels.routing import ProtocolTypeRouter, URLRouter  # noqa: E402
import apps.notifications.routing  # noqa: E402

application = ProtocolTypeRouter({
    "http": django_asgi_app,
    "websocket": URLRouter(
        apps.notifications.routing.websocket_urlpatterns
    ),
})
