import os
from celery import Celery

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'core.settings.local')

app = Celery('lunaris')
app.config_from_object('django.conf:settings', namespace='CELERY')

# Picks up apps/<app>/tasks.py, e.g. the nightly spreadsheet sync
app.autodiscover_tasks()
