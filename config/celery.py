import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

# worker: celery -A config worker -l info
# beat:   celery -A config beat -l info --scheduler django_celery_beat.schedulers:DatabaseScheduler
app = Celery("shipment_reconciler")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks(["domains.shipments"])  # reconcile_shipped_orders / reconcile_single_order
