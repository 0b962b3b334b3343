"""Celery application for background invalidation work.

Workers start with ``celery -A app worker``; settings prefixed ``CELERY_`` apply.
"""
import os

from celery import Celery

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'app.settings')

celery_app = Celery('app')
celery_app.config_from_object('django.conf:settings', namespace='CELERY')
celery_app.autodiscover_tasks()
