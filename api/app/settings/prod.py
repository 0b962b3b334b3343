from . import base

for k, v in base.__dict__.items():
    if k.isupper():
        globals()[k] = v

# Production overrides: invalidation goes through the worker when a broker exists
DEBUG = False
REVALIDATE_ASYNC = bool(getattr(base, 'CELERY_BROKER_URL', ''))
