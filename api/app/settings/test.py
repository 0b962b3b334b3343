from . import base

for k, v in base.__dict__.items():
    if k.isupper():
        globals()[k] = v

# Test overrides (DJANGO_ENV=test, manage.py test or pytest-django)
DEBUG = True
CELERY_TASK_ALWAYS_EAGER = True  # invalidation tasks run inline for assertions
REVALIDATE_ASYNC = False
PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']
CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'proposal-builder-tests',
    }
}
