import os
from urllib.parse import urlparse
from django.core.management.base import BaseCommand
from django.conf import settings

# These must differ for rotation strategy
DISTINCT_SECRET_PAIRS = [
    ('SECRET_KEY', 'JWT_SIGNING_KEY'),
]

# Positive integer knobs read by the publishing pipeline and block schemas
POSITIVE_INTS = [
    'PUBLISH_SLUG_MAX_LENGTH',
    'PUBLISH_SLUG_MAX_ATTEMPTS',
    'GALLERY_MAX_IMAGES',
]

URL_MUST_BE_HTTPS = ['PUBLIC_BASE_URL']


class Command(BaseCommand):
    help = 'Validate environment configuration for the builder API. Exits non-zero on failure.'

    def add_arguments(self, parser):
        parser.add_argument('--strict', action='store_true', help='Treat warnings as errors.')

    def handle(self, *args, **options):
        errors: list[str] = []
        warnings: list[str] = []
        env = os.environ

        if not env.get('SECRET_KEY'):
            (warnings if settings.DEBUG else errors).append('Missing required variable: SECRET_KEY')

        if not settings.DEBUG:
            for a, b in DISTINCT_SECRET_PAIRS:
                av, bv = env.get(a), env.get(b)
                if not bv:
                    errors.append(f'Missing required variable: {b}')
                if av and bv and av == bv:
                    errors.append(f'{b} should differ from {a} for rotation safety')

        # Async invalidation needs a broker; without one the task runs inline
        if env.get('REVALIDATE_ASYNC') == '1' and not env.get('REDIS_URL'):
            errors.append('REVALIDATE_ASYNC=1 requires REDIS_URL')

        for name in POSITIVE_INTS:
            raw = env.get(name)
            if raw is None:
                continue
            try:
                if int(raw) <= 0:
                    errors.append(f'{name} must be a positive integer (got: {raw})')
            except ValueError:
                errors.append(f'{name} must be an integer (got: {raw})')

        for name in URL_MUST_BE_HTTPS:
            val = env.get(name)
            if val and urlparse(val).scheme != 'https':
                warnings.append(f'{name} should be https (got: {val})')

        for w in warnings:
            self.stdout.write(self.style.WARNING(f'WARN: {w}'))
        if options.get('strict') and warnings:
            errors.extend(f'(strict) {w}' for w in warnings)
        if errors:
            for e in errors:
                self.stderr.write(self.style.ERROR(f'ERROR: {e}'))
            self.stderr.write(self.style.ERROR(f'env_doctor failed with {len(errors)} error(s).'))
            raise SystemExit(1)
        self.stdout.write(self.style.SUCCESS('env_doctor passed with no fatal errors.'))
