"""Human-readable, globally unique slugs for public links."""

from __future__ import annotations

import re
from typing import Callable, Iterator

from django.conf import settings

_NON_ALNUM = re.compile(r'[^a-z0-9]+')


def generate_slug(title: str) -> str:
    """Base slug for a proposal title.

    Lower-case, every run of characters outside ``[a-z0-9]`` becomes one
    hyphen, leading/trailing hyphens are trimmed. The result is truncated to
    ``PUBLISH_SLUG_MAX_LENGTH``; an empty result falls back to
    ``PUBLISH_SLUG_FALLBACK``.
    """
    base = _NON_ALNUM.sub('-', (title or '').lower()).strip('-')
    max_length = getattr(settings, 'PUBLISH_SLUG_MAX_LENGTH', 100)
    base = base[:max_length].strip('-')
    return base or getattr(settings, 'PUBLISH_SLUG_FALLBACK', 'proposal')


def candidates(base: str) -> Iterator[str]:
    """``base``, then ``base-1``, ``base-2``, ..."""
    yield base
    counter = 1
    while True:
        yield f'{base}-{counter}'
        counter += 1


def first_free_slug(base: str, is_taken: Callable[[str], bool]) -> str:
    for candidate in candidates(base):
        if not is_taken(candidate):
            return candidate
    raise AssertionError('unreachable')  # pragma: no cover
