"""Deterministic checksums for JSON documents stored by the API."""

from __future__ import annotations

import hashlib
import json
from typing import Any

from django.core.serializers.json import DjangoJSONEncoder


def canonical_json(data: Any) -> bytes:
    """Serialize ``data`` with sorted keys and no insignificant whitespace."""
    return json.dumps(data, cls=DjangoJSONEncoder, sort_keys=True, separators=(',', ':'), ensure_ascii=False).encode('utf-8')


def json_checksum(data: Any) -> str:
    """SHA-256 hex digest of the canonical JSON form of ``data``.

    Two documents that differ only in key order hash identically.
    """
    return hashlib.sha256(canonical_json(data)).hexdigest()


def to_json_safe(data: Any) -> Any:
    """Round-trip through JSON so UUIDs, datetimes and decimals become plain values."""
    return json.loads(json.dumps(data, cls=DjangoJSONEncoder))
