"""Error taxonomy shared by every service operation.

Services raise ``ServiceError`` subclasses internally. Public operations are
wrapped in ``service_result`` so callers always receive a ``Result`` and branch
on ``success``; nothing raises across that boundary. Views turn a ``Result``
into the standard error envelope with ``result_response``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from functools import wraps
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

from .common.keys import t

DEFAULT_VERSION = 'v1'

logger = logging.getLogger(__name__)

T = TypeVar('T')


class ErrorType(str, Enum):
    VALIDATION = 'validation'
    AUTHENTICATION = 'authentication'
    AUTHORIZATION = 'authorization'
    NOT_FOUND = 'not_found'
    UNKNOWN = 'unknown'


HTTP_STATUS = {
    ErrorType.VALIDATION: 400,
    ErrorType.AUTHENTICATION: 401,
    ErrorType.AUTHORIZATION: 403,
    ErrorType.NOT_FOUND: 404,
    ErrorType.UNKNOWN: 500,
}


@dataclass(frozen=True)
class AppError:
    type: ErrorType
    message: str
    resource: Optional[str] = None
    field_errors: Optional[Dict[str, list[str]]] = None

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {'type': self.type.value, 'message': self.message}
        if self.resource:
            data['resource'] = self.resource
        if self.field_errors:
            data['field_errors'] = self.field_errors
        return data


@dataclass(frozen=True)
class Result(Generic[T]):
    success: bool
    data: Optional[T] = None
    error: Optional[AppError] = None

    @classmethod
    def ok(cls, data: T = None) -> 'Result[T]':  # type: ignore[assignment]
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: AppError) -> 'Result[T]':
        return cls(success=False, error=error)


class ServiceError(Exception):
    error_type: ErrorType = ErrorType.UNKNOWN

    def __init__(self, message: str, *, resource: Optional[str] = None, field_errors: Optional[Dict[str, list[str]]] = None):
        super().__init__(message)
        self.message = message
        self.resource = resource
        self.field_errors = field_errors

    def to_error(self) -> AppError:
        return AppError(self.error_type, self.message, resource=self.resource, field_errors=self.field_errors or None)


class ValidationFailed(ServiceError):
    error_type = ErrorType.VALIDATION


class AuthenticationRequired(ServiceError):
    error_type = ErrorType.AUTHENTICATION

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or t('errors.auth.required'))


class AccessDenied(ServiceError):
    error_type = ErrorType.AUTHORIZATION


class NotFound(ServiceError):
    error_type = ErrorType.NOT_FOUND


def service_result(operation: str) -> Callable[[Callable[..., T]], Callable[..., Result[T]]]:
    """Wrap a service function so it returns ``Result`` instead of raising.

    ``operation`` names the call in logs and in the fallback message for
    unexpected failures. Transactions must be opened inside the wrapped
    function so they roll back before the failure is mapped here.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., Result[T]]:
        @wraps(func)
        def _wrapped(*args, **kwargs) -> Result[T]:
            try:
                return Result.ok(func(*args, **kwargs))
            except ServiceError as exc:
                logger.info('[%s] %s: %s', operation, exc.error_type.value, exc.message)
                return Result.fail(exc.to_error())
            except Exception:
                logger.exception('[%s] unexpected failure', operation)
                return Result.fail(AppError(ErrorType.UNKNOWN, t('errors.unknown', operation=operation)))

        return _wrapped

    return decorator


def error_response(error_code: str, message: str, *, status: int = 400, meta: Optional[Dict[str, Any]] = None):
    """Return a standardized error payload structure.

    Shape:
      {"error": {"code": str, "message": str, "meta": {...}, "version": "v1"}}
    """
    from rest_framework.response import Response  # local import to avoid global DRF binding during migrations

    payload = {
        'error': {
            'code': error_code,
            'message': message,
            'version': DEFAULT_VERSION,
        }
    }
    if meta:
        payload['error']['meta'] = meta  # type: ignore[assignment]
    return Response(payload, status=status)


def result_response(result: Result, *, status: int = 200, serialize: Optional[Callable[[Any], Any]] = None):
    """Render a service ``Result`` as a DRF response.

    Success: ``serialize(result.data)`` (or the data itself) with ``status``;
    ``None`` data on a 2xx becomes an empty 204.
    Failure: error envelope with the HTTP status mapped from the error type.
    """
    from rest_framework.response import Response

    if result.success:
        if result.data is None and serialize is None:
            return Response(status=204)
        body = serialize(result.data) if serialize else result.data
        return Response(body, status=status)
    err = result.error
    if err is None:
        err = AppError(ErrorType.UNKNOWN, t('errors.unknown', operation='request'))
    meta: dict[str, Any] = {}
    if err.resource:
        meta['resource'] = err.resource
    if err.field_errors:
        meta['field_errors'] = err.field_errors
    return error_response(err.type.value, err.message, status=HTTP_STATUS[err.type], meta=meta or None)


def flatten_field_errors(errors: Any, prefix: str = '') -> dict[str, list[str]]:
    """Flatten nested DRF ``serializer.errors`` into dotted paths.

    ``{'items': [{}, {'title': ['required']}]}`` becomes
    ``{'items.1.title': ['required']}``. Errors on the object itself land under
    ``non_field_errors`` (or the prefix).
    """
    flat: dict[str, list[str]] = {}
    if isinstance(errors, dict):
        for key, value in errors.items():
            path = f'{prefix}.{key}' if prefix else str(key)
            flat.update(flatten_field_errors(value, path))
    elif isinstance(errors, list):
        if all(not isinstance(e, (dict, list)) for e in errors):
            if errors:
                flat[prefix or 'non_field_errors'] = [str(e) for e in errors]
        else:
            for idx, value in enumerate(errors):
                flat.update(flatten_field_errors(value, f'{prefix}.{idx}' if prefix else str(idx)))
    elif errors:
        flat[prefix or 'non_field_errors'] = [str(errors)]
    return flat


def validation_response(errors: Any):
    """Error envelope for a failed request serializer."""
    return error_response(
        ErrorType.VALIDATION.value,
        t('errors.validation.invalid_request'),
        status=HTTP_STATUS[ErrorType.VALIDATION],
        meta={'field_errors': flatten_field_errors(errors)},
    )
