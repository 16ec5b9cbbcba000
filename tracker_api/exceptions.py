import logging

from django.db import DatabaseError
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, NotFound, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Internal server error"


class NotFoundError(NotFound):
    default_detail = "Not found"


class ConflictError(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists"
    default_code = 'conflict'


class StoreError(APIException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = GENERIC_ERROR
    default_code = 'store_error'


class CacheError(Exception):
    """A cache backend call failed. Never leaves tracker_api.cache."""


def flatten_errors(detail, prefix=''):
    """Turn DRF's nested error detail into ``[{field, message}]``."""
    errors = []
    if isinstance(detail, dict):
        for field, value in detail.items():
            path = f"{prefix}.{field}" if prefix else str(field)
            errors.extend(flatten_errors(value, path))
    elif isinstance(detail, list):
        for item in detail:
            if isinstance(item, (dict, list)):
                errors.extend(flatten_errors(item, prefix))
            else:
                errors.append({'field': prefix or 'non_field_errors', 'message': str(item)})
    else:
        errors.append({'field': prefix or 'non_field_errors', 'message': str(detail)})
    return errors


def api_exception_handler(exc, context):
    """Render every error in the ``{success: false, error}`` envelope."""
    if isinstance(exc, DatabaseError):
        logger.error("Store failure in %s", context.get('view').__class__.__name__, exc_info=exc)
        exc = StoreError()
    elif isinstance(exc, Http404):
        exc = NotFoundError()

    response = exception_handler(exc, context)
    if response is None:
        logger.error("Unhandled error", exc_info=exc)
        return Response({'success': False, 'error': GENERIC_ERROR},
                        status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    if isinstance(exc, ValidationError):
        response.data = {
            'success': False,
            'error': "Validation failed",
            'details': flatten_errors(exc.detail),
        }
    else:
        response.data = {'success': False, 'error': str(exc.detail)}
    return response
