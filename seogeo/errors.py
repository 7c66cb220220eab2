"""
Error kinds and the JSON envelope shared by every SEO/GEO endpoint.

Success: {"ok": true, "data": ...}
Failure: {"ok": false, "error": {"code": ..., "message": ...}}
"""
import logging

from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """
    A caller-correctable failure (bad body, duplicate ids, unknown record,
    missing confirmation). Callers branch on ``code``; ``status`` is the HTTP
    status the API layer answers with.
    """

    def __init__(self, message, status=400, code='BAD_REQUEST'):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code

    def __repr__(self):
        return f"ValidationError(code={self.code!r}, status={self.status}, message={self.message!r})"


def not_found(message):
    return ValidationError(message, status=404, code='NOT_FOUND')


def ok_response(data, http_status=status.HTTP_200_OK, message=None):
    body = {'ok': True, 'data': data}
    if message:
        body['message'] = message
    return Response(body, status=http_status)


def error_response(code, message, http_status):
    return Response({'ok': False, 'error': {'code': code, 'message': message}}, status=http_status)


def envelope_exception_handler(exc, context):
    """
    DRF exception handler: validation errors keep their status/code, DRF's own
    exceptions keep their status, everything else becomes a logged 500 with a
    message that does not leak internals.
    """
    if isinstance(exc, ValidationError):
        return error_response(exc.code, exc.message, exc.status)

    response = exception_handler(exc, context)
    if response is not None:
        if isinstance(exc, APIException):
            code = exc.get_codes()
        else:
            # Django's Http404 / PermissionDenied, converted by DRF
            code = {404: 'NOT_FOUND', 403: 'PERMISSION_DENIED'}.get(response.status_code, 'ERROR')
        if not isinstance(code, str):
            code = 'INVALID_BODY'
        detail = response.data.get('detail') if isinstance(response.data, dict) else None
        message = str(detail) if detail else str(exc)
        response.data = {'ok': False, 'error': {'code': code.upper(), 'message': message}}
        return response

    view = context.get('view')
    logger.exception('Unhandled error in %s', view.__class__.__name__ if view else 'API view')
    return error_response('SERVER_ERROR', 'An unexpected error occurred.', status.HTTP_500_INTERNAL_SERVER_ERROR)
