import logging

from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.response import Response

from .errors import AuthError, DRF_CODE_ALIASES

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        logger.exception("Unhandled error in %s", context.get('view'))
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': str(exc)}}, status=500)
    if isinstance(exc, AuthError):
        code = exc.error_code
    else:
        code = DRF_CODE_ALIASES.get(getattr(exc, 'default_code', ''), 'api_error')
    # normalize response
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = resp.data
    return Response({'ok': False, 'error': {'code': code, 'message': detail}}, status=resp.status_code)
