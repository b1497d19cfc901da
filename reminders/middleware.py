import logging
import time

logger = logging.getLogger('reminders.request')


class RequestLogMiddleware:
    """Log method, path, status and duration of every API request."""
    PREFIXES = ('/api/',)

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        path = request.path or ''
        if not path.startswith(self.PREFIXES):
            return self.get_response(request)
        started = time.monotonic()
        response = self.get_response(request)
        elapsed_ms = (time.monotonic() - started) * 1000
        user = getattr(request, 'user', None)
        logger.info(
            "%s %s -> %s (%.1fms) user=%s",
            request.method, path, response.status_code, elapsed_ms,
            getattr(user, 'pk', None),
        )
        return response
