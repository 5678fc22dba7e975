import logging

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware:
    """Log the method and path of every incoming request"""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        logger.info(f"{request.method} {request.get_full_path()}")
        return self.get_response(request)
