"""
CORS handling for browser clients calling the API from other origins.
"""

from django.conf import settings
from django.http import HttpResponse


class CorsMiddleware:
    """Add permissive CORS headers and answer preflight requests."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if request.method == 'OPTIONS':
            response = HttpResponse()
        else:
            response = self.get_response(request)

        response['Access-Control-Allow-Origin'] = settings.GATEWAY_CORS_ALLOW_ORIGIN
        response['Access-Control-Allow-Methods'] = 'GET, DELETE, OPTIONS'
        response['Access-Control-Allow-Headers'] = 'Content-Type'
        return response
