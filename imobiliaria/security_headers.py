"""
Middleware para Headers de Segurança e Cache - Imobiliária API
==============================================================
"""

from django.conf import settings
from django.utils.deprecation import MiddlewareMixin

NO_CACHE = "no-cache, no-store, must-revalidate"


class SecurityHeadersMiddleware(MiddlewareMixin):
    """
    Headers de segurança básicos e política de cache das respostas da API
    """

    def process_response(self, request, response):
        response["X-Content-Type-Options"] = "nosniff"
        response["X-Frame-Options"] = "DENY"
        response["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response["Cross-Origin-Opener-Policy"] = "same-origin"
        response["Cross-Origin-Resource-Policy"] = "cross-origin"

        # Leituras da API não são cacheadas, a menos que a view defina a própria política
        if request.path.startswith("/api/") and not response.has_header("Cache-Control"):
            response["Cache-Control"] = NO_CACHE
            response["Pragma"] = "no-cache"
            response["Expires"] = "0"

        if not settings.DEBUG:
            response["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        response["X-API-Version"] = "1.0"
        return response
