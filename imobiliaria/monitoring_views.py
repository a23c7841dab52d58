"""
Views de Monitoramento - Imobiliária API
========================================
"""

import time

from django.http import JsonResponse
from django.utils import timezone
from django.views import View

SERVICE_NAME = "Imobiliaria API"

STARTED_AT = time.monotonic()


def uptime():
    """Segundos desde a carga do processo"""
    return round(time.monotonic() - STARTED_AT, 3)


class HealthCheckView(View):
    """
    View para health check da aplicação
    """

    def get(self, request):
        return JsonResponse(
            {
                "status": "ok",
                "timestamp": timezone.now().isoformat(),
                "uptime": uptime(),
                "service": SERVICE_NAME,
            }
        )
