"""
URL configuration for imobiliaria project.

Imobiliária API - Gestão de Imóveis e Locações
==============================================
"""

from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path, re_path

from .monitoring_views import HealthCheckView


def route_not_found(request, exception=None):
    """Resposta JSON para rotas inexistentes"""
    return JsonResponse({"success": False, "message": "Route not found", "path": request.path}, status=404)


urlpatterns = [
    path("admin/", admin.site.urls),
    re_path(r"^health/?$", HealthCheckView.as_view(), name="health-check"),
    # API
    path("api/", include("authentication.urls")),
    path("api/", include("cadastros.urls")),
    path("api/", include("imoveis.urls")),
    path("api/", include("locacoes.urls")),
    path("api/", include("dashboard.urls")),
]

handler404 = route_not_found
