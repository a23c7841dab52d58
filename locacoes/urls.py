"""
URLs para Locações - Imobiliária API
====================================
"""

from django.urls import include, path

from imobiliaria.routers import OptionalSlashRouter

from .views import LeaseViewSet

app_name = "locacoes"

router = OptionalSlashRouter()
router.register(r"leases", LeaseViewSet, basename="lease")

urlpatterns = [
    path("", include(router.urls)),
]
