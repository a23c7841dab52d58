"""
URLs para Cadastros - Imobiliária API
=====================================
"""

from django.urls import include, path

from imobiliaria.routers import OptionalSlashRouter

from .views import AgencyViewSet, OwnerViewSet, TenantViewSet

app_name = "cadastros"

router = OptionalSlashRouter()
router.register(r"agencies", AgencyViewSet, basename="agency")
router.register(r"owners", OwnerViewSet, basename="owner")
router.register(r"tenants", TenantViewSet, basename="tenant")

urlpatterns = [
    path("", include(router.urls)),
]
