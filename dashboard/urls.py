"""
URLs do Dashboard - Imobiliária API
===================================
"""

from django.urls import include, path

from imobiliaria.routers import OptionalSlashRouter

from .views import DashboardViewSet

app_name = "dashboard"

router = OptionalSlashRouter()
router.register(r"dashboard", DashboardViewSet, basename="dashboard")

urlpatterns = [
    path("", include(router.urls)),
]
