"""
URLs para Imóveis - Imobiliária API
===================================
"""

from django.urls import include, path

from imobiliaria.routers import OptionalSlashRouter

from .views import FavoriteViewSet, PropertyTypeViewSet, PropertyViewSet

app_name = "imoveis"

router = OptionalSlashRouter()
router.register(r"property-types", PropertyTypeViewSet, basename="property-type")
router.register(r"properties", PropertyViewSet, basename="property")
router.register(r"favorites", FavoriteViewSet, basename="favorite")

urlpatterns = [
    path("", include(router.urls)),
]
