"""
Views para Locações - Imobiliária API
=====================================
"""

from imobiliaria.viewsets import SoftDeleteResourceViewSet

from .serializers import LeaseSerializer, LeaseWriteSerializer
from .services import LeaseService


class LeaseViewSet(SoftDeleteResourceViewSet):
    """
    ViewSet de contratos de locação
    """

    service_class = LeaseService
    serializer_class = LeaseWriteSerializer
    detail_serializer_class = LeaseSerializer
