"""
Views para Cadastros - Imobiliária API
======================================
"""

from rest_framework.decorators import action

from imobiliaria.responses import success_response
from imobiliaria.viewsets import SoftDeleteResourceViewSet

from .serializers import (
    AgencySerializer,
    AgencyWriteSerializer,
    ContactSerializer,
    OwnerSerializer,
    OwnerWriteSerializer,
    TenantSerializer,
    TenantWriteSerializer,
)
from .services import AgencyService, OwnerService, TenantService

SUGGESTIONS_CACHE_CONTROL = "public, max-age=30"


class ContactSuggestionsMixin:
    """
    GET /suggestions/contacts?q=... com os contatos já cadastrados no recurso
    """

    @action(detail=False, methods=["get"], url_path="suggestions/contacts")
    def contact_suggestions(self, request):
        contacts = self.get_service().suggest_contacts(request.query_params.get("q", ""))
        return success_response(
            ContactSerializer(contacts, many=True).data,
            headers={"Cache-Control": SUGGESTIONS_CACHE_CONTROL},
        )


class AgencyViewSet(ContactSuggestionsMixin, SoftDeleteResourceViewSet):
    """
    ViewSet de imobiliárias
    """

    service_class = AgencyService
    serializer_class = AgencyWriteSerializer
    detail_serializer_class = AgencySerializer


class OwnerViewSet(SoftDeleteResourceViewSet):
    """
    ViewSet de proprietários
    """

    service_class = OwnerService
    serializer_class = OwnerWriteSerializer
    detail_serializer_class = OwnerSerializer


class TenantViewSet(ContactSuggestionsMixin, SoftDeleteResourceViewSet):
    """
    ViewSet de inquilinos
    """

    service_class = TenantService
    serializer_class = TenantWriteSerializer
    detail_serializer_class = TenantSerializer
