"""
Views para Imóveis - Imobiliária API
====================================
"""

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import MethodNotAllowed
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser

from imobiliaria.pagination import StandardResultsSetPagination
from imobiliaria.responses import success_response
from imobiliaria.viewsets import SoftDeleteResourceViewSet

from .filters import FavoriteFilter
from .serializers import (
    DocumentSerializer,
    FavoriteSerializer,
    FavoriteWriteSerializer,
    PropertyListSerializer,
    PropertySerializer,
    PropertyTypeSerializer,
    PropertyTypeWriteSerializer,
    PropertyWriteSerializer,
    UnifiedPropertySerializer,
)
from .services import FavoriteService, PropertyService, PropertyTypeService


class PropertyTypeViewSet(SoftDeleteResourceViewSet):
    """
    ViewSet de tipos de imóvel
    """

    service_class = PropertyTypeService
    serializer_class = PropertyTypeWriteSerializer
    detail_serializer_class = PropertyTypeSerializer


class PropertyViewSet(SoftDeleteResourceViewSet):
    """
    ViewSet de imóveis, com formulário unificado (multipart) e documentos
    """

    service_class = PropertyService
    serializer_class = PropertyWriteSerializer
    detail_serializer_class = PropertySerializer
    list_serializer_class = PropertyListSerializer
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def unified_payload(self, request, partial=False):
        serializer = UnifiedPropertySerializer(data=request.data, partial=partial, context=self.get_serializer_context())
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    def unified_response(self, instance, documents, message, status_code=status.HTTP_200_OK, removed=()):
        data = {
            "property": self.serialize(instance),
            "uploadedDocuments": DocumentSerializer(documents, many=True).data,
        }
        if removed:
            data["removedDocuments"] = list(removed)
        return success_response(data, message, status_code=status_code)

    @action(detail=False, methods=["post"], url_path="create-unified")
    def create_unified(self, request):
        """
        Cria imóvel + endereço + valores e envia os arquivos do formulário
        """
        payload = self.unified_payload(request)
        instance, documents = self.get_service().create_unified(payload["property"], request.FILES, request.user)
        return self.unified_response(
            instance, documents, "Property created successfully", status_code=status.HTTP_201_CREATED
        )

    @action(detail=False, methods=["put"], url_path=r"update-unified/(?P<property_id>[^/.]+)")
    def update_unified(self, request, property_id=None):
        payload = self.unified_payload(request, partial=True)
        instance, documents = self.get_service().update_unified(
            property_id,
            payload["property"],
            request.FILES,
            request.user,
            removed_documents=payload["removed_documents"],
        )
        return self.unified_response(
            instance, documents, "Property updated successfully", removed=payload["removed_documents"]
        )

    @action(detail=True, methods=["post", "put"], url_path="documents")
    def documents(self, request, pk=None):
        """
        POST anexa documentos; PUT substitui os documentos ativos pelos enviados
        """
        replace = request.method == "PUT"
        documents = self.get_service().upload_documents(pk, request.FILES, request.user, replace=replace)
        message = "Documents updated successfully" if replace else "Documents uploaded successfully"
        return success_response(DocumentSerializer(documents, many=True).data, message)


class FavoriteViewSet(SoftDeleteResourceViewSet):
    """
    ViewSet de favoritos; a listagem usa django-filter e a paginação padrão
    """

    service_class = FavoriteService
    serializer_class = FavoriteWriteSerializer
    detail_serializer_class = FavoriteSerializer
    filterset_class = FavoriteFilter
    pagination_class = StandardResultsSetPagination

    def filtered_page(self, request, queryset):
        queryset = DjangoFilterBackend().filter_queryset(request, queryset, self)
        paginator = self.pagination_class()
        page = paginator.paginate_queryset(queryset.order_by("-created_at"), request, view=self)
        return paginator.get_paginated_response(FavoriteSerializer(page, many=True).data)

    def update(self, request, pk=None):
        raise MethodNotAllowed(request.method)

    def list(self, request):
        return self.filtered_page(request, self.get_service().get_queryset())

    @action(detail=False, methods=["get"], url_path=r"user/(?P<user_id>[^/.]+)")
    def by_user(self, request, user_id=None):
        """
        Favoritos de um usuário
        """
        return self.filtered_page(request, self.get_service().get_queryset().filter(user_id=user_id))

    @action(detail=False, methods=["get"])
    def check(self, request):
        serializer = FavoriteWriteSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        result = self.get_service().check(serializer.validated_data["user_id"], serializer.validated_data["property_id"])
        return success_response(result, "Favorite status retrieved successfully")

    @action(detail=False, methods=["post"], url_path="delete-by-user-property")
    def delete_by_user_property(self, request):
        serializer = FavoriteWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.get_service().delete_by_user_property(
            serializer.validated_data["user_id"], serializer.validated_data["property_id"]
        )
        return success_response(None, "Favorite deleted successfully")
