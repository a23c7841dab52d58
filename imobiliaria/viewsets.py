"""
ViewSet base dos recursos com exclusão lógica
=============================================
"""

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .responses import success_response


class SoftDeleteResourceViewSet(viewsets.ViewSet):
    """
    Endpoints padrão: listagem, filtros, detalhe, criação, atualização,
    exclusão lógica e restauração (PATCH /:id/restore)
    """

    service_class = None
    serializer_class = None  # validação de entrada
    detail_serializer_class = None
    list_serializer_class = None
    permission_classes = [IsAuthenticated]

    def get_service(self):
        return self.service_class()

    def get_serializer_context(self):
        return {"request": self.request, "view": self}

    def get_serializer(self, *args, **kwargs):
        kwargs.setdefault("context", self.get_serializer_context())
        return self.serializer_class(*args, **kwargs)

    def serialize(self, instance, serializer_class=None):
        serializer_class = serializer_class or self.detail_serializer_class or self.serializer_class
        return serializer_class(instance, context=self.get_serializer_context()).data

    def validated_data(self, request, partial=False):
        serializer = self.get_serializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data

    @property
    def label(self):
        return self.service_class.label

    def list(self, request):
        """
        Listagem paginada com filtros, busca e ordenação
        """
        page = self.get_service().list(request.query_params)
        serializer_class = self.list_serializer_class or self.detail_serializer_class or self.serializer_class
        page["data"] = serializer_class(page["data"], many=True, context=self.get_serializer_context()).data
        return Response(page)

    @action(detail=False, methods=["get"])
    def filters(self, request):
        """
        Filtros disponíveis para a listagem
        """
        return success_response(self.get_service().filters(request.query_params), "Filters retrieved successfully")

    def retrieve(self, request, pk=None):
        instance = self.get_service().get(pk)
        return success_response(self.serialize(instance))

    def create(self, request):
        instance = self.get_service().create(self.validated_data(request))
        return success_response(
            self.serialize(instance), f"{self.label} created successfully", status_code=status.HTTP_201_CREATED
        )

    def update(self, request, pk=None):
        instance = self.get_service().update(pk, self.validated_data(request, partial=True))
        return success_response(self.serialize(instance), f"{self.label} updated successfully")

    def partial_update(self, request, pk=None):
        return self.update(request, pk)

    def destroy(self, request, pk=None):
        """
        Exclusão lógica
        """
        self.get_service().delete(pk)
        return success_response(None, f"{self.label} deleted successfully")

    @action(detail=True, methods=["patch"])
    def restore(self, request, pk=None):
        """
        Restaurar registro excluído logicamente
        """
        self.get_service().restore(pk)
        return success_response(None, f"{self.label} restored successfully")
