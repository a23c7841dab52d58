"""
Views do Dashboard - Imobiliária API
====================================
"""

from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated

from imobiliaria.responses import success_response

from .serializers import DashboardParamsSerializer
from .services import DashboardService


class DashboardViewSet(viewsets.ViewSet):
    """
    Métricas do período ``startDate``..``endDate`` comparado ao período anterior
    """

    permission_classes = [IsAuthenticated]

    def get_service(self, request):
        params = DashboardParamsSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        return DashboardService(params.validated_data["startDate"], params.validated_data["endDate"])

    @action(detail=False, methods=["get"])
    def financial(self, request):
        return success_response(self.get_service(request).financial(), "Financial metrics retrieved successfully")

    @action(detail=False, methods=["get"])
    def portfolio(self, request):
        return success_response(self.get_service(request).portfolio(), "Portfolio metrics retrieved successfully")

    @action(detail=False, methods=["get"])
    def clients(self, request):
        return success_response(self.get_service(request).clients(), "Clients metrics retrieved successfully")

    @action(detail=False, methods=["get"], url_path="map")
    def map_addresses(self, request):
        return success_response(self.get_service(request).map(), "Map data retrieved successfully")

    @action(detail=False, methods=["get"], url_path="all")
    def all_metrics(self, request):
        return success_response(self.get_service(request).all(), "Dashboard data retrieved successfully")
