"""
Serializers do Dashboard - Imobiliária API
==========================================
"""

from rest_framework import serializers

MAX_RANGE_DAYS = 365


class DashboardParamsSerializer(serializers.Serializer):
    """
    Período do dashboard (``startDate`` e ``endDate`` no formato YYYY-MM-DD)
    """

    startDate = serializers.DateField(
        input_formats=["%Y-%m-%d"],
        error_messages={
            "required": "startDate é obrigatório",
            "invalid": "startDate deve ser uma data válida no formato YYYY-MM-DD",
        },
    )
    endDate = serializers.DateField(
        input_formats=["%Y-%m-%d"],
        error_messages={
            "required": "endDate é obrigatório",
            "invalid": "endDate deve ser uma data válida no formato YYYY-MM-DD",
        },
    )

    def validate(self, attrs):
        start, end = attrs["startDate"], attrs["endDate"]
        if start > end:
            raise serializers.ValidationError("startDate não pode ser maior que endDate")
        if (end - start).days > MAX_RANGE_DAYS:
            raise serializers.ValidationError(f"O intervalo máximo permitido é de {MAX_RANGE_DAYS} dias")
        return attrs
