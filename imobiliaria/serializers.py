"""
Serializers base - Imobiliária API
==================================
"""

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers


class BaseModelSerializer(serializers.ModelSerializer):
    """
    Serializer base com campos comuns
    """

    id = serializers.UUIDField(read_only=True)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)
    deleted_at = serializers.DateTimeField(read_only=True)

    class Meta:
        abstract = True
        fields = ["id", "created_at", "updated_at", "deleted_at"]


class WriteSerializer(serializers.ModelSerializer):
    """
    Serializer de entrada: só valida, quem grava é o service.

    Sem validadores de unicidade automáticos; o conflito de chave natural é
    verificado no service e responde 409.
    """

    class Meta:
        abstract = True
        validators = []

    def create(self, validated_data):
        raise serializers.ValidationError("Criação não permitida neste serializer")

    def update(self, instance, validated_data):
        raise serializers.ValidationError("Atualização não permitida neste serializer")


def run_validator(validator, value):
    """
    Executa um validador de ``imobiliaria.validators`` convertendo o erro para o DRF
    """
    try:
        return validator(value)
    except DjangoValidationError as exc:
        raise serializers.ValidationError(exc.messages)


def optional(validator, value):
    if value in (None, ""):
        return value
    return run_validator(validator, value)
