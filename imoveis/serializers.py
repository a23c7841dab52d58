"""
Serializers para Imóveis - Imobiliária API
==========================================
"""

import json

from rest_framework import serializers

from cadastros.serializers import AddressSerializer, active_linked
from imobiliaria.serializers import BaseModelSerializer, WriteSerializer, optional, run_validator
from imobiliaria.validators import sanitize_string, validate_money_amount, validate_observation

from .models import Document, Favorite, Property, PropertyType, PropertyValue


class PropertyTypeSerializer(BaseModelSerializer):
    class Meta:
        model = PropertyType
        fields = ["id", "description", "created_at", "updated_at", "deleted_at"]


class PropertyTypeWriteSerializer(WriteSerializer):
    description = serializers.CharField(max_length=100)

    class Meta(WriteSerializer.Meta):
        model = PropertyType
        fields = ["description"]

    def validate_description(self, value):
        value = sanitize_string(value)
        if not value:
            raise serializers.ValidationError("Descrição é obrigatória")
        return value


class PropertyValueSerializer(BaseModelSerializer):
    """
    Valores do imóvel (leitura e entrada aninhada)
    """

    class Meta:
        model = PropertyValue
        fields = [
            "id",
            "reference_date",
            "purchase_value",
            "rental_value",
            "sale_value",
            "condo_fee",
            "property_tax",
            "extra_charges",
            "status",
            "sale_date",
            "notes",
            "created_at",
            "updated_at",
            "deleted_at",
        ]
        extra_kwargs = {
            "reference_date": {"required": False},
            "sale_value": {"required": False},
            "condo_fee": {"required": False, "allow_null": True},
            "property_tax": {"required": False},
            "extra_charges": {"required": False},
            "status": {"required": False},
            "sale_date": {"required": False, "allow_null": True},
            "notes": {"required": False, "allow_blank": True},
        }

    def validate_purchase_value(self, value):
        return run_validator(validate_money_amount, value)

    def validate_rental_value(self, value):
        return run_validator(validate_money_amount, value)

    def validate_sale_value(self, value):
        return run_validator(validate_money_amount, value)

    def validate_condo_fee(self, value):
        return optional(validate_money_amount, value)

    def validate_property_tax(self, value):
        return run_validator(validate_money_amount, value)

    def validate_notes(self, value):
        return optional(validate_observation, value)


class DocumentSerializer(BaseModelSerializer):
    type_display = serializers.CharField(source="get_type_display", read_only=True)

    class Meta:
        model = Document
        fields = [
            "id",
            "file_path",
            "file_type",
            "description",
            "type",
            "type_display",
            "created_by",
            "created_at",
            "updated_at",
            "deleted_at",
        ]


class PropertyListSerializer(BaseModelSerializer):
    """
    Serializer simplificado para listagem de imóveis
    """

    owner_name = serializers.CharField(source="owner.name", read_only=True)
    type_description = serializers.CharField(source="type.description", read_only=True)
    agency_trade_name = serializers.CharField(source="agency.trade_name", read_only=True, default=None)
    addresses = serializers.SerializerMethodField()

    class Meta:
        model = Property
        fields = [
            "id",
            "title",
            "owner",
            "owner_name",
            "type",
            "type_description",
            "agency",
            "agency_trade_name",
            "bedrooms",
            "bathrooms",
            "half_bathrooms",
            "garage_spaces",
            "area_total",
            "area_built",
            "frontage",
            "furnished",
            "floor_number",
            "tax_registration",
            "notes",
            "addresses",
            "created_at",
            "updated_at",
            "deleted_at",
        ]

    def get_addresses(self, obj):
        return AddressSerializer(active_linked(obj, "addresses", "address"), many=True).data


class PropertySerializer(PropertyListSerializer):
    """
    Detalhe do imóvel com valores e documentos ativos
    """

    values = serializers.SerializerMethodField()
    documents = serializers.SerializerMethodField()

    class Meta(PropertyListSerializer.Meta):
        fields = PropertyListSerializer.Meta.fields + ["values", "documents"]

    def get_values(self, obj):
        values = [value for value in obj.values.all() if value.deleted_at is None]
        return PropertyValueSerializer(values, many=True).data

    def get_documents(self, obj):
        documents = [document for document in obj.documents.all() if document.deleted_at is None]
        return DocumentSerializer(documents, many=True).data


class PropertyWriteSerializer(WriteSerializer):
    """
    Entrada de criação/atualização de imóveis com endereço e valores aninhados
    """

    owner_id = serializers.UUIDField()
    type_id = serializers.UUIDField()
    agency_id = serializers.UUIDField(required=False, allow_null=True)
    address = AddressSerializer(required=False)
    values = PropertyValueSerializer(required=False)

    class Meta(WriteSerializer.Meta):
        model = Property
        fields = [
            "owner_id",
            "type_id",
            "agency_id",
            "title",
            "bedrooms",
            "bathrooms",
            "half_bathrooms",
            "garage_spaces",
            "area_total",
            "area_built",
            "frontage",
            "furnished",
            "floor_number",
            "tax_registration",
            "notes",
            "address",
            "values",
        ]
        extra_kwargs = {
            "bedrooms": {"required": True},
            "bathrooms": {"required": True},
            "notes": {"required": False, "allow_blank": True},
        }

    def validate_title(self, value):
        value = sanitize_string(value)
        if not value:
            raise serializers.ValidationError("Título é obrigatório")
        return value

    def validate_notes(self, value):
        return optional(validate_observation, value)


def parse_json_field(data, field, default=None):
    """
    Campo texto de formulário multipart contendo JSON
    """
    raw = data.get(field)
    if raw in (None, ""):
        return default
    if isinstance(raw, (dict, list)):
        return raw
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise serializers.ValidationError({field: f"JSON inválido: {exc}"})


class UnifiedPropertySerializer(serializers.Serializer):
    """
    Formulário multipart unificado: ``propertyData``, ``addressData``,
    ``valuesData`` e ``removedDocuments`` chegam como texto JSON
    """

    def to_internal_value(self, data):
        payload = dict(parse_json_field(data, "propertyData", {}))
        address = parse_json_field(data, "addressData")
        values = parse_json_field(data, "valuesData")
        if address is not None:
            payload["address"] = address
        if values is not None:
            payload["values"] = values

        removed = parse_json_field(data, "removedDocuments", [])
        if not isinstance(removed, list):
            raise serializers.ValidationError({"removedDocuments": "Deve ser uma lista de ids"})

        writer = PropertyWriteSerializer(data=payload, partial=self.partial, context=self.context)
        writer.is_valid(raise_exception=True)
        return {"property": writer.validated_data, "removed_documents": [str(pk) for pk in removed]}


class FavoriteSerializer(BaseModelSerializer):
    user_name = serializers.CharField(source="user.name", read_only=True)
    user_email = serializers.CharField(source="user.email", read_only=True)
    property_title = serializers.CharField(source="property.title", read_only=True)

    class Meta:
        model = Favorite
        fields = [
            "id",
            "user",
            "user_name",
            "user_email",
            "property",
            "property_title",
            "created_at",
            "updated_at",
            "deleted_at",
        ]


class FavoriteWriteSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    property_id = serializers.UUIDField()
