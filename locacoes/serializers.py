"""
Serializers para Locações - Imobiliária API
===========================================
"""

from rest_framework import serializers

from imobiliaria.serializers import BaseModelSerializer, WriteSerializer, optional, run_validator
from imobiliaria.validators import sanitize_string, validate_due_day, validate_money_amount

from .models import Lease

LEASE_FIELDS = [
    "contract_number",
    "start_date",
    "end_date",
    "rent_amount",
    "condo_fee",
    "property_tax",
    "extra_charges",
    "commission_amount",
    "rent_due_day",
    "tax_due_day",
    "condo_due_day",
]


class LeaseSerializer(BaseModelSerializer):
    """
    Locação com os nomes das entidades relacionadas
    """

    property_title = serializers.CharField(source="property.title", read_only=True)
    type_description = serializers.CharField(source="type.description", read_only=True)
    owner_name = serializers.CharField(source="owner.name", read_only=True)
    tenant_name = serializers.CharField(source="tenant.name", read_only=True)

    class Meta:
        model = Lease
        fields = (
            ["id", "property", "property_title", "type", "type_description", "owner", "owner_name"]
            + ["tenant", "tenant_name"]
            + LEASE_FIELDS
            + ["created_at", "updated_at", "deleted_at"]
        )


class LeaseWriteSerializer(WriteSerializer):
    property_id = serializers.UUIDField()
    type_id = serializers.UUIDField()
    owner_id = serializers.UUIDField()
    tenant_id = serializers.UUIDField()
    contract_number = serializers.CharField(max_length=50)

    class Meta(WriteSerializer.Meta):
        model = Lease
        fields = ["property_id", "type_id", "owner_id", "tenant_id"] + LEASE_FIELDS
        extra_kwargs = {
            "condo_fee": {"required": False, "allow_null": True},
            "property_tax": {"required": False, "allow_null": True},
            "extra_charges": {"required": False, "allow_null": True},
            "commission_amount": {"required": False},
            "tax_due_day": {"required": False, "allow_null": True},
            "condo_due_day": {"required": False, "allow_null": True},
        }

    def validate_contract_number(self, value):
        value = sanitize_string(value)
        if not value:
            raise serializers.ValidationError("Número do contrato é obrigatório")
        return value

    def validate_rent_amount(self, value):
        return run_validator(validate_money_amount, value)

    def validate_condo_fee(self, value):
        return optional(validate_money_amount, value)

    def validate_property_tax(self, value):
        return optional(validate_money_amount, value)

    def validate_extra_charges(self, value):
        return optional(validate_money_amount, value)

    def validate_commission_amount(self, value):
        return run_validator(validate_money_amount, value)

    def validate_rent_due_day(self, value):
        return run_validator(validate_due_day, value)

    def validate_tax_due_day(self, value):
        return optional(validate_due_day, value)

    def validate_condo_due_day(self, value):
        return optional(validate_due_day, value)
