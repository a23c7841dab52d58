"""
Serializers para Cadastros - Imobiliária API
============================================
"""

from rest_framework import serializers

from imobiliaria.serializers import BaseModelSerializer, WriteSerializer, optional, run_validator
from imobiliaria.validators import (
    sanitize_email,
    sanitize_string,
    validate_cep,
    validate_cnpj,
    validate_cpf,
    validate_phone,
    validate_uf,
)

from .models import Address, Agency, Contact, Owner, Tenant


def active_linked(instance, relation, target):
    """
    Registros ligados ativos (usa o prefetch da listagem quando existir)
    """
    records = []
    for link in getattr(instance, relation).all():
        if link.deleted_at is not None:
            continue
        record = getattr(link, target)
        if record.deleted_at is None:
            records.append(record)
    return records


class AddressSerializer(BaseModelSerializer):
    """
    Serializer para endereços
    """

    full_address = serializers.ReadOnlyField()

    class Meta:
        model = Address
        fields = [
            "id",
            "zip_code",
            "street",
            "number",
            "district",
            "city",
            "state",
            "country",
            "complement",
            "block",
            "lot",
            "full_address",
            "created_at",
            "updated_at",
            "deleted_at",
        ]
        extra_kwargs = {
            "country": {"required": False},
            "complement": {"required": False, "allow_blank": True},
            "block": {"required": False, "allow_blank": True},
            "lot": {"required": False, "allow_blank": True},
        }

    def validate_zip_code(self, value):
        return run_validator(validate_cep, value)

    def validate_state(self, value):
        return run_validator(validate_uf, value)

    def validate_street(self, value):
        return sanitize_string(value)

    def validate_district(self, value):
        return sanitize_string(value)

    def validate_city(self, value):
        return sanitize_string(value)


class ContactSerializer(BaseModelSerializer):
    """
    Serializer para contatos
    """

    class Meta:
        model = Contact
        fields = ["id", "contact", "phone", "cellphone", "email", "whatsapp", "created_at", "updated_at", "deleted_at"]
        extra_kwargs = {
            "contact": {"required": False, "allow_blank": True},
            "phone": {"required": False, "allow_blank": True},
            "cellphone": {"required": False, "allow_blank": True},
            "email": {"required": False, "allow_blank": True},
            "whatsapp": {"required": False},
        }

    def validate_contact(self, value):
        return sanitize_string(value)

    def validate_phone(self, value):
        return optional(validate_phone, value)

    def validate_cellphone(self, value):
        return optional(validate_phone, value)

    def validate_email(self, value):
        return optional(sanitize_email, value)

    def validate(self, data):
        if not any(data.get(field) for field in ("contact", "phone", "cellphone", "email")):
            raise serializers.ValidationError("Informe ao menos nome, telefone, celular ou e-mail do contato")
        return data


class LinkedRecordsMixin(serializers.Serializer):
    """
    Expõe os endereços e contatos ativos da entidade
    """

    addresses = serializers.SerializerMethodField()
    contacts = serializers.SerializerMethodField()

    def get_addresses(self, obj):
        return AddressSerializer(active_linked(obj, "addresses", "address"), many=True).data

    def get_contacts(self, obj):
        return ContactSerializer(active_linked(obj, "contacts", "contact"), many=True).data


# Imobiliárias


class AgencySerializer(LinkedRecordsMixin, BaseModelSerializer):
    """
    Serializer de leitura de imobiliárias
    """

    class Meta:
        model = Agency
        fields = [
            "id",
            "trade_name",
            "legal_name",
            "cnpj",
            "state_registration",
            "municipal_registration",
            "license_number",
            "addresses",
            "contacts",
            "created_at",
            "updated_at",
            "deleted_at",
        ]


class AgencyWriteSerializer(WriteSerializer):
    """
    Entrada de criação/atualização de imobiliárias
    """

    cnpj = serializers.CharField(max_length=18)
    addresses = AddressSerializer(many=True, required=False)
    contacts = ContactSerializer(many=True, required=False)

    class Meta(WriteSerializer.Meta):
        model = Agency
        fields = [
            "trade_name",
            "legal_name",
            "cnpj",
            "state_registration",
            "municipal_registration",
            "license_number",
            "addresses",
            "contacts",
        ]
        extra_kwargs = {
            "state_registration": {"required": False, "allow_blank": True},
            "municipal_registration": {"required": False, "allow_blank": True},
            "license_number": {"required": False, "allow_blank": True},
        }

    def validate_trade_name(self, value):
        return sanitize_string(value)

    def validate_legal_name(self, value):
        return sanitize_string(value)

    def validate_cnpj(self, value):
        return run_validator(validate_cnpj, value)


# Proprietários e inquilinos


PERSON_FIELDS = [
    "id",
    "name",
    "internal_code",
    "occupation",
    "marital_status",
    "cpf",
    "cnpj",
    "addresses",
    "contacts",
    "created_at",
    "updated_at",
    "deleted_at",
]


class OwnerSerializer(LinkedRecordsMixin, BaseModelSerializer):
    class Meta:
        model = Owner
        fields = PERSON_FIELDS


class TenantSerializer(LinkedRecordsMixin, BaseModelSerializer):
    class Meta:
        model = Tenant
        fields = PERSON_FIELDS


class PersonWriteSerializer(WriteSerializer):
    """
    Entrada de proprietários/inquilinos: pessoa física (CPF) ou jurídica (CNPJ)
    """

    internal_code = serializers.CharField(max_length=30)
    cpf = serializers.CharField(max_length=14, required=False, allow_null=True, allow_blank=True)
    cnpj = serializers.CharField(max_length=20, required=False, allow_null=True, allow_blank=True)
    addresses = AddressSerializer(many=True, required=False)
    contacts = ContactSerializer(many=True, required=False)

    class Meta(WriteSerializer.Meta):
        fields = ["name", "internal_code", "occupation", "marital_status", "cpf", "cnpj", "addresses", "contacts"]
        extra_kwargs = {
            "occupation": {"required": False, "allow_blank": True},
            "marital_status": {"required": False, "allow_blank": True},
        }

    def validate_name(self, value):
        """Nome completo ou razão social: qualquer texto não vazio"""
        value = sanitize_string(value)
        if not value:
            raise serializers.ValidationError("Nome é obrigatório")
        return value

    def validate_internal_code(self, value):
        value = sanitize_string(value)
        if not value:
            raise serializers.ValidationError("Código interno é obrigatório")
        return value

    def validate_cpf(self, value):
        return optional(validate_cpf, value) or None

    def validate_cnpj(self, value):
        return optional(validate_cnpj, value) or None

    def validate(self, data):
        cpf = data.get("cpf", getattr(self.instance, "cpf", None))
        cnpj = data.get("cnpj", getattr(self.instance, "cnpj", None))
        if self.partial and "cpf" not in data and "cnpj" not in data:
            return data
        if not cpf and not cnpj:
            raise serializers.ValidationError({"cpf": "É necessário informar CPF (pessoa física) ou CNPJ (pessoa jurídica)"})
        if cpf and cnpj:
            raise serializers.ValidationError({"cnpj": "Informe apenas CPF ou CNPJ"})
        return data


class OwnerWriteSerializer(PersonWriteSerializer):
    class Meta(PersonWriteSerializer.Meta):
        model = Owner


class TenantWriteSerializer(PersonWriteSerializer):
    class Meta(PersonWriteSerializer.Meta):
        model = Tenant

