"""
Services de Locações - Imobiliária API
======================================
"""

from cadastros.models import Owner, Tenant
from imobiliaria.exceptions import DomainError
from imobiliaria.query import QueryEngine
from imobiliaria.query.fields import DATE, NUMBER, TIMESTAMP_FIELDS, direct, relation
from imobiliaria.services import ResourceService
from imoveis.models import Property, PropertyType
from imoveis.services import require_active

from .models import Lease

LEASE_FIELDS = {
    "contract_number": direct("contract_number", label="Número do contrato"),
    "start_date": direct("start_date", DATE, "Início"),
    "end_date": direct("end_date", DATE, "Término"),
    "rent_amount": direct("rent_amount", NUMBER, "Aluguel"),
    "condo_fee": direct("condo_fee", NUMBER, "Condomínio"),
    "property_tax": direct("property_tax", NUMBER, "IPTU"),
    "extra_charges": direct("extra_charges", NUMBER, "Encargos extras"),
    "commission_amount": direct("commission_amount", NUMBER, "Comissão"),
    "rent_due_day": direct("rent_due_day", NUMBER, "Vencimento do aluguel"),
    "tax_due_day": direct("tax_due_day", NUMBER, "Vencimento do IPTU"),
    "condo_due_day": direct("condo_due_day", NUMBER, "Vencimento do condomínio"),
    "property_title": relation("property__title", label="Imóvel"),
    "type_description": relation("type__description", label="Tipo de imóvel"),
    "owner_name": relation("owner__name", label="Proprietário"),
    "tenant_name": relation("tenant__name", label="Inquilino"),
    **TIMESTAMP_FIELDS,
}

REFERENCES = (
    ("property_id", Property, "Property not found"),
    ("type_id", PropertyType, "Property type not found"),
    ("owner_id", Owner, "Owner not found"),
    ("tenant_id", Tenant, "Tenant not found"),
)


class LeaseService(ResourceService):
    model = Lease
    label = "Lease"
    unique_fields = (("contract_number", "Contract number"),)
    engine = QueryEngine(
        LEASE_FIELDS,
        ("contract_number", "property_title", "type_description", "owner_name", "tenant_name"),
        select_related=("property", "type", "owner", "tenant"),
    )

    def get_queryset(self):
        return Lease.objects.select_related("property", "type", "owner", "tenant")

    def check_references(self, data, instance=None):
        for field, model, message in REFERENCES:
            if field in data:
                require_active(model, data[field], message)
        self.check_period(data, instance)

    def check_period(self, data, instance=None):
        """
        Início estritamente anterior ao término, considerando o valor atual
        do contrato para o campo que não foi enviado
        """
        start = data.get("start_date", getattr(instance, "start_date", None))
        end = data.get("end_date", getattr(instance, "end_date", None))
        if start and end and start >= end:
            raise DomainError.validation("Data de início deve ser anterior à data de término")
