"""
Services de Cadastros - Imobiliária API
=======================================

Imobiliárias, proprietários e inquilinos gravam endereços e contatos pelas
tabelas de ligação dentro da mesma transação da entidade.
"""

import logging

from imobiliaria.exceptions import DomainError
from imobiliaria.models import soft_delete_links
from imobiliaria.query import QueryEngine, normalize_text
from imobiliaria.query.fields import ADDRESS_FIELDS, CONTACT_FIELDS, TIMESTAMP_FIELDS, direct
from imobiliaria.services import ResourceService

from .models import Address, Agency, Contact, Owner, Tenant

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 10

LINK_CASCADE = (("addresses", "address"), ("contacts", "contact"))


AGENCY_FIELDS = {
    "trade_name": direct("trade_name", label="Nome fantasia"),
    "legal_name": direct("legal_name", label="Razão social"),
    "cnpj": direct("cnpj", label="CNPJ"),
    "state_registration": direct("state_registration", label="Inscrição estadual"),
    "municipal_registration": direct("municipal_registration", label="Inscrição municipal"),
    "license_number": direct("license_number", label="CRECI"),
    **ADDRESS_FIELDS,
    **CONTACT_FIELDS,
    **TIMESTAMP_FIELDS,
}

PERSON_FIELDS = {
    "name": direct("name", label="Nome"),
    "internal_code": direct("internal_code", label="Código interno"),
    "occupation": direct("occupation", label="Profissão"),
    "marital_status": direct("marital_status", label="Estado civil"),
    "cpf": direct("cpf", label="CPF"),
    "cnpj": direct("cnpj", label="CNPJ"),
    **ADDRESS_FIELDS,
    **CONTACT_FIELDS,
    **TIMESTAMP_FIELDS,
}


def linked_engine(mapping, search_fields):
    return QueryEngine(mapping, search_fields, address_relation="addresses", contact_relation="contacts")


class LinkedRecordsService(ResourceService):
    """
    Service de entidades com endereços e contatos ligados.

    ``addresses``/``contacts`` enviados numa atualização substituem os atuais:
    as ligações antigas (e os registros ligados) são excluídas logicamente.
    """

    cascade_links = LINK_CASCADE

    def link_model(self, relation):
        return self.model._meta.get_field(relation).related_model

    def link_owner_field(self, relation):
        """Nome da FK da tabela de ligação que aponta para a entidade"""
        return self.model._meta.get_field(relation).field.name

    def attach(self, instance, relation, target_model, target, rows):
        link_model = self.link_model(relation)
        owner_field = self.link_owner_field(relation)
        for row in rows:
            record = target_model.objects.create(**dict(row))
            link_model.objects.create(**{owner_field: instance, target: record})

    def attach_addresses(self, instance, rows):
        self.attach(instance, "addresses", Address, "address", rows)

    def attach_contacts(self, instance, rows):
        self.attach(instance, "contacts", Contact, "contact", rows)

    def perform_create(self, data):
        addresses = data.pop("addresses", None) or []
        contacts = data.pop("contacts", None) or []
        instance = super().perform_create(data)
        self.attach_addresses(instance, addresses)
        self.attach_contacts(instance, contacts)
        return instance

    def perform_update(self, instance, data):
        addresses = data.pop("addresses", None)
        contacts = data.pop("contacts", None)
        instance = super().perform_update(instance, data)
        if addresses is not None:
            logger.info(f"{self.label} {instance.pk}: endereços substituídos")
            soft_delete_links(instance.addresses, "address")
            self.attach_addresses(instance, addresses)
        if contacts is not None:
            logger.info(f"{self.label} {instance.pk}: contatos substituídos")
            soft_delete_links(instance.contacts, "contact")
            self.attach_contacts(instance, contacts)
        return instance

    def suggest_contacts(self, term):
        """
        Contatos ativos distintos das entidades ativas que batem com ``term``
        (sem acento/caixa), no máximo 10
        """
        reverse = self.link_model("contacts")._meta.get_field("contact").remote_field.related_name
        owner_field = self.link_owner_field("contacts")
        contacts = (
            Contact.objects.filter(
                deleted_at__isnull=True,
                **{
                    f"{reverse}__deleted_at__isnull": True,
                    f"{reverse}__{owner_field}__deleted_at__isnull": True,
                },
            )
            .distinct()
            .order_by("contact", "created_at")
        )
        needle = normalize_text(term)
        suggestions, seen = [], set()
        for record in contacts:
            text = normalize_text(" ".join(filter(None, [record.contact, record.email, record.phone, record.cellphone])))
            if needle and needle not in text:
                continue
            key = (normalize_text(record.contact), record.email.lower(), record.phone, record.cellphone)
            if key in seen:
                continue
            seen.add(key)
            suggestions.append(record)
            if len(suggestions) == MAX_SUGGESTIONS:
                break
        return suggestions


class AgencyService(LinkedRecordsService):
    model = Agency
    label = "Agency"
    unique_fields = (("cnpj", "CNPJ"),)
    engine = linked_engine(AGENCY_FIELDS, ("trade_name", "legal_name", "cnpj", "license_number", "city", "contact", "email"))


class PersonService(LinkedRecordsService):
    """
    Proprietários e inquilinos: pessoa física (CPF) ou jurídica (CNPJ)
    """

    unique_fields = (("internal_code", "Internal code"), ("cpf", "CPF"), ("cnpj", "CNPJ"))
    engine = linked_engine(PERSON_FIELDS, ("name", "internal_code", "cpf", "cnpj", "city", "contact", "email"))

    def check_references(self, data, instance=None):
        self.check_person_kind(data, instance)

    def check_person_kind(self, data, instance=None):
        """
        Profissão e estado civil são obrigatórios para pessoa física e não
        permitidos para pessoa jurídica, considerando os valores gravados
        para os campos não enviados
        """
        current = {
            field: data.get(field, getattr(instance, field, None))
            for field in ("cpf", "cnpj", "occupation", "marital_status")
        }
        errors = []
        if current["cpf"] and current["cnpj"]:
            errors.append("cnpj: Informe apenas CPF ou CNPJ")
        elif current["cpf"]:
            if not current["occupation"]:
                errors.append("occupation: Profissão é obrigatória para pessoa física")
            if not current["marital_status"]:
                errors.append("marital_status: Estado civil é obrigatório para pessoa física")
        elif current["cnpj"]:
            if current["occupation"]:
                errors.append("occupation: Profissão não é permitida para pessoa jurídica")
            if current["marital_status"]:
                errors.append("marital_status: Estado civil não é permitido para pessoa jurídica")
        else:
            errors.append("cpf: É necessário informar CPF (pessoa física) ou CNPJ (pessoa jurídica)")
        if errors:
            raise DomainError.validation("Validation error", errors=errors)


class OwnerService(PersonService):
    model = Owner
    label = "Owner"


class TenantService(PersonService):
    model = Tenant
    label = "Tenant"
