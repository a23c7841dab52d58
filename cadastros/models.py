"""
Modelos de Cadastros - Imobiliária API
======================================

Endereços, contatos, imobiliárias, proprietários e inquilinos. Endereços e
contatos ficam ligados às entidades por tabelas de ligação com exclusão lógica.
"""

from django.db import models
from django.db.models import Q

from imobiliaria.models import BaseModelWithManager, LinkModel


class Address(BaseModelWithManager):
    """
    Modelo para endereços
    """

    zip_code = models.CharField(max_length=9, help_text="CEP")
    street = models.CharField(max_length=200, help_text="Rua, avenida, alameda, etc.")
    number = models.CharField(max_length=20, help_text="Número do endereço")
    district = models.CharField(max_length=100, help_text="Bairro ou distrito")
    city = models.CharField(max_length=100, help_text="Cidade")
    state = models.CharField(max_length=50, help_text="Estado (UF)")
    country = models.CharField(max_length=60, default="Brasil", help_text="País")
    complement = models.CharField(max_length=100, blank=True, help_text="Apartamento, sala, bloco, etc.")
    block = models.CharField(max_length=20, blank=True, help_text="Quadra")
    lot = models.CharField(max_length=20, blank=True, help_text="Lote")

    class Meta:
        verbose_name = "Endereço"
        verbose_name_plural = "Endereços"
        indexes = [
            models.Index(fields=["city", "state"]),
            models.Index(fields=["zip_code"]),
        ]

    def __str__(self):
        return f"{self.street}, {self.number} - {self.district}, {self.city}/{self.state}"

    @property
    def full_address(self):
        """Retorna endereço formatado completo"""
        parts = [f"{self.street}, {self.number}"]
        if self.complement:
            parts.append(self.complement)
        parts.extend([self.district, f"{self.city}/{self.state}", f"CEP: {self.zip_code}"])
        return " - ".join(parts)


class Contact(BaseModelWithManager):
    """
    Modelo para contatos (pessoa de contato, telefones, e-mail)
    """

    contact = models.CharField(max_length=150, blank=True, help_text="Nome da pessoa de contato")
    phone = models.CharField(max_length=20, blank=True, help_text="Telefone fixo com DDD")
    cellphone = models.CharField(max_length=20, blank=True, help_text="Celular com DDD")
    email = models.EmailField(blank=True, help_text="E-mail de contato")
    whatsapp = models.BooleanField(default=False, help_text="Celular atende WhatsApp")

    class Meta:
        verbose_name = "Contato"
        verbose_name_plural = "Contatos"

    def __str__(self):
        return self.contact


def active_unique(field, model_name):
    """Chave natural única apenas entre registros não excluídos"""
    return models.UniqueConstraint(
        fields=[field],
        condition=Q(deleted_at__isnull=True),
        name=f"{model_name}_{field}_active_unique",
    )


class Agency(BaseModelWithManager):
    """
    Modelo para imobiliárias
    """

    trade_name = models.CharField(max_length=150, help_text="Nome fantasia")
    legal_name = models.CharField(max_length=200, help_text="Razão social")
    cnpj = models.CharField(max_length=18, help_text="CNPJ (apenas dígitos)")
    state_registration = models.CharField(max_length=30, blank=True, help_text="Inscrição estadual")
    municipal_registration = models.CharField(max_length=30, blank=True, help_text="Inscrição municipal")
    license_number = models.CharField(max_length=20, blank=True, help_text="Registro CRECI")

    class Meta:
        verbose_name = "Imobiliária"
        verbose_name_plural = "Imobiliárias"
        constraints = [active_unique("cnpj", "agency")]
        indexes = [models.Index(fields=["trade_name"])]

    def __str__(self):
        return self.trade_name


class Person(BaseModelWithManager):
    """
    Base de proprietários e inquilinos
    """

    name = models.CharField(max_length=150, help_text="Nome completo ou razão social")
    internal_code = models.CharField(max_length=30, help_text="Código interno")
    occupation = models.CharField(max_length=100, blank=True, help_text="Profissão")
    marital_status = models.CharField(max_length=30, blank=True, help_text="Estado civil")
    cpf = models.CharField(max_length=14, null=True, blank=True, help_text="CPF (apenas dígitos)")
    cnpj = models.CharField(max_length=20, null=True, blank=True, help_text="CNPJ (apenas dígitos)")

    class Meta:
        abstract = True
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.name} ({self.internal_code})"

    @property
    def document(self):
        return self.cpf or self.cnpj


class Owner(Person):
    class Meta(Person.Meta):
        verbose_name = "Proprietário"
        verbose_name_plural = "Proprietários"
        constraints = [
            active_unique("internal_code", "owner"),
            active_unique("cpf", "owner"),
            active_unique("cnpj", "owner"),
        ]
        indexes = [models.Index(fields=["name"])]


class Tenant(Person):
    class Meta(Person.Meta):
        verbose_name = "Inquilino"
        verbose_name_plural = "Inquilinos"
        constraints = [
            active_unique("internal_code", "tenant"),
            active_unique("cpf", "tenant"),
            active_unique("cnpj", "tenant"),
        ]
        indexes = [models.Index(fields=["name"])]


# Tabelas de ligação


class AgencyAddress(LinkModel):
    agency = models.ForeignKey(Agency, on_delete=models.CASCADE, related_name="addresses")
    address = models.ForeignKey(Address, on_delete=models.CASCADE, related_name="agency_links")


class AgencyContact(LinkModel):
    agency = models.ForeignKey(Agency, on_delete=models.CASCADE, related_name="contacts")
    contact = models.ForeignKey(Contact, on_delete=models.CASCADE, related_name="agency_links")


class OwnerAddress(LinkModel):
    owner = models.ForeignKey(Owner, on_delete=models.CASCADE, related_name="addresses")
    address = models.ForeignKey(Address, on_delete=models.CASCADE, related_name="owner_links")


class OwnerContact(LinkModel):
    owner = models.ForeignKey(Owner, on_delete=models.CASCADE, related_name="contacts")
    contact = models.ForeignKey(Contact, on_delete=models.CASCADE, related_name="owner_links")


class TenantAddress(LinkModel):
    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE, related_name="addresses")
    address = models.ForeignKey(Address, on_delete=models.CASCADE, related_name="tenant_links")


class TenantContact(LinkModel):
    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE, related_name="contacts")
    contact = models.ForeignKey(Contact, on_delete=models.CASCADE, related_name="tenant_links")
