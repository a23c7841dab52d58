"""
Modelos de Locações - Imobiliária API
=====================================
"""

from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from cadastros.models import Owner, Tenant, active_unique
from imobiliaria.models import BaseModelWithManager
from imoveis.models import Property, PropertyType


def due_day_field(**kwargs):
    return models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(31)], **kwargs
    )


class Lease(BaseModelWithManager):
    """
    Contrato de locação de um imóvel
    """

    property = models.ForeignKey(Property, on_delete=models.PROTECT, related_name="leases")
    type = models.ForeignKey(PropertyType, on_delete=models.PROTECT, related_name="leases")
    owner = models.ForeignKey(Owner, on_delete=models.PROTECT, related_name="leases")
    tenant = models.ForeignKey(Tenant, on_delete=models.PROTECT, related_name="leases")

    contract_number = models.CharField(max_length=50, help_text="Número do contrato")
    start_date = models.DateField(help_text="Início da vigência")
    end_date = models.DateField(help_text="Fim da vigência")
    rent_amount = models.DecimalField(max_digits=12, decimal_places=2, help_text="Valor do aluguel")
    condo_fee = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    property_tax = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True, help_text="IPTU")
    extra_charges = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    commission_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0"))
    rent_due_day = due_day_field(help_text="Dia de vencimento do aluguel")
    tax_due_day = due_day_field(null=True, blank=True, help_text="Dia de vencimento do IPTU")
    condo_due_day = due_day_field(null=True, blank=True, help_text="Dia de vencimento do condomínio")

    class Meta:
        verbose_name = "Locação"
        verbose_name_plural = "Locações"
        ordering = ["-created_at"]
        constraints = [active_unique("contract_number", "lease")]
        indexes = [
            models.Index(fields=["start_date", "end_date"]),
            models.Index(fields=["created_at"]),
        ]

    def __str__(self):
        return f"Contrato {self.contract_number} - {self.property}"

    def is_current(self, on_date):
        """Contrato vigente na data informada"""
        return self.start_date <= on_date <= self.end_date
