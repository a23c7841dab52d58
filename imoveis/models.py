"""
Modelos de Imóveis - Imobiliária API
====================================
"""

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q

from cadastros.models import Address, Agency, Owner, active_unique
from imobiliaria.models import BaseModelWithManager, LinkModel


class PropertyType(BaseModelWithManager):
    """
    Tipo de imóvel (casa, apartamento, sala comercial...)
    """

    description = models.CharField(max_length=100, help_text="Descrição do tipo")

    class Meta:
        verbose_name = "Tipo de Imóvel"
        verbose_name_plural = "Tipos de Imóvel"
        ordering = ["description"]
        constraints = [active_unique("description", "property_type")]

    def __str__(self):
        return self.description


class Property(BaseModelWithManager):
    """
    Modelo para imóveis
    """

    owner = models.ForeignKey(Owner, on_delete=models.PROTECT, related_name="properties")
    agency = models.ForeignKey(Agency, on_delete=models.SET_NULL, null=True, blank=True, related_name="properties")
    type = models.ForeignKey(PropertyType, on_delete=models.PROTECT, related_name="properties")

    title = models.CharField(max_length=200, help_text="Título do anúncio")
    bedrooms = models.PositiveIntegerField(default=0)
    bathrooms = models.PositiveIntegerField(default=0)
    half_bathrooms = models.PositiveIntegerField(default=0, help_text="Lavabos")
    garage_spaces = models.PositiveIntegerField(default=0)
    area_total = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal("0"))])
    area_built = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    frontage = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0"), help_text="Testada (m)")
    furnished = models.BooleanField(default=False)
    floor_number = models.IntegerField(null=True, blank=True)
    tax_registration = models.CharField(max_length=50, help_text="Inscrição imobiliária (IPTU)")
    notes = models.TextField(blank=True)

    class Meta:
        verbose_name = "Imóvel"
        verbose_name_plural = "Imóveis"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["title"]),
            models.Index(fields=["created_at"]),
        ]

    def __str__(self):
        return self.title


class PropertyAddress(LinkModel):
    property = models.ForeignKey(Property, on_delete=models.CASCADE, related_name="addresses")
    address = models.ForeignKey(Address, on_delete=models.CASCADE, related_name="property_links")


class PropertyValue(BaseModelWithManager):
    """
    Valores do imóvel numa data de referência
    """

    STATUS_CHOICES = [
        ("AVAILABLE", "Disponível"),
        ("OCCUPIED", "Ocupado"),
    ]

    property = models.ForeignKey(Property, on_delete=models.CASCADE, related_name="values")
    reference_date = models.DateField()
    purchase_value = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0"))
    rental_value = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0"))
    sale_value = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0"))
    condo_fee = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    property_tax = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0"))
    extra_charges = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0"))
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default="AVAILABLE")
    sale_date = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True)

    class Meta:
        verbose_name = "Valor do Imóvel"
        verbose_name_plural = "Valores do Imóvel"
        ordering = ["-reference_date", "-created_at"]

    def __str__(self):
        return f"{self.property} - {self.reference_date} ({self.get_status_display()})"


class Document(BaseModelWithManager):
    """
    Documento ou imagem anexado ao imóvel
    """

    TITLE_DEED = "TITLE_DEED"
    REGISTRATION = "REGISTRATION"
    PROPERTY_RECORD = "PROPERTY_RECORD"
    IMAGE = "IMAGE"
    OTHER = "OTHER"

    TYPE_CHOICES = [
        (TITLE_DEED, "Escritura"),
        (REGISTRATION, "Matrícula"),
        (PROPERTY_RECORD, "Registro"),
        (IMAGE, "Imagem"),
        (OTHER, "Outro"),
    ]

    REQUIRED_TYPES = (TITLE_DEED, REGISTRATION, PROPERTY_RECORD)

    property = models.ForeignKey(Property, on_delete=models.CASCADE, related_name="documents")
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name="documents"
    )
    file_path = models.CharField(max_length=500, help_text="URL do arquivo armazenado")
    file_type = models.CharField(max_length=100, blank=True, help_text="Content-Type")
    description = models.CharField(max_length=200, blank=True)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default=OTHER)

    class Meta:
        verbose_name = "Documento"
        verbose_name_plural = "Documentos"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.get_type_display()} - {self.property}"


class Favorite(BaseModelWithManager):
    """
    Imóvel favoritado por um usuário
    """

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="favorites")
    property = models.ForeignKey(Property, on_delete=models.CASCADE, related_name="favorites")

    class Meta:
        verbose_name = "Favorito"
        verbose_name_plural = "Favoritos"
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "property"],
                condition=Q(deleted_at__isnull=True),
                name="favorite_user_property_active_unique",
            )
        ]

    def __str__(self):
        return f"{self.user} - {self.property}"
