"""
Services de Imóveis - Imobiliária API
=====================================
"""

import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Prefetch
from django.utils import timezone

from cadastros.models import Address, Agency, Owner
from imobiliaria.exceptions import DomainError
from imobiliaria.query import QueryEngine
from imobiliaria.query.fields import BOOLEAN, EXACT, NUMBER, TIMESTAMP_FIELDS, address, direct, relation
from imobiliaria.services import ResourceService
from imobiliaria.storage import UploadItem, upload_files

from .models import Document, Favorite, Property, PropertyAddress, PropertyType, PropertyValue

logger = logging.getLogger(__name__)

# Campo multipart -> tipo de documento
FILE_FIELDS = {
    "arquivosImagens": Document.IMAGE,
    "arquivosMatricula": Document.REGISTRATION,
    "arquivosRegistro": Document.PROPERTY_RECORD,
    "arquivosEscritura": Document.TITLE_DEED,
    "arquivosOutros": Document.OTHER,
}

DOCUMENT_DESCRIPTIONS = {
    Document.IMAGE: "Imagem do imóvel",
    Document.REGISTRATION: "Matrícula do imóvel",
    Document.PROPERTY_RECORD: "Registro do imóvel",
    Document.TITLE_DEED: "Escritura do imóvel",
    Document.OTHER: "Outro documento",
}


PROPERTY_TYPE_FIELDS = {
    "description": direct("description", label="Descrição"),
    **TIMESTAMP_FIELDS,
}

PROPERTY_FIELDS = {
    "title": direct("title", label="Título"),
    "bedrooms": direct("bedrooms", NUMBER, "Quartos"),
    "bathrooms": direct("bathrooms", NUMBER, "Banheiros"),
    "half_bathrooms": direct("half_bathrooms", NUMBER, "Lavabos"),
    "garage_spaces": direct("garage_spaces", NUMBER, "Vagas"),
    "area_total": direct("area_total", NUMBER, "Área total"),
    "area_built": direct("area_built", NUMBER, "Área construída"),
    "frontage": direct("frontage", NUMBER, "Testada"),
    "furnished": direct("furnished", BOOLEAN, "Mobiliado"),
    "floor_number": direct("floor_number", NUMBER, "Andar"),
    "tax_registration": direct("tax_registration", label="Inscrição imobiliária"),
    "notes": direct("notes", label="Observações"),
    "owner_id": direct("owner_id", EXACT, "Proprietário"),
    "type_id": direct("type_id", EXACT, "Tipo"),
    "agency_id": direct("agency_id", EXACT, "Imobiliária"),
    "owner_name": relation("owner__name", label="Nome do proprietário"),
    "type_description": relation("type__description", label="Tipo de imóvel"),
    "agency_trade_name": relation("agency__trade_name", label="Imobiliária"),
    "city": address("city", "Cidade"),
    "state": address("state", "Estado"),
    "district": address("district", "Bairro"),
    "street": address("street", "Logradouro"),
    "zip_code": address("zip_code", "CEP"),
    **TIMESTAMP_FIELDS,
}


class PropertyTypeService(ResourceService):
    model = PropertyType
    label = "Property type"
    unique_fields = (("description", "Property type"),)
    engine = QueryEngine(PROPERTY_TYPE_FIELDS, ("description",))

    def conflict_message(self, field, label, updating):
        return "Property type already exists"


def require_active(model, pk, message):
    """Registro ativo referenciado pela entrada, ou NotFound"""
    if pk is None:
        return None
    instance = model.objects.filter(pk=pk, deleted_at__isnull=True).first()
    if instance is None:
        raise DomainError.not_found(message)
    return instance


def active_documents(property_id):
    return Document.objects.filter(property_id=property_id, deleted_at__isnull=True)


class PropertyService(ResourceService):
    model = Property
    label = "Property"
    cascade_links = (("addresses", "address"),)
    engine = QueryEngine(
        PROPERTY_FIELDS,
        (
            "title",
            "tax_registration",
            "owner_name",
            "type_description",
            "agency_trade_name",
            "city",
            "district",
            "street",
        ),
        address_relation="addresses",
        select_related=("owner", "type", "agency"),
    )

    def get_queryset(self):
        return Property.objects.select_related("owner", "type", "agency").prefetch_related(
            Prefetch(
                "addresses",
                queryset=PropertyAddress.objects.filter(deleted_at__isnull=True).select_related("address"),
            ),
            Prefetch("values", queryset=PropertyValue.objects.filter(deleted_at__isnull=True)),
            Prefetch("documents", queryset=Document.objects.filter(deleted_at__isnull=True)),
        )

    def get_list_queryset(self):
        return Property.objects.all()

    # Relacionamentos

    def check_references(self, data, instance=None):
        if "owner_id" in data:
            require_active(Owner, data["owner_id"], "Owner not found")
        if "type_id" in data:
            require_active(PropertyType, data["type_id"], "Property type not found")
        if data.get("agency_id"):
            require_active(Agency, data["agency_id"], "Agency not found")

    # Endereço e valores

    def save_address(self, instance, data):
        link = instance.addresses.filter(deleted_at__isnull=True, address__deleted_at__isnull=True).first()
        if link is None:
            PropertyAddress.objects.create(property=instance, address=Address.objects.create(**data))
            return
        for attr, value in data.items():
            setattr(link.address, attr, value)
        link.address.save()

    def save_values(self, instance, data):
        data = dict(data)
        data.setdefault("reference_date", timezone.localdate())
        current = instance.values.filter(deleted_at__isnull=True).order_by("-reference_date", "-created_at").first()
        if current is None:
            PropertyValue.objects.create(property=instance, **data)
            return
        for attr, value in data.items():
            setattr(current, attr, value)
        current.save()

    def perform_create(self, data):
        address_data = data.pop("address", None)
        values_data = data.pop("values", None)
        instance = super().perform_create(data)
        if address_data:
            self.save_address(instance, address_data)
        if values_data:
            self.save_values(instance, values_data)
        return instance

    def perform_update(self, instance, data):
        address_data = data.pop("address", None)
        values_data = data.pop("values", None)
        instance = super().perform_update(instance, data)
        if address_data:
            self.save_address(instance, address_data)
        if values_data:
            self.save_values(instance, values_data)
        return instance

    def create(self, data):
        return self.get(super().create(data).pk)

    def update(self, pk, data):
        return self.get(super().update(pk, data).pk)

    # Cascata para valores e documentos

    def after_delete(self, instance, moment):
        instance.values.filter(deleted_at__isnull=True).update(deleted_at=moment)
        instance.documents.filter(deleted_at__isnull=True).update(deleted_at=moment)

    def after_restore(self, instance, deleted_at):
        instance.values.filter(deleted_at=deleted_at).update(deleted_at=None)
        instance.documents.filter(deleted_at=deleted_at).update(deleted_at=None)

    # Documentos

    def upload_items(self, files):
        """Arquivos do request agrupados pelos campos multipart conhecidos"""
        items = []
        for field, document_type in FILE_FIELDS.items():
            for uploaded in files.getlist(field):
                items.append(UploadItem(field, uploaded, document_type))
        return items

    def store_documents(self, instance, items, user=None):
        """
        Envia os arquivos e grava um Document por upload bem-sucedido
        """
        results = upload_files(items, folder=f"properties/{instance.pk}")
        created_by = user if getattr(user, "is_authenticated", False) else None
        documents = [
            Document.objects.create(
                property=instance,
                created_by=created_by,
                file_path=result.url,
                file_type=result.item.content_type,
                description=DOCUMENT_DESCRIPTIONS[result.item.document_type],
                type=result.item.document_type,
            )
            for result in results
        ]
        if len(documents) < len(items):
            logger.warning(f"Imóvel {instance.pk}: {len(items) - len(documents)} arquivo(s) não enviados")
        return documents

    def upload_documents(self, pk, files, user=None, replace=False):
        """
        POST anexa novos documentos; PUT (``replace``) substitui os ativos
        pelos enviados quando há arquivos novos
        """
        instance = self.get(pk)
        items = self.upload_items(files)
        if not replace and not items:
            raise DomainError.validation("No files uploaded")
        previous = list(active_documents(instance.pk).values_list("pk", flat=True))
        documents = self.store_documents(instance, items, user)
        if replace and documents:
            Document.objects.filter(pk__in=previous).update(deleted_at=timezone.now())
        logger.info(f"Imóvel {instance.pk}: {len(documents)} documento(s) enviados")
        return documents

    def remove_documents(self, instance, document_ids):
        if not document_ids:
            return 0
        removed = active_documents(instance.pk).filter(pk__in=document_ids).update(deleted_at=timezone.now())
        logger.info(f"Imóvel {instance.pk}: {removed} documento(s) removidos")
        return removed

    def create_unified(self, data, files, user=None):
        """
        Cria imóvel, endereço e valores numa transação e depois envia os arquivos
        """
        instance = self.create(data)
        documents = self.store_documents(instance, self.upload_items(files), user)
        return self.get(instance.pk), documents

    def update_unified(self, pk, data, files, user=None, removed_documents=()):
        with transaction.atomic():
            instance = self.update(pk, data)
            self.remove_documents(instance, removed_documents)
        documents = self.store_documents(instance, self.upload_items(files), user)
        return self.get(instance.pk), documents


FAVORITE_FIELDS = {
    "user_id": direct("user_id", EXACT, "Usuário"),
    "property_id": direct("property_id", EXACT, "Imóvel"),
    "user_name": relation("user__name", label="Nome do usuário"),
    "property_title": relation("property__title", label="Imóvel"),
    **TIMESTAMP_FIELDS,
}


class FavoriteService(ResourceService):
    model = Favorite
    label = "Favorite"
    engine = QueryEngine(FAVORITE_FIELDS, ("user_name", "property_title"), select_related=("user", "property"))

    def get_queryset(self):
        return Favorite.objects.select_related("user", "property")

    def create(self, data):
        user_id, property_id = data["user_id"], data["property_id"]
        with transaction.atomic():
            if Favorite.objects.filter(user_id=user_id, property_id=property_id, deleted_at__isnull=True).exists():
                raise DomainError.conflict("Property already in favorites")
            user = require_active(get_user_model(), user_id, "User not found")
            prop = require_active(Property, property_id, "Property not found")
            favorite = Favorite.objects.create(user=user, property=prop)
        logger.info(f"Favorito criado: {favorite.pk}")
        return favorite

    def find(self, user_id, property_id):
        return self.get_queryset().filter(user_id=user_id, property_id=property_id, deleted_at__isnull=True).first()

    def delete_by_user_property(self, user_id, property_id):
        favorite = self.find(user_id, property_id)
        if favorite is None:
            raise DomainError.not_found("Favorite not found")
        return self.delete(favorite.pk)

    def check(self, user_id, property_id):
        favorite = self.find(user_id, property_id)
        return {
            "isFavorite": favorite is not None,
            "favorite": {"id": str(favorite.pk), "created_at": favorite.created_at} if favorite else None,
        }
