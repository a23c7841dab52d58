"""
Service base dos recursos com exclusão lógica
=============================================
"""

import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone

from .exceptions import DomainError
from .models import restore_links, soft_delete_links

logger = logging.getLogger(__name__)


class ResourceService:
    """
    CRUD + ciclo ativo -> excluído -> ativo de um recurso.

    Subclasses definem ``model``, ``label`` (ex.: "Owner"), o ``engine`` de
    listagem e os campos de chave natural em ``unique_fields`` como pares
    ``(campo, rótulo)``.
    """

    model = None
    label = "Record"
    engine = None
    unique_fields = ()
    # (relação de ligação, campo do registro ligado) excluídos/restaurados junto
    cascade_links = ()

    @property
    def entity_name(self):
        return self.label.lower()

    # Consultas

    def get_queryset(self):
        return self.model.objects.all()

    def get_list_queryset(self):
        return self.get_queryset()

    def list(self, raw_params):
        return self.engine.list(self.get_list_queryset(), raw_params)

    def filters(self, raw_params=None):
        return self.engine.metadata(self.get_queryset(), raw_params)

    def fetch(self, pk):
        try:
            return self.get_queryset().get(pk=pk)
        except (self.model.DoesNotExist, ValueError, DjangoValidationError):
            return None

    def get(self, pk):
        """Registro ativo ou NotFound"""
        instance = self.fetch(pk)
        if instance is None or instance.deleted_at is not None:
            raise DomainError.not_found(f"{self.label} not found")
        return instance

    # Referências e unicidade

    def check_references(self, data, instance=None):
        """Registros referenciados pela entrada devem existir e estar ativos"""

    def conflict_message(self, field, label, updating):
        if updating:
            return f"{label} already registered for another {self.entity_name}"
        return f"{label} already registered"

    def check_unique(self, data, instance=None):
        """
        Chaves naturais só conflitam com registros ativos (excluídos não bloqueiam)
        """
        for field, label in self.unique_fields:
            value = data.get(field)
            if value in (None, ""):
                continue
            queryset = self.model.objects.filter(deleted_at__isnull=True, **{field: value})
            if instance is not None:
                queryset = queryset.exclude(pk=instance.pk)
            if queryset.exists():
                raise DomainError.conflict(self.conflict_message(field, label, instance is not None), field=field)

    # Escrita

    def perform_create(self, data):
        return self.model.objects.create(**data)

    def perform_update(self, instance, data):
        for attr, value in data.items():
            setattr(instance, attr, value)
        instance.save()
        return instance

    def create(self, data):
        with transaction.atomic():
            self.check_references(data)
            self.check_unique(data)
            instance = self.perform_create(dict(data))
        logger.info(f"{self.label} criado: {instance.pk}")
        return instance

    def update(self, pk, data):
        with transaction.atomic():
            instance = self.get(pk)
            self.check_references(data, instance)
            self.check_unique(data, instance)
            instance = self.perform_update(instance, dict(data))
        logger.info(f"{self.label} atualizado: {instance.pk}")
        return instance

    def delete(self, pk):
        """
        Exclusão lógica; falha com NotFound se não existe ou já está excluído
        """
        instance = self.fetch(pk)
        if instance is None or instance.deleted_at is not None:
            raise DomainError.not_found(f"{self.label} not found or already deleted")

        moment = timezone.now()
        with transaction.atomic():
            instance.soft_delete(moment)
            for relation, target in self.cascade_links:
                soft_delete_links(getattr(instance, relation), target, moment)
            self.after_delete(instance, moment)
        logger.info(f"{self.label} excluído: {instance.pk}")
        return instance

    def restore(self, pk):
        """
        Restaura um registro excluído; restaurar um registro ativo é erro de domínio
        """
        instance = self.fetch(pk)
        if instance is None:
            raise DomainError.not_found(f"{self.label} not found")
        if instance.deleted_at is None:
            raise DomainError.validation(f"{self.label} is not deleted")

        deleted_at = instance.deleted_at
        with transaction.atomic():
            instance.restore()
            for relation, target in self.cascade_links:
                restore_links(getattr(instance, relation), deleted_at, target)
            self.after_restore(instance, deleted_at)
        logger.info(f"{self.label} restaurado: {instance.pk}")
        return instance

    def after_delete(self, instance, moment):
        """Gancho para exclusões em cascata específicas do recurso"""

    def after_restore(self, instance, deleted_at):
        """Gancho para restaurações em cascata específicas do recurso"""
