"""
Modelos base para Imobiliária API
=================================
"""

import uuid

from django.db import models
from django.utils import timezone


class BaseModel(models.Model):
    """
    Modelo base abstrato com campos de auditoria e exclusão lógica
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False, help_text="Identificador único universal")
    created_at = models.DateTimeField(auto_now_add=True, help_text="Data e hora de criação")
    updated_at = models.DateTimeField(auto_now=True, help_text="Data e hora da última atualização")
    deleted_at = models.DateTimeField(null=True, blank=True, help_text="Data e hora da exclusão lógica")

    class Meta:
        abstract = True
        ordering = ["-created_at"]

    @property
    def is_deleted(self):
        return self.deleted_at is not None

    def soft_delete(self, moment=None):
        """Exclusão lógica do registro"""
        self.deleted_at = moment or timezone.now()
        self.save(update_fields=["deleted_at", "updated_at"])

    def restore(self):
        """Restaurar registro excluído logicamente"""
        self.deleted_at = None
        self.save(update_fields=["deleted_at", "updated_at"])


class ActiveManager(models.Manager):
    """Manager personalizado para filtrar apenas registros não excluídos"""

    def get_queryset(self):
        return super().get_queryset().filter(deleted_at__isnull=True)


class BaseModelWithManager(BaseModel):
    """
    Modelo base com managers personalizados
    """

    objects = models.Manager()  # Manager padrão
    active = ActiveManager()  # Manager para registros ativos

    class Meta:
        abstract = True


class LinkModel(models.Model):
    """
    Base para tabelas de ligação (entidade x endereço, entidade x contato)
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    deleted_at = models.DateTimeField(null=True, blank=True)

    objects = models.Manager()
    active = ActiveManager()

    class Meta:
        abstract = True
        ordering = ["created_at"]


def soft_delete_links(links, cascade_field=None, moment=None):
    """
    Exclui logicamente as ligações ativas e, opcionalmente, o registro ligado
    """
    moment = moment or timezone.now()
    active_links = links.filter(deleted_at__isnull=True)
    if cascade_field:
        target_ids = list(active_links.values_list(f"{cascade_field}_id", flat=True))
        model = links.model._meta.get_field(cascade_field).related_model
        model.objects.filter(pk__in=target_ids, deleted_at__isnull=True).update(deleted_at=moment)
    return active_links.update(deleted_at=moment)


def restore_links(links, deleted_at, cascade_field=None):
    """
    Restaura as ligações excluídas junto com a entidade (mesmo instante de exclusão)
    """
    restored = links.filter(deleted_at=deleted_at)
    if cascade_field:
        target_ids = list(restored.values_list(f"{cascade_field}_id", flat=True))
        model = links.model._meta.get_field(cascade_field).related_model
        model.objects.filter(pk__in=target_ids, deleted_at=deleted_at).update(deleted_at=None)
    return restored.update(deleted_at=None)
