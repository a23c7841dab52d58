"""
Filtros personalizados para Favoritos - Imobiliária API
=======================================================
"""

import django_filters
from django.db.models import Q

from .models import Favorite


class FavoriteFilter(django_filters.FilterSet):
    """
    Filtros da listagem de favoritos
    """

    user_id = django_filters.UUIDFilter(field_name="user_id", label="Usuário")
    property_id = django_filters.UUIDFilter(field_name="property_id", label="Imóvel")
    search = django_filters.CharFilter(method="filter_search", label="Busca por usuário ou imóvel")
    includeDeleted = django_filters.BooleanFilter(method="filter_include_deleted", label="Incluir excluídos")

    class Meta:
        model = Favorite
        fields = []

    def filter_queryset(self, queryset):
        # Por padrão, não mostra excluídos
        if not self.form.cleaned_data.get("includeDeleted"):
            queryset = queryset.filter(deleted_at__isnull=True)
        return super().filter_queryset(queryset)

    def filter_search(self, queryset, name, value):
        term = value.strip()
        if not term:
            return queryset
        return queryset.filter(
            Q(user__name__icontains=term) | Q(user__email__icontains=term) | Q(property__title__icontains=term)
        )

    def filter_include_deleted(self, queryset, name, value):
        return queryset
