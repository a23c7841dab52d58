"""
Motor de consulta genérico das listagens
========================================

Cada recurso declara o seu mapeamento de campos e os campos pesquisáveis; o
motor decide entre o caminho nativo (filtro + ORDER BY + LIMIT no banco) e o
caminho em memória (busca livre ou ordenação por endereço/contato).
"""

import logging

from django.db.models import Max, Min, Prefetch

from imobiliaria.pagination import DEFAULT_PAGE_SIZE, paginated_result

from . import fields as f
from .filters import compile_filters
from .params import normalize_query_params
from .search import field_value, make_flattener, search_rows, sort_rows
from .sorting import DEFAULT_SORT_DIRECTION, DEFAULT_SORT_FIELD, plan_sort

logger = logging.getLogger(__name__)

OPERATORS = {
    f.STRING: ["contains"],
    f.EXACT: ["equals", "in"],
    f.NUMBER: ["equals", "between"],
    f.BOOLEAN: ["equals"],
    f.DATE: ["equals", "between"],
}

MAX_DISTINCT_VALUES = 100


class QueryEngine:
    """
    Traduz parâmetros de listagem numa consulta paginada
    """

    def __init__(
        self,
        mapping,
        search_fields=(),
        flatten=None,
        address_relation=None,
        contact_relation=None,
        select_related=(),
        prefetch_related=(),
        default_limit=DEFAULT_PAGE_SIZE,
    ):
        self.mapping = dict(mapping)
        self.search_fields = tuple(search_fields)
        self.address_relation = address_relation
        self.contact_relation = contact_relation
        self.select_related = tuple(select_related)
        self.prefetch_related = tuple(prefetch_related)
        self.default_limit = default_limit
        self.flatten = flatten or make_flattener(
            self.mapping, self.search_fields, address_relation or "", contact_relation or ""
        )

    def parse(self, raw_params):
        return normalize_query_params(raw_params, default_limit=self.default_limit)

    def link_prefetches(self, model):
        """
        Prefetch das ligações ativas (endereços/contatos) já com o registro ligado
        """
        prefetches = []
        for relation, target in ((self.address_relation, "address"), (self.contact_relation, "contact")):
            if not relation:
                continue
            link_model = model._meta.get_field(relation).related_model
            links = (
                link_model.objects.filter(deleted_at__isnull=True, **{f"{target}__deleted_at__isnull": True})
                .select_related(target)
                .order_by("created_at")
            )
            prefetches.append(Prefetch(relation, queryset=links))
        return prefetches

    def candidates(self, queryset, params):
        """Queryset com estado de exclusão e filtros aplicados (sem busca livre)"""
        if not params.include_inactive:
            queryset = queryset.filter(deleted_at__isnull=True)
        compiled = compile_filters(
            params.filters, self.mapping, self.address_relation or "", self.contact_relation or ""
        )
        queryset = compiled.apply(queryset)
        if self.select_related:
            queryset = queryset.select_related(*self.select_related)
        prefetches = list(self.prefetch_related) + self.link_prefetches(queryset.model)
        if prefetches:
            queryset = queryset.prefetch_related(*prefetches)
        return queryset

    def run(self, queryset, params):
        """
        Executa a consulta e devolve o envelope paginado com as instâncias em ``data``
        """
        plan = plan_sort(params.sort_options, self.mapping, params.search)
        queryset = self.candidates(queryset, params)
        skip, take = params.skip, params.limit

        if plan.in_memory:
            logger.debug(
                f"Listagem {queryset.model.__name__} em memória "
                f"(search={params.search!r}, sort={plan.field}:{plan.direction})"
            )
            rows = list(queryset.order_by(f"-{DEFAULT_SORT_FIELD}"))
            if params.search:
                rows = search_rows(rows, params.search, self.flatten)
            if plan.spec is not None:
                rows = sort_rows(
                    rows,
                    lambda row: field_value(row, plan.spec, self.address_relation, self.contact_relation),
                    descending=plan.descending,
                )
            count = len(rows)
            data = rows[skip : skip + take]
        else:
            count = queryset.count()
            data = list(queryset.order_by(*plan.order_by())[skip : skip + take])

        return paginated_result(data, count, params.limit, params.page)

    def list(self, queryset, raw_params):
        return self.run(queryset, self.parse(raw_params))

    def metadata(self, queryset, raw_params=None):
        """
        Filtros disponíveis com valores distintos / intervalos, operadores e ordenação padrão.

        Os filtros já aplicados (se vierem em ``raw_params``) restringem os valores oferecidos.
        """
        active = queryset.filter(deleted_at__isnull=True)
        if raw_params:
            params = self.parse(raw_params)
            active = compile_filters(
                params.filters, self.mapping, self.address_relation or "", self.contact_relation or ""
            ).apply(active)
        filters = []
        for name, spec in self.mapping.items():
            entry = {"field": name, "type": spec.value_type, "kind": spec.kind, "label": spec.label or name}
            path = self._orm_path(spec)
            if path is None:
                continue

            if spec.value_type == f.STRING:
                values = (
                    active.exclude(**{f"{path}__isnull": True})
                    .exclude(**{path: ""})
                    .order_by(path)
                    .values_list(path, flat=True)
                    .distinct()[:MAX_DISTINCT_VALUES]
                )
                entry["values"] = list(values)
            elif spec.value_type in (f.DATE, f.NUMBER):
                bounds = active.aggregate(min=Min(path), max=Max(path))
                entry["min"], entry["max"] = bounds["min"], bounds["max"]
            elif spec.value_type == f.BOOLEAN:
                entry["values"] = [True, False]
            filters.append(entry)

        return {
            "filters": filters,
            "operators": OPERATORS,
            "defaultSort": f"{DEFAULT_SORT_FIELD}:{DEFAULT_SORT_DIRECTION}",
            "searchFields": list(self.search_fields),
        }

    def _orm_path(self, spec):
        if spec.kind == f.ADDRESS:
            return f"{self.address_relation}__address__{spec.path}" if self.address_relation else None
        if spec.kind == f.CONTACT:
            return f"{self.contact_relation}__contact__{spec.path}" if self.contact_relation else None
        return spec.path
