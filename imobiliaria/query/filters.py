"""
Compilação de filtros para o ORM
================================
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, time
from decimal import Decimal, InvalidOperation

from django.db.models import Q
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from . import fields as f

logger = logging.getLogger(__name__)

END_OF_DAY = time(23, 59, 59, 999000)
TRUE_VALUES = ("true", "1", "yes", "sim")
FALSE_VALUES = ("false", "0", "no", "nao", "não")


@dataclass
class CompiledFilters:
    """
    Predicado pronto para aplicar num queryset.

    ``q`` cobre os campos da entidade e das relações um-para-um;
    ``relation_lookups`` guarda, por relação um-para-muitos, os lookups que
    precisam casar no mesmo registro ligado.
    """

    q: Q = field(default_factory=Q)
    relation_lookups: dict = field(default_factory=dict)

    @property
    def spans_relations(self):
        return bool(self.relation_lookups)

    def apply(self, queryset):
        queryset = queryset.filter(self.q)
        for lookups in self.relation_lookups.values():
            # Um único filter() por relação: todos os lookups no mesmo registro ligado
            queryset = queryset.filter(**lookups)
        if self.relation_lookups:
            queryset = queryset.distinct()
        return queryset


def _aware(value):
    if timezone.is_naive(value):
        return timezone.make_aware(value)
    return value


def parse_moment(value, end_of_day=False):
    """
    Converte texto ISO em datetime; datas sem hora viram início/fim do dia
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return _aware(value)
    text = str(value).strip()
    try:
        moment = parse_datetime(text)
        if moment is None or (len(text) <= 10):
            day = parse_date(text[:10])
            if day is None:
                return None
            moment = datetime.combine(day, END_OF_DAY if end_of_day else time.min)
    except ValueError:
        return None
    return _aware(moment)


def build_date_condition(path, value):
    """
    Data única -> o dia inteiro; ``{from, to}`` -> intervalo com ``to`` inclusivo até o fim do dia
    """
    if isinstance(value, dict):
        start = parse_moment(value.get("from"))
        end = parse_moment(value.get("to"), end_of_day=True)
    else:
        start = parse_moment(value)
        end = parse_moment(str(value)[:10], end_of_day=True) if start else None

    conditions = {}
    if start:
        conditions[f"{path}__gte"] = start
    if end:
        conditions[f"{path}__lte"] = end
    return conditions


def parse_number(value):
    if isinstance(value, bool):
        return None
    try:
        return Decimal(str(value).strip().replace(",", "."))
    except (InvalidOperation, ValueError):
        return None


def parse_boolean(value):
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    return None


def _is_uuid_path(path):
    return path == "id" or path.endswith("_id") or path.endswith("__id")


def _valid_uuid(value):
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


def build_condition(path, value_type, value):
    """
    Lookups do ORM para um campo; dicionário vazio quando o valor é inválido
    """
    if value is None or value == "":
        return {}

    if value_type == f.DATE:
        return build_date_condition(path, value)

    if value_type == f.NUMBER:
        if isinstance(value, dict):
            conditions = {}
            low, high = parse_number(value.get("from")), parse_number(value.get("to"))
            if value.get("from") not in (None, "") and low is not None:
                conditions[f"{path}__gte"] = low
            if value.get("to") not in (None, "") and high is not None:
                conditions[f"{path}__lte"] = high
            return conditions
        number = parse_number(value)
        return {path: number} if number is not None else {}

    if value_type == f.BOOLEAN:
        flag = parse_boolean(value)
        return {path: flag} if flag is not None else {}

    if value_type == f.EXACT:
        values = value if isinstance(value, list) else [value]
        values = [str(item) for item in values if item not in (None, "")]
        if not values:
            return {}
        if _is_uuid_path(path) and not all(_valid_uuid(item) for item in values):
            return {"pk__in": []}
        if len(values) == 1:
            return {path: values[0]}
        return {f"{path}__in": values}

    if isinstance(value, (dict, list)):
        return {}
    return {f"{path}__icontains": str(value).strip()}


def compile_filters(filters, mapping, address_relation="addresses", contact_relation="contacts"):
    """
    Compila a lista de Filter num CompiledFilters; campos desconhecidos são ignorados
    """
    compiled = CompiledFilters()
    relation_names = {f.ADDRESS: (address_relation, "address"), f.CONTACT: (contact_relation, "contact")}

    for item in filters:
        spec = mapping.get(item.field)
        if spec is None:
            logger.debug(f"Filtro ignorado (campo desconhecido): {item.field}")
            continue

        if spec.kind in relation_names:
            link, target = relation_names[spec.kind]
            if not link:
                continue
            conditions = build_condition(f"{link}__{target}__{spec.path}", spec.value_type, item.value)
            if not conditions:
                continue
            lookups = compiled.relation_lookups.setdefault(
                spec.kind,
                {
                    f"{link}__deleted_at__isnull": True,
                    f"{link}__{target}__deleted_at__isnull": True,
                },
            )
            lookups.update(conditions)
            continue

        conditions = build_condition(spec.path, spec.value_type, item.value)
        if conditions:
            compiled.q &= Q(**conditions)

    return compiled
