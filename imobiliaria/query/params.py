"""
Normalização dos parâmetros de listagem
=======================================

Converte o query string de uma listagem em ``QueryParams``: paginação, busca
livre, ordenação (``sort[campo]`` ou o formato antigo ``sort_campo``) e
filtros (``filter[campo]``, ``campo[from]``/``campo[to]`` ou ``campo=valor``).
"""

import json
import re
from dataclasses import dataclass, field

from imobiliaria.pagination import DEFAULT_PAGE_SIZE, clamp_limit, clamp_page

RESERVED_PARAMS = ("limit", "page", "search", "includeInactive")
SORT_DIRECTIONS = ("asc", "desc")

SORT_PATTERN = re.compile(r"^sort\[(?P<field>[^\[\]]+)\]$")
LEGACY_SORT_PATTERN = re.compile(r"^sort_(?P<field>\w+)$")
FILTER_PATTERN = re.compile(r"^filter\[(?P<field>[^\[\]]+)\]$")
RANGE_PATTERN = re.compile(r"^(?:filter\[(?P<wrapped>[^\[\]]+)\]|(?P<field>[^\[\]]+))\[(?P<bound>from|to)\]$")


@dataclass
class Filter:
    field: str
    value: object


@dataclass
class SortDirective:
    field: str
    direction: str = "asc"

    @property
    def descending(self):
        return self.direction == "desc"


@dataclass
class QueryParams:
    limit: int = DEFAULT_PAGE_SIZE
    page: int = 1
    search: str = ""
    filters: list = field(default_factory=list)
    sort_options: list = field(default_factory=list)
    include_inactive: bool = False

    @property
    def skip(self):
        return (self.page - 1) * self.limit

    def get_filter(self, name, default=None):
        for item in self.filters:
            if item.field == name:
                return item.value
        return default


def first_value(raw, key):
    """Primeiro valor de um parâmetro (QueryDict ou dict simples)"""
    if hasattr(raw, "getlist"):
        values = raw.getlist(key)
        return values[0] if values else None
    value = raw.get(key)
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def parse_int(value, default):
    if value is None or value == "":
        return default
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def parse_bool(value):
    return str(value).strip().lower() == "true" if value is not None else False


def parse_filter_value(value):
    """
    Tenta interpretar o valor como JSON (ex.: intervalos de data), senão devolve o texto
    """
    if not isinstance(value, str):
        return value
    text = value.strip()
    if not text or text[0] not in '{["':
        return value
    try:
        return json.loads(text)
    except ValueError:
        return value


def parse_direction(value):
    direction = str(value or "").strip().lower()
    return direction if direction in SORT_DIRECTIONS else None


def normalize_query_params(raw, default_limit=DEFAULT_PAGE_SIZE):
    """
    Normaliza o dicionário bruto de parâmetros em QueryParams
    """
    limit = clamp_limit(parse_int(first_value(raw, "limit"), default_limit))
    page = clamp_page(parse_int(first_value(raw, "page"), 1))
    search = str(first_value(raw, "search") or "").strip()
    include_inactive = parse_bool(first_value(raw, "includeInactive"))

    filters = {}
    sort_options = []

    for key in raw.keys():
        if key in RESERVED_PARAMS:
            continue
        value = first_value(raw, key)

        match = SORT_PATTERN.match(key) or LEGACY_SORT_PATTERN.match(key)
        if match:
            direction = parse_direction(value)
            if direction:
                sort_options.append(SortDirective(match.group("field"), direction))
            continue

        match = RANGE_PATTERN.match(key)
        if match:
            name = match.group("wrapped") or match.group("field")
            current = filters.get(name)
            if not isinstance(current, dict):
                current = {}
            current[match.group("bound")] = value
            filters[name] = current
            continue

        match = FILTER_PATTERN.match(key)
        name = match.group("field") if match else key
        filters[name] = parse_filter_value(value)

    return QueryParams(
        limit=limit,
        page=page,
        search=search,
        filters=[Filter(name, value) for name, value in filters.items()],
        sort_options=sort_options,
        include_inactive=include_inactive,
    )
