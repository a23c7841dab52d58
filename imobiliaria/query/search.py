"""
Busca e ordenação em memória
============================

Usado quando há busca livre ou ordenação por campo de endereço/contato: as
linhas candidatas são carregadas, filtradas por texto normalizado (sem acento,
minúsculo), ordenadas e paginadas por fatiamento.
"""

import unicodedata
from datetime import date, datetime
from decimal import Decimal

from . import fields as f


def normalize_text(value):
    """
    Remove acentos e caixa: "São Paulo" e "sao paulo" viram o mesmo texto
    """
    if value is None:
        return ""
    text = unicodedata.normalize("NFD", str(value))
    text = "".join(char for char in text if not unicodedata.combining(char))
    return text.lower().strip()


def resolve_path(obj, path):
    """Segue um lookup estilo ORM (``owner__name``) em atributos Python"""
    value = obj
    for part in path.split("__"):
        if value is None:
            return None
        value = getattr(value, part, None)
    return value


def first_linked(obj, relation, target):
    """
    Primeiro registro ligado e ativo (endereço/contato) de uma entidade
    """
    if not relation:
        return None
    manager = getattr(obj, relation, None)
    if manager is None:
        return None
    for link in manager.all():
        if link.deleted_at is not None:
            continue
        linked = getattr(link, target, None)
        if linked is not None and linked.deleted_at is None:
            return linked
    return None


def field_value(obj, spec, address_relation="addresses", contact_relation="contacts"):
    """Valor de um campo mapeado para uma linha carregada"""
    if spec.kind == f.ADDRESS:
        linked = first_linked(obj, address_relation, "address")
        return resolve_path(linked, spec.path) if linked is not None else None
    if spec.kind == f.CONTACT:
        linked = first_linked(obj, contact_relation, "contact")
        return resolve_path(linked, spec.path) if linked is not None else None
    return resolve_path(obj, spec.path)


def make_flattener(mapping, search_fields, address_relation="addresses", contact_relation="contacts"):
    """
    Função que achata os campos pesquisáveis de uma linha em textos
    """
    specs = [mapping[name] for name in search_fields if name in mapping]

    def flatten(obj):
        values = []
        for spec in specs:
            value = field_value(obj, spec, address_relation, contact_relation)
            if value not in (None, ""):
                values.append(str(value))
        return values

    return flatten


def search_rows(rows, term, flatten):
    """
    Mantém as linhas cujo texto achatado e normalizado contém o termo normalizado
    """
    needle = normalize_text(term)
    if not needle:
        return list(rows)
    return [row for row in rows if needle in normalize_text(" ".join(flatten(row)))]


def sort_key(value):
    if isinstance(value, bool):
        return (0, int(value), "")
    if isinstance(value, (int, float, Decimal)):
        return (0, value, "")
    if isinstance(value, datetime):
        return (0, value.timestamp(), "")
    if isinstance(value, date):
        return (0, value.toordinal(), "")
    text = str(value)
    return (1, normalize_text(text), text)


def sort_rows(rows, value_of, descending=False):
    """
    Ordena comparando textos sem acento/caixa; linhas sem valor ficam por último
    """
    present, missing = [], []
    for row in rows:
        value = value_of(row)
        (missing if value in (None, "") else present).append((sort_key(value), row))
    present.sort(key=lambda pair: pair[0], reverse=descending)
    return [row for _, row in present] + [row for _, row in missing]
