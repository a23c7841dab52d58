"""
Planejamento da ordenação
=========================
"""

from dataclasses import dataclass

from django.db.models.functions import Lower

from .fields import STRING

NATIVE = "native"
MEMORY = "memory"

DEFAULT_SORT_FIELD = "created_at"
DEFAULT_SORT_DIRECTION = "desc"


@dataclass
class SortPlan:
    mode: str
    field: str
    direction: str
    spec: object = None

    @property
    def descending(self):
        return self.direction == "desc"

    @property
    def in_memory(self):
        return self.mode == MEMORY

    def order_by(self):
        """
        Cláusula ORDER BY para o caminho nativo (id como desempate estável).

        Textos são comparados sem caixa e com vazios por último, como no
        caminho em memória; acentos seguem a collation do banco.
        """
        path = self.spec.path if self.spec is not None else self.field
        prefix = "-" if self.descending else ""
        if self.spec is not None and self.spec.value_type == STRING:
            expression = Lower(path)
            key = expression.desc(nulls_last=True) if self.descending else expression.asc(nulls_last=True)
            return [key, f"{prefix}id"]
        return [f"{prefix}{path}", f"{prefix}id"]


def plan_sort(sort_options, mapping, search=""):
    """
    Decide entre ordenação no banco e em memória.

    Só a primeira diretiva conta. Campos de endereço/contato, ou qualquer busca
    livre, levam a consulta inteira para o caminho em memória.
    """
    chosen = None
    for directive in sort_options[:1]:
        spec = mapping.get(directive.field)
        if spec is not None:
            chosen = (directive, spec)

    if chosen is None:
        plan = SortPlan(NATIVE, DEFAULT_SORT_FIELD, DEFAULT_SORT_DIRECTION, mapping.get(DEFAULT_SORT_FIELD))
    else:
        directive, spec = chosen
        plan = SortPlan(MEMORY if spec.spans_relation else NATIVE, directive.field, directive.direction, spec)

    if search:
        plan.mode = MEMORY
    return plan
