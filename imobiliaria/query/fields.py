"""
Mapeamento de campos filtráveis/ordenáveis por recurso
======================================================
"""

from dataclasses import dataclass

DIRECT = "direct"
RELATION = "relation"
ADDRESS = "address"
CONTACT = "contact"

KINDS = (DIRECT, RELATION, ADDRESS, CONTACT)

STRING = "string"
EXACT = "exact"
NUMBER = "number"
BOOLEAN = "boolean"
DATE = "date"


@dataclass(frozen=True)
class Field:
    """
    Campo exposto na listagem.

    ``path`` é o lookup do ORM a partir da entidade (``DIRECT``/``RELATION``)
    ou a partir do registro ligado (``ADDRESS``/``CONTACT``, ex.: ``city``).
    """

    kind: str
    path: str
    value_type: str = STRING
    label: str = ""

    def __post_init__(self):
        if self.kind not in KINDS:
            raise ValueError(f"Tipo de campo inválido: {self.kind}")

    @property
    def spans_relation(self):
        """Campos alcançados por relação um-para-muitos (ordenados em memória)"""
        return self.kind in (ADDRESS, CONTACT)


def direct(path, value_type=STRING, label=""):
    return Field(DIRECT, path, value_type, label)


def relation(path, value_type=STRING, label=""):
    return Field(RELATION, path, value_type, label)


def address(path, label=""):
    return Field(ADDRESS, path, STRING, label)


def contact(path, label=""):
    return Field(CONTACT, path, STRING, label)


ADDRESS_FIELDS = {
    "zip_code": address("zip_code", "CEP"),
    "street": address("street", "Logradouro"),
    "number": address("number", "Número"),
    "district": address("district", "Bairro"),
    "city": address("city", "Cidade"),
    "state": address("state", "Estado"),
    "country": address("country", "País"),
}

CONTACT_FIELDS = {
    "contact": contact("contact", "Contato"),
    "phone": contact("phone", "Telefone"),
    "cellphone": contact("cellphone", "Celular"),
    "email": contact("email", "E-mail"),
}

TIMESTAMP_FIELDS = {
    "created_at": direct("created_at", DATE, "Criado em"),
    "updated_at": direct("updated_at", DATE, "Atualizado em"),
}
