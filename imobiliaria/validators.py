"""
Validadores personalizados - Imobiliária API
============================================
"""

import html
import re

from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

UF_CHOICES = [
    ("AC", "Acre"),
    ("AL", "Alagoas"),
    ("AP", "Amapá"),
    ("AM", "Amazonas"),
    ("BA", "Bahia"),
    ("CE", "Ceará"),
    ("DF", "Distrito Federal"),
    ("ES", "Espírito Santo"),
    ("GO", "Goiás"),
    ("MA", "Maranhão"),
    ("MT", "Mato Grosso"),
    ("MS", "Mato Grosso do Sul"),
    ("MG", "Minas Gerais"),
    ("PA", "Pará"),
    ("PB", "Paraíba"),
    ("PR", "Paraná"),
    ("PE", "Pernambuco"),
    ("PI", "Piauí"),
    ("RJ", "Rio de Janeiro"),
    ("RN", "Rio Grande do Norte"),
    ("RS", "Rio Grande do Sul"),
    ("RO", "Rondônia"),
    ("RR", "Roraima"),
    ("SC", "Santa Catarina"),
    ("SP", "São Paulo"),
    ("SE", "Sergipe"),
    ("TO", "Tocantins"),
]


def only_digits(value):
    return re.sub(r"[^0-9]", "", str(value))


def sanitize_string(value):
    """
    Sanitiza strings removendo tags e espaços repetidos
    """
    if not isinstance(value, str):
        return value

    # Remove HTML tags
    value = re.sub(r"<[^>]+>", "", value)
    value = html.unescape(value)

    # Remove múltiplos espaços
    return re.sub(r"\s+", " ", value).strip()


def validate_cpf(cpf):
    """
    Valida CPF brasileiro e devolve apenas os dígitos
    """
    cpf = only_digits(cpf)

    if len(cpf) != 11:
        raise ValidationError(_("CPF deve ter 11 dígitos"))

    # Verifica se não são todos iguais
    if cpf == cpf[0] * 11:
        raise ValidationError(_("CPF inválido"))

    for size in (9, 10):
        soma = sum(int(cpf[i]) * (size + 1 - i) for i in range(size))
        resto = soma % 11
        digito = 0 if resto < 2 else 11 - resto
        if int(cpf[size]) != digito:
            raise ValidationError(_("CPF inválido"))

    return cpf


def validate_cnpj(cnpj):
    """
    Valida CNPJ brasileiro e devolve apenas os dígitos
    """
    cnpj = only_digits(cnpj)

    if len(cnpj) != 14:
        raise ValidationError(_("CNPJ deve ter 14 dígitos"))

    if cnpj == cnpj[0] * 14:
        raise ValidationError(_("CNPJ inválido"))

    pesos = [5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2]
    for size in (12, 13):
        pesos_digito = pesos if size == 12 else [6] + pesos
        soma = sum(int(cnpj[i]) * pesos_digito[i] for i in range(size))
        resto = soma % 11
        digito = 0 if resto < 2 else 11 - resto
        if int(cnpj[size]) != digito:
            raise ValidationError(_("CNPJ inválido"))

    return cnpj


def validate_phone(phone):
    """
    Valida telefone brasileiro (DDD + número)
    """
    phone = only_digits(phone)

    if len(phone) not in [10, 11]:
        raise ValidationError(_("Telefone deve ter 10 ou 11 dígitos"))

    if phone[0] == "0" or phone[1] == "0":
        raise ValidationError(_("Código de área inválido"))

    return phone


def validate_cep(cep):
    """
    Valida CEP brasileiro e devolve no formato 00000-000
    """
    cep = only_digits(cep)

    if len(cep) != 8:
        raise ValidationError(_("CEP deve ter 8 dígitos"))

    if cep == "00000000":
        raise ValidationError(_("CEP inválido"))

    return f"{cep[:5]}-{cep[5:]}"


def validate_uf(uf):
    uf = str(uf).strip().upper()
    if uf not in dict(UF_CHOICES):
        raise ValidationError(_("Estado (UF) inválido"))
    return uf


def sanitize_email(email):
    """
    Sanitiza email
    """
    if not email:
        return email

    email = str(email).strip().lower()

    email_regex = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
    if not re.match(email_regex, email):
        raise ValidationError(_("Email inválido"))

    return email


def validate_money_amount(amount):
    """
    Valida valor monetário
    """
    if amount is None:
        return amount

    if amount < 0:
        raise ValidationError(_("Valor não pode ser negativo"))

    if amount > 999999999.99:
        raise ValidationError(_("Valor muito alto"))

    return amount


def validate_due_day(day):
    """Dia de vencimento entre 1 e 31"""
    if day is None:
        return day
    if not 1 <= int(day) <= 31:
        raise ValidationError(_("Dia de vencimento deve estar entre 1 e 31"))
    return day


def validate_name(name):
    """
    Valida nomes de pessoas (letras, espaços, hífen, ponto e apóstrofe)
    """
    if not name or not str(name).strip():
        raise ValidationError(_("Nome é obrigatório"))

    name = sanitize_string(name)

    if len(name) < 2:
        raise ValidationError(_("Nome deve ter pelo menos 2 caracteres"))

    if len(name) > 150:
        raise ValidationError(_("Nome muito longo"))

    if not re.match(r"^[a-zA-ZÀ-ÿ\s\-'.]+$", name):
        raise ValidationError(_("Nome contém caracteres inválidos"))

    return name


def validate_observation(text):
    """
    Valida observações e textos livres
    """
    if not text:
        return text

    text = sanitize_string(text)

    if len(text) > 2000:
        raise ValidationError(_("Texto muito longo (máximo 2000 caracteres)"))

    return text
