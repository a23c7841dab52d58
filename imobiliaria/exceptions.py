"""
Erros de domínio e exception handler da Imobiliária API
=======================================================
"""

import enum
import logging

from django.core.exceptions import ObjectDoesNotExist
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError
from django.http import Http404
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)

THROTTLED_MESSAGE = "Too many requests, please try again later."


class ErrorKind(enum.Enum):
    """
    Tipos de falha de domínio conhecidos pela camada HTTP
    """

    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    VALIDATION = "validation_error"
    INTERNAL = "internal_error"


STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class DomainError(Exception):
    """
    Erro levantado pelos services, com o tipo usado para escolher o status HTTP
    """

    def __init__(self, kind, message, errors=None, **context):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.errors = list(errors or [])
        self.context = context

    def __repr__(self):
        return f"DomainError({self.kind.name}, {self.message!r})"

    @classmethod
    def not_found(cls, message, **context):
        return cls(ErrorKind.NOT_FOUND, message, **context)

    @classmethod
    def conflict(cls, message, **context):
        return cls(ErrorKind.CONFLICT, message, **context)

    @classmethod
    def validation(cls, message, errors=None, **context):
        return cls(ErrorKind.VALIDATION, message, errors=errors or [message], **context)

    @classmethod
    def internal(cls, message="Internal server error", **context):
        return cls(ErrorKind.INTERNAL, message, **context)


def error_body(message, errors=None):
    body = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return body


def domain_error_response(exc):
    """
    Converte um DomainError na resposta HTTP correspondente ao seu tipo
    """
    try:
        status_code = STATUS_BY_KIND[exc.kind]
    except KeyError:
        raise ValueError(f"ErrorKind sem status HTTP: {exc.kind}") from exc

    if exc.kind is ErrorKind.INTERNAL:
        logger.error(f"Erro interno de domínio: {exc.message} - contexto: {exc.context}")

    return Response(error_body(exc.message, exc.errors), status=status_code)


def is_unique_violation(exc):
    """
    IntegrityError de chave única (SQLite: "UNIQUE constraint failed",
    PostgreSQL: SQLSTATE 23505); as demais violações viram erro interno
    """
    if not isinstance(exc, IntegrityError):
        return False
    if getattr(exc.__cause__, "pgcode", None) == "23505":
        return True
    return "unique" in str(exc).lower()


def custom_exception_handler(exc, context):
    """
    Custom exception handler que retorna o envelope de erro da API
    """
    if isinstance(exc, DomainError):
        response = domain_error_response(exc)
    else:
        # Chama o handler padrão do DRF primeiro
        response = exception_handler(exc, context)

        # Se o DRF não tratou a exceção, tratamos aqui
        if response is None:

            # Django ValidationError
            if isinstance(exc, DjangoValidationError):
                response = Response(
                    error_body("Validation error", format_validation_errors(_django_error_detail(exc))),
                    status=status.HTTP_400_BAD_REQUEST,
                )

            # Registro inexistente
            elif isinstance(exc, (Http404, ObjectDoesNotExist)):
                response = Response(error_body("Record not found"), status=status.HTTP_404_NOT_FOUND)

            # Violação de unicidade que escapou dos services
            elif is_unique_violation(exc):
                logger.warning(f"Violação de integridade: {exc}")
                response = Response(
                    error_body("Unique constraint failed", [str(exc)]), status=status.HTTP_409_CONFLICT
                )

            # Outros erros não tratados
            else:
                logger.error(f"Erro não tratado: {str(exc)}", exc_info=True)
                response = Response(error_body("Internal server error"), status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        # Personalizar resposta já tratada pelo DRF
        else:
            if response.status_code == status.HTTP_400_BAD_REQUEST:
                response.data = error_body("Validation error", format_validation_errors(response.data))
            elif response.status_code == status.HTTP_429_TOO_MANY_REQUESTS:
                response.data = error_body(THROTTLED_MESSAGE)
            else:
                response.data = error_body(_detail_message(response.data, response.status_code))

    # Log de erros para debugging
    if response.status_code >= 400:
        logger.warning(
            f"Erro {response.status_code}: {exc} - "
            f"View: {context.get('view', 'unknown')} - "
            f"Request: {context.get('request', 'unknown')}"
        )

    return response


def get_error_message(status_code):
    """
    Retorna mensagem de erro amigável baseada no status code
    """
    messages = {
        400: "Validation error",
        401: "Authentication required",
        403: "Permission denied",
        404: "Not found",
        405: "Method not allowed",
        409: "Conflict",
        415: "Unsupported media type",
        429: "Too many requests",
        500: "Internal server error",
    }
    return messages.get(status_code, "Unknown error")


def _detail_message(data, status_code):
    if isinstance(data, dict) and "detail" in data:
        return str(data["detail"])
    return get_error_message(status_code)


def _django_error_detail(exc):
    if hasattr(exc, "message_dict"):
        return exc.message_dict
    return exc.messages


def format_validation_errors(errors, field=None):
    """
    Achata erros de validação (dict/lista aninhados) numa lista de mensagens
    """
    if isinstance(errors, dict):
        formatted = []
        for key, value in errors.items():
            nested = None if key in ("non_field_errors", "detail") else key
            if field:
                nested = f"{field}.{nested}" if nested else field
            formatted.extend(format_validation_errors(value, nested))
        return formatted
    if isinstance(errors, (list, tuple)):
        return [message for item in errors for message in format_validation_errors(item, field)]
    return [f"{field}: {errors}" if field else str(errors)]
