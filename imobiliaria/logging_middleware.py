"""
Middleware para Logs - Imobiliária API
======================================
"""

import json
import logging
import time
import traceback

from django.utils import timezone
from django.utils.deprecation import MiddlewareMixin

# Loggers específicos
access_logger = logging.getLogger("access")
audit_logger = logging.getLogger("audit")
error_logger = logging.getLogger("django.request")

SENSITIVE_FIELDS = ("password", "oldpassword", "newpassword", "token", "refresh", "secret", "key")


def get_client_ip(request):
    """
    Obtém o IP real do cliente
    """
    x_forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR")
    if x_forwarded_for:
        return x_forwarded_for.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")


def get_user_id(request):
    user = getattr(request, "user", None)
    if user is not None and user.is_authenticated:
        return str(user.pk)
    return "anonymous"


def is_sensitive(key):
    return str(key).lower() in SENSITIVE_FIELDS


def filter_sensitive(data):
    """
    Remove campos sensíveis (senhas, tokens) de dicionários aninhados
    """
    if isinstance(data, dict):
        return {key: filter_sensitive(value) for key, value in data.items() if not is_sensitive(key)}
    if isinstance(data, list):
        return [filter_sensitive(item) for item in data]
    return data


class AccessLogMiddleware(MiddlewareMixin):
    """
    Middleware para logs de acesso
    """

    def process_request(self, request):
        request._start_time = time.time()
        return None

    def process_response(self, request, response):
        duration = time.time() - getattr(request, "_start_time", time.time())

        message = (
            f"{request.method} {request.path} "
            f"| Status: {response.status_code} "
            f"| Duration: {round(duration * 1000, 2)}ms "
            f"| User: {get_user_id(request)} "
            f"| IP: {get_client_ip(request)}"
        )
        if request.GET:
            params = {key: value for key, value in request.GET.items() if not is_sensitive(key)}
            message += f" | Query: {json.dumps(params, ensure_ascii=False)}"

        if response.status_code >= 500:
            access_logger.error(message)
        elif response.status_code >= 400:
            access_logger.warning(message)
        else:
            access_logger.info(message)
        return response


class ErrorLogMiddleware(MiddlewareMixin):
    """
    Middleware para capturar e logar erros não tratados
    """

    def process_exception(self, request, exception):
        error_data = {
            "exception_type": type(exception).__name__,
            "exception_message": str(exception),
            "traceback": traceback.format_exc(),
            "request_path": request.path,
            "request_method": request.method,
            "user_id": get_user_id(request),
            "ip_address": get_client_ip(request),
            "timestamp": timezone.now().isoformat(),
        }

        error_logger.error(
            f"EXCEPTION {error_data['exception_type']}: {error_data['exception_message']} "
            f"| Path: {error_data['request_path']} "
            f"| Method: {error_data['request_method']} "
            f"| User: {error_data['user_id']}"
        )
        audit_logger.error(json.dumps({"event": "application_error", "data": error_data}))
        return None


class AuditLogMiddleware(MiddlewareMixin):
    """
    Middleware para auditoria das operações de escrita (incluindo exclusão
    lógica e restauração)
    """

    AUDIT_PREFIX = "/api/"
    AUDIT_METHODS = ("POST", "PUT", "PATCH", "DELETE")

    def should_audit(self, request):
        return request.path.startswith(self.AUDIT_PREFIX) and request.method in self.AUDIT_METHODS

    def operation(self, request):
        if request.method == "DELETE":
            return "soft_delete"
        if request.method == "PATCH" and request.path.rstrip("/").endswith("/restore"):
            return "restore"
        return {"POST": "create", "PUT": "update", "PATCH": "update"}[request.method]

    def request_data(self, request):
        """
        Corpo JSON da requisição sem campos sensíveis (multipart não é registrado)
        """
        if not request.content_type or "json" not in request.content_type:
            return {}
        try:
            return filter_sensitive(json.loads(request.body.decode("utf-8") or "{}"))
        except (ValueError, UnicodeDecodeError):
            return {}

    def process_request(self, request):
        if self.should_audit(request):
            request._audit_data = self.request_data(request)
        return None

    def process_response(self, request, response):
        if not self.should_audit(request):
            return response

        audit_data = {
            "event": self.operation(request),
            "method": request.method,
            "path": request.path,
            "status_code": response.status_code,
            "user_id": get_user_id(request),
            "ip_address": get_client_ip(request),
            "timestamp": timezone.now().isoformat(),
            "success": 200 <= response.status_code < 400,
            "request_data": getattr(request, "_audit_data", {}),
        }

        # Para criações, captura o id do registro criado
        if response.status_code == 201:
            data = getattr(response, "data", None)
            if isinstance(data, dict) and isinstance(data.get("data"), dict) and "id" in data["data"]:
                audit_data["created_object_id"] = str(data["data"]["id"])

        audit_logger.info(json.dumps(audit_data, default=str, ensure_ascii=False))
        return response
