"""
Envelope de resposta da Imobiliária API
=======================================
"""

from rest_framework import status
from rest_framework.response import Response


def success_response(data=None, message=None, status_code=status.HTTP_200_OK, headers=None):
    """
    Resposta padrão para operações sobre uma única entidade
    """
    body = {"success": True, "data": data}
    if message:
        body["message"] = message
    return Response(body, status=status_code, headers=headers)
