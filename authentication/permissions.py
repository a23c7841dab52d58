"""
Permissões personalizadas para Autenticação - Imobiliária API
=============================================================
"""

from rest_framework import permissions


class IsAdminRole(permissions.BasePermission):
    """
    Permissão para usuários com perfil ADMIN (ou superusers)
    """

    message = "Acesso restrito a administradores"

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and (user.is_superuser or user.is_admin))


class IsSelfOrAdmin(permissions.BasePermission):
    """
    Permissão para o próprio usuário ou admins
    """

    message = "Você só pode alterar os seus próprios dados"

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        if user.is_superuser or user.is_admin:
            return True
        return str(view.kwargs.get("pk") or view.kwargs.get("user_id")) == str(user.pk)
