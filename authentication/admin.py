"""
Admin para Autenticação - Imobiliária API
=========================================
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Admin customizado para User
    """

    list_display = ["email", "name", "role", "gender", "is_staff", "deleted_at", "created_at"]
    list_filter = ["role", "gender", "is_staff", "is_superuser"]
    search_fields = ["email", "name"]
    ordering = ["-created_at"]
    readonly_fields = ["id", "created_at", "updated_at", "last_login"]

    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("Dados pessoais", {"fields": ("name", "birth_date", "gender")}),
        ("Permissões", {"fields": ("role", "is_staff", "is_superuser", "groups", "user_permissions")}),
        ("Informações do Sistema", {"fields": ("id", "last_login", "created_at", "updated_at", "deleted_at")}),
    )

    add_fieldsets = (
        (None, {"classes": ("wide",), "fields": ("email", "name", "role", "password1", "password2")}),
    )
