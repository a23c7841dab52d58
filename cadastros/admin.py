"""
Admin configuration for Cadastros app
"""

from django.contrib import admin

from .models import Address, Agency, Contact, Owner, Tenant


@admin.register(Address)
class AddressAdmin(admin.ModelAdmin):
    list_display = ("street", "number", "district", "city", "state", "zip_code", "deleted_at")
    list_filter = ("state", "city")
    search_fields = ("street", "district", "city", "zip_code")
    readonly_fields = ("id", "created_at", "updated_at")


@admin.register(Contact)
class ContactAdmin(admin.ModelAdmin):
    list_display = ("contact", "phone", "cellphone", "email", "whatsapp", "deleted_at")
    search_fields = ("contact", "email", "phone", "cellphone")
    readonly_fields = ("id", "created_at", "updated_at")


@admin.register(Agency)
class AgencyAdmin(admin.ModelAdmin):
    list_display = ("trade_name", "legal_name", "cnpj", "license_number", "deleted_at")
    search_fields = ("trade_name", "legal_name", "cnpj")
    readonly_fields = ("id", "created_at", "updated_at")


class PersonAdmin(admin.ModelAdmin):
    list_display = ("name", "internal_code", "cpf", "cnpj", "deleted_at")
    search_fields = ("name", "internal_code", "cpf", "cnpj")
    readonly_fields = ("id", "created_at", "updated_at")

    fieldsets = (
        ("Identificação", {"fields": ("name", "internal_code", "cpf", "cnpj")}),
        ("Dados pessoais", {"fields": ("occupation", "marital_status")}),
        ("Informações do Sistema", {"fields": ("id", "created_at", "updated_at", "deleted_at"), "classes": ("collapse",)}),
    )


admin.site.register(Owner, PersonAdmin)
admin.site.register(Tenant, PersonAdmin)
