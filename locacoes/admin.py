"""
Admin configuration for Locacoes app
"""

from django.contrib import admin

from .models import Lease


@admin.register(Lease)
class LeaseAdmin(admin.ModelAdmin):
    list_display = ("contract_number", "property", "owner", "tenant", "start_date", "end_date", "rent_amount", "deleted_at")
    list_filter = ("start_date", "end_date")
    search_fields = ("contract_number", "property__title", "owner__name", "tenant__name")
    readonly_fields = ("id", "created_at", "updated_at")
    list_select_related = ("property", "owner", "tenant")
    date_hierarchy = "start_date"
