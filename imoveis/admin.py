"""
Admin configuration for Imoveis app
"""

from django.contrib import admin

from .models import Document, Favorite, Property, PropertyType, PropertyValue


class PropertyValueInline(admin.TabularInline):
    model = PropertyValue
    extra = 0
    fields = ("reference_date", "rental_value", "purchase_value", "status", "deleted_at")


class DocumentInline(admin.TabularInline):
    model = Document
    extra = 0
    fields = ("type", "file_path", "file_type", "deleted_at")


@admin.register(PropertyType)
class PropertyTypeAdmin(admin.ModelAdmin):
    list_display = ("description", "deleted_at")
    search_fields = ("description",)


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = ("title", "owner", "type", "agency", "bedrooms", "area_total", "deleted_at")
    list_filter = ("type", "furnished")
    search_fields = ("title", "tax_registration", "owner__name")
    readonly_fields = ("id", "created_at", "updated_at")
    list_select_related = ("owner", "type", "agency")
    inlines = [PropertyValueInline, DocumentInline]


@admin.register(Favorite)
class FavoriteAdmin(admin.ModelAdmin):
    list_display = ("user", "property", "created_at", "deleted_at")
    search_fields = ("user__email", "property__title")
