from django.contrib import admin

from apps.scrap.models import ScrapRecord


@admin.register(ScrapRecord)
class ScrapRecordAdmin(admin.ModelAdmin):
    list_display = ("record_date", "machine_name", "scrap_type", "quantity_kg", "product", "actor_id")
    list_filter = ("scrap_type", "record_date")
    search_fields = ("machine_name", "product__name")
