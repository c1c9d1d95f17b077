from django.contrib import admin

from apps.production.models import Machine, ProductionOrder, ProductionTallyBucket, ShiftComment, ShiftReport


@admin.register(Machine)
class MachineAdmin(admin.ModelAdmin):
    list_display = ("name", "cavities", "status", "current_product", "quantity_ordered", "quantity_produced")
    list_filter = ("status",)
    search_fields = ("name",)


@admin.register(ProductionTallyBucket)
class ProductionTallyBucketAdmin(admin.ModelAdmin):
    list_display = ("machine", "hour_timestamp", "count")
    list_filter = ("machine",)
    readonly_fields = ("count",)


@admin.register(ProductionOrder)
class ProductionOrderAdmin(admin.ModelAdmin):
    list_display = ("product", "quantity_ordered", "machine_name", "status", "created_at", "completed_at")
    list_filter = ("status",)
    search_fields = ("product__name", "machine_name", "notes")


@admin.register(ShiftComment)
class ShiftCommentAdmin(admin.ModelAdmin):
    list_display = ("comment_date", "shift_number", "updated_at")
    list_filter = ("shift_number",)


@admin.register(ShiftReport)
class ShiftReportAdmin(admin.ModelAdmin):
    list_display = ("report_date", "shift_number", "machine_name", "product_name", "production_goal", "production_achieved")
    list_filter = ("shift_number",)
    search_fields = ("machine_name", "product_name", "notes")
