from django.contrib import admin

from apps.inventory.models import InventoryMovement, Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ("name", "pieces_per_package", "total_pieces", "pallets", "updated_at")
    search_fields = ("name",)
    readonly_fields = ("total_pieces", "updated_at")


@admin.register(InventoryMovement)
class InventoryMovementAdmin(admin.ModelAdmin):
    list_display = ("movement_type", "quantity_pieces", "product", "actor_id", "created_at")
    search_fields = ("product__name", "actor_id")
    list_filter = ("movement_type",)

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
