from django.urls import path

from apps.inventory.api.v1.views import (
    MovementListView,
    ProductDetailView,
    ProductListView,
    ProductMovementView,
)


urlpatterns = [
    path("products/", ProductListView.as_view(), name="product-list"),
    path("products/<uuid:product_id>/", ProductDetailView.as_view(), name="product-detail"),
    path(
        "products/<uuid:product_id>/movements/",
        ProductMovementView.as_view(),
        name="product-movement-create",
    ),
    path("movements/", MovementListView.as_view(), name="movement-list"),
]
