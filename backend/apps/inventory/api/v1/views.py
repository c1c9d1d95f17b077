from django.conf import settings
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.api.authentication import resolve_actor_id
from apps.core.api.params import parse_positive_int
from apps.core.idempotency import complete_request, fail_request, find_completed_request, start_request
from apps.inventory.api.v1.serializers import (
    InventoryMovementSerializer,
    MovementCreateSerializer,
    ProductCreateSerializer,
    ProductSerializer,
    ProductUpdateSerializer,
)
from apps.inventory.services import movements, products


class ProductListView(APIView):
    def get(self, request):
        queryset = products.list_products(
            stock=request.query_params.get("stock") or None,
            order=request.query_params.get("order") or None,
        )
        return Response(ProductSerializer(queryset, many=True).data)

    def post(self, request):
        serializer = ProductCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product = products.create_product(**serializer.validated_data)
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)


class ProductDetailView(APIView):
    def get(self, request, product_id):
        return Response(ProductSerializer(products.get_product(product_id)).data)

    def patch(self, request, product_id):
        serializer = ProductUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product = products.update_pieces_per_package(product_id, serializer.validated_data["pieces_per_package"])
        return Response(ProductSerializer(product).data)


class ProductMovementView(APIView):
    operation = "inventory_movement"

    def post(self, request, product_id):
        idempotency_key = request.headers.get("Idempotency-Key")
        record = None
        if idempotency_key:
            payload = {"product_id": product_id, **request.data}
            existing = find_completed_request(self.operation, idempotency_key, payload)
            if existing:
                result = existing.result or {}
                return Response(result.get("data", {}), status=result.get("status_code", status.HTTP_200_OK))
            record = start_request(self.operation, idempotency_key, payload)

        try:
            serializer = MovementCreateSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            data = serializer.validated_data
            actor_id = resolve_actor_id(request, data.get("actor_id"))
            if data.get("quantity_pallets") is not None:
                product = movements.apply_movement_in_pallets(
                    product_id, data["movement_type"], data["quantity_pallets"], actor_id=actor_id
                )
            else:
                product = movements.apply_movement(
                    product_id, data["movement_type"], data["quantity_pieces"], actor_id=actor_id
                )
        except ValidationError as exc:
            if record:
                fail_request(record, status.HTTP_400_BAD_REQUEST, exc.detail)
            raise
        except APIException as exc:
            if record:
                fail_request(record, exc.status_code, {"detail": str(exc.detail)})
            raise

        payload = ProductSerializer(product).data
        if record:
            complete_request(record, status.HTTP_201_CREATED, payload)
        return Response(payload, status=status.HTTP_201_CREATED)


class MovementListView(APIView):
    def get(self, request):
        limit = parse_positive_int(request.query_params.get("limit"), settings.PLANTLEDGER_MOVEMENTS_LIMIT)
        queryset = movements.list_movements(product_id=request.query_params.get("product") or None, limit=limit)
        return Response(InventoryMovementSerializer(queryset, many=True).data)
