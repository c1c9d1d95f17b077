from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.api.authentication import resolve_actor_id
from apps.core.api.params import parse_iso_date
from apps.scrap.api.v1.serializers import (
    ScrapRecordSerializer,
    ScrapRecordWriteSerializer,
    ScrapSummaryRowSerializer,
    summary_rows,
)
from apps.scrap.services import ledger


class ScrapRecordListView(APIView):
    def get(self, request):
        record_date = parse_iso_date(request.query_params.get("date"))
        records = ledger.list_for_date(record_date, size=request.query_params.get("size") or None)
        return Response(ScrapRecordSerializer(records, many=True).data)

    def post(self, request):
        serializer = ScrapRecordWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        record = ledger.record_scrap(
            machine_name=data["machine_name"],
            product_id=data.get("product"),
            scrap_type=data["scrap_type"],
            quantity_kg=data["quantity_kg"],
            actor_id=resolve_actor_id(request, data.get("actor_id")),
            record_date=data.get("record_date"),
        )
        return Response(ScrapRecordSerializer(record).data, status=status.HTTP_201_CREATED)


class ScrapRecordDetailView(APIView):
    def patch(self, request, scrap_id):
        serializer = ScrapRecordWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        fields = dict(serializer.validated_data)
        fields.pop("actor_id", None)
        if "product" in fields:
            fields["product_id"] = fields.pop("product")
        record = ledger.update_scrap(scrap_id, **fields)
        return Response(ScrapRecordSerializer(record).data)

    def delete(self, request, scrap_id):
        ledger.delete_scrap(scrap_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class ScrapSummaryView(APIView):
    def get(self, request):
        record_date = parse_iso_date(request.query_params.get("date")) or ledger.today()
        summary = ledger.summarize(record_date)
        return Response(
            {
                "date": record_date.isoformat(),
                "machines": ScrapSummaryRowSerializer(summary_rows(summary), many=True).data,
                "total": str(ledger.grand_total(summary)),
            }
        )
