from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.core.api.authentication import resolve_actor_id
from apps.core.api.params import parse_iso_datetime
from apps.production.api.v1.serializers import (
    MachineAssignmentSerializer,
    MachineCreateSerializer,
    MachineProgressSerializer,
    MachineSerializer,
    MachineStatusSerializer,
    MachineUpdateSerializer,
    ProductionCountSerializer,
    ProductionOrderCreateSerializer,
    ProductionOrderSerializer,
    ShiftCommentSerializer,
    ShiftQuerySerializer,
    ShiftReportSerializer,
    ShiftReportUpdateSerializer,
)
from apps.production.services import machines, orders, shifts, tally


class MachineListView(APIView):
    def get(self, request):
        return Response(MachineSerializer(machines.list_machines(), many=True).data)

    def post(self, request):
        serializer = MachineCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        machine = machines.create_machine(**serializer.validated_data)
        return Response(MachineSerializer(machine).data, status=status.HTTP_201_CREATED)


class MachineDetailView(APIView):
    def get(self, request, machine_id):
        return Response(MachineSerializer(machines.get_machine(machine_id)).data)

    def patch(self, request, machine_id):
        serializer = MachineUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        machine = machines.update_machine(machine_id, **serializer.validated_data)
        return Response(MachineSerializer(machine).data)


class MachineStatusView(APIView):
    def post(self, request, machine_id):
        serializer = MachineStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        machine = machines.set_status(machine_id, serializer.validated_data["status"])
        return Response(MachineSerializer(machine).data)


class MachineAssignmentView(APIView):
    def post(self, request, machine_id):
        serializer = MachineAssignmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        machine = machines.assign_product(
            machine_id,
            product_id=serializer.validated_data["product"],
            quantity_ordered=serializer.validated_data["quantity_ordered"],
        )
        return Response(MachineSerializer(machines.get_machine(machine.pk)).data)


class MachineProgressView(APIView):
    def post(self, request, machine_id):
        serializer = MachineProgressSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        machine = machines.set_quantity_produced(machine_id, serializer.validated_data["quantity_produced"])
        return Response(MachineSerializer(machine).data)


class MachineProductionView(APIView):
    def get(self, request, machine_id):
        hour = tally.floor_to_hour(parse_iso_datetime(request.query_params.get("hour")))
        total = tally.get_for_machine(machine_id, hour)
        return Response({"machine": str(machine_id), "hour": hour.isoformat(), "total": total})

    def post(self, request, machine_id):
        serializer = ProductionCountSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        hour = tally.floor_to_hour(serializer.validated_data.get("occurred_at"))
        total = tally.add_production(machine_id, serializer.validated_data["count"], occurred_at=hour)
        return Response(
            {"machine": str(machine_id), "hour": hour.isoformat(), "total": total},
            status=status.HTTP_201_CREATED,
        )


class HourlyProductionView(APIView):
    def get(self, request):
        hour = tally.floor_to_hour(parse_iso_datetime(request.query_params.get("hour")))
        return Response({"hour": hour.isoformat(), "totals": tally.hour_totals(hour)})


class ProductionOrderListView(APIView):
    def get(self, request):
        queryset = orders.list_orders(status=request.query_params.get("status") or None)
        return Response(ProductionOrderSerializer(queryset, many=True).data)

    def post(self, request):
        serializer = ProductionOrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        order = orders.create_order(
            product_id=data["product"],
            quantity_ordered=data["quantity_ordered"],
            machine_name=data["machine_name"],
            notes=data.get("notes"),
            actor_id=resolve_actor_id(request, data.get("actor_id")),
        )
        return Response(ProductionOrderSerializer(order).data, status=status.HTTP_201_CREATED)


class ProductionOrderDetailView(APIView):
    def delete(self, request, order_id):
        orders.delete_order(order_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class ProductionOrderCompleteView(APIView):
    def post(self, request, order_id):
        order = orders.complete_order(order_id)
        return Response(ProductionOrderSerializer(order).data)


class ShiftCommentView(APIView):
    def get(self, request):
        query = ShiftQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        comment = shifts.get_shift_comment(query.validated_data["date"], query.validated_data["shift"])
        if comment is None:
            return Response(
                {
                    "id": None,
                    "comment_date": query.validated_data["date"].isoformat(),
                    "shift_number": query.validated_data["shift"],
                    "comments": "",
                    "updated_at": None,
                }
            )
        return Response(ShiftCommentSerializer(comment).data)

    def put(self, request):
        serializer = ShiftCommentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        comment = shifts.upsert_shift_comment(
            serializer.validated_data["comment_date"],
            serializer.validated_data["shift_number"],
            serializer.validated_data.get("comments", ""),
        )
        return Response(ShiftCommentSerializer(comment).data)


class ShiftReportListView(APIView):
    def get(self, request):
        query = ShiftQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        reports = shifts.list_shift_reports(query.validated_data["date"], query.validated_data["shift"])
        return Response(ShiftReportSerializer(reports, many=True).data)

    def post(self, request):
        serializer = ShiftReportSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        report = shifts.create_shift_report(data.pop("report_date"), data.pop("shift_number"), **data)
        return Response(ShiftReportSerializer(report).data, status=status.HTTP_201_CREATED)


class ShiftReportDetailView(APIView):
    def patch(self, request, report_id):
        serializer = ShiftReportUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        report = shifts.update_shift_report(report_id, **serializer.validated_data)
        return Response(ShiftReportSerializer(report).data)

    def delete(self, request, report_id):
        shifts.delete_shift_report(report_id)
        return Response(status=status.HTTP_204_NO_CONTENT)
