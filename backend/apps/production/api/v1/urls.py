from django.urls import path

from apps.production.api.v1.views import (
    HourlyProductionView,
    MachineAssignmentView,
    MachineDetailView,
    MachineListView,
    MachineProductionView,
    MachineProgressView,
    MachineStatusView,
    ProductionOrderCompleteView,
    ProductionOrderDetailView,
    ProductionOrderListView,
    ShiftCommentView,
    ShiftReportDetailView,
    ShiftReportListView,
)


urlpatterns = [
    path("machines/", MachineListView.as_view(), name="machine-list"),
    path("machines/<uuid:machine_id>/", MachineDetailView.as_view(), name="machine-detail"),
    path("machines/<uuid:machine_id>/status/", MachineStatusView.as_view(), name="machine-status"),
    path("machines/<uuid:machine_id>/assignment/", MachineAssignmentView.as_view(), name="machine-assignment"),
    path("machines/<uuid:machine_id>/progress/", MachineProgressView.as_view(), name="machine-progress"),
    path("machines/<uuid:machine_id>/production/", MachineProductionView.as_view(), name="machine-production"),
    path("production/hourly/", HourlyProductionView.as_view(), name="production-hourly"),
    path("orders/", ProductionOrderListView.as_view(), name="order-list"),
    path("orders/<uuid:order_id>/", ProductionOrderDetailView.as_view(), name="order-detail"),
    path("orders/<uuid:order_id>/complete/", ProductionOrderCompleteView.as_view(), name="order-complete"),
    path("shift-comments/", ShiftCommentView.as_view(), name="shift-comment"),
    path("shift-reports/", ShiftReportListView.as_view(), name="shift-report-list"),
    path("shift-reports/<uuid:report_id>/", ShiftReportDetailView.as_view(), name="shift-report-detail"),
]
