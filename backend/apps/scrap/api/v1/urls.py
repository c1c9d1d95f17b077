from django.urls import path

from apps.scrap.api.v1.views import ScrapRecordDetailView, ScrapRecordListView, ScrapSummaryView


urlpatterns = [
    path("scrap/", ScrapRecordListView.as_view(), name="scrap-list"),
    path("scrap/summary/", ScrapSummaryView.as_view(), name="scrap-summary"),
    path("scrap/<uuid:scrap_id>/", ScrapRecordDetailView.as_view(), name="scrap-detail"),
]
