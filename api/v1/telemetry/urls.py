"""
URL configuration for telemetry API endpoints.
"""

from django.urls import path

from api.v1.telemetry import views

urlpatterns = [
    path("receive", views.ReceiveTelemetryView.as_view(), name="receive-telemetry"),
    path("stats", views.DashboardStatsView.as_view(), name="dashboard-stats"),
    path("usage", views.UsageHistoryView.as_view(), name="usage-history"),
    path("instances", views.ActiveInstancesView.as_view(), name="active-instances"),
]
