"""
URL configuration for license API endpoints.
"""

from django.urls import path

from api.v1.licenses import views

urlpatterns = [
    path("", views.LicenseListView.as_view(), name="licenses"),
    path(
        "activations/<uuid:activation_id>",
        views.ActivationDetailView.as_view(),
        name="activation-detail",
    ),
    path("<uuid:license_id>", views.LicenseDetailView.as_view(), name="license-detail"),
    path(
        "<uuid:license_id>/activations",
        views.LicenseActivationsView.as_view(),
        name="license-activations",
    ),
]
