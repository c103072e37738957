"""
URL configuration for engine-facing license endpoints.
"""

from django.urls import path

from api.v1.engine import views

urlpatterns = [
    path("validate", views.ValidateLicenseView.as_view(), name="validate-license"),
    path("activate", views.ActivateView.as_view(), name="activate-license"),
    path("deactivate", views.DeactivateView.as_view(), name="deactivate-license"),
]
