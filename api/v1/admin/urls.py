"""
URL configuration for admin API endpoints.
"""

from django.urls import path

from api.v1.admin import views

urlpatterns = [
    path("licenses", views.AdminLicenseListView.as_view(), name="admin-licenses"),
    path(
        "licenses/generate",
        views.AdminGenerateLicenseView.as_view(),
        name="admin-generate-license",
    ),
]
