"""
URL configuration for account API endpoints.
"""

from django.urls import path

from api.v1.account import views

urlpatterns = [
    path("me", views.MeView.as_view(), name="me"),
]
