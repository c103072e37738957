"""
URL configuration for auth API endpoints.
"""

from django.urls import path

from api.v1.auth import views

urlpatterns = [
    path("register", views.RegisterView.as_view(), name="register"),
    path("login", views.LoginView.as_view(), name="login"),
    path("refresh", views.RefreshView.as_view(), name="refresh-tokens"),
    path("logout", views.LogoutView.as_view(), name="logout"),
]
