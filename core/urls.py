"""URL configuration for core views."""

from __future__ import annotations

from django.urls import path

from core import views

app_name = "core"

urlpatterns = [
    path("", views.home, name="home"),
    path("user", views.user_report, name="user_report"),
    path("monthly", views.monthly_report, name="monthly_report"),
    path("monthly/chart", views.monthly_chart, name="monthly_chart"),
]
