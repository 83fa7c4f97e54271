"""Order URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.orders.views import OrderIntakeView

urlpatterns = [
    path("orders", OrderIntakeView.as_view(), name="order_intake"),
]
