# api/v1/urls.py
from django.urls import include, path

from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

urlpatterns = [
    # --- Auth (운영자 JWT) ---
    path("auth/token/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("auth/token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    # --- Scheduler trigger ---
    path("cron/", include(("domains.shipments.urls", "shipments"))),
    # --- Orders (staff tracking tools) ---
    path("orders/", include(("domains.orders.urls", "orders"))),
]
