from django.urls import path

from .views import OrderSyncTrackingAPI, OrderTrackingTimelineAPI, ShipmentOrderListAPI

urlpatterns = [
    # 운영자 전용
    path("shipments/",                     ShipmentOrderListAPI.as_view(),     name="shipment-order-list"),
    path("<uuid:order_id>/sync-tracking/", OrderSyncTrackingAPI.as_view(),     name="order-sync-tracking"),
    path("<uuid:order_id>/tracking/",      OrderTrackingTimelineAPI.as_view(), name="order-tracking"),
]
