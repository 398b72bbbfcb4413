from __future__ import annotations

import django_filters as df
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema
from rest_framework import generics, status
from rest_framework.filters import OrderingFilter
from rest_framework.response import Response
from rest_framework.views import APIView

from domains.shipments.serializers import ReconcileResultSerializer
from domains.shipments.services import reconcile_order
from shared.api_markers import EmptySerializer
from shared.pagination import StandardResultsSetPagination
from shared.permissions import IsStaffUser

from .models import Order, OrderStatus, ShippingProvider
from .serializers import OrderTrackingTimelineSerializer, ShippedOrderReadSerializer


# -------------------------------
# Filters (staff listing)
# -------------------------------
class ShipmentOrderFilter(df.FilterSet):
    status = df.ChoiceFilter(choices=OrderStatus.choices)
    shipping_provider = df.ChoiceFilter(choices=ShippingProvider.choices)
    tenant_id = df.UUIDFilter(field_name="tenant_id")
    tracking_number = df.CharFilter(lookup_expr="iexact")
    date_from = df.IsoDateTimeFilter(field_name="created_at", lookup_expr="gte")
    date_to = df.IsoDateTimeFilter(field_name="created_at", lookup_expr="lte")

    class Meta:
        model = Order
        fields = ["status", "shipping_provider", "tenant_id", "tracking_number", "date_from", "date_to"]


# -------------------------------
# GET /api/v1/orders/shipments/  (운영자, 필터/정렬/페이징)
# 택배사가 배정된 주문만
# -------------------------------
class ShipmentOrderListAPI(generics.ListAPIView):
    permission_classes = [IsStaffUser]
    serializer_class = ShippedOrderReadSerializer
    queryset = (
        Order.objects.select_related("tenant", "product")
        .filter(shipping_provider__isnull=False)
        .order_by("-created_at")
    )
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = ShipmentOrderFilter
    ordering_fields = ["created_at", "updated_at", "delivered_at"]
    pagination_class = StandardResultsSetPagination

    @extend_schema(operation_id="ListShipmentOrders")
    def get(self, *args, **kwargs):
        return super().get(*args, **kwargs)


# -------------------------------
# POST /api/v1/orders/{order_id}/sync-tracking/
# 주문 1건 즉시 동기화 (결과 형태는 크론 응답의 항목과 동일)
# -------------------------------
class OrderSyncTrackingAPI(APIView):
    permission_classes = [IsStaffUser]

    @extend_schema(
        operation_id="SyncOrderTracking",
        request=EmptySerializer,
        responses={200: ReconcileResultSerializer},
    )
    def post(self, request, order_id):
        order = get_object_or_404(Order.objects.select_related("tenant"), pk=order_id)
        if not order.shipping_provider or not order.tracking_number:
            return Response(
                {"error": "Order has no shipping provider or tracking number"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        result = reconcile_order(order)
        return Response(result.as_dict(), status=status.HTTP_200_OK)


# -------------------------------
# GET /api/v1/orders/{order_id}/tracking/
# -------------------------------
class OrderTrackingTimelineAPI(APIView):
    permission_classes = [IsStaffUser]

    @extend_schema(operation_id="GetOrderTracking", responses={200: OrderTrackingTimelineSerializer})
    def get(self, request, order_id):
        order = get_object_or_404(Order, pk=order_id)
        return Response(OrderTrackingTimelineSerializer(order).data, status=status.HTTP_200_OK)
