"""API views for the order domain."""

from __future__ import annotations

from django.db import transaction  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from .filters import OrderFilterSet
from .models import Order
from .queries import visible_to
from .serializers import (
    ComplaintRequestSerializer,
    ComplaintSerializer,
    ConfirmTicketSerializer,
    OrderCreateSerializer,
    OrderRefundSerializer,
    OrderSerializer,
    RefundRequestSerializer,
)
from .services import OrderService


class OrderViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    """Заказы: оформление, возврат, жалоба и погашение билета."""

    queryset = Order.objects.select_related("excursion", "point", "buyer").all()
    permission_classes = [permissions.IsAuthenticated]
    filterset_class = OrderFilterSet

    def get_service(self) -> OrderService:
        return OrderService()

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return OrderCreateSerializer
        return OrderSerializer

    def get_queryset(self):  # type: ignore
        return super().get_queryset().filter(visible_to(self.request.user)).distinct()

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        service = self.get_service()
        with transaction.atomic():
            buyer = service.resolve_buyer(request.user, data.get("buyer"))
            order = service.create_order(
                buyer,
                data["excursion_id"],
                data["point_id"],
                data["date_start"],
                data["time_start"],
                data["number_adult"],
                data["number_children"],
                data["total_amount"],
                languages=data["languages"],
                transfer=data["transfer"],
                ignore_duplicate_check=data["ignore_repeat_order"],
                order_user=request.user,
            )
        read_serializer = OrderSerializer(order, context=self.get_serializer_context())
        headers = self.get_success_headers(read_serializer.data)
        return Response(read_serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    @action(detail=True, methods=["post"])
    def refund(self, request, pk=None):  # type: ignore
        order = self.get_object()
        serializer = RefundRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order_refund = self.get_service().refund_order(
            order.pk,
            request.user,
            serializer.validated_data["description"],
        )
        return Response(OrderRefundSerializer(order_refund).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["get"], url_path="can-refund", url_name="can-refund")
    def can_refund(self, request, pk=None):  # type: ignore
        order = self.get_object()
        return Response(self.get_service().can_refund(order.pk))

    @action(detail=True, methods=["post"])
    def complaint(self, request, pk=None):  # type: ignore
        order = self.get_object()
        serializer = ComplaintRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        complaint = self.get_service().file_complaint(
            order.pk,
            request.user,
            serializer.validated_data["type"],
            serializer.validated_data["description"],
        )
        return Response(ComplaintSerializer(complaint).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["get"], url_path="can-complain", url_name="can-complain")
    def can_complain(self, request, pk=None):  # type: ignore
        order = self.get_object()
        result = self.get_service().can_complain(order.pk, request.user)
        return Response(result, status=status.HTTP_200_OK if result["status"] else status.HTTP_403_FORBIDDEN)

    @action(detail=False, methods=["post"], url_path="confirm", url_name="confirm")
    def confirm(self, request):  # type: ignore
        """Погашение билета по QR-коду сотрудником партнёра."""
        serializer = ConfirmTicketSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = self.get_service().confirm_ticket_by_code(serializer.validated_data["code"], request.user)
        return Response(OrderSerializer(order, context=self.get_serializer_context()).data)
