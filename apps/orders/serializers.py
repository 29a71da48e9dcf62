"""Serializers for the order domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.finances.models import BillAction

from .models import Complaint, Order, OrderRefund


class BuyerSerializer(serializers.Serializer):
    """Покупатель, для которого оформляют заказ."""

    email = serializers.EmailField()
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True, default="")
    first_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")
    last_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")
    patronymic = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")


class OrderCreateSerializer(serializers.Serializer):
    """Оформление заказа покупателем."""

    excursion_id = serializers.IntegerField(min_value=1)
    point_id = serializers.IntegerField(min_value=1)
    date_start = serializers.DateField()
    time_start = serializers.TimeField()
    number_adult = serializers.IntegerField(min_value=0, default=1)
    number_children = serializers.IntegerField(min_value=0, default=0)
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    languages = serializers.ListField(child=serializers.CharField(max_length=32), required=False, default=list)
    transfer = serializers.BooleanField(required=False, default=False)
    ignore_repeat_order = serializers.BooleanField(required=False, default=False)
    buyer = BuyerSerializer(required=False)

    def validate(self, attrs):  # type: ignore
        if attrs["number_adult"] + attrs["number_children"] < 1:
            raise serializers.ValidationError("В заказе должен быть хотя бы один участник.")
        return attrs


class BillActionSerializer(serializers.ModelSerializer):
    class Meta:
        model = BillAction
        fields = ["uuid", "status", "amount", "currency", "captured_at", "refunded_amount", "refunded_at"]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Детальный сериализатор заказа."""

    buyer_id = serializers.ReadOnlyField(source="buyer.id")
    order_user_id = serializers.ReadOnlyField(source="order_user.id")
    excursion_id = serializers.ReadOnlyField(source="excursion.id")
    excursion_name = serializers.ReadOnlyField(source="excursion.name")
    point_id = serializers.ReadOnlyField(source="point.id")
    status_label = serializers.CharField(source="get_status_display", read_only=True)
    transaction = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "buyer_id",
            "order_user_id",
            "excursion_id",
            "excursion_name",
            "point_id",
            "number_adult",
            "number_children",
            "items",
            "amount",
            "currency",
            "status",
            "status_label",
            "date_start",
            "time_start",
            "date_finish",
            "date_confirm",
            "employee",
            "transaction",
            "created_at",
        ]
        read_only_fields = fields

    def get_transaction(self, obj: Order):  # type: ignore
        bill_action = BillAction.objects.filter(order=obj).first()
        return BillActionSerializer(bill_action).data if bill_action is not None else None


class RefundRequestSerializer(serializers.Serializer):
    description = serializers.CharField(required=False, allow_blank=True, default="", max_length=2000)


class OrderRefundSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderRefund
        fields = ["id", "order", "percent", "amount", "with_penalty", "description", "created_at"]
        read_only_fields = fields


class ComplaintRequestSerializer(serializers.Serializer):
    type = serializers.CharField(max_length=50)
    description = serializers.CharField(required=False, allow_blank=True, default="", max_length=5000)


class ComplaintSerializer(serializers.ModelSerializer):
    class Meta:
        model = Complaint
        fields = ["id", "order", "type", "description", "created_at"]
        read_only_fields = fields


class ConfirmTicketSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=64)
