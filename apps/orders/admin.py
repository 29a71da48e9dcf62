"""Admin registration for orders."""

from __future__ import annotations

from django.contrib import admin

from .models import Complaint, Order, OrderRefund, QrCode


class ComplaintInline(admin.TabularInline):
    model = Complaint
    extra = 0
    readonly_fields = ("user", "type", "description", "created_at")


class OrderRefundInline(admin.TabularInline):
    model = OrderRefund
    extra = 0
    can_delete = False
    readonly_fields = ("user", "percent", "amount", "with_penalty", "description", "created_at")


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "excursion",
        "buyer",
        "order_user",
        "status",
        "date_start",
        "time_start",
        "amount",
        "date_confirm",
        "created_at",
    )
    list_filter = ("status", "date_start")
    search_fields = ("id", "excursion__name", "buyer__email", "order_user__email")
    readonly_fields = (
        "order_user",
        "items",
        "amount",
        "date_finish",
        "date_confirm",
        "employee",
        "created_at",
        "updated_at",
    )
    inlines = [ComplaintInline, OrderRefundInline]

    def get_queryset(self, request):  # type: ignore
        return Order.all_objects.select_related("excursion", "buyer", "order_user")


@admin.register(QrCode)
class QrCodeAdmin(admin.ModelAdmin):
    list_display = ("order", "code", "created_at")
    search_fields = ("code", "order__id")
