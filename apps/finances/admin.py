"""Admin registration for payment records."""

from __future__ import annotations

from django.contrib import admin

from .models import BillAction, BillActionEvent


class BillActionEventInline(admin.TabularInline):
    model = BillActionEvent
    extra = 0
    can_delete = False
    readonly_fields = ("operation", "idempotency_key", "amount", "reference", "succeeded", "payload", "created_at")


@admin.register(BillAction)
class BillActionAdmin(admin.ModelAdmin):
    list_display = ("order", "status", "amount", "currency", "hold_ref", "created_at")
    list_filter = ("status",)
    search_fields = ("order__id", "hold_ref", "capture_ref", "refund_ref")
    readonly_fields = ("uuid", "created_at", "updated_at", "captured_at", "refunded_at")
    inlines = [BillActionEventInline]
