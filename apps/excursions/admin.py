"""Admin registration for the excursion catalogue."""

from __future__ import annotations

from django.contrib import admin

from .models import Excursion, ExcursionTime, ExcursionTimePoint, MapLocation


class ExcursionTimeInline(admin.TabularInline):
    model = ExcursionTime
    extra = 0


@admin.register(Excursion)
class ExcursionAdmin(admin.ModelAdmin):
    list_display = ("name", "owner", "type", "subtype", "price_adult", "price_children", "status")
    list_filter = ("type", "subtype", "status")
    search_fields = ("name", "owner__email")
    inlines = [ExcursionTimeInline]


class MapLocationInline(admin.StackedInline):
    model = MapLocation
    extra = 0


@admin.register(ExcursionTimePoint)
class ExcursionTimePointAdmin(admin.ModelAdmin):
    list_display = ("title", "excursion", "excursion_time", "price_adult", "price_children")
    search_fields = ("title", "address", "excursion__name")
    inlines = [MapLocationInline]
