"""Visitman admin.

Check-ins and reward claims are the audit trail: read-only, no add/delete.
"""

from django.contrib import admin
from django.db.models import Count, Max
from django.utils.html import format_html

from visitman.models import Business, CheckIn, Customer, RewardClaim


class ReadOnlyAdminMixin:
    """Append-only records: visible, never edited in admin."""

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# ===========================================
# Business Admin
# ===========================================


@admin.register(Business)
class BusinessAdmin(admin.ModelAdmin):
    list_display = ["name", "email", "phone", "customer_count", "created_at"]
    search_fields = ["name", "email"]
    readonly_fields = ["id", "created_at"]

    def customer_count(self, obj):
        return obj.customers.count()

    customer_count.short_description = "Customers"


# ===========================================
# Customer Admin
# ===========================================


class CheckInInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = CheckIn
    extra = 0
    fields = ["checkin_time", "staff_user_id"]
    readonly_fields = ["checkin_time", "staff_user_id"]
    ordering = ["-checkin_time"]


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ["phone", "business", "visits_badge", "last_checkin", "created_at"]
    list_filter = ["business"]
    search_fields = ["phone"]
    readonly_fields = ["id", "created_at"]
    inlines = [CheckInInline]

    def get_queryset(self, request):
        return (
            super()
            .get_queryset(request)
            .select_related("business")
            .annotate(visit_count=Count("checkins"), last_checkin_time=Max("checkins__checkin_time"))
        )

    def get_readonly_fields(self, request, obj=None):
        if obj is not None:
            return [*self.readonly_fields, "business", "phone"]
        return self.readonly_fields

    def visits_badge(self, obj):
        color = "#198754" if obj.visit_count else "#6c757d"
        return format_html(
            '<span style="background:{}; color:#fff; padding:2px 8px; '
            'border-radius:3px; font-size:11px;">{} visits</span>',
            color,
            obj.visit_count,
        )

    visits_badge.short_description = "Visits"
    visits_badge.admin_order_field = "visit_count"

    def last_checkin(self, obj):
        return obj.last_checkin_time or obj.created_at

    last_checkin.short_description = "Last visit"
    last_checkin.admin_order_field = "last_checkin_time"


# ===========================================
# Audit trail
# ===========================================


@admin.register(CheckIn)
class CheckInAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ["checkin_time", "customer", "staff_user_id"]
    list_filter = ["customer__business"]
    search_fields = ["customer__phone", "staff_user_id"]
    date_hierarchy = "checkin_time"


@admin.register(RewardClaim)
class RewardClaimAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ["claimed_at", "customer", "reward_description", "visits_required", "staff_user_id"]
    list_filter = ["visits_required"]
    search_fields = ["customer__phone", "reward_description"]
