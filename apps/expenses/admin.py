# ==========================================
# apps/expenses/admin.py
# ==========================================

from django.contrib import admin
from django.utils.html import format_html

from .models import Activity, ActivityType, Expense, ExpenseSplit, Settlement, SplitType


class ExpenseSplitInline(admin.TabularInline):
    """Inline admin for the owed amounts of an expense."""
    model = ExpenseSplit
    extra = 0
    fields = ['user', 'amount', 'percentage', 'shares']
    readonly_fields = ['user', 'amount', 'percentage', 'shares']

    def has_add_permission(self, request, obj=None):
        """Splits are created by the service together with the expense."""
        return False


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    """
    Admin interface for group expenses.

    Splits are shown inline and read-only; a mismatch between the split
    total and the expense amount is flagged in the list.
    """

    list_display = [
        'description',
        'group',
        'paid_by',
        'amount',
        'split_type_badge',
        'split_check',
        'date',
    ]
    list_filter = ['split_type', 'category', 'group', 'date']
    search_fields = [
        'description',
        'group__name',
        'paid_by__email',
        'paid_by__display_name',
    ]
    readonly_fields = ['created_by', 'created_at', 'updated_at']
    inlines = [ExpenseSplitInline]
    date_hierarchy = 'date'
    ordering = ['-date', '-created_at']

    fieldsets = (
        ('Expense', {
            'fields': ('group', 'description', 'category', 'date')
        }),
        ('Payment', {
            'fields': ('paid_by', 'amount', 'split_type')
        }),
        ('Metadata', {
            'fields': ('created_by', 'created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    def split_type_badge(self, obj):
        colors = {
            SplitType.EQUAL: '#6B8E5E',
            SplitType.EXACT: '#A47449',
            SplitType.PERCENTAGE: '#5E7A8E',
            SplitType.SHARES: '#8E5E7A',
        }
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            colors.get(obj.split_type, '#999'), obj.get_split_type_display()
        )
    split_type_badge.short_description = 'Split'
    split_type_badge.admin_order_field = 'split_type'

    def split_check(self, obj):
        """Show whether the splits add up to the expense amount."""
        split_total = obj.get_split_total()
        if split_total == obj.amount:
            return format_html('<span style="color: {};">✓</span>', '#6B8E5E')
        return format_html(
            '<span style="color: #B85C5C;">{} / {}</span>',
            split_total, obj.amount
        )
    split_check.short_description = 'Splits'

    def get_queryset(self, request):
        """Optimize query with select_related."""
        qs = super().get_queryset(request)
        return qs.select_related('group', 'paid_by').prefetch_related('splits')


@admin.register(Settlement)
class SettlementAdmin(admin.ModelAdmin):
    """Admin interface for recorded settlements."""

    list_display = [
        'from_user',
        'to_user',
        'amount',
        'payment_method',
        'group',
        'settled_at',
    ]
    list_filter = ['payment_method', 'group', 'settled_at']
    search_fields = [
        'from_user__email',
        'from_user__display_name',
        'to_user__email',
        'to_user__display_name',
        'group__name',
        'note',
    ]
    readonly_fields = ['created_by', 'created_at']
    date_hierarchy = 'settled_at'
    ordering = ['-settled_at']

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('group', 'from_user', 'to_user')


@admin.register(Activity)
class ActivityAdmin(admin.ModelAdmin):
    """Read-only admin for the group activity feed."""

    list_display = ['type_badge', 'description', 'group', 'user', 'created_at']
    list_filter = ['type', 'group', 'created_at']
    search_fields = ['description', 'group__name', 'user__email', 'user__display_name']
    readonly_fields = ['group', 'user', 'type', 'description', 'metadata', 'created_at']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    def type_badge(self, obj):
        colors = {
            ActivityType.EXPENSE_ADDED: '#A47449',
            ActivityType.SETTLEMENT_MADE: '#6B8E5E',
        }
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            colors.get(obj.type, '#999'), obj.get_type_display()
        )
    type_badge.short_description = 'Type'
    type_badge.admin_order_field = 'type'

    def has_add_permission(self, request):
        """Entries are written by the expense and settlement services."""
        return False

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('group', 'user')
