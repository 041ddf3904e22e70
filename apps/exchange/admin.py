"""
Django Admin configuration for Exchange app.
Currencies can be toggled but never deleted; history is read-only.
"""

from django.contrib import admin
from django.utils.html import format_html

from apps.exchange.infrastructure.persistence.models import Currency, ExchangeHistory
from apps.exchange.infrastructure.persistence.unit_of_work import UnitOfWork


@admin.register(Currency)
class CurrencyAdmin(admin.ModelAdmin):
    """Admin interface for Currency model with soft delete actions."""

    list_display = ('name', 'symbol', 'get_status', 'created_at')
    list_filter = ('is_active', 'created_at')
    search_fields = ('name',)
    readonly_fields = ('id', 'created_at', 'updated_at')
    ordering = ('name',)
    actions = ['activate_currencies', 'deactivate_currencies']

    fieldsets = (
        ('Currency Information', {
            'fields': ('name', 'symbol', 'is_active')
        }),
        ('Metadata', {
            'fields': ('id', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def has_delete_permission(self, request, obj=None):
        return False

    def get_status(self, obj):
        """Display status with colored indicator."""
        if obj.is_active:
            return format_html(
                '<span style="color: green; font-weight: bold;">● {}</span>', 'Active'
            )
        return format_html('<span style="color: red;">○ {}</span>', 'Inactive')
    get_status.short_description = 'Status'

    @admin.action(description='Activate selected currencies')
    def activate_currencies(self, request, queryset):
        with UnitOfWork() as uow:
            for pk in queryset.values_list('pk', flat=True):
                uow.currencies.update(pk, is_active=True)
            updated = uow.complete()
        self.message_user(request, f'{updated} currency(ies) activated.')

    @admin.action(description='Deactivate selected currencies')
    def deactivate_currencies(self, request, queryset):
        with UnitOfWork() as uow:
            for pk in queryset.values_list('pk', flat=True):
                uow.currencies.deactivate(pk)
            updated = uow.complete()
        self.message_user(request, f'{updated} currency(ies) deactivated.')


@admin.register(ExchangeHistory)
class ExchangeHistoryAdmin(admin.ModelAdmin):
    """Read-only admin interface for ExchangeHistory."""

    list_display = (
        'get_currency_pair',
        'amount',
        'rate',
        'result_amount',
        'exchanged_at',
    )
    list_filter = ('exchanged_at', 'source_currency', 'target_currency')
    search_fields = ('source_currency__name', 'target_currency__name')
    date_hierarchy = 'exchanged_at'

    def get_currency_pair(self, obj):
        """Display currency pair in format SOURCE/TARGET."""
        return f"{obj.source_currency.name}/{obj.target_currency.name}"
    get_currency_pair.short_description = 'Currency Pair'
    get_currency_pair.admin_order_field = 'source_currency__name'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
