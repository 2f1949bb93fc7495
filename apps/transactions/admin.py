from django.contrib import admin
from apps.transactions.models import Transaction, BankLink


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    """Admin interface for imported transactions."""

    list_display = [
        'merchant',
        'amount',
        'date',
        'category',
        'user',
        'restaurant',
        'created_at',
    ]
    list_filter = ['category', 'date', 'created_at']
    search_fields = [
        'merchant',
        'external_id',
        'user__email',
        'restaurant__name',
    ]
    readonly_fields = ['external_id', 'created_at', 'updated_at']
    raw_id_fields = ['user', 'restaurant']
    date_hierarchy = 'date'
    ordering = ['-date']

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('user', 'restaurant')


@admin.register(BankLink)
class BankLinkAdmin(admin.ModelAdmin):
    """Admin interface for bank links."""

    list_display = ['user', 'institution_name', 'created_at', 'last_synced_at']
    search_fields = ['user__email', 'institution_name']
    readonly_fields = ['access_token', 'created_at', 'last_synced_at']
    raw_id_fields = ['user']
