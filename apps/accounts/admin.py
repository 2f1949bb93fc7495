from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.db.models import Count
from apps.transactions.models import BankLink
from .models import User


class BankLinkInline(admin.TabularInline):
    """Linked banks, without exposing access tokens."""

    model = BankLink
    extra = 0
    fields = ['institution_name', 'institution_id', 'created_at', 'last_synced_at']
    readonly_fields = fields
    can_delete = True
    show_change_link = False


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin interface for diner accounts."""

    list_display = [
        'email',
        'display_name',
        'transaction_count',
        'restaurant_count',
        'is_active',
        'created_at',
        'last_login',
    ]
    list_filter = ['is_active', 'is_staff', 'created_at']
    search_fields = ['email', 'display_name']
    ordering = ['-created_at']
    inlines = [BankLinkInline]

    fieldsets = (
        ('Profile', {
            'fields': ('email', 'display_name', 'avatar', 'password')
        }),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
            'classes': ('collapse',),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'last_login'),
        }),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'display_name', 'password1', 'password2'),
        }),
    )

    readonly_fields = ['created_at', 'last_login']
    filter_horizontal = ['groups', 'user_permissions']
    actions = ['deactivate_users']

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.annotate(
            _transaction_count=Count('transactions', distinct=True),
            _restaurant_count=Count('restaurant_stats', distinct=True),
        )

    @admin.display(description='Transactions', ordering='_transaction_count')
    def transaction_count(self, obj):
        return obj._transaction_count

    @admin.display(description='Restaurants', ordering='_restaurant_count')
    def restaurant_count(self, obj):
        return obj._restaurant_count

    @admin.action(description='Deactivate selected users')
    def deactivate_users(self, request, queryset):
        """Deactivate selected users (excludes superusers)."""
        count = queryset.filter(is_superuser=False).update(is_active=False)
        self.message_user(request, f'Deactivated {count} user(s).')
