from django.contrib import admin
from apps.restaurants.models import Restaurant, UserRestaurantStats
from apps.restaurants.services import recompute_user_restaurant_stats


@admin.register(Restaurant)
class RestaurantAdmin(admin.ModelAdmin):
    """Admin interface for Restaurants."""

    list_display = ['name', 'address', 'latitude', 'longitude', 'created_at']
    search_fields = ['name', 'address']
    readonly_fields = ['name_normalized', 'created_at']
    date_hierarchy = 'created_at'
    ordering = ['name']

    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'address', 'hero_image')
        }),
        ('Location', {
            'fields': ('latitude', 'longitude'),
        }),
        ('Normalized Fields (Auto-generated)', {
            'fields': ('name_normalized',),
            'classes': ('collapse',)
        }),
        ('Metadata', {
            'fields': ('created_at',),
            'classes': ('collapse',)
        }),
    )


@admin.register(UserRestaurantStats)
class UserRestaurantStatsAdmin(admin.ModelAdmin):
    """Admin interface for visit rollups (read-only, derived from transactions)."""

    list_display = ['user', 'restaurant', 'visit_count', 'total_spent', 'last_visit', 'updated_at']
    search_fields = ['user__email', 'restaurant__name']
    readonly_fields = ['user', 'restaurant', 'visit_count', 'total_spent', 'last_visit', 'updated_at']
    ordering = ['-visit_count']
    actions = ['recompute_stats']

    def has_add_permission(self, request):
        return False

    def recompute_stats(self, request, queryset):
        """Recompute rollups for the users of the selected rows."""
        user_ids = set(queryset.values_list('user_id', flat=True))
        for user_id in user_ids:
            recompute_user_restaurant_stats(user_id=user_id)
        self.message_user(request, f"Recomputed stats for {len(user_ids)} user(s)")
    recompute_stats.short_description = "Recompute stats for selected users"

    def get_queryset(self, request):
        """Optimize query."""
        qs = super().get_queryset(request)
        return qs.select_related('user', 'restaurant')
