from rest_framework import serializers
from apps.accounts.serializers import UserPublicSerializer
from .models import Restaurant, UserRestaurantStats


class RestaurantSerializer(serializers.ModelSerializer):
    """Main serializer for restaurants."""

    coordinates = serializers.SerializerMethodField()
    diner_count = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = Restaurant
        fields = [
            'id',
            'name',
            'address',
            'coordinates',
            'hero_image',
            'diner_count',
            'created_at',
        ]
        read_only_fields = fields

    def get_coordinates(self, obj):
        return obj.coordinates


class RestaurantSummarySerializer(serializers.ModelSerializer):
    """Compact restaurant info embedded in stats."""

    class Meta:
        model = Restaurant
        fields = ['id', 'name', 'address', 'hero_image']
        read_only_fields = fields


class UserRestaurantStatsSerializer(serializers.ModelSerializer):
    """A user's visit rollup for one restaurant."""

    restaurant = RestaurantSummarySerializer(read_only=True)

    class Meta:
        model = UserRestaurantStats
        fields = [
            'restaurant',
            'visit_count',
            'total_spent',
            'last_visit',
            'updated_at',
        ]
        read_only_fields = fields


class LeaderboardEntrySerializer(serializers.ModelSerializer):
    """A diner's standing at one restaurant."""

    user = UserPublicSerializer(read_only=True)

    class Meta:
        model = UserRestaurantStats
        fields = ['user', 'visit_count', 'total_spent', 'last_visit']
        read_only_fields = fields


class SpendingSummarySerializer(serializers.Serializer):
    restaurant_count = serializers.IntegerField()
    total_visits = serializers.IntegerField()
    total_spent = serializers.DecimalField(max_digits=14, decimal_places=2)
    last_visit = serializers.DateField(allow_null=True)
