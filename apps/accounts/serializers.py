from rest_framework import serializers
from apps.transactions.models import BankLink
from .models import User


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})


class UserSerializer(serializers.ModelSerializer):
    """Account fields of the logged-in diner."""

    class Meta:
        model = User
        fields = ['id', 'email', 'display_name', 'avatar', 'created_at', 'last_login']
        read_only_fields = fields


class UserPublicSerializer(serializers.ModelSerializer):
    """What other diners may see (leaderboards)."""

    class Meta:
        model = User
        fields = ['id', 'display_name', 'avatar']
        read_only_fields = fields


class BankLinkStatusSerializer(serializers.ModelSerializer):
    class Meta:
        model = BankLink
        fields = ['institution_name', 'created_at', 'last_synced_at']
        read_only_fields = fields


class ProfileSerializer(serializers.Serializer):
    """Own profile: account, bank link status and restaurant activity."""

    user = UserSerializer()
    bank_linked = serializers.SerializerMethodField()
    bank_link = BankLinkStatusSerializer(allow_null=True)
    transaction_count = serializers.IntegerField()
    unmatched_transactions = serializers.IntegerField()
    restaurant_count = serializers.IntegerField()
    total_visits = serializers.IntegerField()
    total_spent = serializers.DecimalField(max_digits=14, decimal_places=2)
    last_visit = serializers.DateField(allow_null=True)

    def get_bank_linked(self, obj) -> bool:
        return obj['bank_link'] is not None


class ProfileUpdateSerializer(serializers.Serializer):
    display_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    avatar = serializers.URLField(max_length=500, required=False, allow_blank=True)
