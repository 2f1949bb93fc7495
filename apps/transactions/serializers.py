from rest_framework import serializers
from .models import Transaction, BankLink


class TransactionRestaurantSerializer(serializers.Serializer):
    """Restaurant summary embedded in a transaction."""

    id = serializers.UUIDField()
    name = serializers.CharField()
    address = serializers.CharField()
    hero_image = serializers.URLField()


class TransactionSerializer(serializers.ModelSerializer):
    """Imported transaction with its restaurant."""

    restaurant = TransactionRestaurantSerializer(read_only=True, allow_null=True)

    class Meta:
        model = Transaction
        fields = [
            'id',
            'external_id',
            'amount',
            'merchant',
            'date',
            'category',
            'restaurant',
            'created_at',
        ]
        read_only_fields = fields


class BankLinkSerializer(serializers.ModelSerializer):
    """Bank link without the access token."""

    class Meta:
        model = BankLink
        fields = [
            'id',
            'institution_id',
            'institution_name',
            'created_at',
            'last_synced_at',
        ]
        read_only_fields = fields


class ExchangeTokenSerializer(serializers.Serializer):
    """Input for exchanging a public token from the link flow."""

    public_token = serializers.CharField(max_length=200)
    metadata = serializers.DictField(required=False, default=dict)


class SyncRequestSerializer(serializers.Serializer):
    """Input for a bank sync; dates default to the configured window."""

    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):
        start_date = attrs.get('start_date')
        end_date = attrs.get('end_date')
        if start_date and end_date and start_date > end_date:
            raise serializers.ValidationError({
                'start_date': 'start_date must not be after end_date'
            })
        return attrs


class IngestOutcomeSerializer(serializers.Serializer):
    external_id = serializers.CharField(allow_null=True)
    status = serializers.CharField()
    reason = serializers.CharField(allow_blank=True)
    restaurant_id = serializers.UUIDField(allow_null=True)


class SyncResultSerializer(serializers.Serializer):
    """Summary returned by a bank sync."""

    start_date = serializers.DateField()
    end_date = serializers.DateField()
    fetched = serializers.IntegerField()
    restaurant_transactions = serializers.IntegerField()
    restaurants_visited = serializers.IntegerField()
    created = serializers.IntegerField()
    skipped = serializers.IntegerField()
    failed = serializers.IntegerField()
    outcomes = IngestOutcomeSerializer(many=True)
