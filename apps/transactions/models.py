from django.db import models
import uuid


class Transaction(models.Model):
    """Bank transaction imported from the aggregator for one user."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='transactions'
    )

    # Identifier assigned by the bank aggregator; idempotency key with user
    external_id = models.CharField(max_length=100)

    amount = models.DecimalField(max_digits=12, decimal_places=2)
    merchant = models.CharField(max_length=200)
    date = models.DateField()
    category = models.CharField(max_length=100)

    # Set once by the restaurant matcher, right after insert
    restaurant = models.ForeignKey(
        'restaurants.Restaurant',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='transactions'
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'transactions'
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'external_id'],
                name='unique_user_external_transaction'
            ),
        ]
        indexes = [
            models.Index(fields=['user', 'date'], name='transactions_user_date_idx'),
            models.Index(fields=['user', 'restaurant'], name='transactions_user_rest_idx'),
        ]
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f"{self.merchant} - {self.amount} ({self.date})"


class BankLink(models.Model):
    """Access token of a bank connection made through the aggregator."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='bank_links'
    )
    access_token = models.CharField(max_length=200)
    institution_id = models.CharField(max_length=100, blank=True)
    institution_name = models.CharField(max_length=200, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    last_synced_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'bank_links'
        indexes = [
            models.Index(fields=['user', 'created_at'], name='bank_links_user_created_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.user} - {self.institution_name or 'Unknown institution'}"
