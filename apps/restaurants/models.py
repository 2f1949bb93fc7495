from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid
import re


UNKNOWN_ADDRESS = 'Unknown Address'


def normalize_name(text):
    """Lowercase, drop punctuation, then collapse whitespace."""
    text = re.sub(r'[^\w\s-]', '', text.lower())
    return re.sub(r'\s+', ' ', text).strip()


class Restaurant(models.Model):
    """Restaurant a diner has spent money at; created lazily from merchant names."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200, db_index=True)
    name_normalized = models.CharField(max_length=200, db_index=True, editable=False)
    address = models.CharField(max_length=300, default=UNKNOWN_ADDRESS)
    latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    hero_image = models.URLField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'restaurants'
        indexes = [
            models.Index(fields=['name_normalized'], name='restaurants_name_norm_idx'),
            models.Index(fields=['created_at'], name='restaurants_created_at_idx'),
        ]
        ordering = ['name']

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        self.name_normalized = normalize_name(self.name)
        super().save(*args, **kwargs)

    @property
    def coordinates(self):
        """Return {'lat', 'lng'} or None when the location is unknown."""
        if self.latitude is None or self.longitude is None:
            return None
        return {'lat': float(self.latitude), 'lng': float(self.longitude)}


class UserRestaurantStats(models.Model):
    """Per-user visit rollup for one restaurant, recomputed from transactions."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='restaurant_stats'
    )
    restaurant = models.ForeignKey(
        Restaurant,
        on_delete=models.CASCADE,
        related_name='user_stats'
    )
    visit_count = models.PositiveIntegerField(default=0)
    total_spent = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    last_visit = models.DateField()
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'user_restaurant_stats'
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'restaurant'],
                name='unique_user_restaurant_stats'
            ),
        ]
        indexes = [
            models.Index(fields=['restaurant', 'total_spent'], name='urs_restaurant_spent_idx'),
        ]
        ordering = ['-visit_count', '-last_visit']
        verbose_name_plural = 'user restaurant stats'

    def __str__(self):
        return f"{self.user} @ {self.restaurant.name}: {self.visit_count} visits"
