# Generated manually for restaurants app

import uuid
from decimal import Decimal
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Restaurant',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(db_index=True, max_length=200)),
                ('name_normalized', models.CharField(db_index=True, editable=False, max_length=200)),
                ('address', models.CharField(default='Unknown Address', max_length=300)),
                ('latitude', models.DecimalField(blank=True, decimal_places=6, max_digits=9, null=True)),
                ('longitude', models.DecimalField(blank=True, decimal_places=6, max_digits=9, null=True)),
                ('hero_image', models.URLField(blank=True, max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'restaurants',
                'ordering': ['name'],
                'indexes': [
                    models.Index(fields=['name_normalized'], name='restaurants_name_norm_idx'),
                    models.Index(fields=['created_at'], name='restaurants_created_at_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='UserRestaurantStats',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('visit_count', models.PositiveIntegerField(default=0)),
                ('total_spent', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12, validators=[MinValueValidator(Decimal('0.00'))])),
                ('last_visit', models.DateField()),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('restaurant', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='user_stats', to='restaurants.restaurant')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='restaurant_stats', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'user_restaurant_stats',
                'ordering': ['-visit_count', '-last_visit'],
                'verbose_name_plural': 'user restaurant stats',
                'indexes': [
                    models.Index(fields=['restaurant', 'total_spent'], name='urs_restaurant_spent_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('user', 'restaurant'), name='unique_user_restaurant_stats'),
                ],
            },
        ),
    ]
