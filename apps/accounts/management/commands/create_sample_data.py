"""
Management command to create sample data for testing the API.

Usage:
    python manage.py create_sample_data [--clear]

This creates:
- 3 users (admin, alice, bob)
- 5 San Francisco restaurants with coordinates and hero images
- Restaurant transactions for alice and bob, imported through the
  regular ingestion pipeline
- Visit stats for every user with transactions
"""

from django.core.management.base import BaseCommand
from django.db import transaction
from decimal import Decimal

from apps.accounts.models import User
from apps.restaurants.models import Restaurant, UserRestaurantStats
from apps.restaurants.services import recompute_all_restaurant_stats
from apps.transactions.models import Transaction, BankLink
from apps.transactions.services import ingest_transactions


RESTAURANTS = [
    {
        'name': 'Starbucks',
        'address': '123 Main St, San Francisco, CA',
        'latitude': Decimal('37.774900'),
        'longitude': Decimal('-122.419400'),
        'hero_image': 'https://images.unsplash.com/photo-1501339847302-ac426a4a7cbb?w=400',
    },
    {
        'name': "McDonald's",
        'address': '456 Market St, San Francisco, CA',
        'latitude': Decimal('37.784900'),
        'longitude': Decimal('-122.409400'),
        'hero_image': 'https://images.unsplash.com/photo-1571091718767-18b5b1457add?w=400',
    },
    {
        'name': 'Chipotle',
        'address': '789 Mission St, San Francisco, CA',
        'latitude': Decimal('37.784900'),
        'longitude': Decimal('-122.409400'),
        'hero_image': 'https://images.unsplash.com/photo-1565299624946-b28f40a0ca4b?w=400',
    },
    {
        'name': 'Blue Bottle Coffee',
        'address': '321 Valencia St, San Francisco, CA',
        'latitude': Decimal('37.754900'),
        'longitude': Decimal('-122.429400'),
        'hero_image': 'https://images.unsplash.com/photo-1509042239860-f550ce710b93?w=400',
    },
    {
        'name': 'In-N-Out Burger',
        'address': '654 Castro St, San Francisco, CA',
        'latitude': Decimal('37.764900'),
        'longitude': Decimal('-122.419400'),
        'hero_image': 'https://images.unsplash.com/photo-1568901346375-23c9450c58cd?w=400',
    },
]

TRANSACTIONS = {
    'alice': [
        {'id': 'sample-txn-1', 'amount': '25.50', 'merchant': 'Starbucks', 'date': '2024-01-15'},
        {'id': 'sample-txn-2', 'amount': '45.00', 'merchant': "McDonald's", 'date': '2024-01-14'},
        {'id': 'sample-txn-3', 'amount': '12.75', 'merchant': 'Chipotle', 'date': '2024-01-13'},
        {'id': 'sample-txn-4', 'amount': '8.50', 'merchant': 'Blue Bottle Coffee', 'date': '2024-01-12'},
        {'id': 'sample-txn-5', 'amount': '15.25', 'merchant': 'In-N-Out Burger', 'date': '2024-01-11'},
        {'id': 'sample-txn-6', 'amount': '6.40', 'merchant': 'STARBUCKS', 'date': '2024-01-18'},
    ],
    'bob': [
        {'id': 'sample-txn-1', 'amount': '9.90', 'merchant': 'Starbucks', 'date': '2024-01-16'},
        {'id': 'sample-txn-2', 'amount': '31.20', 'merchant': 'Chipotle', 'date': '2024-01-17'},
        {'id': 'sample-txn-3', 'amount': '18.00', 'merchant': 'Chipotle', 'date': '2024-01-19'},
    ],
}


class Command(BaseCommand):
    help = 'Create sample data for testing the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing data before creating new sample data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating sample data...')

        users = self.create_users()
        self.create_restaurants()
        self.create_transactions(users)

        self.stdout.write('  Computing visit stats...')
        recompute_all_restaurant_stats()

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Test accounts:')
        self.stdout.write('  admin@example.com / admin123 (superuser)')
        self.stdout.write('  alice@example.com / password123')
        self.stdout.write('  bob@example.com / password123')

    def clear_data(self):
        """Clear all data from the database."""
        UserRestaurantStats.objects.all().delete()
        Transaction.objects.all().delete()
        BankLink.objects.all().delete()
        Restaurant.objects.all().delete()
        User.objects.filter(is_superuser=False).delete()
        User.objects.filter(email='admin@example.com').delete()

    def create_users(self):
        """Create test users."""
        self.stdout.write('  Creating users...')

        admin, _ = User.objects.get_or_create(
            email='admin@example.com',
            defaults={
                'display_name': 'Admin User',
                'is_staff': True,
                'is_superuser': True,
            }
        )
        admin.set_password('admin123')
        admin.save()

        alice, _ = User.objects.get_or_create(
            email='alice@example.com',
            defaults={'display_name': 'Alice Eats'}
        )
        alice.set_password('password123')
        alice.save()

        bob, _ = User.objects.get_or_create(
            email='bob@example.com',
            defaults={'display_name': 'Bob Brunch'}
        )
        bob.set_password('password123')
        bob.save()

        return {
            'admin': admin,
            'alice': alice,
            'bob': bob,
        }

    def create_restaurants(self):
        """Create restaurants, skipping names that already exist."""
        self.stdout.write('  Creating restaurants...')

        restaurants = []
        for data in RESTAURANTS:
            restaurant, _ = Restaurant.objects.get_or_create(
                name=data['name'],
                defaults=data,
            )
            restaurants.append(restaurant)

        return restaurants

    def create_transactions(self, users):
        """Import sample transactions through the ingestion pipeline."""
        self.stdout.write('  Importing transactions...')

        for key, records in TRANSACTIONS.items():
            records = [{**record, 'category': 'Food and Drink'} for record in records]
            report = ingest_transactions(user=users[key], records=records)
            self.stdout.write(
                f'    {users[key].email}: {report.created} created, '
                f'{report.skipped} skipped, {report.failed} failed'
            )
