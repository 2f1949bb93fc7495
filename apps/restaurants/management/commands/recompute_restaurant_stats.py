"""
Management command to rebuild restaurant visit stats from transactions.

Usage:
    python manage.py recompute_restaurant_stats
    python manage.py recompute_restaurant_stats --email alice@example.com
"""

from django.core.management.base import BaseCommand, CommandError

from apps.accounts.models import User
from apps.restaurants.services import (
    recompute_user_restaurant_stats,
    recompute_all_restaurant_stats,
)


class Command(BaseCommand):
    help = 'Recompute per-user restaurant visit stats'

    def add_arguments(self, parser):
        parser.add_argument(
            '--email',
            help='Only recompute stats for this user',
        )

    def handle(self, *args, **options):
        email = options.get('email')

        if not email:
            count = recompute_all_restaurant_stats()
            self.stdout.write(
                self.style.SUCCESS(f'Recomputed restaurant stats for {count} user(s)')
            )
            return

        try:
            user = User.objects.get(email__iexact=email)
        except User.DoesNotExist:
            raise CommandError(f'User {email} does not exist')

        stats = recompute_user_restaurant_stats(user_id=user.id)
        self.stdout.write(
            self.style.SUCCESS(
                f'Recomputed restaurant stats for {user.email}: {len(stats)} restaurant(s)'
            )
        )
