"""Diner profile: account details plus bank link and restaurant activity."""

from typing import Any, Dict, Optional

from apps.restaurants.services import get_user_spending_summary
from apps.transactions.models import BankLink, Transaction
from ..models import User


def get_user_profile(*, user: User) -> Dict[str, Any]:
    """
    Collect what the app shows on a diner's own profile.

    Returns:
        Dictionary with:
        - user: User
        - bank_link: latest BankLink or None
        - transaction_count: int - Imported transactions
        - unmatched_transactions: int - Transactions without a restaurant
        - restaurant_count, total_visits, total_spent, last_visit: from the
          visit rollups
    """
    transactions = Transaction.objects.filter(user=user)

    return {
        'user': user,
        'bank_link': BankLink.objects.filter(user=user).order_by('-created_at').first(),
        'transaction_count': transactions.count(),
        'unmatched_transactions': transactions.filter(restaurant__isnull=True).count(),
        **get_user_spending_summary(user_id=user.id),
    }


def update_user_profile(
    *,
    user: User,
    display_name: Optional[str] = None,
    avatar: Optional[str] = None
) -> User:
    """Change the public parts of a profile; omitted fields stay as they are."""
    changed = []
    if display_name is not None:
        user.display_name = display_name.strip()
        changed.append('display_name')
    if avatar is not None:
        user.avatar = avatar
        changed.append('avatar')

    if changed:
        user.save(update_fields=changed)
    return user
