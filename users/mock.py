# users/mock.py
import logging
from django.conf import settings
from django.contrib.auth import get_user_model

from billing.models import Subscription

logger = logging.getLogger(__name__)


def get_mock_user():
    """
    Returns the hardcoded account every page acts for, creating it and its
    subscription on first use. Values come from the MOCK_* settings.
    """
    User = get_user_model()
    user, created = User.objects.get_or_create(
        pk=settings.MOCK_USER_ID,
        defaults={
            'username': settings.MOCK_USER_EMAIL,
            'email': settings.MOCK_USER_EMAIL,
            'first_name': settings.MOCK_USER_NAME,
        },
    )
    if created:
        logger.info(f"Provisioned mock user {user.email}")

    Subscription.objects.get_or_create(
        pk=settings.MOCK_SUBSCRIPTION_ID,
        defaults={
            'user': user,
            'monthly_price': settings.MOCK_SUBSCRIPTION_PRICE,
            'status': Subscription.Status.ACTIVE,
        },
    )
    return user
