from django.conf import settings
from django.core.management.base import BaseCommand
from django.db import transaction
from billing.models import Cancellation, Subscription
from users.mock import get_mock_user

class Command(BaseCommand):
    help = "Restores the mock user's subscription and clears its cancellation history"

    def handle(self, *args, **options):
        try:
            with transaction.atomic():
                user = get_mock_user()

                # 1. Drop recorded cancellations so a fresh variant gets drawn
                deleted_count, _ = Cancellation.objects.filter(user=user).delete()

                # 2. Put the subscription back to active
                subscription = Subscription.objects.get(pk=settings.MOCK_SUBSCRIPTION_ID)
                subscription.status = Subscription.Status.ACTIVE
                subscription.monthly_price = settings.MOCK_SUBSCRIPTION_PRICE
                subscription.save()

                self.stdout.write(
                    self.style.SUCCESS(
                        f"Deleted {deleted_count} cancellations. Subscription {subscription.pk} is active."
                    )
                )
        except Exception as e:
            self.stdout.write(self.style.ERROR(f"Error during reset: {e}"))
            raise
