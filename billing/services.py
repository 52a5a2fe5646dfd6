# billing/services.py
import logging
import secrets

from django.conf import settings
from django.db import DatabaseError

from .models import Cancellation, Subscription, Variant
from .payments import apply_downsell_discount

logger = logging.getLogger(__name__)


class CancellationService:

    @staticmethod
    def draw_variant():
        # One random byte: even -> A, odd -> B
        byte = secrets.randbits(8)
        return Variant.A if byte % 2 == 0 else Variant.B

    @staticmethod
    def get_stored_variant(user_id):
        return (
            Cancellation.objects.filter(user_id=user_id)
            .exclude(downsell_variant='')
            .order_by('-created_at', '-id')
            .values_list('downsell_variant', flat=True)
            .first()
        )

    @staticmethod
    def get_or_assign_variant(user_id):
        """
        Reuse the variant stored on the user's latest cancellation row, or draw
        a fresh one. A fresh draw is not persisted here; it only sticks once a
        write step records it, so two first lookups may disagree.
        """
        try:
            stored = CancellationService.get_stored_variant(user_id)
        except DatabaseError as e:
            logger.warning(f"Variant lookup failed for user {user_id}, drawing a new one: {e}")
            stored = None

        if stored:
            return Variant(stored)
        return CancellationService.draw_variant()

    @staticmethod
    def cancel_subscription(user_id, subscription_id, variant, reason, accepted_downsell=False):
        """
        Marks the subscription pending_cancellation, then records the
        cancellation. The writes are separate: if the insert fails, the status
        change stays and the error propagates.
        """
        subscription = Subscription.objects.get(pk=subscription_id)
        subscription.status = Subscription.Status.PENDING_CANCELLATION
        subscription.save(update_fields=['status', 'updated_at'])

        cancellation = Cancellation.objects.create(
            user_id=user_id,
            subscription_id=subscription_id,
            downsell_variant=variant,
            reason=reason,
            accepted_downsell=accepted_downsell,
        )
        logger.info(f"Subscription {subscription_id} pending cancellation (variant {variant}, reason '{reason}')")
        return cancellation

    @staticmethod
    def accept_downsell(user_id, subscription_id, variant, reason):
        """Records the accepted offer. Subscription status is left as it is."""
        cancellation = Cancellation.objects.create(
            user_id=user_id,
            subscription_id=subscription_id,
            downsell_variant=variant,
            reason=reason,
            accepted_downsell=True,
        )

        subscription = Subscription.objects.filter(pk=subscription_id).first()
        if subscription:
            apply_downsell_discount(
                subscription_id,
                subscription.discounted_price(),
                settings.DOWNSELL_DURATION_MONTHS,
            )
        return cancellation
