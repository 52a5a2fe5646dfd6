# billing/payments.py
import logging

logger = logging.getLogger(__name__)


def apply_downsell_discount(subscription_id, discounted_price, months):
    """
    Stub for the payment-side price change. Nothing is charged or updated;
    the request is only logged.
    """
    logger.info(
        f"Downsell accepted for subscription {subscription_id}: "
        f"${discounted_price / 100:.2f}/month for {months} months (payment update not processed)"
    )
