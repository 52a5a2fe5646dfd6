# billing/models.py

from django.db import models
from django.conf import settings
from auditlog.registry import auditlog


class Variant(models.TextChoices):
    A = 'A', 'A (no offer)'
    B = 'B', 'B (downsell offer)'


class Subscription(models.Model):
    class Status(models.TextChoices):
        ACTIVE = 'active', 'Active'
        PENDING_CANCELLATION = 'pending_cancellation', 'Pending cancellation'
        CANCELLED = 'cancelled', 'Cancelled'

    id = models.CharField(primary_key=True, max_length=64)
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='subscription'
    )
    monthly_price = models.PositiveIntegerField(help_text="Monthly price in cents")
    status = models.CharField(max_length=32, choices=Status.choices, default=Status.ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'subscriptions'

    def __str__(self):
        return f"{self.id} ({self.status})"

    def discounted_price(self, discount=None):
        """Monthly price with the downsell discount applied, never below zero."""
        if discount is None:
            discount = settings.DOWNSELL_DISCOUNT_CENTS
        return max(self.monthly_price - discount, 0)


class Cancellation(models.Model):
    # No uniqueness on user: a downsell acceptance and a later cancellation
    # both leave a row.
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='cancellations')
    subscription = models.ForeignKey(Subscription, on_delete=models.CASCADE, related_name='cancellations')
    downsell_variant = models.CharField(max_length=1, choices=Variant.choices)
    reason = models.CharField(max_length=255, blank=True)
    accepted_downsell = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'cancellations'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.user_id} - {self.reason} [{self.downsell_variant}]"

    def to_dict(self):
        return {
            "id": self.pk,
            "user_id": str(self.user_id),
            "subscription_id": self.subscription_id,
            "downsell_variant": self.downsell_variant,
            "reason": self.reason,
            "accepted_downsell": self.accepted_downsell,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

auditlog.register(Subscription)
auditlog.register(Cancellation)
