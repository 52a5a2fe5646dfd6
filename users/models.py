# users/models.py
import uuid
from django.db import models
from django.contrib.auth.models import AbstractUser
from auditlog.registry import auditlog


class UserAccount(AbstractUser):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    @property
    def name(self):
        return self.first_name or self.username

    def get_subscription(self):
        """Returns the account's subscription, or None if it has not been provisioned."""
        return getattr(self, 'subscription', None)

auditlog.register(UserAccount)
