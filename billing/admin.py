# billing/admin.py
from django.contrib import admin
from .models import Cancellation, Subscription


@admin.register(Subscription)
class SubscriptionAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'monthly_price', 'status', 'updated_at')
    list_filter = ('status',)
    search_fields = ('id', 'user__email')


@admin.register(Cancellation)
class CancellationAdmin(admin.ModelAdmin):
    list_display = ('user', 'subscription', 'downsell_variant', 'reason', 'accepted_downsell', 'created_at')
    list_filter = ('downsell_variant', 'accepted_downsell', 'reason', 'created_at')
    search_fields = ('user__email', 'reason')
