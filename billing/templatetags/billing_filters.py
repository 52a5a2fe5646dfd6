# billing/templatetags/billing_filters.py
from django import template
register = template.Library()

@register.filter
def dollars(cents, style=None):
    """
    Formats an integer amount of cents as $X.YY. With ``"short"``, whole
    amounts drop the cents ($10 rather than $10.00).
    """
    try:
        cents = int(cents)
    except (TypeError, ValueError):
        return ""
    if style == "short" and cents % 100 == 0:
        return f"${cents // 100}"
    return f"${cents / 100:.2f}"
