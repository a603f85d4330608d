# core/templatetags/backoffice_filters.py
from django import template

from shared.utils import format_money

register = template.Library()

BADGE_COLORS = {
    # Payments
    'succeeded': 'emerald',
    'pending': 'amber',
    'processing': 'blue',
    'failed': 'red',
    'cancelled': 'red',
    'refunded': 'gray',
    # Orders / payslips
    'paid': 'emerald',
    'void': 'gray',
    'draft': 'gray',
    'finalized': 'blue',
    # Enrollments / students / courses
    'active': 'emerald',
    'enrolled': 'emerald',
    'inactive': 'gray',
    'completed': 'blue',
    'withdrawn': 'red',
    'suspended': 'red',
    'dropped': 'red',
    'graduated': 'blue',
    # Sessions
    'scheduled': 'blue',
    'ongoing': 'amber',
    'live': 'red',
    'ended': 'gray',
    'no_show': 'red',
    # Funnels
    'published': 'emerald',
    'archived': 'gray',
}


@register.filter
def money(value):
    """
    Format an amount as Ringgit.
    Usage: {{ order.amount|money }}
    """
    return format_money(value)


@register.filter
def badge_color(status):
    """
    Colour name for a status badge.
    Usage: <span class="badge badge-{{ payment.status|badge_color }}">
    """
    return BADGE_COLORS.get(str(status), 'gray')


@register.filter
def get_item(dictionary, key):
    """
    Get a value from a dictionary by key.
    Usage: {{ my_dict|get_item:key }}
    """
    if dictionary and isinstance(dictionary, dict):
        return dictionary.get(key)
    return None


@register.filter
def percentage(value):
    """
    Format a value that is already a percentage.
    Usage: {{ summary.conversion_rate|percentage }}
    """
    try:
        return f"{float(value):.2f}%"
    except (ValueError, TypeError):
        return "0%"
