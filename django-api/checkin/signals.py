"""Django signals for cache invalidation.

Redemption itself is a queryset update and sends no signal; the check-in
record written right after it does.
"""

from django.core.cache import cache
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from checkin.conf import stats_cache_key
from checkin.models import CheckIn, Ticket


@receiver([post_save, post_delete], sender=Ticket)
def invalidate_ticket_stats_cache(sender, instance, **kwargs):
    """Invalidate event stats when a ticket is saved or deleted."""
    cache.delete(stats_cache_key(instance.event_id))


@receiver(post_save, sender=CheckIn)
def invalidate_checkin_stats_cache(sender, instance, created, **kwargs):
    """Invalidate event stats when a check-in is recorded."""
    if created:
        cache.delete(stats_cache_key(instance.event_id))
