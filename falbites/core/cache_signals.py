"""
Cache invalidation signals
Drop cached list payloads whenever the underlying rows change
"""
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver

from falbites.catalog.models import Category, TopCategory, SubCategory
from falbites.subscriptions.models import DailyTip
from .cache_utils import invalidate, CATEGORY_LIST_CACHE_KEY, DAILY_TIPS_CACHE_KEY, SETTINGS_CACHE_KEY
from .models import PlatformSetting


@receiver([post_save, post_delete], sender=Category)
@receiver([post_save, post_delete], sender=TopCategory)
@receiver([post_save, post_delete], sender=SubCategory)
def invalidate_category_cache(sender, instance, **kwargs):
    invalidate(CATEGORY_LIST_CACHE_KEY)


@receiver([post_save, post_delete], sender=DailyTip)
def invalidate_daily_tips_cache(sender, instance, **kwargs):
    invalidate(DAILY_TIPS_CACHE_KEY)


@receiver(post_save, sender=PlatformSetting)
def invalidate_settings_cache(sender, instance, **kwargs):
    invalidate(SETTINGS_CACHE_KEY)
