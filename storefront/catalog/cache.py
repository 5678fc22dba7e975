"""
Cached category listing for the storefront navigation.

Two variants are kept, active-only and all; any category save or delete
drops both.
"""
from django.core.cache import cache
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
import logging

from .models import Category

logger = logging.getLogger(__name__)

CATEGORY_LIST_CACHE_TTL = 600  # 10 minutes


def category_list_key(include_inactive):
    return f"category_list:{'all' if include_inactive else 'active'}"


def get_category_list(include_inactive):
    """Serialized categories (relative media paths), ordered for display"""
    from .serializers import CategorySerializer

    key = category_list_key(include_inactive)
    categories = cache.get(key)
    if categories is not None:
        return categories

    queryset = Category.objects.select_related('parent')
    if not include_inactive:
        queryset = queryset.filter(is_active=True)
    categories = list(CategorySerializer(queryset.order_by('display_order', 'name'), many=True).data)
    cache.set(key, categories, CATEGORY_LIST_CACHE_TTL)
    return categories


def invalidate_category_cache():
    try:
        cache.delete_many([category_list_key(True), category_list_key(False)])
        logger.info("Invalidated category list cache")
    except Exception as e:
        logger.warning(f"Could not invalidate category cache: {e}")


@receiver(post_save, sender=Category)
@receiver(post_delete, sender=Category)
def category_changed(sender, instance, **kwargs):
    invalidate_category_cache()
