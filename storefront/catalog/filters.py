import django_filters
from django.db.models import Q
from .models import Category, Product


FLAG_TAGS = {
    'Best Seller': 'is_best_seller',
    'New Launch': 'is_new_launch',
    'Featured': 'is_featured',
}

SORT_ORDERINGS = {
    'price_asc': ('price',),
    'price_desc': ('-price',),
    'discount_desc': ('-discount_percent',),
    'rating_desc': ('-average_rating',),
    'name_asc': ('name',),
    'name_desc': ('-name',),
    'latest': ('-created_at',),
    'bestseller': ('-is_best_seller', '-created_at'),
}
DEFAULT_ORDERING = ('-created_at',)


def split_csv(value):
    return [part.strip() for part in (value or '').split(',') if part.strip()]


class ProductFilter(django_filters.FilterSet):
    """
    Storefront listing filters. Query parameter names follow the frontend:

    categorySlug, priceMin, priceMax, discountMin, ratingMin,
    colors, materials, tags (comma lists), search and sort.
    """
    categorySlug = django_filters.CharFilter(method='filter_category_slug')
    priceMin = django_filters.NumberFilter(field_name='price', lookup_expr='gte')
    priceMax = django_filters.NumberFilter(field_name='price', lookup_expr='lte')
    discountMin = django_filters.NumberFilter(field_name='discount_percent', lookup_expr='gte')
    ratingMin = django_filters.NumberFilter(field_name='average_rating', lookup_expr='gte')
    colors = django_filters.CharFilter(method='filter_colors')
    materials = django_filters.CharFilter(method='filter_materials')
    tags = django_filters.CharFilter(method='filter_tags')
    search = django_filters.CharFilter(method='filter_search')
    sort = django_filters.CharFilter(method='filter_sort')

    class Meta:
        model = Product
        fields = []

    def filter_category_slug(self, queryset, name, value):
        """Category and its direct children; unknown slug matches nothing"""
        category = Category.objects.filter(slug=value).first()
        if not category:
            return queryset.none()
        category_ids = [category.id] + list(category.children.values_list('id', flat=True))
        return queryset.filter(category_id__in=category_ids)

    def filter_colors(self, queryset, name, value):
        query = Q()
        for color in split_csv(value):
            query |= Q(colors__name__icontains=color)
        return queryset.filter(query).distinct() if query else queryset

    def filter_materials(self, queryset, name, value):
        query = Q()
        for material in split_csv(value):
            query |= Q(materials_used__icontains=material)
        return queryset.filter(query) if query else queryset

    def filter_tags(self, queryset, name, value):
        """Marketing tags map to flags; anything else must be in the tags list"""
        query = Q()
        for tag in split_csv(value):
            if tag in FLAG_TAGS:
                query |= Q(**{FLAG_TAGS[tag]: True})
            else:
                query |= Q(tags__icontains=f'"{tag}"')
        return queryset.filter(query) if query else queryset

    def filter_search(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(name__icontains=value) |
            Q(short_description__icontains=value) |
            Q(long_description__icontains=value) |
            Q(tags__icontains=value) |
            Q(features__icontains=value) |
            Q(materials_used__icontains=value) |
            Q(colors__name__icontains=value)
        ).distinct()

    def filter_sort(self, queryset, name, value):
        return queryset.order_by(*SORT_ORDERINGS.get(value, DEFAULT_ORDERING))
