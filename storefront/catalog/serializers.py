from django.db import transaction
from rest_framework import serializers
from .models import Category, Product, ProductColor, ProductReview
from .utils import (
    absolute_media_url, clean_upload_path, parse_colors, parse_json_field, parse_multi_line
)


class CategorySerializer(serializers.ModelSerializer):
    parentName = serializers.CharField(source='parent.name', read_only=True, default=None)
    displayOrder = serializers.IntegerField(source='display_order', required=False)
    isActive = serializers.BooleanField(source='is_active', required=False)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Category
        fields = ['id', 'name', 'slug', 'parent', 'parentName', 'description', 'image',
                  'displayOrder', 'isActive', 'createdAt']
        read_only_fields = ['slug']

    def validate_image(self, value):
        return clean_upload_path(value)


class ProductColorSerializer(serializers.ModelSerializer):
    class Meta:
        model = ProductColor
        fields = ['id', 'name', 'hex', 'sku', 'stock', 'status', 'images']
        read_only_fields = ['status']


class ProductReviewSerializer(serializers.ModelSerializer):
    isApproved = serializers.BooleanField(source='is_approved', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = ProductReview
        fields = ['id', 'user', 'name', 'rating', 'comment', 'isApproved', 'createdAt']
        read_only_fields = ['user', 'name']


class ProductSerializer(serializers.ModelSerializer):
    """Read/write product payload. Colors accept names, JSON or {name, hex} objects."""
    category = serializers.PrimaryKeyRelatedField(queryset=Category.objects.all())
    shortDescription = serializers.CharField(source='short_description', required=False, allow_blank=True)
    longDescription = serializers.CharField(source='long_description', required=False, allow_blank=True)
    idealFor = serializers.JSONField(source='ideal_for', required=False)
    materialsUsed = serializers.JSONField(source='materials_used', required=False)
    seoTitle = serializers.CharField(source='seo_title', required=False, allow_blank=True)
    seoDescription = serializers.CharField(source='seo_description', required=False, allow_blank=True)
    seoKeywords = serializers.JSONField(source='seo_keywords', required=False)
    isAvailable = serializers.BooleanField(source='is_available', required=False)
    isBestSeller = serializers.BooleanField(source='is_best_seller', required=False)
    isNewLaunch = serializers.BooleanField(source='is_new_launch', required=False)
    isFeatured = serializers.BooleanField(source='is_featured', required=False)
    isDeleted = serializers.BooleanField(source='is_deleted', read_only=True)
    discountPercent = serializers.IntegerField(source='discount_percent', read_only=True)
    averageRating = serializers.DecimalField(source='average_rating', max_digits=3, decimal_places=1, read_only=True)
    reviewCount = serializers.IntegerField(source='review_count', read_only=True)
    minStock = serializers.IntegerField(source='min_stock', required=False)
    stockStatus = serializers.CharField(source='stock_status', read_only=True)
    allowBackorder = serializers.BooleanField(source='allow_backorder', required=False)
    fulfillmentType = serializers.ChoiceField(source='fulfillment_type', choices=Product.FULFILLMENT_TYPE_CHOICES, required=False)
    leadTimeDays = serializers.IntegerField(source='lead_time_days', required=False)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)
    colors = serializers.JSONField(write_only=True, required=False)

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'sku', 'category', 'price', 'mrp',
            'shortDescription', 'longDescription', 'features', 'idealFor', 'specifications',
            'dimensions', 'materialsUsed', 'material', 'warranty', 'images', 'thumbnail', 'tags',
            'seoTitle', 'seoDescription', 'seoKeywords',
            'isAvailable', 'isBestSeller', 'isNewLaunch', 'isFeatured', 'isDeleted',
            'discountPercent', 'averageRating', 'reviewCount',
            'stock', 'minStock', 'stockStatus', 'allowBackorder', 'fulfillmentType', 'leadTimeDays',
            'colors', 'createdAt', 'updatedAt',
        ]

    def validate(self, attrs):
        for field in ('features', 'ideal_for', 'materials_used', 'tags', 'seo_keywords'):
            if field in attrs:
                attrs[field] = parse_multi_line(attrs[field])
        for field in ('specifications', 'dimensions'):
            if field in attrs:
                attrs[field] = parse_json_field(attrs[field])
        if 'warranty' in attrs:
            warranty = parse_json_field(attrs['warranty']) or {}
            if not isinstance(warranty, dict):
                raise serializers.ValidationError({'warranty': 'Expected an object with coverage and care.'})
            for key in ('coverage', 'care'):
                if key in warranty:
                    warranty[key] = parse_multi_line(warranty[key])
            attrs['warranty'] = warranty
        if 'thumbnail' in attrs:
            attrs['thumbnail'] = clean_upload_path(attrs['thumbnail'])
        if 'images' in attrs:
            images = parse_json_field(attrs['images']) or []
            if isinstance(images, str):
                images = [images]
            attrs['images'] = [clean_upload_path(img) for img in images]
        if 'colors' in attrs:
            attrs['colors'] = parse_colors(attrs['colors'])
        return attrs

    @transaction.atomic
    def create(self, validated_data):
        colors = validated_data.pop('colors', [])
        product = Product.objects.create(**validated_data)
        if colors:
            self._sync_colors(product, colors)
            product.save()
        return product

    @transaction.atomic
    def update(self, instance, validated_data):
        colors = validated_data.pop('colors', None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        if colors is not None:
            self._sync_colors(instance, colors)
        instance.save()
        instance._prefetched_objects_cache = {}
        return instance

    def _sync_colors(self, product, colors):
        """Upsert colors by id or name, keeping stock unless the payload sets it"""
        existing = {color.id: color for color in ProductColor.objects.filter(product=product)}
        by_name = {color.name: color for color in existing.values()}
        kept = set()
        for position, data in enumerate(colors):
            color = existing.get(data.get('id')) or by_name.get(data['name'])
            if color is None:
                color = ProductColor(product=product, name=data['name'])
            color.name = data['name']
            color.hex = data.get('hex', color.hex) or ''
            color.sku = data.get('sku', color.sku) or ''
            color.images = [clean_upload_path(img) for img in data.get('images', color.images) or []]
            if data.get('stock') is not None:
                color.stock = int(data['stock'])
            color.position = position
            color.save()
            kept.add(color.id)
        ProductColor.objects.filter(product=product).exclude(id__in=kept).delete()

    def to_representation(self, instance):
        data = super().to_representation(instance)
        request = self.context.get('request')
        category = instance.category
        data['category'] = {
            'id': category.id,
            'name': category.name,
            'slug': category.slug,
            'image': absolute_media_url(category.image, request),
            'description': category.description,
        } if category else None
        data['colors'] = ProductColorSerializer(instance.colors.all(), many=True).data
        data['thumbnail'] = absolute_media_url(instance.thumbnail, request)
        data['images'] = [absolute_media_url(img, request) for img in instance.images or []]
        if self.context.get('include_reviews'):
            approved = [review for review in instance.reviews.all() if review.is_approved]
            data['reviews'] = ProductReviewSerializer(approved, many=True).data
        return data


class ProductSearchSerializer(serializers.ModelSerializer):
    """Compact search suggestion"""
    isBestSeller = serializers.BooleanField(source='is_best_seller')
    isNewLaunch = serializers.BooleanField(source='is_new_launch')
    discountPercent = serializers.IntegerField(source='discount_percent')
    category = serializers.SerializerMethodField()
    image = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = ['id', 'name', 'category', 'price', 'mrp', 'image', 'isBestSeller', 'isNewLaunch', 'discountPercent']

    def get_category(self, obj):
        return obj.category.name if obj.category else 'Uncategorized'

    def get_image(self, obj):
        path = obj.thumbnail or (obj.images[0] if obj.images else '')
        return absolute_media_url(path, self.context.get('request'))
