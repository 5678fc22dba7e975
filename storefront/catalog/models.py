from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from django.db.models import Avg, Count
from django.utils.text import slugify


STOCK_STATUS_CHOICES = [
    ('In Stock', 'In Stock'),
    ('Low Stock', 'Low Stock'),
    ('Out of Stock', 'Out of Stock'),
]

DEFAULT_MIN_STOCK = 5


def derive_stock_status(stock, min_stock):
    """Out of Stock at zero or below, Low Stock up to the threshold, else In Stock"""
    threshold = min_stock or DEFAULT_MIN_STOCK
    if (stock or 0) <= 0:
        return 'Out of Stock'
    if stock <= threshold:
        return 'Low Stock'
    return 'In Stock'


class Category(models.Model):
    """Product categories"""
    name = models.CharField(max_length=200, unique=True)
    slug = models.SlugField(max_length=220, unique=True, blank=True)
    parent = models.ForeignKey('self', on_delete=models.SET_NULL, null=True, blank=True, related_name='children')
    description = models.TextField(blank=True)
    image = models.CharField(max_length=500, blank=True)
    display_order = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        self.name = self.name.strip()
        self.slug = slugify(self.name)
        super().save(*args, **kwargs)

    class Meta:
        db_table = 'categories'
        verbose_name_plural = 'categories'
        ordering = ['display_order', 'name']


class Product(models.Model):
    """Product master with scalar stock and per-color stock"""
    FULFILLMENT_TYPE_CHOICES = [
        ('instock', 'In Stock'),
        ('made_to_order', 'Made to Order'),
        ('hybrid', 'Hybrid'),
    ]

    name = models.CharField(max_length=200, db_index=True)
    sku = models.CharField(max_length=100, unique=True)
    category = models.ForeignKey(Category, on_delete=models.PROTECT, related_name='products')
    price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    mrp = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    short_description = models.TextField(blank=True)
    long_description = models.TextField(blank=True)
    features = models.JSONField(default=list, blank=True)
    ideal_for = models.JSONField(default=list, blank=True)
    specifications = models.JSONField(default=list, blank=True)  # [{"label": ..., "value": ...}]
    dimensions = models.JSONField(default=dict, blank=True)
    materials_used = models.JSONField(default=list, blank=True)
    material = models.CharField(max_length=200, blank=True)
    warranty = models.JSONField(default=dict, blank=True)  # {"coverage": [...], "care": [...]}
    images = models.JSONField(default=list, blank=True)
    thumbnail = models.CharField(max_length=500, blank=True)
    tags = models.JSONField(default=list, blank=True)
    average_rating = models.DecimalField(max_digits=3, decimal_places=1, default=Decimal('0.0'))
    review_count = models.IntegerField(default=0)
    seo_title = models.CharField(max_length=255, blank=True)
    seo_description = models.TextField(blank=True)
    seo_keywords = models.JSONField(default=list, blank=True)
    is_available = models.BooleanField(default=True)
    is_deleted = models.BooleanField(default=False, db_index=True)
    is_best_seller = models.BooleanField(default=False)
    is_new_launch = models.BooleanField(default=False)
    is_featured = models.BooleanField(default=False)
    discount_percent = models.IntegerField(default=0)

    # Inventory
    stock = models.IntegerField(default=0)
    min_stock = models.IntegerField(default=DEFAULT_MIN_STOCK)
    stock_status = models.CharField(max_length=20, choices=STOCK_STATUS_CHOICES, default='In Stock', db_index=True)
    allow_backorder = models.BooleanField(default=False)
    fulfillment_type = models.CharField(max_length=20, choices=FULFILLMENT_TYPE_CHOICES, default='instock')
    lead_time_days = models.IntegerField(default=7)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    DERIVED_FIELDS = ('stock', 'stock_status', 'average_rating', 'review_count', 'discount_percent', 'updated_at')

    def __str__(self):
        return f"{self.name} ({self.sku})"

    def audit_identity(self):
        return self.name, self.sku

    def find_color(self, name):
        """Color variant matched by exact name, or None"""
        if not name or not self.pk:
            return None
        return ProductColor.objects.filter(product=self, name=name).first()

    def refresh_derived_fields(self):
        """
        Recompute everything derived from colors, reviews and pricing:
        scalar stock (sum of color stocks when colors exist), stock statuses,
        approved review stats and discount percent.
        """
        colors = list(ProductColor.objects.filter(product=self)) if self.pk else []
        if colors:
            self.stock = sum(color.stock or 0 for color in colors)

        self.stock_status = derive_stock_status(self.stock, self.min_stock)

        for color in colors:
            status = derive_stock_status(color.stock, self.min_stock)
            if color.status != status:
                color.status = status
                color.save(update_fields=['status'])

        if self.pk:
            stats = self.reviews.filter(is_approved=True).aggregate(count=Count('id'), avg=Avg('rating'))
        else:
            stats = {'count': 0, 'avg': None}
        if stats['count']:
            self.review_count = stats['count']
            self.average_rating = Decimal(str(stats['avg'])).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP)
        else:
            self.review_count = 0
            self.average_rating = Decimal('0.0')

        if self.mrp and self.price and self.mrp > self.price:
            ratio = (Decimal(self.mrp) - Decimal(self.price)) / Decimal(self.mrp) * 100
            self.discount_percent = int(ratio.quantize(Decimal('1'), rounding=ROUND_HALF_UP))
        else:
            self.discount_percent = 0

    def save(self, *args, **kwargs):
        self.refresh_derived_fields()
        update_fields = kwargs.get('update_fields')
        if update_fields is not None:
            kwargs['update_fields'] = set(update_fields) | set(self.DERIVED_FIELDS)
        super().save(*args, **kwargs)

    class Meta:
        db_table = 'products'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['is_deleted', '-created_at'], name='idx_product_live_created'),
            models.Index(fields=['category', 'is_deleted'], name='idx_product_category'),
        ]


class ProductColor(models.Model):
    """Color variant with its own stock"""
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='colors')
    name = models.CharField(max_length=100)
    hex = models.CharField(max_length=20, blank=True)
    sku = models.CharField(max_length=100, blank=True)
    stock = models.IntegerField(default=0)
    status = models.CharField(max_length=20, choices=STOCK_STATUS_CHOICES, default='In Stock')
    images = models.JSONField(default=list, blank=True)
    position = models.PositiveIntegerField(default=0)

    def __str__(self):
        return f"{self.product.name} - {self.name}"

    class Meta:
        db_table = 'product_colors'
        ordering = ['position', 'id']


class ProductReview(models.Model):
    """Customer reviews; only approved reviews count toward the rating"""
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='reviews')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='reviews')
    name = models.CharField(max_length=150)
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    comment = models.TextField()
    is_approved = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.product.name} - {self.rating}"

    def audit_identity(self):
        return self.product.name, self.product.sku

    class Meta:
        db_table = 'product_reviews'
        ordering = ['-created_at']
