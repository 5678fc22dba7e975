from django.db import models


ENQUIRY_STATUS_CHOICES = [
    ('new', 'New'),
    ('contacted', 'Contacted'),
    ('closed', 'Closed'),
]

TRANSITION_EFFECT_CHOICES = [
    ('fade', 'Fade'),
    ('slide-left', 'Slide left'),
    ('slide-right', 'Slide right'),
    ('zoom-in', 'Zoom in'),
]

IMAGE_EFFECT_CHOICES = [
    ('none', 'None'),
    ('zoom-in', 'Zoom in'),
    ('zoom-out', 'Zoom out'),
    ('subtle-pan', 'Subtle pan'),
]


class Enquiry(models.Model):
    """Customer interest in a product, sent from the product page"""
    name = models.CharField(max_length=255)
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=20)
    city = models.CharField(max_length=100, blank=True)
    product = models.ForeignKey(
        'catalog.Product', on_delete=models.SET_NULL, null=True, blank=True, related_name='enquiries'
    )
    product_name = models.CharField(max_length=255, blank=True)
    selected_color = models.CharField(max_length=100, blank=True)
    quantity = models.PositiveIntegerField(default=1)
    message = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=ENQUIRY_STATUS_CHOICES, default='new')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.name} - {self.product_name or 'General'}"

    class Meta:
        db_table = 'enquiries'
        ordering = ['-created_at', '-id']
        verbose_name_plural = 'enquiries'


class HeroBanner(models.Model):
    """Home page carousel slide"""
    title = models.CharField(max_length=255, blank=True, default='')
    subtitle = models.CharField(max_length=500, blank=True, default='')
    image = models.CharField(max_length=500)
    button_text = models.CharField(max_length=100, default='Browse Products')
    button_link = models.CharField(max_length=255, default='/products')
    display_order = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)
    hotspots = models.JSONField(default=list, blank=True)  # [{"x", "y", "label", "productId", "productUrl"}]
    transition_effect = models.CharField(max_length=20, choices=TRANSITION_EFFECT_CHOICES, default='fade')
    image_effect = models.CharField(max_length=20, choices=IMAGE_EFFECT_CHOICES, default='none')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.title or f"Banner {self.pk}"

    class Meta:
        db_table = 'hero_banners'
        ordering = ['display_order', 'id']
