from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import IntegrityError, models, transaction
from django.db.models import F
from django.utils import timezone
import logging

logger = logging.getLogger(__name__)


ORDER_STATUS_CHOICES = [
    ('pending', 'Pending'),
    ('processing', 'Processing'),
    ('confirmed', 'Confirmed'),
    ('packed', 'Packed'),
    ('shipped', 'Shipped'),
    ('delivered', 'Delivered'),
    ('cancelled', 'Cancelled'),
]

PAYMENT_METHOD_CHOICES = [
    ('razorpay', 'Online (Razorpay)'),
    ('cod', 'Cash on Delivery'),
]

PAYMENT_STATUS_CHOICES = [
    ('pending', 'Pending'),
    ('paid', 'Paid'),
    ('failed', 'Failed'),
    ('refunded', 'Refunded'),
]

ITEM_FULFILLMENT_CHOICES = [
    ('instock', 'In Stock'),
    ('made_to_order', 'Made to Order'),
]


class OrderSequence(models.Model):
    """Counter behind order numbers, bumped with an F() update that holds the row lock"""
    name = models.CharField(max_length=50, unique=True)
    value = models.PositiveIntegerField(default=0)

    def __str__(self):
        return f"{self.name}: {self.value}"

    @classmethod
    def seed(cls, name='order'):
        """Create the counter from the current order count; losing a concurrent insert is fine"""
        try:
            with transaction.atomic():
                cls.objects.create(name=name, value=Order.objects.count())
        except IntegrityError:
            logger.info(f"Sequence '{name}' was seeded concurrently")

    @classmethod
    def next_value(cls, name='order'):
        """Increment and return the counter. Must run inside a transaction."""
        if not cls.objects.filter(name=name).update(value=F('value') + 1):
            cls.seed(name)
            cls.objects.filter(name=name).update(value=F('value') + 1)
        return cls.objects.values_list('value', flat=True).get(name=name)

    class Meta:
        db_table = 'order_sequences'


def format_order_number(sequence, when=None):
    """DSF + two-digit year + two-digit month + five-digit sequence"""
    when = timezone.localtime(when) if when else timezone.localtime()
    return f"{settings.ORDER_NUMBER_PREFIX}{when:%y%m}{sequence:05d}"


class Order(models.Model):
    """Customer order with contact, address, pricing and payment snapshots"""
    order_number = models.CharField(max_length=50, unique=True, blank=True)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='orders')

    # Contact snapshot
    customer_name = models.CharField(max_length=150)
    customer_email = models.EmailField()
    customer_phone = models.CharField(max_length=20)

    # Shipping address
    address = models.TextField()
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    pincode = models.CharField(max_length=10)
    landmark = models.CharField(max_length=200, blank=True)

    # Pricing, as submitted by the checkout
    subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    gst = models.DecimalField(max_digits=12, decimal_places=2)
    shipping_charges = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total = models.DecimalField(max_digits=12, decimal_places=2)

    # Payment
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, default='razorpay')
    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, default='pending', db_index=True)
    razorpay_order_id = models.CharField(max_length=100, blank=True)
    razorpay_payment_id = models.CharField(max_length=100, blank=True)
    razorpay_signature = models.CharField(max_length=255, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)

    order_status = models.CharField(max_length=20, choices=ORDER_STATUS_CHOICES, default='pending', db_index=True)
    notes = models.TextField(blank=True)
    agreed_to_terms = models.BooleanField(default=False)
    is_deleted = models.BooleanField(default=False, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.order_number or f"Order-{self.id}"

    def audit_identity(self):
        return self.customer_name, self.order_number

    def save(self, *args, **kwargs):
        if not self.order_number:
            with transaction.atomic():
                self.order_number = format_order_number(OrderSequence.next_value())
                super().save(*args, **kwargs)
            return
        super().save(*args, **kwargs)

    class Meta:
        db_table = 'orders'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['is_deleted', '-created_at'], name='idx_order_live_created'),
        ]


class OrderItem(models.Model):
    """Line item with a snapshot of the product as sold"""
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey('catalog.Product', on_delete=models.SET_NULL, null=True, related_name='order_items')
    name = models.CharField(max_length=200, blank=True)
    image = models.CharField(max_length=500, blank=True)
    price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    mrp = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    selected_color = models.CharField(max_length=100, blank=True)
    fulfillment_type = models.CharField(max_length=20, choices=ITEM_FULFILLMENT_CHOICES, default='instock')
    lead_time_days = models.IntegerField(null=True, blank=True)

    def __str__(self):
        return f"{self.name} x {self.quantity}"

    class Meta:
        db_table = 'order_items'
        ordering = ['id']
