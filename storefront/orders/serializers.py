from rest_framework import serializers
from storefront.catalog.utils import absolute_media_url
from .models import (
    Order, OrderItem, ORDER_STATUS_CHOICES, PAYMENT_METHOD_CHOICES, ITEM_FULFILLMENT_CHOICES
)


# Checkout input
class ContactSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    phone = serializers.CharField(max_length=20)


class ShippingAddressSerializer(serializers.Serializer):
    address = serializers.CharField()
    city = serializers.CharField(max_length=100)
    state = serializers.CharField(max_length=100)
    pincode = serializers.CharField(max_length=10)
    landmark = serializers.CharField(max_length=200, required=False, allow_blank=True)


class PricingSerializer(serializers.Serializer):
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2)
    discount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, default=0)
    gst = serializers.DecimalField(max_digits=12, decimal_places=2)
    shippingCharges = serializers.DecimalField(
        source='shipping_charges', max_digits=12, decimal_places=2, required=False, default=0
    )
    total = serializers.DecimalField(max_digits=12, decimal_places=2)


class PaymentInputSerializer(serializers.Serializer):
    method = serializers.ChoiceField(choices=PAYMENT_METHOD_CHOICES, default='razorpay')


class OrderItemInputSerializer(serializers.Serializer):
    product = serializers.IntegerField()
    name = serializers.CharField(max_length=200, required=False, allow_blank=True)
    image = serializers.CharField(max_length=500, required=False, allow_blank=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    mrp = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    quantity = serializers.IntegerField(min_value=1)
    selectedColor = serializers.CharField(source='selected_color', max_length=100, required=False, allow_blank=True, allow_null=True)
    fulfillmentType = serializers.ChoiceField(
        source='fulfillment_type', choices=ITEM_FULFILLMENT_CHOICES, required=False, default='instock'
    )
    leadTimeDays = serializers.IntegerField(source='lead_time_days', required=False, allow_null=True)


class OrderCreateSerializer(serializers.Serializer):
    """Checkout payload; prices are taken as submitted"""
    user = ContactSerializer()
    shippingAddress = ShippingAddressSerializer(source='shipping_address')
    items = OrderItemInputSerializer(many=True, allow_empty=False)
    pricing = PricingSerializer()
    payment = PaymentInputSerializer(required=False)
    notes = serializers.CharField(required=False, allow_blank=True)
    agreedToTerms = serializers.BooleanField(source='agreed_to_terms', required=False, default=False)


class OrderStatusSerializer(serializers.Serializer):
    orderStatus = serializers.ChoiceField(source='order_status', choices=ORDER_STATUS_CHOICES)
    notes = serializers.CharField(required=False, allow_blank=True)


# Output
class OrderItemSerializer(serializers.ModelSerializer):
    selectedColor = serializers.CharField(source='selected_color')
    fulfillmentType = serializers.CharField(source='fulfillment_type')
    leadTimeDays = serializers.IntegerField(source='lead_time_days')

    class Meta:
        model = OrderItem
        fields = ['id', 'product', 'name', 'image', 'price', 'mrp', 'quantity',
                  'selectedColor', 'fulfillmentType', 'leadTimeDays']

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data['image'] = absolute_media_url(instance.image, self.context.get('request'))
        return data


class OrderSerializer(serializers.ModelSerializer):
    """Order in the nested shape the storefront and admin screens read"""
    orderNumber = serializers.CharField(source='order_number', read_only=True)
    userId = serializers.IntegerField(source='user_id', read_only=True)
    user = serializers.SerializerMethodField()
    shippingAddress = serializers.SerializerMethodField()
    pricing = serializers.SerializerMethodField()
    payment = serializers.SerializerMethodField()
    items = OrderItemSerializer(many=True, read_only=True)
    orderStatus = serializers.CharField(source='order_status', read_only=True)
    agreedToTerms = serializers.BooleanField(source='agreed_to_terms', read_only=True)
    isDeleted = serializers.BooleanField(source='is_deleted', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Order
        fields = ['id', 'orderNumber', 'userId', 'user', 'shippingAddress', 'items', 'pricing',
                  'payment', 'orderStatus', 'notes', 'agreedToTerms', 'isDeleted', 'createdAt', 'updatedAt']

    def get_user(self, obj):
        return {'name': obj.customer_name, 'email': obj.customer_email, 'phone': obj.customer_phone}

    def get_shippingAddress(self, obj):
        return {
            'address': obj.address,
            'city': obj.city,
            'state': obj.state,
            'pincode': obj.pincode,
            'landmark': obj.landmark,
        }

    def get_pricing(self, obj):
        return {
            'subtotal': obj.subtotal,
            'discount': obj.discount,
            'gst': obj.gst,
            'shippingCharges': obj.shipping_charges,
            'total': obj.total,
        }

    def get_payment(self, obj):
        return {
            'method': obj.payment_method,
            'status': obj.payment_status,
            'razorpayOrderId': obj.razorpay_order_id,
            'razorpayPaymentId': obj.razorpay_payment_id,
            'paidAt': obj.paid_at,
        }
