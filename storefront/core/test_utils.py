"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from storefront.catalog.models import Category, Product, ProductColor
from storefront.content.models import Enquiry, HeroBanner
from storefront.delivery.models import ServiceableArea
from decimal import Decimal
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(email=None, password='testpass123', role='customer', name=None, is_staff=False):
        """Create a test user"""
        if not email:
            email = f'user_{TestDataFactory.random_string(6).lower()}@test.com'
        return User.objects.create_user(
            username=email,
            email=email,
            password=password,
            name=name or 'Test User',
            role=role,
            is_staff=is_staff,
        )

    @staticmethod
    def create_admin(**kwargs):
        return TestDataFactory.create_user(role='superadmin', **kwargs)

    @staticmethod
    def create_editor(**kwargs):
        return TestDataFactory.create_user(role='editor', **kwargs)

    @staticmethod
    def create_category(name=None, parent=None, is_active=True, display_order=0):
        """Create a test category"""
        if not name:
            name = f'Category {TestDataFactory.random_string(6)}'
        return Category.objects.create(
            name=name,
            parent=parent,
            is_active=is_active,
            display_order=display_order,
            description=f'Test category {name}',
        )

    @staticmethod
    def create_product(name=None, sku=None, category=None, stock=10, price=None, mrp=None,
                       fulfillment_type='instock', allow_backorder=False, colors=None, **extra):
        """
        Create a test product.

        colors: optional [(name, stock), ...]; the product stock then becomes their sum
        """
        if not name:
            name = f'Product {TestDataFactory.random_string(6)}'
        if not sku:
            sku = f'SKU-{TestDataFactory.random_string(8).upper()}'
        if not category:
            category = TestDataFactory.create_category()
        product = Product.objects.create(
            name=name,
            sku=sku,
            category=category,
            stock=stock,
            price=Decimal('15000.00') if price is None else Decimal(str(price)),
            mrp=Decimal('20000.00') if mrp is None else Decimal(str(mrp)),
            fulfillment_type=fulfillment_type,
            allow_backorder=allow_backorder,
            **extra
        )
        if colors:
            for position, (color_name, color_stock) in enumerate(colors):
                ProductColor.objects.create(
                    product=product, name=color_name, stock=color_stock, position=position
                )
            product.save()
        return product

    @staticmethod
    def create_area(pincode='380015', city='Ahmedabad', state='Gujarat', is_active=True):
        return ServiceableArea.objects.create(pincode=pincode, city=city, state=state, is_active=is_active)

    @staticmethod
    def create_enquiry(product=None, name='Kiran Desai', phone='9898989898', status='new', **extra):
        return Enquiry.objects.create(
            name=name,
            phone=phone,
            product=product,
            product_name=product.name if product else '',
            status=status,
            **extra
        )

    @staticmethod
    def create_banner(title=None, display_order=0, is_active=True, image='/uploads/banners/hero.jpg'):
        return HeroBanner.objects.create(
            title=title or f'Banner {TestDataFactory.random_string(4)}',
            image=image,
            display_order=display_order,
            is_active=is_active,
        )

    @staticmethod
    def order_payload(items, payment_method='razorpay', total='15000.00'):
        """Checkout body as the storefront sends it"""
        return {
            'user': {'name': 'Asha Patel', 'email': 'asha@test.com', 'phone': '9876543210'},
            'shippingAddress': {
                'address': '12 Lake View Road',
                'city': 'Ahmedabad',
                'state': 'Gujarat',
                'pincode': '380015',
            },
            'items': items,
            'pricing': {
                'subtotal': total,
                'discount': '0.00',
                'gst': '0.00',
                'shippingCharges': '0.00',
                'total': total,
            },
            'payment': {'method': payment_method},
            'agreedToTerms': True,
        }

    @staticmethod
    def order_item(product, quantity=1, selected_color=None, fulfillment_type='instock'):
        item = {
            'product': product.id,
            'name': product.name,
            'price': str(product.price),
            'quantity': quantity,
            'fulfillmentType': fulfillment_type,
        }
        if selected_color:
            item['selectedColor'] = selected_color
        return item


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
