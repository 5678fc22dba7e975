"""
Test suite for the order flow
Tests: stock reservation at checkout, payment-method rules, cancellation and
reactivation, order numbering, admin listing and lookups
"""
import re

from django.test import TestCase, override_settings
from rest_framework import status

from storefront.core.models import AuditLog
from storefront.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from storefront.catalog.models import Product, ProductColor
from storefront.orders.exceptions import InsufficientStock
from storefront.orders.lifecycle import TRANSITIONS, ORDER_STATUSES, RELEASE, RESERVE, transition_effect
from storefront.orders.models import Order, OrderItem, OrderSequence, format_order_number
from storefront.orders import inventory

ORDER_NUMBER = re.compile(r'^DSF\d{2}\d{2}\d{5}$')


def stock_of(product):
    return Product.objects.get(pk=product.pk).stock


def color_stock(product, name):
    return ProductColor.objects.get(product=product, name=name).stock


class TransitionTableTests(TestCase):
    """Every status pair is permitted and carries the right stock effect"""

    def test_table_covers_every_pair(self):
        self.assertEqual(len(TRANSITIONS), len(ORDER_STATUSES) ** 2)

    def test_into_cancelled_releases(self):
        for current in ORDER_STATUSES:
            if current != 'cancelled':
                self.assertEqual(transition_effect(current, 'cancelled'), RELEASE)

    def test_out_of_cancelled_reserves(self):
        for target in ORDER_STATUSES:
            if target != 'cancelled':
                self.assertEqual(transition_effect('cancelled', target), RESERVE)

    def test_other_moves_have_no_effect(self):
        self.assertIsNone(transition_effect('pending', 'shipped'))
        self.assertIsNone(transition_effect('delivered', 'pending'))
        self.assertIsNone(transition_effect('cancelled', 'cancelled'))

    def test_unknown_status(self):
        with self.assertRaises(KeyError):
            transition_effect('pending', 'lost')


class InventoryTests(TestCase):
    """Guarded decrements and releases"""

    def test_take_refuses_to_oversell(self):
        product = TestDataFactory.create_product(stock=2)
        with self.assertRaises(InsufficientStock):
            inventory.take(product, 3)
        self.assertEqual(stock_of(product), 2)

    def test_take_checks_the_database_not_the_loaded_row(self):
        product = TestDataFactory.create_product(stock=2)
        product.stock = 100
        with self.assertRaises(InsufficientStock) as ctx:
            inventory.take(product, 3)
        self.assertIn('Available: 2', ctx.exception.message)
        self.assertEqual(stock_of(product), 2)

    def test_take_checks_current_color_stock(self):
        product = TestDataFactory.create_product(colors=[('Black', 5), ('Walnut', 5)])
        ProductColor.objects.filter(product=product, name='Black').update(stock=1)
        with self.assertRaises(InsufficientStock):
            inventory.take(product, 3, 'Black')
        self.assertEqual(color_stock(product, 'Black'), 1)

    def test_take_allows_backorder(self):
        product = TestDataFactory.create_product(stock=1, allow_backorder=True)
        inventory.take(product, 3)
        self.assertEqual(stock_of(product), -2)

    def test_reserve_catches_repeated_product(self):
        product = TestDataFactory.create_product(stock=5)
        with self.assertRaises(InsufficientStock):
            inventory.reserve([
                (product.pk, 3, None, 'instock'),
                (product.pk, 3, None, 'instock'),
            ])

    def test_made_to_order_lines_are_ignored(self):
        product = TestDataFactory.create_product(stock=0)
        moved = inventory.reserve([(product.pk, 4, None, 'made_to_order')])
        self.assertEqual(moved, [])
        self.assertEqual(stock_of(product), 0)

    def test_release_restores_product_and_color(self):
        product = TestDataFactory.create_product(colors=[('Black', 2), ('Walnut', 3)])
        inventory.release([(product.pk, 4, 'Black', 'instock')])
        self.assertEqual(color_stock(product, 'Black'), 6)
        self.assertEqual(stock_of(product), 9)


class OrderNumberTests(TestCase):

    def setUp(self):
        self.user = TestDataFactory.create_user()

    def make_order(self):
        return Order.objects.create(
            user=self.user, customer_name='A', customer_email='a@test.com', customer_phone='1',
            address='x', city='y', state='z', pincode='380015',
            subtotal=100, gst=0, total=100,
        )

    def test_format(self):
        order = self.make_order()
        self.assertRegex(order.order_number, ORDER_NUMBER)
        self.assertTrue(order.order_number.endswith('00001'))

    def test_numbers_are_sequential_and_unique(self):
        numbers = [self.make_order().order_number for _ in range(5)]
        self.assertEqual(len(set(numbers)), 5)
        self.assertEqual([int(n[-5:]) for n in numbers], [1, 2, 3, 4, 5])

    def test_sequence_seeds_from_existing_orders(self):
        self.make_order()
        self.make_order()
        OrderSequence.objects.all().delete()
        order = self.make_order()
        self.assertTrue(order.order_number.endswith('00003'))

    def test_counter_row_exists_before_first_order(self):
        self.assertTrue(OrderSequence.objects.filter(name='order').exists())

    def test_losing_a_concurrent_seed_keeps_the_transaction_usable(self):
        OrderSequence.objects.filter(name='order').update(value=4)
        OrderSequence.seed('order')
        self.assertEqual(OrderSequence.objects.get(name='order').value, 4)
        order = self.make_order()
        self.assertTrue(order.order_number.endswith('00005'))

    def test_number_survives_deleted_orders(self):
        first = self.make_order()
        first.delete()
        second = self.make_order()
        self.assertNotEqual(first.order_number, second.order_number)

    @override_settings(ORDER_NUMBER_PREFIX='XYZ')
    def test_prefix_setting(self):
        self.assertTrue(format_order_number(42).startswith('XYZ'))
        self.assertTrue(format_order_number(42).endswith('00042'))


class OrderCreateTests(TestCase):
    """POST /api/orders"""

    def setUp(self):
        self.customer = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.customer)

    def place(self, items, payment_method='razorpay'):
        payload = TestDataFactory.order_payload(items, payment_method=payment_method)
        return self.client.post('/api/orders', payload, format='json')

    def test_instock_order_reduces_stock_exactly(self):
        chair = TestDataFactory.create_product(stock=10)
        table = TestDataFactory.create_product(stock=4)
        response = self.place([
            TestDataFactory.order_item(chair, quantity=3),
            TestDataFactory.order_item(table, quantity=4),
        ])
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['success'])
        self.assertRegex(response.data['order']['orderNumber'], ORDER_NUMBER)
        self.assertEqual(stock_of(chair), 7)
        self.assertEqual(stock_of(table), 0)
        self.assertEqual(Product.objects.get(pk=table.pk).stock_status, 'Out of Stock')

        order = Order.objects.get(pk=response.data['order']['id'])
        self.assertEqual(order.user, self.customer)
        self.assertEqual(order.order_status, 'pending')
        self.assertEqual(order.items.count(), 2)

    def test_selected_color_is_decremented(self):
        sofa = TestDataFactory.create_product(colors=[('Black', 4), ('Walnut', 6)])
        response = self.place([TestDataFactory.order_item(sofa, quantity=2, selected_color='Walnut')])
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(color_stock(sofa, 'Walnut'), 4)
        self.assertEqual(color_stock(sofa, 'Black'), 4)
        self.assertEqual(stock_of(sofa), 8)

    def test_color_shortage_rejected(self):
        sofa = TestDataFactory.create_product(colors=[('Black', 1), ('Walnut', 6)])
        response = self.place([TestDataFactory.order_item(sofa, quantity=2, selected_color='Black')])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('(Black)', response.data['message'])
        self.assertEqual(stock_of(sofa), 7)

    def test_unknown_color_is_ignored(self):
        product = TestDataFactory.create_product(stock=5)
        response = self.place([TestDataFactory.order_item(product, quantity=2, selected_color='Pink')])
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(stock_of(product), 3)

    def test_insufficient_stock_changes_nothing(self):
        plenty = TestDataFactory.create_product(stock=10)
        scarce = TestDataFactory.create_product(name='Recliner', stock=1)
        response = self.place([
            TestDataFactory.order_item(plenty, quantity=2),
            TestDataFactory.order_item(scarce, quantity=2),
        ])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Insufficient stock for Recliner. Available: 1')
        self.assertEqual(stock_of(plenty), 10)
        self.assertEqual(stock_of(scarce), 1)
        self.assertEqual(Order.objects.count(), 0)

    def test_repeated_product_cannot_oversell(self):
        product = TestDataFactory.create_product(stock=5)
        response = self.place([
            TestDataFactory.order_item(product, quantity=3),
            TestDataFactory.order_item(product, quantity=3),
        ])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(stock_of(product), 5)
        self.assertEqual(Order.objects.count(), 0)

    def test_backorder_allows_negative_stock(self):
        product = TestDataFactory.create_product(stock=1, allow_backorder=True)
        response = self.place([TestDataFactory.order_item(product, quantity=3)])
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(stock_of(product), -2)

    def test_cod_with_made_to_order_rejected(self):
        stocked = TestDataFactory.create_product(stock=10)
        custom = TestDataFactory.create_product(stock=0, fulfillment_type='made_to_order')
        response = self.place([
            TestDataFactory.order_item(stocked, quantity=1),
            TestDataFactory.order_item(custom, quantity=1, fulfillment_type='made_to_order'),
        ], payment_method='cod')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('Cash on Delivery is not available', response.data['message'])
        self.assertEqual(stock_of(stocked), 10)
        self.assertEqual(Order.objects.count(), 0)

    def test_made_to_order_paid_online_skips_stock(self):
        custom = TestDataFactory.create_product(stock=0, fulfillment_type='made_to_order')
        response = self.place([TestDataFactory.order_item(custom, quantity=2, fulfillment_type='made_to_order')])
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(stock_of(custom), 0)

    def test_missing_product_is_404(self):
        product = TestDataFactory.create_product(stock=5)
        item = TestDataFactory.order_item(product)
        item['product'] = 99999
        item['name'] = 'Ghost Chair'
        response = self.place([item])
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Product Ghost Chair not found')

    def test_soft_deleted_product_is_404(self):
        product = TestDataFactory.create_product(stock=5, is_deleted=True)
        response = self.place([TestDataFactory.order_item(product)])
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_requires_authentication(self):
        product = TestDataFactory.create_product(stock=5)
        self.client.logout()
        response = self.place([TestDataFactory.order_item(product)])
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])
        self.assertEqual(stock_of(product), 5)

    def test_invalid_payload(self):
        product = TestDataFactory.create_product(stock=5)
        response = self.place([TestDataFactory.order_item(product, quantity=0)])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('items', response.data)

    def test_empty_items(self):
        response = self.place([])
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_snapshot_defaults_from_product(self):
        product = TestDataFactory.create_product(stock=5, lead_time_days=14)
        response = self.place([{'product': product.id, 'quantity': 1}])
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        item = OrderItem.objects.get(order_id=response.data['order']['id'])
        self.assertEqual(item.name, product.name)
        self.assertEqual(item.price, product.price)
        self.assertEqual(item.lead_time_days, 14)
        self.assertEqual(item.fulfillment_type, 'instock')

    def test_audit_logged(self):
        product = TestDataFactory.create_product(stock=5)
        response = self.place([TestDataFactory.order_item(product, quantity=1)])
        number = response.data['order']['orderNumber']
        self.assertTrue(AuditLog.objects.filter(action='order_create', object_reference=number).exists())
        self.assertTrue(AuditLog.objects.filter(action='stock_sale', object_reference=number).exists())


class OrderStatusTests(TestCase):
    """PUT /api/orders/:id/status"""

    def setUp(self):
        self.customer = TestDataFactory.create_user()
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()

    def place(self, items, payment_method='razorpay'):
        self.client.authenticate_user(self.customer)
        payload = TestDataFactory.order_payload(items, payment_method=payment_method)
        response = self.client.post('/api/orders', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.client.authenticate_user(self.admin)
        return response.data['order']['id']

    def set_status(self, order_id, order_status, **extra):
        return self.client.put(f'/api/orders/{order_id}/status', {'orderStatus': order_status, **extra}, format='json')

    def test_cancel_uncancel_round_trip(self):
        product = TestDataFactory.create_product(stock=10)
        order_id = self.place([TestDataFactory.order_item(product, quantity=3)])
        self.assertEqual(stock_of(product), 7)

        response = self.set_status(order_id, 'cancelled')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['message'], 'Order status updated')
        self.assertEqual(response.data['order']['orderStatus'], 'cancelled')
        self.assertEqual(stock_of(product), 10)

        response = self.set_status(order_id, 'processing')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(stock_of(product), 7)

    def test_cancel_restores_color_stock(self):
        sofa = TestDataFactory.create_product(colors=[('Black', 4), ('Walnut', 6)])
        order_id = self.place([TestDataFactory.order_item(sofa, quantity=2, selected_color='Black')])
        self.set_status(order_id, 'cancelled')
        self.assertEqual(color_stock(sofa, 'Black'), 4)
        self.assertEqual(stock_of(sofa), 10)

    def test_cancel_twice_restores_once(self):
        product = TestDataFactory.create_product(stock=10)
        order_id = self.place([TestDataFactory.order_item(product, quantity=3)])
        self.set_status(order_id, 'cancelled')
        self.set_status(order_id, 'cancelled')
        self.assertEqual(stock_of(product), 10)

    def test_non_cancel_moves_leave_stock(self):
        product = TestDataFactory.create_product(stock=10)
        order_id = self.place([TestDataFactory.order_item(product, quantity=3)])
        for order_status in ['processing', 'confirmed', 'packed', 'shipped', 'delivered', 'pending']:
            response = self.set_status(order_id, order_status)
            self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(stock_of(product), 7)

    def test_made_to_order_never_restocked(self):
        custom = TestDataFactory.create_product(stock=0, fulfillment_type='made_to_order')
        order_id = self.place([TestDataFactory.order_item(custom, quantity=2, fulfillment_type='made_to_order')])
        self.set_status(order_id, 'cancelled')
        self.assertEqual(stock_of(custom), 0)
        self.set_status(order_id, 'pending')
        self.assertEqual(stock_of(custom), 0)

    def test_uncancel_without_stock_is_refused(self):
        product = TestDataFactory.create_product(stock=3)
        order_id = self.place([TestDataFactory.order_item(product, quantity=3)])
        self.set_status(order_id, 'cancelled')
        Product.objects.filter(pk=product.pk).update(stock=1)

        response = self.set_status(order_id, 'processing')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Order.objects.get(pk=order_id).order_status, 'cancelled')
        self.assertEqual(stock_of(product), 1)

    def test_notes_are_saved(self):
        product = TestDataFactory.create_product(stock=10)
        order_id = self.place([TestDataFactory.order_item(product)])
        self.set_status(order_id, 'shipped', notes='Dispatched via BlueDart')
        self.assertEqual(Order.objects.get(pk=order_id).notes, 'Dispatched via BlueDart')

    def test_invalid_status(self):
        product = TestDataFactory.create_product(stock=10)
        order_id = self.place([TestDataFactory.order_item(product)])
        response = self.set_status(order_id, 'lost')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_order(self):
        self.client.authenticate_user(self.admin)
        response = self.set_status(99999, 'cancelled')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_requires_admin(self):
        product = TestDataFactory.create_product(stock=10)
        order_id = self.place([TestDataFactory.order_item(product)])
        self.client.authenticate_user(self.customer)
        response = self.set_status(order_id, 'cancelled')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(stock_of(product), 9)

    def test_transition_audit_records_effect(self):
        product = TestDataFactory.create_product(stock=10)
        order_id = self.place([TestDataFactory.order_item(product)])
        self.set_status(order_id, 'cancelled')
        log = AuditLog.objects.filter(action='order_status', object_id=str(order_id)).first()
        self.assertEqual(log.changes, {'from': 'pending', 'to': 'cancelled', 'effect': 'release'})
        self.assertTrue(AuditLog.objects.filter(action='stock_release', object_id=str(order_id)).exists())


class OrderReadTests(TestCase):
    """Admin listing, public lookup and soft delete"""

    def setUp(self):
        self.customer = TestDataFactory.create_user()
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.product = TestDataFactory.create_product(stock=100)

    def place(self, payment_method='razorpay'):
        self.client.authenticate_user(self.customer)
        payload = TestDataFactory.order_payload([TestDataFactory.order_item(self.product)], payment_method=payment_method)
        response = self.client.post('/api/orders', payload, format='json')
        return Order.objects.get(pk=response.data['order']['id'])

    def test_list_requires_admin(self):
        self.client.authenticate_user(self.customer)
        self.assertEqual(self.client.get('/api/orders').status_code, status.HTTP_403_FORBIDDEN)
        self.client.logout()
        self.assertEqual(self.client.get('/api/orders').status_code, status.HTTP_401_UNAUTHORIZED)

    def test_list_paginates_newest_first(self):
        orders = [self.place() for _ in range(3)]
        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/orders', {'limit': 2})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total'], 3)
        self.assertEqual(response.data['totalPages'], 2)
        self.assertEqual(response.data['currentPage'], 1)
        self.assertEqual([o['id'] for o in response.data['orders']], [orders[2].id, orders[1].id])

        response = self.client.get('/api/orders', {'limit': 2, 'page': 5})
        self.assertEqual(response.data['orders'], [])

    def test_list_filters(self):
        first = self.place()
        second = self.place(payment_method='cod')
        Order.objects.filter(pk=second.pk).update(payment_status='paid', order_status='shipped')
        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/orders', {'status': 'shipped'})
        self.assertEqual([o['id'] for o in response.data['orders']], [second.id])
        response = self.client.get('/api/orders', {'paymentStatus': 'pending'})
        self.assertEqual([o['id'] for o in response.data['orders']], [first.id])

    def test_list_excludes_deleted(self):
        self.place()
        deleted = self.place()
        Order.objects.filter(pk=deleted.pk).update(is_deleted=True)
        self.client.authenticate_user(self.admin)
        response = self.client.get('/api/orders')
        self.assertEqual(response.data['total'], 1)

    def test_lookup_by_id_and_number_is_public(self):
        order = self.place()
        self.client.logout()
        by_id = self.client.get(f'/api/orders/{order.id}')
        by_number = self.client.get(f'/api/orders/{order.order_number}')
        self.assertEqual(by_id.status_code, status.HTTP_200_OK)
        self.assertEqual(by_number.status_code, status.HTTP_200_OK)
        self.assertEqual(by_id.data['orderNumber'], order.order_number)
        self.assertEqual(by_number.data['id'], order.id)
        self.assertEqual(by_number.data['shippingAddress']['pincode'], '380015')
        self.assertEqual(by_number.data['payment']['method'], 'razorpay')
        self.assertEqual(len(by_number.data['items']), 1)

    def test_lookup_unknown(self):
        self.assertEqual(self.client.get('/api/orders/DSF000000000').status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(self.client.get('/api/orders/not-an-id').status_code, status.HTTP_404_NOT_FOUND)

    def test_soft_delete(self):
        order = self.place()
        self.client.authenticate_user(self.admin)
        response = self.client.delete(f'/api/orders/{order.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(Order.objects.get(pk=order.pk).is_deleted)
        self.assertEqual(self.client.get(f'/api/orders/{order.order_number}').status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(stock_of(self.product), 99)

    def test_delete_requires_admin(self):
        order = self.place()
        response = self.client.delete(f'/api/orders/{order.id}')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class StockScenarioTests(TestCase):
    """Stock 10, order 3, cancel, reactivate"""

    def test_scenario(self):
        customer = TestDataFactory.create_user()
        admin = TestDataFactory.create_admin()
        product = TestDataFactory.create_product(stock=10)
        client = AuthenticatedAPIClient()

        client.authenticate_user(customer)
        payload = TestDataFactory.order_payload([TestDataFactory.order_item(product, quantity=3)])
        response = client.post('/api/orders', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        order_id = response.data['order']['id']
        self.assertEqual(stock_of(product), 7)
        self.assertEqual(Order.objects.get(pk=order_id).order_status, 'pending')

        client.authenticate_user(admin)
        client.put(f'/api/orders/{order_id}/status', {'orderStatus': 'cancelled'}, format='json')
        self.assertEqual(stock_of(product), 10)

        client.put(f'/api/orders/{order_id}/status', {'orderStatus': 'processing'}, format='json')
        self.assertEqual(stock_of(product), 7)
