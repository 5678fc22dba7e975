"""
Order flow: intake, status changes and soft delete.

Intake validates every line first (product exists, payment method allows the
fulfillment type, stock is available), then reserves stock and writes the
order, all inside one transaction. Any failure leaves stock and orders untouched.
"""
import logging

from django.db import transaction

from storefront.core.utils import record_audit
from . import inventory
from .exceptions import OrderNotFound, PaymentMethodNotAllowed, ProductNotFound
from .lifecycle import RELEASE, RESERVE, transition_effect
from .models import Order, OrderItem

logger = logging.getLogger(__name__)


def validate_items(items, payment_method, products):
    """Validation pass over all lines; raises on the first failing line"""
    for item in items:
        product = products.get(item['product'])
        label = item.get('name') or item['product']
        if product is None or product.is_deleted:
            raise ProductNotFound(f"Product {label} not found")

        fulfillment_type = item.get('fulfillment_type') or 'instock'
        if payment_method == 'cod' and fulfillment_type == 'made_to_order':
            raise PaymentMethodNotAllowed(
                f"Cash on Delivery is not available for Made to Order items ({item.get('name') or product.name}). "
                "Online payment required."
            )

        if inventory.tracks_stock(fulfillment_type):
            inventory.check_available(product, item['quantity'], item.get('selected_color'))


def build_items(order, items, products):
    """Line items with the product snapshot filled in where the checkout left it out"""
    line_items = []
    for item in items:
        product = products[item['product']]
        line_items.append(OrderItem(
            order=order,
            product=product,
            name=item.get('name') or product.name,
            image=item.get('image') or product.thumbnail or (product.images[0] if product.images else ''),
            price=item['price'] if item.get('price') is not None else product.price,
            mrp=item['mrp'] if item.get('mrp') is not None else product.mrp,
            quantity=item['quantity'],
            selected_color=item.get('selected_color') or '',
            fulfillment_type=item.get('fulfillment_type') or 'instock',
            lead_time_days=item['lead_time_days'] if item.get('lead_time_days') is not None else product.lead_time_days,
        ))
    return line_items


def place_order(data, user, request=None):
    """
    Create an order from validated checkout data for the given user.

    Returns the saved Order. Raises ProductNotFound, PaymentMethodNotAllowed
    or InsufficientStock without changing anything.
    """
    items = data['items']
    contact = data['user']
    address = data['shipping_address']
    pricing = data['pricing']
    payment_method = data.get('payment', {}).get('method') or 'razorpay'

    with transaction.atomic():
        products = inventory.lock_products(item['product'] for item in items)
        validate_items(items, payment_method, products)

        moved = inventory.reserve(
            (item['product'], item['quantity'], item.get('selected_color'), item.get('fulfillment_type'))
            for item in items
        )

        order = Order(
            user=user,
            customer_name=contact['name'],
            customer_email=contact['email'],
            customer_phone=contact['phone'],
            address=address['address'],
            city=address['city'],
            state=address['state'],
            pincode=address['pincode'],
            landmark=address.get('landmark') or '',
            subtotal=pricing['subtotal'],
            discount=pricing.get('discount') or 0,
            gst=pricing['gst'],
            shipping_charges=pricing.get('shipping_charges') or 0,
            total=pricing['total'],
            payment_method=payment_method,
            notes=data.get('notes') or '',
            agreed_to_terms=data.get('agreed_to_terms', False),
        )
        order.save()
        OrderItem.objects.bulk_create(build_items(order, items, products))

    logger.info(f"Order {order.order_number} created for user {user.pk} ({len(items)} items, total {order.total})")
    record_audit('order_create', order, request, user=user, changes={
        'total': str(order.total), 'payment_method': payment_method, 'items': len(items)
    })
    if moved:
        record_audit('stock_sale', order, request, user=user, changes={'moved': moved})
    return order


def get_live_order(order_id, lock=False):
    queryset = Order.objects.filter(pk=order_id, is_deleted=False)
    if lock:
        queryset = queryset.select_for_update()
    order = queryset.first()
    if order is None:
        raise OrderNotFound()
    return order


def change_status(order_id, target, notes=None, request=None):
    """
    Move an order to a new status, applying the transition's stock effect.

    Un-cancelling re-reserves stock with the same guard as intake; when that
    fails the status stays as it was and InsufficientStock propagates.
    """
    with transaction.atomic():
        order = get_live_order(order_id, lock=True)
        previous = order.order_status
        effect = transition_effect(previous, target)

        moved = []
        if effect == RELEASE:
            moved = inventory.release(inventory.order_lines(order))
        elif effect == RESERVE:
            moved = inventory.reserve(inventory.order_lines(order))

        order.order_status = target
        update_fields = ['order_status', 'updated_at']
        if notes:
            order.notes = notes
            update_fields.append('notes')
        order.save(update_fields=update_fields)

    logger.info(f"Order {order.order_number} status {previous} -> {target} (effect: {effect or 'none'})")
    record_audit('order_status', order, request, changes={'from': previous, 'to': target, 'effect': effect})
    if moved:
        record_audit('stock_release' if effect == RELEASE else 'stock_reserve', order, request, changes={'moved': moved})
    return order


def soft_delete(order_id, request=None):
    """Hide an order from listings and lookups; stock is left as it is"""
    order = get_live_order(order_id)
    order.is_deleted = True
    order.save(update_fields=['is_deleted', 'updated_at'])
    logger.info(f"Order {order.order_number} soft deleted")
    record_audit('order_delete', order, request)
    return order
