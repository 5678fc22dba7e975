"""
Stock mutations for the order flow.

Every function here expects to run inside transaction.atomic(). Product rows
are locked in primary-key order, decrements are conditional F() updates so a
concurrent order can never push stock below what was checked, and derived
fields (statuses, scalar stock from colors) are recomputed once at the end.
"""
import logging

from django.db.models import F

from storefront.catalog.models import Product, ProductColor
from .exceptions import InsufficientStock

logger = logging.getLogger(__name__)


def lock_products(product_ids):
    """Lock the given products (ascending pk) and return them keyed by id"""
    ids = sorted({pid for pid in product_ids if pid is not None})
    products = Product.objects.select_for_update().filter(pk__in=ids).order_by('pk')
    return {product.pk: product for product in products}


def tracks_stock(fulfillment_type):
    """Only in-stock lines move inventory; made-to-order and hybrid never do"""
    return (fulfillment_type or 'instock') == 'instock'


def check_available(product, quantity, color_name=None):
    """Read-only availability check used by the validation pass"""
    if product.allow_backorder:
        return
    if product.stock < quantity:
        raise InsufficientStock(f"Insufficient stock for {product.name}. Available: {product.stock}")
    color = product.find_color(color_name)
    if color is not None and color.stock < quantity:
        raise InsufficientStock(
            f"Insufficient stock for {product.name} ({color_name}). Available: {color.stock}"
        )


def take(product, quantity, color_name=None):
    """
    Guarded decrement of product stock and the selected color's stock.

    Raises InsufficientStock when the conditional update matches no row,
    which rolls back the surrounding transaction.
    """
    guard = {} if product.allow_backorder else {'stock__gte': quantity}

    updated = Product.objects.filter(pk=product.pk, **guard).update(stock=F('stock') - quantity)
    if not updated:
        current = Product.objects.filter(pk=product.pk).values_list('stock', flat=True).first()
        raise InsufficientStock(f"Insufficient stock for {product.name}. Available: {current}")

    color = product.find_color(color_name)
    if color is not None:
        updated = ProductColor.objects.filter(pk=color.pk, **guard).update(stock=F('stock') - quantity)
        if not updated:
            color.refresh_from_db(fields=['stock'])
            raise InsufficientStock(
                f"Insufficient stock for {product.name} ({color_name}). Available: {color.stock}"
            )


def give_back(product, quantity, color_name=None):
    """Unconditional increment of product and selected color stock"""
    Product.objects.filter(pk=product.pk).update(stock=F('stock') + quantity)
    color = product.find_color(color_name)
    if color is not None:
        ProductColor.objects.filter(pk=color.pk).update(stock=F('stock') + quantity)


def settle(products):
    """Reload touched products and recompute their derived stock fields"""
    for product in products:
        product.refresh_from_db()
        product.save()


def _apply(lines, mutate):
    """
    Run mutate(product, quantity, color) for each in-stock line.

    lines: iterable of (product_id, quantity, selected_color, fulfillment_type)
    Returns [{'product', 'sku', 'color', 'quantity'}] describing what moved.
    """
    lines = [line for line in lines if tracks_stock(line[3]) and line[0] is not None]
    products = lock_products(line[0] for line in lines)
    moved = []
    touched = {}
    for product_id, quantity, color_name, _ in lines:
        product = products.get(product_id)
        if product is None:
            continue
        mutate(product, quantity, color_name)
        touched[product.pk] = product
        moved.append({
            'product': product.pk,
            'sku': product.sku,
            'color': color_name or None,
            'quantity': quantity,
        })
    settle(touched.values())
    return moved


def reserve(lines):
    """Take stock for every in-stock line, all or nothing"""
    moved = _apply(lines, take)
    if moved:
        logger.info(f"Reserved stock: {moved}")
    return moved


def release(lines):
    """Return stock for every in-stock line"""
    moved = _apply(lines, give_back)
    if moved:
        logger.info(f"Released stock: {moved}")
    return moved


def order_lines(order):
    """Stock lines of a saved order"""
    return [
        (item.product_id, item.quantity, item.selected_color, item.fulfillment_type)
        for item in order.items.all()
    ]
