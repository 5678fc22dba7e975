from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from django.conf import settings
from django.core.paginator import Paginator, EmptyPage
import logging

from storefront.core.permissions import IsAdmin, IsAdminOrReadOnly
from .exceptions import OrderError, OrderNotFound
from .models import Order
from .serializers import OrderCreateSerializer, OrderSerializer, OrderStatusSerializer
from . import services

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20


def _positive_int(value, default):
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


@api_view(['GET', 'POST'])
@permission_classes([AllowAny])
def order_list_create(request):
    # Pass the underlying Django request so each handler applies its own permissions
    if request.method == 'GET':
        return order_list(request._request)
    return order_create(request._request)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdmin])
def order_list(request):
    """List live orders newest first, filtered by status and paymentStatus"""
    queryset = Order.objects.filter(is_deleted=False).prefetch_related('items')

    status_filter = request.query_params.get('status', None)
    if status_filter:
        queryset = queryset.filter(order_status=status_filter)

    payment_status = request.query_params.get('paymentStatus', None)
    if payment_status:
        queryset = queryset.filter(payment_status=payment_status)

    queryset = queryset.order_by('-created_at', '-id')

    page = _positive_int(request.query_params.get('page'), 1)
    limit = _positive_int(request.query_params.get('limit'), DEFAULT_PAGE_SIZE)
    paginator = Paginator(queryset, limit)
    try:
        orders = paginator.page(page).object_list
    except EmptyPage:
        orders = []

    total = paginator.count
    return Response({
        'orders': OrderSerializer(orders, many=True, context={'request': request}).data,
        'totalPages': paginator.num_pages if total else 0,
        'currentPage': page,
        'total': total,
    })


@api_view(['POST'])
@permission_classes([AllowAny])
def order_create(request):
    """Place an order for the signed-in customer"""
    if not request.user or not request.user.is_authenticated:
        return Response({
            'success': False,
            'message': 'Authentication required. Please log in to place an order.'
        }, status=status.HTTP_401_UNAUTHORIZED)

    serializer = OrderCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        order = services.place_order(serializer.validated_data, request.user, request=request)
    except OrderError as e:
        logger.info(f"Order rejected for user {request.user.pk}: {e.message}")
        return Response({'message': e.message}, status=e.status_code)
    except Exception as e:
        logger.exception("Create order failed")
        return Response({'message': 'Failed to create order', 'error': str(e)},
                        status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response({
        'success': True,
        'order': {
            'orderNumber': order.order_number,
            'id': order.id,
            'total': order.total,
        }
    }, status=status.HTTP_201_CREATED)


def find_order(identifier):
    """Look up a live order by numeric id or by order number"""
    identifier = str(identifier).strip()
    queryset = Order.objects.filter(is_deleted=False).prefetch_related('items')
    if identifier.startswith(settings.ORDER_NUMBER_PREFIX):
        order = queryset.filter(order_number=identifier).first()
    elif identifier.isdigit():
        order = queryset.filter(pk=int(identifier)).first()
    else:
        order = None
    if order is None:
        raise OrderNotFound()
    return order


@api_view(['GET', 'DELETE'])
@permission_classes([IsAdminOrReadOnly])
def order_detail(request, pk):
    """Track an order by id or order number; admins may soft delete it"""
    try:
        order = find_order(pk)
        if request.method == 'GET':
            return Response(OrderSerializer(order, context={'request': request}).data)

        services.soft_delete(order.id, request=request)
        return Response({'message': 'Order removed', 'id': order.id})
    except OrderError as e:
        return Response({'message': e.message}, status=e.status_code)


@api_view(['PUT', 'PATCH'])
@permission_classes([IsAuthenticated, IsAdmin])
def order_update_status(request, pk):
    """Change the order status; cancellation returns stock, un-cancelling takes it again"""
    serializer = OrderStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        order = services.change_status(
            pk,
            serializer.validated_data['order_status'],
            notes=serializer.validated_data.get('notes'),
            request=request,
        )
    except OrderError as e:
        return Response({'message': e.message}, status=e.status_code)
    except Exception as e:
        logger.exception(f"Status update failed for order {pk}")
        return Response({'message': 'Failed to update order status', 'error': str(e)},
                        status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    order = Order.objects.prefetch_related('items').get(pk=order.pk)
    return Response({
        'success': True,
        'message': 'Order status updated',
        'order': OrderSerializer(order, context={'request': request}).data,
    })
