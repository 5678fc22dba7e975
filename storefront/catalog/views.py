from rest_framework import status
from rest_framework.decorators import api_view, permission_classes, parser_classes
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from django.db import transaction
from django.db.models import ProtectedError, Q
from django.shortcuts import get_object_or_404
import logging

from storefront.core.permissions import IsCatalogEditor, IsCatalogEditorOrReadOnly
from storefront.core.utils import record_audit
from .models import Category, Product, ProductColor, ProductReview
from .serializers import (
    CategorySerializer, ProductSerializer, ProductSearchSerializer, ProductReviewSerializer
)
from .filters import ProductFilter
from .cache import get_category_list
from .utils import absolute_media_url
from . import ai_service

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 8


def live_products():
    return Product.objects.filter(is_deleted=False).select_related('category').prefetch_related('colors')


# Category views
@api_view(['GET', 'POST'])
@permission_classes([IsCatalogEditorOrReadOnly])
def category_list_create(request):
    """List categories (active only unless all=true) or create one"""
    if request.method == 'GET':
        include_inactive = request.query_params.get('all', '').lower() == 'true'
        categories = get_category_list(include_inactive)
        for category in categories:
            category['image'] = absolute_media_url(category['image'], request)
        return Response(categories)

    serializer = CategorySerializer(data=request.data)
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsCatalogEditorOrReadOnly])
def category_detail(request, pk):
    """Retrieve, update or delete a category"""
    category = get_object_or_404(Category, pk=pk)

    if request.method == 'GET':
        return Response(CategorySerializer(category).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = CategorySerializer(category, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        category.delete()
    except ProtectedError:
        return Response(
            {'message': 'Category has products assigned. Move or delete them first.'},
            status=status.HTTP_400_BAD_REQUEST
        )
    return Response({'message': 'Category removed'})


# Product views
@api_view(['GET', 'POST'])
@permission_classes([IsCatalogEditorOrReadOnly])
def product_list_create(request):
    """List live products with storefront filters, or create a product"""
    if request.method == 'GET':
        products = ProductFilter(request.query_params, queryset=live_products()).qs
        serializer = ProductSerializer(products, many=True, context={'request': request})
        return Response(serializer.data)

    serializer = ProductSerializer(data=request.data, context={'request': request})
    if serializer.is_valid():
        product = serializer.save()
        record_audit('create', product, request, changes={
            'stock': product.stock, 'price': str(product.price) if product.price is not None else None
        })
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([AllowAny])
def product_search(request):
    """Search suggestions by name, description, tags, features, materials or color"""
    query = request.query_params.get('q', '').strip()
    if not query:
        return Response({'message': "Search query 'q' is required"}, status=status.HTTP_400_BAD_REQUEST)

    products = Product.objects.filter(is_deleted=False).select_related('category').filter(
        Q(name__icontains=query) |
        Q(short_description__icontains=query) |
        Q(long_description__icontains=query) |
        Q(tags__icontains=query) |
        Q(features__icontains=query) |
        Q(materials_used__icontains=query) |
        Q(colors__name__icontains=query)
    ).distinct()[:SEARCH_LIMIT]
    serializer = ProductSearchSerializer(products, many=True, context={'request': request})
    return Response(serializer.data)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsCatalogEditorOrReadOnly])
def product_detail(request, pk):
    """Retrieve, update or soft delete a product"""
    product = get_object_or_404(live_products().prefetch_related('reviews'), pk=pk)

    if request.method == 'GET':
        serializer = ProductSerializer(product, context={'request': request, 'include_reviews': True})
        return Response(serializer.data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = ProductSerializer(
            product, data=request.data, partial=request.method == 'PATCH', context={'request': request}
        )
        if serializer.is_valid():
            serializer.save()
            record_audit('update', product, request, changes={'fields': sorted(request.data.keys())})
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    product.is_deleted = True
    product.save(update_fields=['is_deleted'])
    record_audit('delete', product, request)
    return Response({'id': product.id})


@api_view(['PATCH'])
@permission_classes([IsAuthenticated, IsCatalogEditor])
def product_stock_update(request, pk):
    """
    Quick stock edit.

    Body: {"stock": 12, "variants": [{"id": 3, "stock": 4}, {"sku": "CH-BLK", "stock": 8}]}
    When the product has colors the scalar stock is recomputed from them.
    """
    product = get_object_or_404(Product, pk=pk, is_deleted=False)
    stock = request.data.get('stock')
    variants = request.data.get('variants')

    try:
        with transaction.atomic():
            product = Product.objects.select_for_update().get(pk=product.pk)
            before = {'stock': product.stock, 'colors': {c.name: c.stock for c in product.colors.all()}}

            if stock is not None:
                product.stock = int(stock)

            if isinstance(variants, list):
                colors = list(ProductColor.objects.filter(product=product))
                for variant in variants:
                    if not isinstance(variant, dict) or variant.get('stock') is None:
                        continue
                    color = next((c for c in colors if variant.get('id') is not None and str(c.id) == str(variant['id'])), None)
                    if color is None and variant.get('sku'):
                        color = next((c for c in colors if c.sku == variant['sku']), None)
                    if color is not None:
                        color.stock = int(variant['stock'])
                        color.save(update_fields=['stock'])

            product.save()
    except (TypeError, ValueError):
        return Response({'message': 'Stock values must be whole numbers'}, status=status.HTTP_400_BAD_REQUEST)

    after = {'stock': product.stock, 'colors': {c.name: c.stock for c in product.colors.all()}}
    logger.info(f"Stock adjusted for {product.sku}: {before['stock']} -> {after['stock']}")
    record_audit('stock_adjust', product, request, changes={'before': before, 'after': after})
    return Response(ProductSerializer(product, context={'request': request}).data)


# Review views
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def product_review_create(request, pk):
    """Submit a review; it counts toward the rating once approved"""
    product = get_object_or_404(Product, pk=pk, is_deleted=False)

    if ProductReview.objects.filter(product=product, user=request.user).exists():
        return Response({'message': 'Product already reviewed'}, status=status.HTTP_400_BAD_REQUEST)

    serializer = ProductReviewSerializer(data=request.data)
    if serializer.is_valid():
        serializer.save(product=product, user=request.user, name=request.user.name or request.user.email)
        return Response({'message': 'Review submitted! Waiting for approval.'}, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsCatalogEditor])
def product_review_approve(request, pk, review_id):
    product = get_object_or_404(Product, pk=pk)
    review = ProductReview.objects.filter(product=product, pk=review_id).first()
    if not review:
        return Response({'message': 'Review not found'}, status=status.HTTP_404_NOT_FOUND)

    review.is_approved = True
    review.save(update_fields=['is_approved'])
    product.save()
    record_audit('review_approve', review, request, changes={'rating': review.rating})
    return Response({'message': 'Review approved'})


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsCatalogEditor])
def product_review_delete(request, pk, review_id):
    product = get_object_or_404(Product, pk=pk)
    ProductReview.objects.filter(product=product, pk=review_id).delete()
    product.save()
    return Response({'message': 'Review removed'})


# Generative product data
def _read_image(request):
    """Return (bytes, mime_type) or an error Response"""
    image = request.FILES.get('image')
    if not image:
        return None, Response({'message': 'No image uploaded'}, status=status.HTTP_400_BAD_REQUEST)
    if not ai_service.is_allowed_image(image):
        return None, Response({'message': 'Images only (jpg, jpeg, png, webp)'}, status=status.HTTP_400_BAD_REQUEST)
    return (image.read(), image.content_type), None


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser])
def ai_generate(request):
    """Draft product fields from an uploaded photo"""
    image, error = _read_image(request)
    if error:
        return error
    image_bytes, mime_type = image

    try:
        data = ai_service.generate_product_data(
            image_bytes,
            mime_type,
            brand_name=request.data.get('brandName') or 'Dipak Furniture',
            positioning=request.data.get('positioning') or 'Premium',
            target_market=request.data.get('targetMarket') or 'Home',
        )
    except ai_service.MissingAPIKey as e:
        logger.error(str(e))
        return Response({'message': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    except ai_service.GenerationError as e:
        body = {'message': str(e)}
        if e.raw is not None:
            body['raw'] = e.raw
        return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    except Exception as e:
        logger.exception("AI generation failed")
        return Response({'message': str(e) or 'AI generation failed'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response(data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser])
def ai_regenerate(request):
    """Rewrite one product field from the photo"""
    image, error = _read_image(request)
    if error:
        return error
    image_bytes, mime_type = image

    field_name = request.data.get('fieldName')
    if not field_name:
        return Response({'message': 'fieldName is required'}, status=status.HTTP_400_BAD_REQUEST)

    try:
        result = ai_service.regenerate_field(
            field_name,
            image_bytes,
            mime_type,
            brand_name=request.data.get('brandName') or 'Dipak Furniture',
            positioning=request.data.get('positioning') or 'Premium',
            current_value=request.data.get('currentValue'),
        )
    except ai_service.MissingAPIKey as e:
        logger.error(str(e))
        return Response({'message': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    except Exception as e:
        logger.exception("AI regeneration failed")
        return Response({'message': str(e) or 'AI regeneration failed'}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response({'result': result})
