from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
import logging

from storefront.core.permissions import IsAdmin
from .models import Enquiry, HeroBanner
from .serializers import EnquirySerializer, EnquiryStatusSerializer, HeroBannerSerializer

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
@permission_classes([AllowAny])
def enquiry_list_create(request):
    # Anyone may send an enquiry; only admins read them
    if request.method == 'GET':
        return enquiry_list(request._request)
    return enquiry_create(request._request)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdmin])
def enquiry_list(request):
    """All enquiries, newest first, optionally filtered by status"""
    queryset = Enquiry.objects.all()
    status_filter = request.query_params.get('status', None)
    if status_filter:
        queryset = queryset.filter(status=status_filter)
    return Response(EnquirySerializer(queryset, many=True).data)


@api_view(['POST'])
@permission_classes([AllowAny])
def enquiry_create(request):
    serializer = EnquirySerializer(data=request.data)
    if serializer.is_valid():
        enquiry = serializer.save()
        logger.info(f"Enquiry {enquiry.id} received for {enquiry.product_name or 'general interest'}")
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['PUT', 'PATCH'])
@permission_classes([IsAuthenticated, IsAdmin])
def enquiry_update_status(request, pk):
    """Mark an enquiry as new, contacted or closed"""
    enquiry = Enquiry.objects.filter(pk=pk).first()
    if enquiry is None:
        return Response({'message': 'Enquiry not found'}, status=status.HTTP_404_NOT_FOUND)

    serializer = EnquiryStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    enquiry.status = serializer.validated_data['status']
    enquiry.save(update_fields=['status'])
    return Response(EnquirySerializer(enquiry).data)


@api_view(['GET', 'POST'])
@permission_classes([AllowAny])
def hero_banner_list_create(request):
    if request.method == 'GET':
        return hero_banner_list(request._request)
    return hero_banner_create(request._request)


@api_view(['GET'])
@permission_classes([AllowAny])
def hero_banner_list(request):
    """Active banners in display order, for the home page"""
    banners = HeroBanner.objects.filter(is_active=True).order_by('display_order', 'id')
    return Response(HeroBannerSerializer(banners, many=True, context={'request': request}).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdmin])
def hero_banner_admin_list(request):
    """Every banner, active or not"""
    banners = HeroBanner.objects.all().order_by('display_order', 'id')
    return Response(HeroBannerSerializer(banners, many=True, context={'request': request}).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def hero_banner_create(request):
    serializer = HeroBannerSerializer(data=request.data, context={'request': request})
    if serializer.is_valid():
        serializer.save()
        return Response({
            'success': True,
            'message': 'Hero banner created successfully',
            'banner': serializer.data,
        }, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdmin])
def hero_banner_detail(request, pk):
    """Update or delete a banner"""
    banner = HeroBanner.objects.filter(pk=pk).first()
    if banner is None:
        return Response({'message': 'Hero banner not found'}, status=status.HTTP_404_NOT_FOUND)

    if request.method == 'DELETE':
        banner.delete()
        return Response({'success': True, 'message': 'Hero banner deleted successfully'})

    serializer = HeroBannerSerializer(banner, data=request.data, partial=True, context={'request': request})
    if serializer.is_valid():
        serializer.save()
        return Response({
            'success': True,
            'message': 'Hero banner updated successfully',
            'banner': serializer.data,
        })
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
