from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny
from django.db import transaction
from django.shortcuts import get_object_or_404
import logging

from storefront.core.permissions import IsAdmin
from .lookup import check_pincode, is_valid_pincode
from .models import ServiceableArea
from .serializers import ServiceableAreaSerializer

logger = logging.getLogger(__name__)


@api_view(['GET'])
@permission_classes([AllowAny])
def delivery_check(request, pincode):
    """Can we deliver to this pincode?"""
    if not is_valid_pincode(pincode):
        return Response({'message': 'Invalid pincode format'}, status=status.HTTP_400_BAD_REQUEST)
    return Response(check_pincode(pincode))


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def serviceable_area_list_create(request):
    """List all serviceable areas or add one"""
    if request.method == 'GET':
        areas = ServiceableArea.objects.all().order_by('pincode')
        return Response(ServiceableAreaSerializer(areas, many=True).data)

    serializer = ServiceableAreaSerializer(data=request.data)
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdmin])
def serviceable_area_detail(request, pk):
    """Retrieve, update or delete a serviceable area"""
    area = get_object_or_404(ServiceableArea, pk=pk)

    if request.method == 'GET':
        return Response(ServiceableAreaSerializer(area).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = ServiceableAreaSerializer(area, data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    area.delete()
    return Response({'message': 'Area removed'})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def serviceable_area_bulk(request):
    """
    Bulk add areas from [{pincode, city, state}, ...] (or {"areas": [...]}).
    Pincodes that already exist, or repeat within the upload, are skipped.
    """
    rows = request.data.get('areas') if isinstance(request.data, dict) else request.data
    if not isinstance(rows, list):
        return Response({'message': 'Expected a list of areas'}, status=status.HTTP_400_BAD_REQUEST)

    existing = set(ServiceableArea.objects.values_list('pincode', flat=True))
    created = 0
    skipped = 0
    errors = []

    with transaction.atomic():
        for index, row in enumerate(rows):
            pincode = str(row.get('pincode', '')).strip() if isinstance(row, dict) else ''
            if pincode in existing:
                skipped += 1
                continue
            serializer = ServiceableAreaSerializer(data=row if isinstance(row, dict) else {})
            if not serializer.is_valid():
                errors.append({'row': index, 'errors': serializer.errors})
                continue
            serializer.save()
            existing.add(serializer.validated_data['pincode'])
            created += 1

    logger.info(f"Serviceable area bulk upload: {created} created, {skipped} skipped, {len(errors)} invalid")
    return Response({
        'message': 'Bulk upload successful',
        'created': created,
        'skipped': skipped,
        'errors': errors,
    })
