"""
Supplier self-service: drivers, vehicles, vehicle availability postings and
documents for verification. Every query is scoped to the requesting supplier.
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from django.db import transaction
from django.shortcuts import get_object_or_404
import logging

from authentication.permissions import IsSupplier
from notifications.services import NotificationService
from orders.models import Order
from .models import Driver, Vehicle, VehicleLocation, SupplierDocument
from .serializers import (
    DriverSerializer,
    VehicleSerializer,
    VehicleLocationSerializer,
    SupplierDocumentSerializer,
)

logger = logging.getLogger(__name__)


def _validation_error(serializer):
    return Response({
        'success': False,
        'errors': serializer.errors
    }, status=status.HTTP_400_BAD_REQUEST)


def _blocking_orders(field, instance):
    """Orders still running with this driver or vehicle"""
    return Order.objects.filter(**{field: instance}).exclude(status__in=Order.TERMINAL_STATUSES)


# ============================================================================
# DRIVERS
# ============================================================================

@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsSupplier])
def drivers(request):
    """
    GET  /api/supplier/drivers/?is_active=true
    POST /api/supplier/drivers/
    """
    if request.method == 'GET':
        queryset = Driver.objects.filter(supplier=request.user)
        is_active = request.query_params.get('is_active')
        if is_active is not None:
            queryset = queryset.filter(is_active=is_active.lower() == 'true')
        return Response(DriverSerializer(queryset, many=True).data)

    serializer = DriverSerializer(data=request.data)
    if not serializer.is_valid():
        return _validation_error(serializer)

    driver = serializer.save(supplier=request.user)
    logger.info(f"Driver {driver.id} added by supplier {request.user.username}")
    return Response({
        'success': True,
        'message': 'Driver created successfully',
        'driver': DriverSerializer(driver).data
    }, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsSupplier])
def driver_detail(request, driver_id):
    """
    GET/PUT/PATCH/DELETE /api/supplier/drivers/<id>/
    A driver on an order that is still running cannot be deleted; deactivate instead.
    """
    driver = get_object_or_404(Driver, id=driver_id, supplier=request.user)

    if request.method == 'GET':
        return Response(DriverSerializer(driver).data)

    if request.method == 'DELETE':
        blocking = list(_blocking_orders('driver', driver).values_list('order_number', flat=True))
        if blocking:
            return Response({
                'success': False,
                'message': f'Driver {driver.driver_name} is on active orders: {", ".join(blocking)}. Deactivate instead.',
                'blocking_orders': blocking
            }, status=status.HTTP_409_CONFLICT)

        driver.delete()
        return Response({'success': True, 'message': 'Driver deleted successfully'})

    serializer = DriverSerializer(driver, data=request.data, partial=request.method == 'PATCH')
    if not serializer.is_valid():
        return _validation_error(serializer)

    driver = serializer.save()
    return Response({
        'success': True,
        'message': 'Driver updated successfully',
        'driver': DriverSerializer(driver).data
    })


# ============================================================================
# VEHICLES
# ============================================================================

@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsSupplier])
def vehicles(request):
    """
    GET  /api/supplier/vehicles/?is_active=true
    POST /api/supplier/vehicles/
    """
    if request.method == 'GET':
        queryset = Vehicle.objects.filter(supplier=request.user)
        is_active = request.query_params.get('is_active')
        if is_active is not None:
            queryset = queryset.filter(is_active=is_active.lower() == 'true')
        return Response(VehicleSerializer(queryset, many=True).data)

    serializer = VehicleSerializer(data=request.data)
    if not serializer.is_valid():
        return _validation_error(serializer)

    vehicle = serializer.save(supplier=request.user)
    logger.info(f"Vehicle {vehicle.vehicle_number} registered by supplier {request.user.username}")
    return Response({
        'success': True,
        'message': 'Vehicle created successfully',
        'vehicle': VehicleSerializer(vehicle).data
    }, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsSupplier])
def vehicle_detail(request, vehicle_id):
    """GET/PUT/PATCH/DELETE /api/supplier/vehicles/<id>/"""
    vehicle = get_object_or_404(Vehicle, id=vehicle_id, supplier=request.user)

    if request.method == 'GET':
        return Response(VehicleSerializer(vehicle).data)

    if request.method == 'DELETE':
        blocking = list(_blocking_orders('vehicle', vehicle).values_list('order_number', flat=True))
        if blocking:
            return Response({
                'success': False,
                'message': f'Vehicle {vehicle.vehicle_number} is on active orders: {", ".join(blocking)}. Deactivate instead.',
                'blocking_orders': blocking
            }, status=status.HTTP_409_CONFLICT)

        vehicle.delete()
        return Response({'success': True, 'message': 'Vehicle deleted successfully'})

    serializer = VehicleSerializer(vehicle, data=request.data, partial=request.method == 'PATCH')
    if not serializer.is_valid():
        return _validation_error(serializer)

    vehicle = serializer.save()
    return Response({
        'success': True,
        'message': 'Vehicle updated successfully',
        'vehicle': VehicleSerializer(vehicle).data
    })


# ============================================================================
# VEHICLE LOCATIONS
# ============================================================================

@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsSupplier])
def vehicle_locations(request):
    """
    GET  /api/supplier/vehicle-locations/?status=available
    POST /api/supplier/vehicle-locations/  admins are notified of the posting
    """
    if request.method == 'GET':
        queryset = VehicleLocation.objects.filter(supplier=request.user).select_related(
            'supplier', 'vehicle', 'driver', 'district'
        )
        status_filter = request.query_params.get('status')
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        return Response(VehicleLocationSerializer(queryset, many=True).data)

    serializer = VehicleLocationSerializer(data=request.data, context={'supplier': request.user})
    if not serializer.is_valid():
        return _validation_error(serializer)

    with transaction.atomic():
        location = serializer.save(supplier=request.user)
        NotificationService.notify_admins_vehicle_location(location)

    logger.info(f"Vehicle {location.vehicle.vehicle_number} posted available at {location.place} by {request.user.username}")
    return Response({
        'success': True,
        'message': 'Vehicle location posted',
        'vehicle_location': VehicleLocationSerializer(location).data
    }, status=status.HTTP_201_CREATED)


@api_view(['PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsSupplier])
def vehicle_location_detail(request, location_id):
    """PATCH/DELETE /api/supplier/vehicle-locations/<id>/"""
    location = get_object_or_404(VehicleLocation, id=location_id, supplier=request.user)

    if request.method == 'DELETE':
        location.delete()
        return Response({'success': True, 'message': 'Vehicle location removed'})

    serializer = VehicleLocationSerializer(
        location, data=request.data, partial=True, context={'supplier': request.user}
    )
    if not serializer.is_valid():
        return _validation_error(serializer)

    location = serializer.save()
    return Response({
        'success': True,
        'message': 'Vehicle location updated',
        'vehicle_location': VehicleLocationSerializer(location).data
    })


# ============================================================================
# DOCUMENTS
# ============================================================================

@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsSupplier])
def documents(request):
    """
    GET  /api/supplier/documents/
    POST /api/supplier/documents/  { "document_type": "vehicle_rc", "document_url": "...", "vehicle": 4 }
    """
    if request.method == 'GET':
        queryset = SupplierDocument.objects.filter(supplier=request.user)
        return Response(SupplierDocumentSerializer(queryset, many=True).data)

    serializer = SupplierDocumentSerializer(data=request.data, context={'supplier': request.user})
    if not serializer.is_valid():
        return _validation_error(serializer)

    document = serializer.save(supplier=request.user)
    NotificationService.notify_admins(
        title='Document Submitted for Verification',
        message=(
            f'{request.user.get_display_name()} submitted a {document.get_document_type_display()} '
            f'for verification.'
        ),
        category='document',
        priority='medium',
        supplier=request.user,
        driver=document.driver,
        vehicle=document.vehicle,
    )

    return Response({
        'success': True,
        'message': 'Document submitted for verification',
        'document': SupplierDocumentSerializer(document).data
    }, status=status.HTTP_201_CREATED)
