"""
Load type and district management.

Pickers (order forms) only ever see active records. Admins see everything,
can deactivate instead of deleting, and a hard delete of a record that an
order still references fails with 409.
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from django.db import IntegrityError, transaction
from django.db.models import ProtectedError, Q
from django.shortcuts import get_object_or_404
import logging

from authentication.permissions import IsAdmin
from transport_office.db_retry import retry_on_transient_error
from .models import LoadType, District
from .serializers import (
    LoadTypeSerializer,
    DistrictSerializer,
    LoadTypeOptionSerializer,
    DistrictOptionSerializer,
)

logger = logging.getLogger(__name__)

REFERENCE_TYPES = {
    'load-types': (LoadType, LoadTypeSerializer, 'Load type'),
    'districts': (District, DistrictSerializer, 'District'),
}

DUPLICATE_MESSAGES = {
    'load-types': 'Load type with this name already exists',
    'districts': 'District with this name and state already exists',
}


def _invalid_type_response(reference_type):
    return Response({
        'success': False,
        'message': f'Invalid reference type "{reference_type}". Must be "load-types" or "districts"'
    }, status=status.HTTP_400_BAD_REQUEST)


# ============================================================================
# PICKERS (any authenticated user)
# ============================================================================

@api_view(['GET'])
@permission_classes([IsAuthenticated])
@retry_on_transient_error
def active_load_types(request):
    """
    GET /api/reference/load-types/
    Active load types for order forms
    """
    load_types = LoadType.objects.filter(is_active=True)
    return Response({
        'load_types': LoadTypeOptionSerializer(load_types, many=True).data,
        'total': load_types.count()
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
@retry_on_transient_error
def active_districts(request):
    """
    GET /api/reference/districts/?state=Karnataka
    Active districts for order forms, optionally narrowed to one state
    """
    districts = District.objects.filter(is_active=True)

    state = request.query_params.get('state')
    if state:
        districts = districts.filter(state__iexact=state)

    return Response({
        'districts': DistrictOptionSerializer(districts, many=True).data,
        'total': districts.count()
    })


# ============================================================================
# ADMIN MANAGEMENT
# ============================================================================

@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def manage_reference_list(request, reference_type):
    """
    GET /api/admin/reference/{load-types|districts}/ - all records including inactive
    POST /api/admin/reference/{load-types|districts}/ - create a record
    """
    if reference_type not in REFERENCE_TYPES:
        return _invalid_type_response(reference_type)

    model, serializer_class, label = REFERENCE_TYPES[reference_type]

    if request.method == 'GET':
        queryset = model.objects.all()

        is_active = request.query_params.get('is_active')
        if is_active is not None:
            queryset = queryset.filter(is_active=is_active.lower() == 'true')

        search = request.query_params.get('search')
        if search:
            lookup = Q(name__icontains=search)
            if model is District:
                lookup |= Q(state__icontains=search)
            queryset = queryset.filter(lookup)

        return Response({
            'results': serializer_class(queryset, many=True).data,
            'total': queryset.count()
        })

    serializer = serializer_class(data=request.data)
    if not serializer.is_valid():
        return Response({
            'success': False,
            'errors': serializer.errors
        }, status=status.HTTP_400_BAD_REQUEST)

    try:
        with transaction.atomic():
            instance = serializer.save()
    except IntegrityError:
        return Response({
            'success': False,
            'message': DUPLICATE_MESSAGES[reference_type]
        }, status=status.HTTP_409_CONFLICT)

    logger.info(f"{label} created: {instance} by {request.user.username}")

    return Response({
        'success': True,
        'message': f'{label} created successfully',
        'data': serializer_class(instance).data
    }, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdmin])
def manage_reference_item(request, reference_type, item_id):
    """
    GET/PUT/PATCH/DELETE /api/admin/reference/{load-types|districts}/{id}/

    DELETE is a hard delete. Records still used by orders are protected and
    the store's refusal is returned as 409; deactivate them instead.
    """
    if reference_type not in REFERENCE_TYPES:
        return _invalid_type_response(reference_type)

    model, serializer_class, label = REFERENCE_TYPES[reference_type]
    instance = get_object_or_404(model, id=item_id)

    if request.method == 'GET':
        return Response(serializer_class(instance).data)

    if request.method == 'DELETE':
        name = str(instance)
        try:
            with transaction.atomic():
                instance.delete()
        except ProtectedError as e:
            count = len(e.protected_objects)
            logger.info(f"Refused to delete {label.lower()} {name}: referenced by {count} order(s)")
            return Response({
                'success': False,
                'message': f'Cannot delete {label.lower()} "{name}" because it is used by {count} order(s). Deactivate it instead.'
            }, status=status.HTTP_409_CONFLICT)

        logger.info(f"{label} deleted: {name} by {request.user.username}")
        return Response({
            'success': True,
            'message': f'{label} deleted successfully'
        }, status=status.HTTP_200_OK)

    serializer = serializer_class(instance, data=request.data, partial=request.method == 'PATCH')
    if not serializer.is_valid():
        return Response({
            'success': False,
            'errors': serializer.errors
        }, status=status.HTTP_400_BAD_REQUEST)

    try:
        with transaction.atomic():
            instance = serializer.save()
    except IntegrityError:
        return Response({
            'success': False,
            'message': DUPLICATE_MESSAGES[reference_type]
        }, status=status.HTTP_409_CONFLICT)

    return Response({
        'success': True,
        'message': f'{label} updated successfully',
        'data': serializer_class(instance).data
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def toggle_reference_status(request, reference_type, item_id):
    """
    POST /api/admin/reference/{load-types|districts}/{id}/toggle-status/
    Flip is_active
    """
    if reference_type not in REFERENCE_TYPES:
        return _invalid_type_response(reference_type)

    model, serializer_class, label = REFERENCE_TYPES[reference_type]
    instance = get_object_or_404(model, id=item_id)

    instance.is_active = not instance.is_active
    instance.save(update_fields=['is_active', 'updated_at'])

    action = 'activated' if instance.is_active else 'deactivated'
    logger.info(f"{label} {instance} {action} by {request.user.username}")

    return Response({
        'success': True,
        'message': f'{label} {action}',
        'data': serializer_class(instance).data
    })
