import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from falbites.core.permissions import IsPlatformAdmin
from falbites.core.responses import validation_error_response
from falbites.users.models import Customer
from .models import Franchise
from .serializers import FranchiseSerializer

logger = logging.getLogger(__name__)


def franchise_queryset():
    return Franchise.objects.select_related('assigned_manager')


def not_found():
    return Response({'success': False, 'message': 'Franchise not found'}, status=status.HTTP_404_NOT_FOUND)


@api_view(['GET', 'POST'])
@permission_classes([IsPlatformAdmin])
def franchise_list_create(request):
    """List all franchises or create a new franchise"""
    if request.method == 'GET':
        serializer = FranchiseSerializer(franchise_queryset(), many=True)
        return Response({'data': serializer.data})

    serializer = FranchiseSerializer(data=request.data)
    if serializer.is_valid():
        franchise = serializer.save()
        logger.info(f"Franchise {franchise.pk} ({franchise.name}) created")
        return Response(
            {'message': 'Franchise created successfully', 'data': FranchiseSerializer(franchise).data},
            status=status.HTTP_201_CREATED,
        )
    return validation_error_response(serializer)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsPlatformAdmin])
def franchise_detail(request, pk):
    """Retrieve, update or delete a franchise"""
    franchise = franchise_queryset().filter(pk=pk).first()
    if franchise is None:
        return not_found()

    if request.method == 'GET':
        return Response({'data': FranchiseSerializer(franchise).data})
    elif request.method == 'PUT':
        serializer = FranchiseSerializer(franchise, data=request.data, partial=True)
        if serializer.is_valid():
            franchise = serializer.save()
            logger.info(f"Franchise {franchise.pk} updated")
            return Response({'message': 'Franchise updated successfully', 'data': FranchiseSerializer(franchise).data})
        return validation_error_response(serializer)
    else:  # DELETE
        franchise.delete()
        logger.info(f"Franchise {pk} deleted")
        return Response({'message': 'Franchise deleted successfully'})


@api_view(['PATCH'])
@permission_classes([IsPlatformAdmin])
def assign_manager(request, pk):
    """Make a manager responsible for a franchise"""
    manager_id = request.data.get('managerId')
    if not manager_id:
        return Response({'success': False, 'message': 'Franchise ID and Manager ID are required.'},
                        status=status.HTTP_400_BAD_REQUEST)

    franchise = franchise_queryset().filter(pk=pk).first()
    if franchise is None:
        return not_found()
    manager = Customer.objects.filter(pk=manager_id, role='manager').first()
    if manager is None:
        return Response({'success': False, 'message': 'Manager not found'}, status=status.HTTP_404_NOT_FOUND)

    franchise.assigned_manager = manager
    franchise.save(update_fields=['assigned_manager', 'updated_at'])
    manager.assigned_franchise = franchise
    manager.save(update_fields=['assigned_franchise', 'updated_at'])
    logger.info(f"Manager {manager.pk} assigned to franchise {franchise.pk}")
    return Response({
        'message': 'Manager assigned to franchise successfully',
        'data': FranchiseSerializer(franchise).data,
    })
