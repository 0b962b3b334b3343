from typing import Any

from django.contrib.auth import get_user_model
from django.db import transaction
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from app.common.keys import t
from app.errors import error_response, validation_response

from .models import Workspace, WorkspaceMember
from .serializers import WorkspaceMemberSerializer, WorkspaceSerializer


class WorkspaceViewSet(viewsets.ModelViewSet):
    permission_classes = [IsAuthenticated]
    serializer_class = WorkspaceSerializer

    def get_queryset(self):
        user = self.request.user
        # Only workspaces the user belongs to (any role)
        return Workspace.objects.filter(memberships__user=user).distinct().order_by('created_at')

    def perform_create(self, serializer):
        user = self.request.user
        with transaction.atomic():
            workspace = serializer.save(owner=user)
            WorkspaceMember.objects.get_or_create(workspace=workspace, user=user, defaults={'role': 'owner'})

    def _is_manager(self, workspace: Workspace) -> bool:
        return WorkspaceMember.objects.filter(
            workspace=workspace,
            user_id=self.request.user.id,
            role__in=WorkspaceMember.MANAGER_ROLES,
        ).exists()

    def update(self, request, *args: Any, **kwargs: Any):
        workspace = self.get_object()
        if not self._is_manager(workspace):
            return error_response('authorization', t('errors.workspace.owner_only'), status=status.HTTP_403_FORBIDDEN)
        return super().update(request, *args, **kwargs)

    def destroy(self, request, *args: Any, **kwargs: Any):
        workspace = self.get_object()
        if workspace.owner_id != request.user.id:
            return error_response('authorization', t('errors.workspace.owner_only'), status=status.HTTP_403_FORBIDDEN)
        return super().destroy(request, *args, **kwargs)

    @action(detail=True, methods=['get', 'post'], url_path='members')
    def members(self, request, pk=None):
        """List members; owners/admins may add an existing user by id."""
        workspace = self.get_object()
        if request.method == 'GET':
            qs = workspace.memberships.select_related('user').order_by('created_at')
            return Response(WorkspaceMemberSerializer(qs, many=True).data)
        if not self._is_manager(workspace):
            return error_response('authorization', t('errors.workspace.owner_only'), status=status.HTTP_403_FORBIDDEN)
        serializer = WorkspaceMemberSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_response(serializer.errors)
        target = get_user_model().objects.filter(id=serializer.validated_data['user_id']).first()
        if target is None:
            return error_response('not_found', t('errors.workspace.user_not_found'), status=status.HTTP_404_NOT_FOUND)
        membership, created = WorkspaceMember.objects.get_or_create(
            workspace=workspace,
            user=target,
            defaults={'role': serializer.validated_data.get('role') or 'member'},
        )
        return Response(
            WorkspaceMemberSerializer(membership).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )
