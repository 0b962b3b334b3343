from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from app.common.keys import t
from app.errors import HTTP_STATUS, ServiceError, error_response, validation_response
from workspaces.access import require_member, require_owner
from workspaces.models import Workspace

from .models import WorkspaceBrandSettings
from .serializers import BrandSettingsSerializer


class WorkspaceBrandView(APIView):
    """GET: members read brand settings (null when unset). PUT: owners/admins upsert."""

    permission_classes = [IsAuthenticated]

    def _gate(self, request: Request, workspace_id, *, manage: bool):
        if not Workspace.objects.filter(id=workspace_id).exists():
            return error_response('not_found', t('errors.workspace.not_found'), status=404, meta={'resource': 'workspace'})
        try:
            (require_owner if manage else require_member)(request.user, workspace_id)
        except ServiceError as exc:
            return error_response(exc.error_type.value, exc.message, status=HTTP_STATUS[exc.error_type])
        return None

    def get(self, request: Request, workspace_id):
        denied = self._gate(request, workspace_id, manage=False)
        if denied is not None:
            return denied
        instance = WorkspaceBrandSettings.objects.filter(workspace_id=workspace_id).first()
        return Response(BrandSettingsSerializer(instance).data if instance else None)

    def put(self, request: Request, workspace_id):
        denied = self._gate(request, workspace_id, manage=True)
        if denied is not None:
            return denied
        instance = WorkspaceBrandSettings.objects.filter(workspace_id=workspace_id).first()
        serializer = BrandSettingsSerializer(instance, data=request.data)
        if not serializer.is_valid():
            return validation_response(serializer.errors)
        created = instance is None
        serializer.save(workspace_id=workspace_id)
        return Response(serializer.data, status=status.HTTP_201_CREATED if created else status.HTTP_200_OK)
