from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated

from app.common.keys import t
from app.errors import error_response, validation_response
from workspaces.access import is_member, scope_to_member_workspaces

from .models import Case, FAQItem
from .serializers import CaseSerializer, FAQItemSerializer


class WorkspaceScopedViewSet(viewsets.ModelViewSet):
    """CRUD over a workspace-owned collection.

    Listing covers every workspace the user belongs to, or just the one named in
    the X-Workspace-ID header. Writes require membership of the target workspace.
    """

    permission_classes = [IsAuthenticated]
    model = None

    def get_queryset(self):
        header = self.request.headers.get('X-Workspace-ID')
        return scope_to_member_workspaces(self.model.objects.all(), self.request.user, header)

    def create(self, request, *args, **kwargs):
        if not isinstance(request.data, dict):
            return validation_response({'non_field_errors': [t('errors.validation.body_not_object')]})
        workspace_id = request.data.get('workspace')
        if workspace_id and not is_member(request.user, workspace_id):
            return error_response('authorization', t('errors.workspace.forbidden'), status=status.HTTP_403_FORBIDDEN)
        return super().create(request, *args, **kwargs)

    def perform_create(self, serializer):
        serializer.save()


class CaseViewSet(WorkspaceScopedViewSet):
    model = Case
    serializer_class = CaseSerializer

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user)


class FAQItemViewSet(WorkspaceScopedViewSet):
    model = FAQItem
    serializer_class = FAQItemSerializer
