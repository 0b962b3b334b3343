from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from app.common.keys import t
from app.errors import error_response, result_response, validation_response
from publishing import pipeline
from publishing.serializers import ProposalSnapshotSerializer
from workspaces.access import is_member, scope_to_member_workspaces

from . import blocks as block_store
from .block_types import picker_catalogue
from .models import Proposal
from .serializers import (
    BlockCreateSerializer,
    BlockUpdateSerializer,
    ProposalBlockSerializer,
    ProposalSerializer,
    ReorderSerializer,
)


def _blocks_payload(items):
    return ProposalBlockSerializer(items, many=True).data


def _block_payload(block):
    return ProposalBlockSerializer(block).data


class ProposalViewSet(viewsets.ModelViewSet):
    queryset = Proposal.objects.all().select_related('public_link').order_by('-created_at')
    serializer_class = ProposalSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        """Proposals of every workspace the user belongs to.

        An X-Workspace-ID header narrows the list to that workspace (empty if
        the user is not a member of it).
        """
        header = self.request.headers.get('X-Workspace-ID')
        return scope_to_member_workspaces(super().get_queryset(), self.request.user, header)

    def create(self, request: Request, *args, **kwargs):
        if not isinstance(request.data, dict):
            return validation_response({'non_field_errors': [t('errors.validation.body_not_object')]})
        workspace_id = request.data.get('workspace')
        if workspace_id and not is_member(request.user, workspace_id):
            return error_response('authorization', t('errors.workspace.forbidden'), status=status.HTTP_403_FORBIDDEN)
        return super().create(request, *args, **kwargs)

    def perform_create(self, serializer: ProposalSerializer):
        serializer.save(created_by=self.request.user)

    # Block and publish actions take the raw pk so the service layer decides
    # between not_found and authorization.

    @action(detail=True, methods=['get', 'post'], url_path='blocks')
    def blocks(self, request: Request, pk=None):
        if request.method == 'GET':
            return result_response(block_store.list_blocks(request.user, pk), serialize=_blocks_payload)
        serializer = BlockCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_response(serializer.errors)
        data = serializer.validated_data
        result = block_store.create_block(
            request.user,
            pk,
            data['type'],
            props=data.get('props'),
            order_index=data.get('order_index'),
            style_overrides=data.get('style_overrides'),
        )
        return result_response(result, status=status.HTTP_201_CREATED, serialize=_block_payload)

    @action(detail=True, methods=['post'], url_path='blocks/reorder')
    def reorder_blocks(self, request: Request, pk=None):
        serializer = ReorderSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_response(serializer.errors)
        result = block_store.reorder_blocks(request.user, pk, serializer.validated_data['ordered_ids'])
        return result_response(result, serialize=_blocks_payload)

    @action(detail=True, methods=['post'], url_path='blocks/compact')
    def compact_blocks(self, request: Request, pk=None):
        return result_response(block_store.compact_order(request.user, pk), serialize=_blocks_payload)

    @action(detail=True, methods=['post', 'delete'], url_path='publish')
    def publish(self, request: Request, pk=None):
        if request.method == 'DELETE':
            return result_response(pipeline.unpublish_proposal(request.user, pk))
        return result_response(pipeline.publish_proposal(request.user, pk), status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['get'], url_path='snapshots')
    def snapshots(self, request: Request, pk=None):
        result = pipeline.list_snapshots(request.user, pk)
        return result_response(result, serialize=lambda items: ProposalSnapshotSerializer(items, many=True).data)


class BlockTypesView(APIView):
    """Add-block picker: categories in display order with their block types."""

    permission_classes = [permissions.IsAuthenticated]

    def get(self, request: Request):
        return Response({'categories': picker_catalogue()})


class BlockDetailView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request: Request, block_id: str):
        return result_response(block_store.get_block(request.user, block_id), serialize=_block_payload)

    def patch(self, request: Request, block_id: str):
        serializer = BlockUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_response(serializer.errors)
        data = serializer.validated_data
        result = block_store.update_block(
            request.user, block_id, props=data.get('props'), style_overrides=data.get('style_overrides')
        )
        return result_response(result, serialize=_block_payload)

    def delete(self, request: Request, block_id: str):
        return result_response(block_store.delete_block(request.user, block_id))


class BlockDuplicateView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request: Request, block_id: str):
        result = block_store.duplicate_block(request.user, block_id)
        return result_response(result, status=status.HTTP_201_CREATED, serialize=_block_payload)
