from rest_framework import serializers

from workspaces.models import Workspace

from .block_types import BlockType
from .models import Proposal, ProposalBlock


class ProposalSerializer(serializers.ModelSerializer):
    created_by = serializers.ReadOnlyField(source='created_by.id')
    workspace = serializers.PrimaryKeyRelatedField(queryset=Workspace.objects.all())
    # Read-only block summary for list views; full props come from the blocks endpoint.
    block_count = serializers.SerializerMethodField()
    public_slug = serializers.SerializerMethodField()

    class Meta:
        model = Proposal
        fields = [
            'id',
            'workspace',
            'title',
            'client_name',
            'status',
            'created_by',
            'block_count',
            'public_slug',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def get_block_count(self, obj: Proposal) -> int:
        return obj.blocks.count()

    def get_public_slug(self, obj: Proposal):
        link = getattr(obj, 'public_link', None)
        if link is None or not link.is_active:
            return None
        return link.slug

    def update(self, instance: Proposal, validated_data):
        # A proposal never moves between workspaces
        validated_data.pop('workspace', None)
        return super().update(instance, validated_data)


class ProposalBlockSerializer(serializers.ModelSerializer):
    proposal = serializers.ReadOnlyField(source='proposal_id')

    class Meta:
        model = ProposalBlock
        fields = ['id', 'proposal', 'type', 'order_index', 'props', 'style_overrides', 'created_at', 'updated_at']
        read_only_fields = fields


class BlockCreateSerializer(serializers.Serializer):
    """Request shape for creating a block; props are checked by the registry schema."""

    type = serializers.ChoiceField(choices=BlockType.choices)
    props = serializers.JSONField(required=False)
    order_index = serializers.IntegerField(required=False, min_value=0)
    style_overrides = serializers.JSONField(required=False)


class BlockUpdateSerializer(serializers.Serializer):
    props = serializers.JSONField(required=False)
    style_overrides = serializers.JSONField(required=False)


class ReorderSerializer(serializers.Serializer):
    ordered_ids = serializers.ListField(child=serializers.CharField(), allow_empty=True)
