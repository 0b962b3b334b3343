from rest_framework import serializers

from .models import ProposalSnapshot


class ProposalSnapshotSerializer(serializers.ModelSerializer):
    slug = serializers.ReadOnlyField(source='public_link.slug')
    block_count = serializers.SerializerMethodField()

    class Meta:
        model = ProposalSnapshot
        fields = ['id', 'slug', 'proposal', 'sequence', 'meta', 'block_count', 'created_at']
        read_only_fields = fields

    def get_block_count(self, obj: ProposalSnapshot) -> int:
        return len(obj.blocks or [])
