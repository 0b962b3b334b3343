import uuid

from django.conf import settings
from django.db import models

from .block_types import BlockType


class Proposal(models.Model):
    STATUS_CHOICES = (
        ('draft', 'Draft'),
        ('sent', 'Sent'),
        ('accepted', 'Accepted'),
        ('rejected', 'Rejected'),
    )
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    workspace = models.ForeignKey('workspaces.Workspace', on_delete=models.CASCADE, related_name='proposals')
    title = models.CharField(max_length=200)
    client_name = models.CharField(max_length=200, blank=True, default='')
    # Commercial status; independent of block content and of publishing.
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default='draft')
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='proposals'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:  # pragma: no cover
        return f"Proposal {self.pk} ({self.status})"


class ProposalBlock(models.Model):
    """One typed content unit of a proposal.

    ``order_index`` values of a proposal's blocks are always exactly 0..N-1.
    Every write that changes positions goes through ``proposals.blocks`` which
    locks the proposal row and renumbers the whole sibling set in one batch.
    There is deliberately no unique constraint on (proposal, order_index): the
    batch renumber passes through transient duplicates on backends without
    deferrable constraints.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    proposal = models.ForeignKey(Proposal, on_delete=models.CASCADE, related_name='blocks')
    type = models.CharField(max_length=32, choices=BlockType.choices)
    order_index = models.PositiveIntegerField(default=0)
    props = models.JSONField(default=dict)
    style_overrides = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['proposal_id', 'order_index', 'created_at']
        indexes = [
            models.Index(fields=['proposal', 'order_index'], name='proposal_block_order_idx'),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"ProposalBlock {self.proposal_id}:{self.order_index} ({self.type})"
