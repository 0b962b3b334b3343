import uuid

from django.conf import settings
from django.db import models


class PublicLink(models.Model):
    """Stable slug address of a proposal's published snapshots.

    Created on first publish and reused afterwards; unpublishing only flips
    ``is_active`` so the slug survives a later republish.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    proposal = models.OneToOneField('proposals.Proposal', on_delete=models.CASCADE, related_name='public_link')
    slug = models.SlugField(max_length=120, unique=True)
    is_active = models.BooleanField(default=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='public_links'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:  # pragma: no cover
        return f"PublicLink {self.slug} ({'active' if self.is_active else 'inactive'})"


class SnapshotImmutableError(Exception):
    pass


class ProposalSnapshot(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    public_link = models.ForeignKey(PublicLink, on_delete=models.CASCADE, related_name='snapshots')
    proposal = models.ForeignKey('proposals.Proposal', on_delete=models.CASCADE, related_name='snapshots')
    brand = models.JSONField(null=True, blank=True)
    blocks = models.JSONField(default=list)
    # {version, published_at, published_by, checksum}
    meta = models.JSONField(default=dict)
    # 1-based publish counter per link, assigned under the proposal lock
    sequence = models.PositiveIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-sequence']
        constraints = [
            models.UniqueConstraint(fields=['public_link', 'sequence'], name='snapshot_link_sequence_uniq'),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise SnapshotImmutableError('Snapshots are append-only')
        return super().save(*args, **kwargs)

    def __str__(self) -> str:  # pragma: no cover
        return f"ProposalSnapshot {self.pk} of {self.proposal_id}"
