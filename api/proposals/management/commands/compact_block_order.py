import uuid

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from proposals.blocks import compact_proposal
from proposals.models import Proposal, ProposalBlock


class Command(BaseCommand):
    help = 'Renumber block order indexes to a dense 0..N-1 sequence (all proposals or one).'

    def add_arguments(self, parser):
        parser.add_argument('--proposal', help='Only repair this proposal id')
        parser.add_argument('--dry-run', action='store_true', help='Only report proposals with gaps or duplicates')

    def handle(self, *args, **options):
        qs = Proposal.objects.order_by('created_at')
        if options.get('proposal'):
            try:
                proposal_id = uuid.UUID(options['proposal'])
            except ValueError:
                raise CommandError(f"Invalid proposal id: {options['proposal']}")
            qs = qs.filter(pk=proposal_id)
            if not qs.exists():
                raise CommandError(f"Proposal {options['proposal']} not found")

        broken = []
        for proposal_id in qs.values_list('id', flat=True).iterator():
            indexes = list(
                ProposalBlock.objects.filter(proposal_id=proposal_id).order_by('order_index').values_list('order_index', flat=True)
            )
            if indexes != list(range(len(indexes))):
                broken.append(proposal_id)

        if options.get('dry_run'):
            self.stdout.write(self.style.WARNING(f'Would compact: {len(broken)}'))
            return

        rows = 0
        for proposal_id in broken:
            with transaction.atomic():
                Proposal.objects.select_for_update().filter(pk=proposal_id).first()
                rows += compact_proposal(proposal_id)
        self.stdout.write(self.style.SUCCESS(f'Proposals compacted: {len(broken)} (blocks moved: {rows})'))
