from app.revalidation import builder_path, paths_invalidated
from proposals import blocks
from proposals.models import ProposalBlock

from .base import BuilderTestCase


class BuilderInvalidationTests(BuilderTestCase):
    """Every committed block mutation marks the builder page stale."""

    def setUp(self):
        super().setUp()
        self.received = []
        paths_invalidated.connect(self._listener)
        self.addCleanup(paths_invalidated.disconnect, self._listener)
        self.builder = builder_path(self.workspace.id, self.proposal.id)

    def _listener(self, sender, paths, **kwargs):
        self.received.append(paths)

    def _run(self, call):
        self.received.clear()
        with self.captureOnCommitCallbacks(execute=True):
            result = self.unwrap(call())
        self.assertEqual(self.received, [(self.builder,)])
        return result

    def test_create_and_add(self):
        self._run(lambda: blocks.create_block(self.user, self.proposal.id, 'text'))
        self._run(lambda: blocks.add_block(self.user, self.proposal.id, 'faq_list'))

    def test_update(self):
        block = self.unwrap(blocks.create_block(self.user, self.proposal.id, 'hero_simple'))
        self._run(lambda: blocks.update_block(self.user, block.id, props={'title': 'New'}))

    def test_delete(self):
        block = self.unwrap(blocks.create_block(self.user, self.proposal.id, 'text'))
        self._run(lambda: blocks.delete_block(self.user, block.id))

    def test_reorder(self):
        first = self.unwrap(blocks.create_block(self.user, self.proposal.id, 'text'))
        second = self.unwrap(blocks.create_block(self.user, self.proposal.id, 'text'))
        self._run(lambda: blocks.reorder_blocks(self.user, self.proposal.id, [str(second.id), str(first.id)]))

    def test_duplicate(self):
        block = self.unwrap(blocks.create_block(self.user, self.proposal.id, 'text'))
        self._run(lambda: blocks.duplicate_block(self.user, block.id))

    def test_compact_with_gaps(self):
        block = self.unwrap(blocks.create_block(self.user, self.proposal.id, 'text'))
        ProposalBlock.objects.filter(pk=block.pk).update(order_index=7)
        self._run(lambda: blocks.compact_order(self.user, self.proposal.id))

    def test_rejected_mutation_sends_nothing(self):
        self.unwrap(blocks.create_block(self.user, self.proposal.id, 'text'))
        self.received.clear()
        with self.captureOnCommitCallbacks(execute=True):
            result = blocks.reorder_blocks(self.user, self.proposal.id, [])
        self.assertFailsWith(result, 'validation')
        self.assertEqual(self.received, [])

    def test_empty_update_sends_nothing(self):
        block = self.unwrap(blocks.create_block(self.user, self.proposal.id, 'text'))
        self.received.clear()
        with self.captureOnCommitCallbacks(execute=True):
            self.unwrap(blocks.update_block(self.user, block.id))
        self.assertEqual(self.received, [])
