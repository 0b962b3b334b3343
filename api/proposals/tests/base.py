from django.contrib.auth import get_user_model
from django.test import TestCase

from proposals.models import Proposal
from workspaces.models import Workspace, WorkspaceMember


class BuilderTestCase(TestCase):
    """Owner, workspace and an empty draft proposal; plus an outsider user."""

    def setUp(self):
        User = get_user_model()
        self.user = User.objects.create_user(username='owner', password='p')
        self.outsider = User.objects.create_user(username='outsider', password='p')
        self.workspace = Workspace.objects.create(name='Studio', owner=self.user)
        WorkspaceMember.objects.create(workspace=self.workspace, user=self.user, role='owner')
        self.proposal = Proposal.objects.create(workspace=self.workspace, title='Acme Corp', created_by=self.user)

    def unwrap(self, result):
        self.assertTrue(result.success, result.error)
        return result.data

    def assertFailsWith(self, result, error_type):
        self.assertFalse(result.success)
        self.assertEqual(result.error.type.value, error_type)
        return result.error

    def order_of(self, proposal=None):
        proposal = proposal or self.proposal
        return list(proposal.blocks.order_by('order_index').values_list('id', 'order_index'))
