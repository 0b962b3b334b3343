from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser
from django.test import TestCase

from app.errors import AccessDenied, AuthenticationRequired
from workspaces import access
from workspaces.models import Workspace, WorkspaceMember


class AccessTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.owner = User.objects.create_user(username='owner', password='p')
        self.member = User.objects.create_user(username='member', password='p')
        self.stranger = User.objects.create_user(username='stranger', password='p')
        self.workspace = Workspace.objects.create(name='W', owner=self.owner)
        WorkspaceMember.objects.create(workspace=self.workspace, user=self.owner, role='owner')
        WorkspaceMember.objects.create(workspace=self.workspace, user=self.member, role='member')

    def test_membership_lookup(self):
        self.assertTrue(access.is_member(self.member, self.workspace.id))
        self.assertFalse(access.is_member(self.stranger, self.workspace.id))
        self.assertFalse(access.is_member(self.member, 'not-a-uuid'))
        self.assertEqual(access.get_membership(self.owner, self.workspace.id).role, 'owner')

    def test_require_member_error_kinds(self):
        with self.assertRaises(AuthenticationRequired):
            access.require_member(AnonymousUser(), self.workspace.id)
        with self.assertRaises(AccessDenied):
            access.require_member(self.stranger, self.workspace.id)
        self.assertEqual(access.require_member(self.member, self.workspace.id).user_id, self.member.id)

    def test_require_owner(self):
        access.require_owner(self.owner, self.workspace.id)
        with self.assertRaises(AccessDenied):
            access.require_owner(self.member, self.workspace.id)


class WorkspaceApiTests(TestCase):
    def setUp(self):
        User = get_user_model()
        self.user = User.objects.create_user(username='alice', password='p')
        self.other = User.objects.create_user(username='bob', password='p')

    def test_create_makes_owner_membership(self):
        self.client.force_login(self.user)
        resp = self.client.post('/api/workspaces/', data={'name': 'Agency'}, content_type='application/json')
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()['role'], 'owner')
        ws = Workspace.objects.get(pk=resp.json()['id'])
        self.assertTrue(WorkspaceMember.objects.filter(workspace=ws, user=self.user, role='owner').exists())

    def test_list_only_member_workspaces(self):
        mine = Workspace.objects.create(name='Mine', owner=self.user)
        WorkspaceMember.objects.create(workspace=mine, user=self.user, role='owner')
        theirs = Workspace.objects.create(name='Theirs', owner=self.other)
        WorkspaceMember.objects.create(workspace=theirs, user=self.other, role='owner')
        self.client.force_login(self.user)
        names = [w['name'] for w in self.client.get('/api/workspaces/').json()]
        self.assertEqual(names, ['Mine'])

    def test_member_cannot_rename_or_add_members(self):
        ws = Workspace.objects.create(name='Shared', owner=self.other)
        WorkspaceMember.objects.create(workspace=ws, user=self.other, role='owner')
        WorkspaceMember.objects.create(workspace=ws, user=self.user, role='member')
        self.client.force_login(self.user)
        resp = self.client.patch(f'/api/workspaces/{ws.id}/', data={'name': 'Mine now'}, content_type='application/json')
        self.assertEqual(resp.status_code, 403)
        add = self.client.post(
            f'/api/workspaces/{ws.id}/members/', data={'user_id': self.user.id}, content_type='application/json'
        )
        self.assertEqual(add.status_code, 403)

    def test_owner_adds_member(self):
        ws = Workspace.objects.create(name='Team', owner=self.user)
        WorkspaceMember.objects.create(workspace=ws, user=self.user, role='owner')
        self.client.force_login(self.user)
        resp = self.client.post(
            f'/api/workspaces/{ws.id}/members/', data={'user_id': self.other.id}, content_type='application/json'
        )
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()['role'], 'member')
        missing = self.client.post(
            f'/api/workspaces/{ws.id}/members/', data={'user_id': 99999}, content_type='application/json'
        )
        self.assertEqual(missing.status_code, 404)
