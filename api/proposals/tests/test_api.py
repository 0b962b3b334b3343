import uuid

from django.test import override_settings

from proposals import blocks
from proposals.models import Proposal, ProposalBlock
from workspaces.models import Workspace

from .base import BuilderTestCase


class ProposalsApiTests(BuilderTestCase):
    def test_list_requires_auth(self):
        resp = self.client.get('/api/proposals/')
        self.assertIn(resp.status_code, (401, 403))

    def test_list_scoped_to_member_workspaces(self):
        elsewhere = Workspace.objects.create(name='Elsewhere', owner=self.outsider)
        Proposal.objects.create(workspace=elsewhere, title='Hidden')
        self.client.force_login(self.user)
        resp = self.client.get('/api/proposals/')
        self.assertEqual(resp.status_code, 200)
        titles = [p['title'] for p in resp.json()]
        self.assertEqual(titles, ['Acme Corp'])
        narrowed = self.client.get('/api/proposals/', HTTP_X_WORKSPACE_ID=str(elsewhere.id))
        self.assertEqual(narrowed.json(), [])

    def test_create_in_member_workspace(self):
        self.client.force_login(self.user)
        resp = self.client.post(
            '/api/proposals/',
            data={'workspace': str(self.workspace.id), 'title': 'New deal', 'client_name': 'Globex'},
            content_type='application/json',
        )
        self.assertEqual(resp.status_code, 201)
        body = resp.json()
        self.assertEqual(body['status'], 'draft')
        self.assertEqual(body['block_count'], 0)
        self.assertIsNone(body['public_slug'])

    def test_create_in_foreign_workspace_forbidden(self):
        elsewhere = Workspace.objects.create(name='Elsewhere', owner=self.outsider)
        self.client.force_login(self.user)
        resp = self.client.post(
            '/api/proposals/', data={'workspace': str(elsewhere.id), 'title': 'Sneaky'}, content_type='application/json'
        )
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()['error']['code'], 'authorization')

    def test_workspace_header_is_parsed_as_uuid(self):
        self.client.force_login(self.user)
        upper = self.client.get('/api/proposals/', HTTP_X_WORKSPACE_ID=str(self.workspace.id).upper())
        self.assertEqual([p['title'] for p in upper.json()], ['Acme Corp'])
        garbage = self.client.get('/api/proposals/', HTTP_X_WORKSPACE_ID='not-a-uuid')
        self.assertEqual(garbage.status_code, 200)
        self.assertEqual(garbage.json(), [])

    def test_create_with_list_body_is_validation_error(self):
        self.client.force_login(self.user)
        resp = self.client.post('/api/proposals/', data=[{'title': 'x'}], content_type='application/json')
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()['error']['code'], 'validation')

    def test_status_change_does_not_touch_blocks(self):
        blocks.create_block(self.user, self.proposal.id, 'text')
        self.client.force_login(self.user)
        resp = self.client.patch(
            f'/api/proposals/{self.proposal.id}/', data={'status': 'sent'}, content_type='application/json'
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['status'], 'sent')
        self.assertEqual(ProposalBlock.objects.filter(proposal=self.proposal).count(), 1)


class BlockApiTests(BuilderTestCase):
    def setUp(self):
        super().setUp()
        self.client.force_login(self.user)
        self.base = f'/api/proposals/{self.proposal.id}/blocks/'

    def post(self, url, data=None):
        return self.client.post(url, data=data or {}, content_type='application/json')

    def test_block_types_catalogue(self):
        resp = self.client.get('/api/block-types')
        self.assertEqual(resp.status_code, 200)
        categories = resp.json()['categories']
        self.assertEqual(categories[0]['category'], 'intro')
        self.assertEqual(categories[0]['blocks'][0]['type'], 'hero_simple')

    def test_create_list_and_get(self):
        resp = self.post(self.base, {'type': 'hero_simple', 'props': {'title': 'Hi'}})
        self.assertEqual(resp.status_code, 201)
        created = resp.json()
        self.assertEqual(created['order_index'], 0)
        self.assertEqual(created['proposal'], str(self.proposal.id))
        self.post(self.base, {'type': 'gallery'})
        listed = self.client.get(self.base).json()
        self.assertEqual([b['type'] for b in listed], ['hero_simple', 'gallery'])
        detail = self.client.get(f"/api/blocks/{created['id']}")
        self.assertEqual(detail.json()['props']['title'], 'Hi')

    def test_validation_envelope_has_field_errors(self):
        resp = self.post(self.base, {'type': 'hero_simple', 'props': {'title': ''}})
        self.assertEqual(resp.status_code, 400)
        error = resp.json()['error']
        self.assertEqual(error['code'], 'validation')
        self.assertIn('props.title', error['meta']['field_errors'])

    def test_unknown_type_is_request_validation(self):
        resp = self.post(self.base, {'type': 'marquee'})
        self.assertEqual(resp.status_code, 400)
        self.assertIn('type', resp.json()['error']['meta']['field_errors'])

    def test_patch_duplicate_delete(self):
        block = self.post(self.base, {'type': 'hero_simple', 'props': {'title': 'Hi'}}).json()
        url = f"/api/blocks/{block['id']}"
        patched = self.client.patch(url, data={'props': {'title': 'Bye'}}, content_type='application/json')
        self.assertEqual(patched.status_code, 200)
        self.assertEqual(patched.json()['props']['title'], 'Bye')
        copy = self.post(f'{url}/duplicate')
        self.assertEqual(copy.status_code, 201)
        self.assertEqual(copy.json()['order_index'], 1)
        self.assertEqual(self.client.delete(url).status_code, 204)
        remaining = self.client.get(self.base).json()
        self.assertEqual([(b['id'], b['order_index']) for b in remaining], [(copy.json()['id'], 0)])

    def test_reorder_and_compact(self):
        a = self.post(self.base, {'type': 'text'}).json()['id']
        b = self.post(self.base, {'type': 'text'}).json()['id']
        resp = self.post(f'{self.base}reorder/', {'ordered_ids': [b, a]})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([x['id'] for x in resp.json()], [b, a])
        bad = self.post(f'{self.base}reorder/', {'ordered_ids': [b]})
        self.assertEqual(bad.status_code, 400)
        compact = self.post(f'{self.base}compact/')
        self.assertEqual(compact.status_code, 200)
        self.assertEqual([x['order_index'] for x in compact.json()], [0, 1])

    def test_not_found_and_forbidden(self):
        missing = self.client.get(f'/api/blocks/{uuid.uuid4()}')
        self.assertEqual(missing.status_code, 404)
        self.assertEqual(missing.json()['error']['meta']['resource'], 'block')
        self.assertEqual(self.client.get('/api/blocks/garbage').status_code, 404)
        block = self.post(self.base, {'type': 'text'}).json()
        self.client.force_login(self.outsider)
        self.assertEqual(self.client.get(f"/api/blocks/{block['id']}").status_code, 403)
        self.assertEqual(self.client.get(self.base).status_code, 403)

    @override_settings(GALLERY_MAX_IMAGES=1)
    def test_gallery_cap_enforced_over_http(self):
        urls = ['https://cdn.example.com/a.png', 'https://cdn.example.com/b.png']
        resp = self.post(self.base, {'type': 'gallery', 'props': {'image_urls': urls}})
        self.assertEqual(resp.status_code, 400)
