import uuid
from unittest import mock

from django.contrib.auth.models import AnonymousUser
from django.core.cache import cache
from django.test import override_settings
from django.utils import timezone

from app.common.checksum import json_checksum
from brand.models import WorkspaceBrandSettings
from library.models import Case
from proposals import blocks
from proposals.models import Proposal
from proposals.tests.base import BuilderTestCase
from publishing import pipeline
from publishing.models import ProposalSnapshot, PublicLink, SnapshotImmutableError


class PublishTests(BuilderTestCase):
    def setUp(self):
        super().setUp()
        cache.clear()

    def test_first_publish_creates_link_and_snapshot(self):
        self.unwrap(blocks.add_block(self.user, self.proposal.id, 'hero_simple'))
        data = self.unwrap(pipeline.publish_proposal(self.user, self.proposal.id))
        self.assertEqual(data['slug'], 'acme-corp')
        snapshot = ProposalSnapshot.objects.get(pk=data['snapshot_id'])
        self.assertIsNone(snapshot.brand)
        self.assertEqual(snapshot.blocks[0]['type'], 'hero_simple')
        self.assertEqual(snapshot.meta['version'], '1.0')
        self.assertEqual(snapshot.meta['published_by'], self.user.pk)
        self.assertEqual(snapshot.meta['checksum'], json_checksum({'brand': None, 'blocks': snapshot.blocks}))

    def test_republish_keeps_slug_appends_snapshot(self):
        first = self.unwrap(pipeline.publish_proposal(self.user, self.proposal.id))
        second = self.unwrap(pipeline.publish_proposal(self.user, self.proposal.id))
        self.assertEqual(first['slug'], second['slug'])
        self.assertNotEqual(first['snapshot_id'], second['snapshot_id'])
        self.assertEqual(PublicLink.objects.count(), 1)
        self.assertEqual(ProposalSnapshot.objects.filter(proposal=self.proposal).count(), 2)

    def test_colliding_titles_get_counter_suffix(self):
        other = Proposal.objects.create(workspace=self.workspace, title='Acme Corp!!!')
        third = Proposal.objects.create(workspace=self.workspace, title='acme corp')
        first = self.unwrap(pipeline.publish_proposal(self.user, self.proposal.id))
        second = self.unwrap(pipeline.publish_proposal(self.user, other.id))
        last = self.unwrap(pipeline.publish_proposal(self.user, third.id))
        self.assertEqual([first['slug'], second['slug'], last['slug']], ['acme-corp', 'acme-corp-1', 'acme-corp-2'])
        self.assertEqual(self.unwrap(pipeline.get_public_snapshot('acme-corp-1'))['snapshot_id'], second['snapshot_id'])
        self.assertEqual(self.unwrap(pipeline.get_public_snapshot('acme-corp'))['snapshot_id'], first['snapshot_id'])

    def test_slug_conflict_on_insert_is_retried(self):
        real = pipeline._taken_slugs
        calls = []

        def stale_probe(base):
            # First probe misses a concurrently created link
            calls.append(base)
            return set() if len(calls) == 1 else real(base)

        squatter = Proposal.objects.create(workspace=self.workspace, title='Squatter')
        PublicLink.objects.create(proposal=squatter, slug='acme-corp')
        with mock.patch.object(pipeline, '_taken_slugs', side_effect=stale_probe):
            data = self.unwrap(pipeline.publish_proposal(self.user, self.proposal.id))
        self.assertEqual(data['slug'], 'acme-corp-1')
        self.assertEqual(len(calls), 2)

    @override_settings(PUBLISH_SLUG_MAX_ATTEMPTS=2)
    def test_slug_conflicts_exhausted_is_unknown_error(self):
        squatter = Proposal.objects.create(workspace=self.workspace, title='Squatter')
        PublicLink.objects.create(proposal=squatter, slug='acme-corp')
        with mock.patch.object(pipeline, '_taken_slugs', return_value=set()):
            self.assertFailsWith(pipeline.publish_proposal(self.user, self.proposal.id), 'unknown')
        self.assertFalse(PublicLink.objects.filter(proposal=self.proposal).exists())

    def test_brand_settings_included(self):
        WorkspaceBrandSettings.objects.create(
            workspace=self.workspace,
            logo_url='https://cdn.example.com/logo.png',
            colors={'primary': '#112233', 'secondary': '#445566', 'background': '#ffffff', 'text': '#000000'},
        )
        data = self.unwrap(pipeline.publish_proposal(self.user, self.proposal.id))
        snapshot = ProposalSnapshot.objects.get(pk=data['snapshot_id'])
        self.assertEqual(snapshot.brand['colors']['primary'], '#112233')
        self.assertEqual(snapshot.brand['logo_url'], 'https://cdn.example.com/logo.png')

    def test_snapshot_freezes_referenced_records(self):
        case = Case.objects.create(workspace=self.workspace, title='X')
        self.unwrap(
            blocks.create_block(self.user, self.proposal.id, 'cases_grid', {'layout': 'grid', 'case_ids': [str(case.id)]})
        )
        first = self.unwrap(pipeline.publish_proposal(self.user, self.proposal.id))
        case.title = 'Y'
        case.save()
        second = self.unwrap(pipeline.publish_proposal(self.user, self.proposal.id))
        old = ProposalSnapshot.objects.get(pk=first['snapshot_id'])
        new = ProposalSnapshot.objects.get(pk=second['snapshot_id'])
        self.assertEqual(old.blocks[0]['props']['cases'][0]['title'], 'X')
        self.assertEqual(new.blocks[0]['props']['cases'][0]['title'], 'Y')
        case.delete()
        old.refresh_from_db()
        self.assertEqual(old.blocks[0]['props']['cases'][0]['title'], 'X')
        third = self.unwrap(pipeline.publish_proposal(self.user, self.proposal.id))
        self.assertEqual(ProposalSnapshot.objects.get(pk=third['snapshot_id']).blocks[0]['props']['cases'], [])

    def test_failed_first_publish_leaves_no_link(self):
        self.unwrap(blocks.add_block(self.user, self.proposal.id, 'text'))
        with mock.patch.object(pipeline, 'resolve_block_references', side_effect=RuntimeError('boom')):
            self.assertFailsWith(pipeline.publish_proposal(self.user, self.proposal.id), 'unknown')
        self.assertFalse(PublicLink.objects.exists())
        self.assertFalse(ProposalSnapshot.objects.exists())

    def test_latest_snapshot_follows_publish_order_not_clock(self):
        frozen = timezone.now()
        with mock.patch('django.utils.timezone.now', return_value=frozen):
            ids = [self.unwrap(pipeline.publish_proposal(self.user, self.proposal.id))['snapshot_id'] for _ in range(4)]
        sequences = list(ProposalSnapshot.objects.filter(proposal=self.proposal).values_list('sequence', flat=True))
        self.assertEqual(sequences, [4, 3, 2, 1])
        self.assertEqual(self.unwrap(pipeline.get_public_snapshot('acme-corp'))['snapshot_id'], ids[-1])
        history = self.unwrap(pipeline.list_snapshots(self.user, self.proposal.id))
        self.assertEqual([str(s.id) for s in history], ids[::-1])

    def test_snapshots_are_immutable(self):
        data = self.unwrap(pipeline.publish_proposal(self.user, self.proposal.id))
        snapshot = ProposalSnapshot.objects.get(pk=data['snapshot_id'])
        snapshot.blocks = []
        with self.assertRaises(SnapshotImmutableError):
            snapshot.save()

    def test_error_kinds(self):
        self.assertFailsWith(pipeline.publish_proposal(AnonymousUser(), self.proposal.id), 'authentication')
        self.assertFailsWith(pipeline.publish_proposal(self.outsider, self.proposal.id), 'authorization')
        self.assertFailsWith(pipeline.publish_proposal(self.user, uuid.uuid4()), 'not_found')
        self.assertFailsWith(pipeline.unpublish_proposal(self.user, self.proposal.id), 'not_found')
        self.assertFailsWith(pipeline.list_snapshots(self.outsider, self.proposal.id), 'authorization')


class PublicViewerTests(BuilderTestCase):
    def setUp(self):
        super().setUp()
        cache.clear()
        self.unwrap(blocks.create_block(self.user, self.proposal.id, 'hero_simple', {'title': 'v1'}))
        self.slug = self.unwrap(pipeline.publish_proposal(self.user, self.proposal.id))['slug']

    def test_unknown_slug_not_found(self):
        self.assertFailsWith(pipeline.get_public_snapshot('nope'), 'not_found')

    def test_republish_invalidates_cached_page(self):
        first = self.unwrap(pipeline.get_public_snapshot(self.slug))
        block = self.proposal.blocks.get()
        self.unwrap(blocks.update_block(self.user, block.id, props={'title': 'v2'}))
        with self.captureOnCommitCallbacks(execute=True):
            self.unwrap(pipeline.publish_proposal(self.user, self.proposal.id))
        latest = self.unwrap(pipeline.get_public_snapshot(self.slug))
        self.assertEqual(first['blocks'][0]['props']['title'], 'v1')
        self.assertEqual(latest['blocks'][0]['props']['title'], 'v2')

    def test_cached_until_invalidated(self):
        self.unwrap(pipeline.get_public_snapshot(self.slug))
        block = self.proposal.blocks.get()
        self.unwrap(blocks.update_block(self.user, block.id, props={'title': 'v2'}))
        # Publish without running on-commit hooks: the cached page is still served
        self.unwrap(pipeline.publish_proposal(self.user, self.proposal.id))
        self.assertEqual(self.unwrap(pipeline.get_public_snapshot(self.slug))['blocks'][0]['props']['title'], 'v1')

    def test_unpublish_hides_and_republish_restores_same_slug(self):
        with self.captureOnCommitCallbacks(execute=True):
            self.unwrap(pipeline.unpublish_proposal(self.user, self.proposal.id))
        self.assertFailsWith(pipeline.get_public_snapshot(self.slug), 'not_found')
        again = self.unwrap(pipeline.publish_proposal(self.user, self.proposal.id))
        self.assertEqual(again['slug'], self.slug)
        self.assertTrue(PublicLink.objects.get(slug=self.slug).is_active)

    def test_http_viewer_is_anonymous(self):
        resp = self.client.get(f'/api/p/{self.slug}')
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body['slug'], self.slug)
        self.assertEqual(body['blocks'][0]['props']['title'], 'v1')
        missing = self.client.get('/api/p/does-not-exist')
        self.assertEqual(missing.status_code, 404)
        self.assertEqual(missing.json()['error']['code'], 'not_found')

    def test_http_publish_and_history(self):
        self.client.force_login(self.user)
        resp = self.client.post(f'/api/proposals/{self.proposal.id}/publish/')
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()['slug'], self.slug)
        history = self.client.get(f'/api/proposals/{self.proposal.id}/snapshots/').json()
        self.assertEqual(len(history), 2)
        self.assertEqual(history[0]['id'], resp.json()['snapshot_id'])
        self.assertEqual(self.client.delete(f'/api/proposals/{self.proposal.id}/publish/').status_code, 204)
        listed = self.client.get(f'/api/proposals/{self.proposal.id}/').json()
        self.assertIsNone(listed['public_slug'])
