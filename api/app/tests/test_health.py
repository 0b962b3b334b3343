from django.test import TestCase


class HealthTests(TestCase):
    def test_healthz_plain_text(self):
        resp = self.client.get('/healthz')
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.content, b'ok')

    def test_liveness_needs_no_auth(self):
        r = self.client.get('/api/health')
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {'status': 'ok'})

    def test_readiness_reports_db_and_cache(self):
        r = self.client.get('/api/ready')
        self.assertEqual(r.status_code, 200)
        data = r.json()
        self.assertTrue(data['db'])
        # LocMemCache in tests
        self.assertTrue(data['cache'])
        self.assertEqual(data['status'], 'ok')
