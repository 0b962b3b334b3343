from django.test import SimpleTestCase

from app.errors import AppError, ErrorType, Result, result_response


class ResultResponseTests(SimpleTestCase):
    def test_error_type_maps_to_status_and_meta(self):
        result = Result.fail(AppError(ErrorType.NOT_FOUND, 'gone', resource='block'))
        resp = result_response(result)
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.data['error']['code'], 'not_found')
        self.assertEqual(resp.data['error']['meta'], {'resource': 'block'})

    def test_success_without_data_is_no_content(self):
        self.assertEqual(result_response(Result.ok()).status_code, 204)

    def test_failure_missing_error_renders_as_unknown(self):
        resp = result_response(Result(success=False))
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.data['error']['code'], 'unknown')
